''' A script for converting audio between WAV and IDSP GC-ADPCM streams, and for dumping IDSP headers to YAML '''

# Define current version
CURRENT_VERSION = '2026.10.19'

# Imports
import os
import sys
import wave
import argparse
import datetime
from typing import Final

# Ensure /dspadpcm is present and can be imported
try:
  # Import the IDSP container
  from dspadpcm.container.Idsp import IdspContainer, read_idsp, write_idsp

  # Import the error types and output enum
  from dspadpcm.Errors import IdspError
  from dspadpcm.Enums import OutputType

  from dspadpcm.YAMLSerializer import dump_yaml, load_yaml
  from dspadpcm.Helpers import struct

except ImportError as e:
  print("Error: One or more required modules are missing.")
  print(f"Details: {e}")
  print("\nPlease ensure the 'dspadpcm' package is correctly installed and all its dependencies are available.")
  sys.exit(1)

# Create ANSI formatting for terminal messages
# ANSI COLORS: https://talyian.github.io/ansicolors/
# TERMINAL TEXT COLORS
RED        : Final = '\x1b[31m'
YELLOW_229 : Final = '\x1b[38;5;229m'
BLUE_39    : Final = '\x1b[38;5;39m'
GRAY_245   : Final = '\x1b[38;5;245m'
GRAY_248   : Final = '\x1b[38;5;248m'
GREEN_79   : Final = '\x1b[38;5;79m'

# TERMINAL TEXT STYLES
BOLD      : Final = '\x1b[1m'
RESET     : Final = '\x1b[0m' # Resets all text styles and colors

# Argument Parser
def parse_args(argv=None):
  parser = argparse.ArgumentParser(
    formatter_class=argparse.RawDescriptionHelpFormatter,
    usage=f'{GRAY_248}[>_]{RESET} {YELLOW_229}python{RESET} {BLUE_39}{os.path.basename(sys.argv[0])}{RESET} {GRAY_245}[-h]{RESET} {BLUE_39}file [files ...]{RESET} {GRAY_245}[-o {{wav, yaml}}] [-i SIZE] [--loop START END]{RESET}',
    description='''This script converts audio between 16-bit WAV files and IDSP GC-ADPCM streams.'''
  )

  parser.add_argument(
    'files',
    nargs='+',
    help="an IDSP file, a WAV file, or a WAV file and a YAML file of stream settings"
  )
  parser.add_argument(
    '-o',
    '--output',
    choices=[OutputType.WAV.value, OutputType.YAML.value],
    required=False,
    default=OutputType.WAV.value,
    help="specifies the output type when converting from an IDSP file (defaults to wav)"
  )
  parser.add_argument(
    '-i',
    '--interleave',
    type=int,
    required=False,
    help="interleave block size in bytes when converting to IDSP (defaults to 0, a single block per channel)"
  )
  parser.add_argument(
    '--loop',
    nargs=2,
    type=int,
    metavar=('START', 'END'),
    required=False,
    help="loop start and exclusive loop end, in samples, when converting to IDSP"
  )

  return parser.parse_args(argv)

# Create date for the output filenames
DATE_FILENAME = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")

''' WAV Functions '''
def read_wav(filename: str) -> tuple[list[list[int]], int]:
  with wave.open(filename, 'rb') as wav:
    channel_count = wav.getnchannels()
    sample_rate = wav.getframerate()

    if wav.getsampwidth() != 2:
      raise ValueError(f"Only 16-bit WAV files are supported, got {wav.getsampwidth() * 8}-bit")

    frames = wav.readframes(wav.getnframes())

  samples = struct.unpack(f'<{len(frames) // 2}h', frames)
  channels = [list(samples[c::channel_count]) for c in range(channel_count)]
  return channels, sample_rate

def write_wav(filename: str, channels: list[list[int]], sample_rate: int) -> None:
  frame_count = len(channels[0]) if channels else 0
  interleaved = [channel[i] for i in range(frame_count) for channel in channels]

  with wave.open(filename, 'wb') as wav:
    wav.setnchannels(len(channels))
    wav.setsampwidth(2)
    wav.setframerate(sample_rate)
    wav.writeframes(struct.pack(f'<{len(interleaved)}h', *interleaved))

''' Conversion Functions '''
def create_idsp(filename: str, wav_file: str, settings_file: str, args) -> str:
  channels, sample_rate = read_wav(wav_file)

  settings = {}
  if settings_file:
    with open(settings_file, 'r') as f:
      settings = load_yaml(f)

    # Header dumps written by this script nest everything under 'idsp'
    settings = settings.get('idsp', settings)

  # Command line options take precedence over the settings file
  if args.interleave is not None:
    settings['interleave size'] = args.interleave
  if args.loop:
    settings['loop start'], settings['loop end'] = args.loop
    settings['looping'] = True

  container = IdspContainer.from_yaml(settings, channels, sample_rate)

  output = f'{filename}_{DATE_FILENAME}.idsp'
  write_idsp(output, container)
  return output

def create_wav(filename: str, container: IdspContainer) -> str:
  output = f'{filename}_{DATE_FILENAME}.wav'
  write_wav(output, container.to_pcm(), container.sample_rate)
  return output

def create_yaml(filename: str, container: IdspContainer) -> str:
  output = f'{filename}_{DATE_FILENAME}.yaml'
  with open(output, 'w') as f:
    dump_yaml({"idsp": container.to_yaml()}, f)
  return output

def error(message: str) -> None:
  print(f"{RED}{BOLD}Error:{RESET} {message}")
  sys.exit(1)

''' Main Function '''
def main(argv=None) -> None:
  args = parse_args(argv)
  files = args.files

  settings_file = None
  if len(files) == 1:
    [file] = files
    extension = os.path.splitext(file)[1].lower()
    if extension == '.idsp':
      mode = 'idsp'
    elif extension == '.wav':
      mode = 'wav'
    else:
      error("A single input file must be an IDSP or WAV file.")

  elif len(files) == 2:
    file1, file2 = files
    extensions = {os.path.splitext(file1)[1].lower(), os.path.splitext(file2)[1].lower()}

    if extensions not in ({'.wav', '.yaml'}, {'.wav', '.yml'}):
      error("For encoding with stream settings, you must supply both a .wav and a .yaml file.")
    mode = 'wav'

    file          = file1 if file1.lower().endswith('.wav') else file2
    settings_file = file2 if file is file1 else file1

  else:
    error("Too many input files.")

  filename = os.path.basename(os.path.splitext(file)[0])

  try:
    if mode == 'wav':
      ''' From WAV '''
      output = create_idsp(filename, file, settings_file, args)

    elif mode == 'idsp':
      ''' From IDSP '''
      container = read_idsp(file)

      if args.output == OutputType.YAML.value:
        output = create_yaml(filename, container)
      else:
        output = create_wav(filename, container)

  except (IdspError, OSError, ValueError, wave.Error) as e:
    error(str(e))

  print(f"{GREEN_79}Created{RESET} {BLUE_39}{output}{RESET}")

if __name__ == '__main__':
  main()

'''
### Channel Module

This module defines the `IdspChannel` class, which represents one channel of an IDSP
container: its DSP channel header and its GC-ADPCM payload.

Classes:
    `IdspChannel`:
        Represents a single channel header plus the channel's deinterleaved audio.

Functionality:
    - Parse a channel header from a binary format ('from_bytes').
    - Export a channel header back to binary format ('to_bytes').
    - Build a channel header for freshly encoded audio ('from_audio').
    - Convert the channel header to and from a YAML-friendly dictionary ('to_yaml', 'from_yaml').
    - Decode the channel's audio to PCM ('to_pcm').

Dependencies:
    `struct`:
        For byte-level unpacking and packing.

    `AdpcmContext`:
        Represents the start and loop decoder contexts.

    `PredictorTable`:
        Represents the channel's 8 predictor pairs.

    `Helpers`:
        For frame geometry and nibble address conversions.

    `Enums`:
        `AudioFormat`:
            Enum defining the header's sample format.

        `LoopFlag`:
            Enum defining the header's looping flag.

Intended Usage:
    Channel headers are read by `IdspContainer.from_bytes` and written by
    `IdspContainer.to_bytes`. The payload is stored on the channel after deinterleaving.
'''

# Import child structures
from .Context import AdpcmContext

# Import helper functions
from ...Helpers import *

# Import the header enums
from ...Enums import AudioFormat, LoopFlag, resolve_enum_value

from ...codec.Codebook import PredictorTable
from ...codec.Decoder import decode_gc_adpcm

# Size of the fields actually read from a channel header
CHANNEL_FIELDS_SIZE : Final = 0x4A

class IdspChannel: # struct size = 0x60
  ''' Represents a channel header and its audio in an IDSP container '''
  def __init__(self):
    # Set the default name to be used by the class
    self.name = "Channel"

    self.offset = 0
    self.index  = -1

    self.sample_count    = 0
    self.nibble_count    = 0
    self.sample_rate     = 0
    self.looping         = False
    self.format          = AudioFormat.ADPCM
    self.start_address   = 0
    self.end_address     = 0
    self.current_address = 0
    self.gain            = 0

    self.coefficients  = PredictorTable()
    self.start_context = AdpcmContext()
    self.loop_context  = AdpcmContext()

    # Deinterleaved GC-ADPCM payload
    self.audio = b''

  @classmethod
  def from_bytes(cls, index: int, channel_offset: int, data: bytes):
    self = cls()
    self.index  = index
    self.offset = channel_offset

    (
      self.sample_count,
      self.nibble_count,
      self.sample_rate,
      looping,
      self.format,
      self.start_address,
      self.end_address,
      self.current_address
    ) = struct.unpack('>3i 2h 3i', data[channel_offset:channel_offset + 0x1C])

    self.looping = looping == LoopFlag.LOOPING

    self.coefficients = PredictorTable.from_bytes(channel_offset + 0x1C, data)
    self.gain, = struct.unpack('>h', data[channel_offset + 0x3C:channel_offset + 0x3E])
    self.start_context = AdpcmContext.from_bytes(channel_offset + 0x3E, data)
    self.loop_context  = AdpcmContext.from_bytes(channel_offset + 0x44, data)

    return self

  def to_bytes(self, channel_header_size: int = 0x60) -> bytes:
    raw = struct.pack(
      '>3i 2h 3i',
      self.sample_count,
      self.nibble_count,
      self.sample_rate,
      LoopFlag.LOOPING if self.looping else LoopFlag.NONE,
      self.format,
      self.start_address,
      self.end_address,
      self.current_address
    )

    raw += self.coefficients.to_bytes()
    raw += struct.pack('>h', self.gain)
    raw += self.start_context.to_bytes()
    raw += self.loop_context.to_bytes()

    assert len(raw) == CHANNEL_FIELDS_SIZE
    return raw + b'\x00' * (channel_header_size - len(raw))

  @classmethod
  def from_audio(cls, index: int, audio: bytes, coefficients: PredictorTable, sample_count: int, sample_rate: int, loop_start: int = 0, loop_end: int = 0, looping: bool = False):
    self = cls()
    self.index = index

    self.sample_count = sample_count
    self.nibble_count = sample_count_to_nibble_count(sample_count)
    self.sample_rate  = sample_rate
    self.looping      = looping
    self.coefficients = coefficients
    self.audio        = audio

    end_sample = loop_end if looping else sample_count
    self.start_address   = sample_to_nibble_address(loop_start if looping else 0)
    self.end_address     = sample_to_nibble_address(max(end_sample - 1, 0))
    self.current_address = sample_to_nibble_address(0)

    self.start_context = AdpcmContext(audio[0] if audio else 0, 0, 0)
    if looping:
      pcm = decode_gc_adpcm(audio, coefficients, sample_count)
      self.loop_context = AdpcmContext.from_loop_point(loop_start, audio, pcm)

    return self

  def to_pcm(self) -> list[int]:
    return decode_gc_adpcm(self.audio, self.coefficients, self.sample_count, self.start_context.history)

  @classmethod
  def from_yaml(cls, channel_dict: dict):
    self = cls()

    self.sample_count    = channel_dict.get('sample count', 0)
    self.nibble_count    = channel_dict.get('nibble count', sample_count_to_nibble_count(self.sample_count))
    self.sample_rate     = channel_dict.get('sample rate', 0)
    self.looping         = bool(channel_dict.get('looping', False))
    self.format          = resolve_enum_value(AudioFormat, channel_dict.get('format', 'ADPCM'))
    self.start_address   = channel_dict.get('start address', 0)
    self.end_address     = channel_dict.get('end address', 0)
    self.current_address = channel_dict.get('current address', 0)
    self.gain            = channel_dict.get('gain', 0)

    if 'coefficients' in channel_dict:
      self.coefficients = PredictorTable.from_yaml(channel_dict['coefficients'])

    self.start_context = AdpcmContext.from_yaml(channel_dict.get('start context', {}))
    self.loop_context  = AdpcmContext.from_yaml(channel_dict.get('loop context', {}))

    return self

  def to_yaml(self) -> dict:
    return {
      "name": f"{self.name} [{self.index}]",
      "sample count": self.sample_count,
      "nibble count": self.nibble_count,
      "sample rate": self.sample_rate,
      "looping": self.looping,
      "format": AudioFormat(self.format).name,
      "start address": self.start_address,
      "end address": self.end_address,
      "current address": self.current_address,
      "coefficients": self.coefficients.to_yaml(),
      "gain": self.gain,
      "start context": self.start_context.to_yaml(),
      "loop context": self.loop_context.to_yaml()
    }

if __name__ == '__main__':
  pass

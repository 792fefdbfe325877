'''
IDSP Module

This module defines classes and functionality for reading, building, and writing IDSP
containers, the multi-channel GC-ADPCM stream format.

Classes:
    `IdspContainer`:
        Represents the stream header, the channel headers, and the channel payloads of an
        IDSP file.

Functions:
    `read_idsp_bytes`, `write_idsp_bytes`:
        Parse or serialize a container in memory.

    `read_idsp`, `write_idsp`:
        Same as above, through the file system.

Functionality:
    - Load a container from binary data (`from_bytes`), deinterleaving the payload.
    - Export a container back to binary data (`to_bytes`), interleaving the payload.
    - Build a container from per-channel PCM (`from_pcm`, `from_yaml`), analyzing and
      encoding every channel.
    - Decode every channel back to PCM (`to_pcm`).
    - Dump the headers to a YAML-friendly dictionary (`to_yaml`).

Binary layout (big-endian):
    0x00  magic "IDSP"
    0x04  reserved
    0x08  channel count           0x0C  sample rate
    0x10  sample count            0x14  loop start
    0x18  loop end                0x1C  interleave size
    0x20  stream header size      0x24  channel header size
    0x28  audio data offset       0x2C  audio data length (per channel)

    Channel headers follow at `stream header size + index * channel header size`, and the
    interleaved payload of all channels starts at the audio data offset.

Dependencies:
    `struct`:
        For byte-level unpacking and packing.

    `Interleave`:
        For splitting and merging channel payloads.

    `structs.Channel`:
        The individual channel header representation.

    `codec`:
        For coefficient analysis and encoding when building from PCM.

Intended Usage:
    This module is the entry point of the container format. Errors in the data raise the
    exceptions in `Errors`, and file system errors propagate as `OSError`.
'''

from typing import Optional

# Import IDSP child structures
from .structs.Channel import IdspChannel, CHANNEL_FIELDS_SIZE

from .Interleave import interleave, deinterleave

# Import helper functions
from ..Helpers import *
from ..Errors import InvalidHeaderError, InvalidAudioLengthError

from ..codec.Codebook import PredictorTable
from ..codec.Coefficients import analyze_coefficients
from ..codec.Encoder import encode_gc_adpcm

IDSP_MAGIC : Final = b'IDSP'

STREAM_HEADER_SIZE  : Final = 0x40
CHANNEL_HEADER_SIZE : Final = 0x60

# Size of the fields actually read from the stream header
STREAM_FIELDS_SIZE : Final = 0x30

class IdspContainer:
  ''' Represents an IDSP multi-channel GC-ADPCM stream '''
  def __init__(self):
    self.sample_rate     = 0
    self.sample_count    = 0
    self.loop_start      = 0
    self.loop_end        = 0
    self.interleave_size = 0

    self.header_size       = STREAM_HEADER_SIZE
    self.channel_info_size = CHANNEL_HEADER_SIZE
    self.audio_data_offset = 0
    self.audio_data_length = 0

    self.channels: list[IdspChannel] = []

  @property
  def channel_count(self) -> int:
    return len(self.channels)

  @property
  def looping(self) -> bool:
    return any(channel.looping for channel in self.channels)

  @classmethod
  def from_bytes(cls, data: bytes):
    self = cls()

    if data[:len(IDSP_MAGIC)] != IDSP_MAGIC:
      raise InvalidHeaderError("Data does not start with the IDSP magic")

    if len(data) < STREAM_FIELDS_SIZE:
      raise InvalidHeaderError(f"IDSP header is truncated ({len(data)} bytes)")

    (
      channel_count,
      self.sample_rate,
      self.sample_count,
      self.loop_start,
      self.loop_end,
      self.interleave_size,
      self.header_size,
      self.channel_info_size,
      self.audio_data_offset,
      self.audio_data_length
    ) = struct.unpack('>10i', data[0x08:STREAM_FIELDS_SIZE])

    if channel_count <= 0:
      raise InvalidHeaderError(f"IDSP header declares {channel_count} channels")

    if self.channel_info_size < CHANNEL_FIELDS_SIZE:
      raise InvalidHeaderError(f"IDSP channel headers of {self.channel_info_size} bytes are too small")

    if channel_count > (len(data) - self.header_size) // self.channel_info_size:
      raise InvalidHeaderError(f"IDSP header declares {channel_count} channels, more than the data holds")

    # Create channels
    self.channels = []
    for i in range(channel_count):
      offset = self.header_size + i * self.channel_info_size
      if offset < 0 or offset + CHANNEL_FIELDS_SIZE > len(data):
        raise InvalidHeaderError(f"Channel header {i} lies outside the data")

      self.channels.append(IdspChannel.from_bytes(i, offset, data))

    audio_length = self.audio_data_length * channel_count
    if self.audio_data_offset < 0 or self.audio_data_length < 0 or self.audio_data_offset + audio_length > len(data):
      raise InvalidAudioLengthError(f"Audio data of {audio_length} bytes at {self.audio_data_offset} runs past the end of the data")

    audio = data[self.audio_data_offset:self.audio_data_offset + audio_length]
    for channel, channel_audio in zip(self.channels, deinterleave(audio, self.interleave_size, channel_count)):
      channel.audio = channel_audio

    return self

  def to_bytes(self) -> bytes:
    if not self.channels:
      raise InvalidAudioLengthError("An IDSP container needs at least one channel")

    # Always written with the standard header sizes, whatever was read
    audio_data_offset = STREAM_HEADER_SIZE + CHANNEL_HEADER_SIZE * self.channel_count

    audio = interleave([channel.audio for channel in self.channels], self.interleave_size)
    audio_data_length = len(audio) // self.channel_count

    raw = bytearray(IDSP_MAGIC)
    raw += struct.pack(
      '>I 10i',
      0,
      self.channel_count,
      self.sample_rate,
      self.sample_count,
      self.loop_start,
      self.loop_end,
      self.interleave_size,
      STREAM_HEADER_SIZE,
      CHANNEL_HEADER_SIZE,
      audio_data_offset,
      audio_data_length
    )
    raw += b'\x00' * (STREAM_HEADER_SIZE - len(raw))

    for channel in self.channels:
      raw += channel.to_bytes(CHANNEL_HEADER_SIZE)

    raw += audio
    return bytes(raw)

  @classmethod
  def from_pcm(cls, channels_pcm, sample_rate: int, loop_start: int = 0, loop_end: Optional[int] = None, looping: bool = False, interleave_size: int = 0, coefficients=None):
    '''
    Builds a container by encoding one PCM sequence per channel.

    `loop_end` is exclusive and defaults to the sample count. `coefficients` optionally
    supplies one predictor table per channel; missing tables are analyzed from the PCM.
    '''
    self = cls()

    channels_pcm = [[int(s) for s in pcm] for pcm in channels_pcm]
    if not channels_pcm:
      raise InvalidAudioLengthError("An IDSP container needs at least one channel")

    sample_count = len(channels_pcm[0])
    if any(len(pcm) != sample_count for pcm in channels_pcm):
      raise InvalidAudioLengthError("All channels must have the same number of samples")

    if loop_end is None:
      loop_end = sample_count

    if looping and not 0 <= loop_start < loop_end <= sample_count:
      raise ValueError(f"Invalid loop points {loop_start}-{loop_end} for {sample_count} samples")

    if coefficients is None:
      coefficients = []

    self.sample_rate     = sample_rate
    self.sample_count    = sample_count
    self.loop_start      = loop_start if looping else 0
    self.loop_end        = loop_end if looping else 0
    self.interleave_size = interleave_size

    self.channels = []
    for i, pcm in enumerate(channels_pcm):
      if i < len(coefficients) and coefficients[i] is not None:
        table = PredictorTable.coerce(coefficients[i])
      else:
        table = analyze_coefficients(pcm)

      audio = encode_gc_adpcm(pcm, table)
      channel = IdspChannel.from_audio(i, audio, table, sample_count, sample_rate, self.loop_start, self.loop_end, looping)
      self.channels.append(channel)

    return self

  def to_pcm(self) -> list[list[int]]:
    return [channel.to_pcm() for channel in self.channels]

  @classmethod
  def from_yaml(cls, stream_dict: dict, channels_pcm, sample_rate: int):
    ''' Builds a container from PCM using stream settings written by `to_yaml` or by hand '''
    channel_dicts = stream_dict.get('channels') or []

    coefficients = []
    for channel_dict in channel_dicts:
      if channel_dict and 'coefficients' in channel_dict:
        coefficients.append(PredictorTable.from_yaml(channel_dict['coefficients']))
      else:
        coefficients.append(None)

    looping = bool(stream_dict.get('looping', 'loop end' in stream_dict))

    return cls.from_pcm(
      channels_pcm,
      sample_rate,
      loop_start=stream_dict.get('loop start', 0),
      loop_end=stream_dict.get('loop end') or None,
      looping=looping,
      interleave_size=stream_dict.get('interleave size', 0),
      coefficients=coefficients
    )

  def to_yaml(self) -> dict:
    return {
      "channel count": self.channel_count,
      "sample rate": self.sample_rate,
      "sample count": self.sample_count,
      "looping": self.looping,
      "loop start": self.loop_start,
      "loop end": self.loop_end,
      "interleave size": self.interleave_size,
      "channels": [channel.to_yaml() for channel in self.channels]
    }

''' Binary Functions '''
def read_idsp_bytes(data: bytes) -> IdspContainer:
  return IdspContainer.from_bytes(data)

def write_idsp_bytes(container: IdspContainer) -> bytes:
  return container.to_bytes()

''' File Functions '''
def read_idsp(filename: str) -> IdspContainer:
  with open(filename, 'rb') as file:
    data = file.read()
  return read_idsp_bytes(data)

def write_idsp(filename: str, container: IdspContainer) -> None:
  data = write_idsp_bytes(container)
  with open(filename, 'wb') as file:
    file.write(data)

if __name__ == '__main__':
  pass

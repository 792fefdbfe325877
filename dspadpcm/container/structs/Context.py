'''
### Context Module

This module defines the `AdpcmContext` class, which represents the decoder state a DSP
channel header stores for its start point and for its loop point.

Classes:
    `AdpcmContext`:
        Represents a single `(predictor_scale, hist_1, hist_2)` context.

Functionality:
    - Parse a context from a binary channel header ('from_bytes').
    - Export a context back to binary format ('to_bytes').
    - Convert the context to and from a YAML-friendly dictionary ('to_yaml', 'from_yaml').
    - Build the loop context of an encoded channel ('from_loop_point').

Dependencies:
    `struct`:
        For byte-level unpacking and packing.

    `Helpers`:
        For frame geometry.

Intended Usage:
    `predictor_scale` is a copy of the header byte of the frame the context points into, and
    `hist_1` / `hist_2` are the two samples decoded right before that point.
'''

# Import helper functions
from ...Helpers import *

class AdpcmContext: # struct size = 0x06
  ''' Represents a GC-ADPCM decoder context in a channel header '''
  def __init__(self, predictor_scale: int = 0, hist_1: int = 0, hist_2: int = 0):
    self.predictor_scale = predictor_scale
    self.hist_1 = hist_1
    self.hist_2 = hist_2

  @classmethod
  def from_bytes(cls, context_offset: int, data: bytes):
    self = cls()

    (
      self.predictor_scale,
      self.hist_1,
      self.hist_2
    ) = struct.unpack('>3h', data[context_offset:context_offset + 0x06])

    return self

  def to_bytes(self) -> bytes:
    return struct.pack('>3h', self.predictor_scale, self.hist_1, self.hist_2)

  @classmethod
  def from_loop_point(cls, loop_start: int, audio: bytes, pcm: list[int]):
    frame_offset = (loop_start // SAMPLES_PER_FRAME) * BYTES_PER_FRAME
    predictor_scale = audio[frame_offset] if frame_offset < len(audio) else 0

    hist_1 = pcm[loop_start - 1] if loop_start >= 1 else 0
    hist_2 = pcm[loop_start - 2] if loop_start >= 2 else 0

    return cls(predictor_scale, hist_1, hist_2)

  @classmethod
  def from_yaml(cls, context_dict: dict):
    return cls(
      context_dict.get('predictor scale', 0),
      context_dict.get('history 1', 0),
      context_dict.get('history 2', 0)
    )

  def to_yaml(self) -> dict:
    return {
      "predictor scale": self.predictor_scale,
      "history 1": self.hist_1,
      "history 2": self.hist_2
    }

  @property
  def history(self) -> tuple[int, int]:
    return self.hist_1, self.hist_2

  def __eq__(self, other):
    if not isinstance(other, AdpcmContext):
      return NotImplemented
    return (self.predictor_scale, self.hist_1, self.hist_2) == (other.predictor_scale, other.hist_1, other.hist_2)

  def __repr__(self):
    return f"AdpcmContext(predictor_scale={self.predictor_scale}, hist_1={self.hist_1}, hist_2={self.hist_2})"

if __name__ == '__main__':
  pass

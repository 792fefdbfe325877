'''
### Codebook Module

This module defines the `PredictorTable` class, which represents the eight fixed-point
predictor pairs a GC-ADPCM channel is encoded with.

Classes:
    `PredictorTable`:
        Represents a single table of 8 `(coef_1, coef_2)` predictor pairs.

Functionality:
    - Parse a predictor table from a binary channel header ('from_bytes').
    - Export a predictor table back to binary format ('to_bytes').
    - Convert the table to and from a YAML-friendly dictionary ('to_yaml', 'from_yaml').
    - Validate that a table always holds exactly 16 signed 16-bit values.

Dependencies:
    `struct`:
        For byte-level unpacking and packing.

    `Helpers`:
        For the table geometry constants.

    `YAMLSerializer`:
        `FlowStyleList`:
            Keeps each predictor pair on a single line when dumped to YAML.

Intended Usage:
    The codec functions accept either a `PredictorTable` or a flat sequence of 16 values and
    normalize it with `PredictorTable.coerce`. Coefficients are stored with an implicit scale
    of 2048, so a stored value of 2048 is a true coefficient of 1.0.
'''

# Import helper functions
from ..Helpers import *

from ..YAMLSerializer import FlowStyleList

class PredictorTable: # struct size = 0x20
  ''' Represents the 8 predictor pairs of a GC-ADPCM channel '''
  def __init__(self, coefficients=None):
    # Set the default name to be used by the class
    self.name = "Coefficients"

    if coefficients is None:
      coefficients = [0] * NUM_COEFFICIENTS

    coefficients = [int(c) for c in coefficients]
    if len(coefficients) != NUM_COEFFICIENTS:
      raise ValueError(f"A predictor table holds {NUM_COEFFICIENTS} coefficients, got {len(coefficients)}")

    for coef in coefficients:
      if not INT16_MIN <= coef <= INT16_MAX:
        raise ValueError(f"Coefficient {coef} does not fit in a signed 16-bit value")

    self._coefficients = tuple(coefficients)

  @classmethod
  def coerce(cls, coefficients):
    if isinstance(coefficients, cls):
      return coefficients
    return cls(coefficients)

  @classmethod
  def from_pairs(cls, pairs):
    pairs = list(pairs)
    if len(pairs) != NUM_PREDICTORS:
      raise ValueError(f"A predictor table holds {NUM_PREDICTORS} pairs, got {len(pairs)}")

    return cls([coef for pair in pairs for coef in pair])

  @classmethod
  def from_bytes(cls, table_offset: int, data: bytes):
    return cls(struct.unpack('>16h', data[table_offset:table_offset + 0x20]))

  def to_bytes(self) -> bytes:
    return struct.pack('>16h', *self._coefficients)

  @classmethod
  def from_yaml(cls, table_dict):
    # Accept both the flat list and the list of pairs written by to_yaml
    if isinstance(table_dict, dict):
      table_dict = table_dict['predictors']

    if table_dict and isinstance(table_dict[0], (list, tuple)):
      return cls.from_pairs(table_dict)

    return cls(table_dict)

  def to_yaml(self) -> dict:
    return {
      "predictors": [FlowStyleList(pair) for pair in self.pairs]
    }

  def pair(self, index: int) -> tuple[int, int]:
    return self._coefficients[index * 2], self._coefficients[index * 2 + 1]

  @property
  def pairs(self) -> list[tuple[int, int]]:
    return [self.pair(i) for i in range(NUM_PREDICTORS)]

  @property
  def coefficients(self) -> list[int]:
    return list(self._coefficients)

  def __getitem__(self, index):
    return self._coefficients[index]

  def __len__(self):
    return NUM_COEFFICIENTS

  def __iter__(self):
    return iter(self._coefficients)

  def __eq__(self, other):
    if isinstance(other, PredictorTable):
      return self._coefficients == other._coefficients
    if isinstance(other, (list, tuple)):
      return list(self._coefficients) == list(other)
    return NotImplemented

  def __hash__(self):
    return hash(self._coefficients)

  def __repr__(self):
    return f"PredictorTable({list(self._coefficients)})"

if __name__ == '__main__':
  pass

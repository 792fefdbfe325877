'''
### Helpers Module

This module provides the low-level arithmetic shared by the GC-ADPCM codec and the IDSP
container: nibble packing, fixed-width saturation, and the conversions between sample,
nibble, and byte counts dictated by the 14-sample / 8-byte frame geometry.

Constants:
    `SAMPLES_PER_FRAME`, `NIBBLES_PER_FRAME`, `BYTES_PER_FRAME`:
        The frame geometry of the wire format.

Functions:
    `high_nibble`, `low_nibble`, `high_nibble_signed`, `low_nibble_signed`, `combine_nibbles`:
        Nibble extraction and packing.

    `clamp_16`, `clamp_4`:
        Saturate an integer to the signed 16-bit or signed 4-bit range.

    `sample_count_to_nibble_count`, `sample_count_to_byte_count`, `nibble_count_to_sample_count`,
    `byte_count_to_sample_count`, `sample_to_nibble_address`:
        Frame geometry conversions, including the short final frame rule.

    `divide_by_round_up`, `divide_truncate`, `round_to_f32`, `round_saturate_16`:
        Integer and floating point helpers that reproduce fixed-width arithmetic.

Dependencies:
    `struct`:
        Imported and exposed for byte-level packing and unpacking, and used for single
        precision rounding.

    `math`:
        Imported and exposed for floor and NaN checks.

Intended Usage:
    This module is intended to be star-imported by the codec and container modules.
'''

import math as _math
import struct as _struct
from typing import Final

''' Frame Geometry '''
SAMPLES_PER_FRAME : Final = 14
NIBBLES_PER_FRAME : Final = 16
BYTES_PER_FRAME   : Final = 8

# Number of predictor pairs in a table, and of int16 values in its flat form
NUM_PREDICTORS   : Final = 8
NUM_COEFFICIENTS : Final = 16

INT16_MIN : Final = -32768
INT16_MAX : Final = 32767

''' Nibble Functions '''
def high_nibble(value: int) -> int:
  return (value >> 4) & 0x0F

def low_nibble(value: int) -> int:
  return value & 0x0F

def _sign_extend_4(nibble: int) -> int:
  return nibble - 16 if nibble >= 8 else nibble

def high_nibble_signed(value: int) -> int:
  return _sign_extend_4(high_nibble(value))

def low_nibble_signed(value: int) -> int:
  return _sign_extend_4(low_nibble(value))

def combine_nibbles(high: int, low: int) -> int:
  return ((high & 0x0F) << 4) | (low & 0x0F)

''' Saturation Functions '''
def clamp_16(value: int) -> int:
  if value > INT16_MAX:
    return INT16_MAX
  if value < INT16_MIN:
    return INT16_MIN
  return value

def clamp_4(value: int) -> int:
  if value > 7:
    return 7
  if value < -8:
    return -8
  return value

''' Frame Geometry Functions '''
def divide_by_round_up(value: int, divisor: int) -> int:
  return (value + divisor - 1) // divisor

def sample_count_to_nibble_count(sample_count: int) -> int:
  frames = sample_count // SAMPLES_PER_FRAME
  extra_samples = sample_count % SAMPLES_PER_FRAME
  extra_nibbles = 0 if extra_samples == 0 else extra_samples + 2 # header byte
  return NIBBLES_PER_FRAME * frames + extra_nibbles

def sample_count_to_byte_count(sample_count: int) -> int:
  return divide_by_round_up(sample_count_to_nibble_count(sample_count), 2)

def nibble_count_to_sample_count(nibble_count: int) -> int:
  frames = nibble_count // NIBBLES_PER_FRAME
  extra_nibbles = nibble_count % NIBBLES_PER_FRAME
  extra_samples = 0 if extra_nibbles < 2 else extra_nibbles - 2
  return SAMPLES_PER_FRAME * frames + extra_samples

def byte_count_to_sample_count(byte_count: int) -> int:
  return nibble_count_to_sample_count(byte_count * 2)

def sample_to_nibble_address(sample: int) -> int:
  ''' Nibble address of a sample, skipping the two header nibbles of every frame '''
  frames = sample // SAMPLES_PER_FRAME
  extra_samples = sample % SAMPLES_PER_FRAME
  return NIBBLES_PER_FRAME * frames + extra_samples + 2

''' Fixed-Width Arithmetic Functions '''
def divide_truncate(dividend: int, divisor: int) -> int:
  ''' Integer division rounding toward zero, like C and Rust integer division '''
  quotient = abs(dividend) // abs(divisor)
  return quotient if (dividend < 0) == (divisor < 0) else -quotient

def round_to_f32(value: float) -> float:
  return _struct.unpack('<f', _struct.pack('<f', value))[0]

def round_half_away(value: float) -> int:
  magnitude = abs(value)
  whole = _math.floor(magnitude)
  if magnitude - whole >= 0.5:
    whole += 1
  return int(whole) if value >= 0 else -int(whole)

def round_saturate_16(value: float) -> int:
  if _math.isnan(value):
    return 0
  if value > INT16_MAX:
    return INT16_MAX
  if value < INT16_MIN:
    return INT16_MIN
  return round_half_away(value)

# Expose struct and math
struct = _struct
math = _math

if __name__ == '__main__':
  pass

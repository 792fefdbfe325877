'''
### Interleave Module

This module splits and merges the per-channel payloads of a multi-channel container.

Functions:
    `interleave`:
        Merges equal-length channel payloads into alternating fixed-size blocks.

    `deinterleave`:
        Splits alternating fixed-size blocks back into one payload per channel.

Functionality:
    - Lay out block 0 of every channel, then block 1 of every channel, and so on.
    - Handle a final block shorter than the interleave size.
    - Optionally pad or truncate every channel to a different output length, copying the
      shorter of the source and destination block each time.

Dependencies:
    `Helpers`:
        For rounding-up division.

    `Errors`:
        `InvalidAudioLengthError`:
            Raised when the payload does not split evenly between the channels.

Intended Usage:
    An interleave size of 0 (or less) means a single block per channel spanning its whole
    payload, which is how mono IDSP files are usually stored.
'''

from typing import Optional

# Import helper functions
from ..Helpers import *

from ..Errors import InvalidAudioLengthError

def _block_layout(interleave_size: int, input_size: int, output_size: int) -> tuple[int, int, int, int, int]:
  if interleave_size <= 0:
    interleave_size = max(input_size, output_size, 1)

  in_block_count  = divide_by_round_up(input_size, interleave_size)
  out_block_count = divide_by_round_up(output_size, interleave_size)

  last_input_size  = input_size - (in_block_count - 1) * interleave_size
  last_output_size = output_size - (out_block_count - 1) * interleave_size

  return interleave_size, in_block_count, out_block_count, last_input_size, last_output_size

def interleave(inputs, interleave_size: int, output_size: Optional[int] = None) -> bytes:
  inputs = [bytes(channel) for channel in inputs]
  if not inputs:
    return b''

  input_size = len(inputs[0])
  if any(len(channel) != input_size for channel in inputs):
    raise InvalidAudioLengthError("All channels must have the same payload length")

  if output_size is None:
    output_size = input_size

  input_count = len(inputs)
  (
    interleave_size,
    in_block_count,
    out_block_count,
    last_input_size,
    last_output_size
  ) = _block_layout(interleave_size, input_size, output_size)

  output = bytearray(output_size * input_count)

  for b in range(min(in_block_count, out_block_count)):
    current_input_size  = last_input_size if b == in_block_count - 1 else interleave_size
    current_output_size = last_output_size if b == out_block_count - 1 else interleave_size
    bytes_to_copy = min(current_input_size, current_output_size)

    src = interleave_size * b
    for i, channel in enumerate(inputs):
      dst = interleave_size * b * input_count + current_output_size * i
      output[dst:dst + bytes_to_copy] = channel[src:src + bytes_to_copy]

  return bytes(output)

def deinterleave(data: bytes, interleave_size: int, output_count: int, output_size: Optional[int] = None) -> list[bytes]:
  length = len(data)
  if output_count <= 0:
    raise InvalidAudioLengthError(f"Cannot split audio between {output_count} channels")

  if length % output_count != 0:
    raise InvalidAudioLengthError(f"Audio length {length} does not divide evenly between {output_count} channels")

  input_size = length // output_count
  if output_size is None:
    output_size = input_size

  (
    interleave_size,
    in_block_count,
    out_block_count,
    last_input_size,
    last_output_size
  ) = _block_layout(interleave_size, input_size, output_size)

  outputs = [bytearray(output_size) for _ in range(output_count)]
  position = 0

  for b in range(min(in_block_count, out_block_count)):
    current_input_size  = last_input_size if b == in_block_count - 1 else interleave_size
    current_output_size = last_output_size if b == out_block_count - 1 else interleave_size
    bytes_to_copy = min(current_input_size, current_output_size)

    dst = interleave_size * b
    for output in outputs:
      output[dst:dst + bytes_to_copy] = data[position:position + bytes_to_copy]

      # Skip whatever part of the source block does not fit the destination
      position += current_input_size

  return [bytes(output) for output in outputs]

if __name__ == '__main__':
  pass

'''
### Decoder Module

This module decodes a GC-ADPCM byte stream back into 16-bit PCM.

Functions:
    `decode_gc_adpcm`:
        Decodes a full channel of GC-ADPCM with a given predictor table.

Dependencies:
    `Helpers`:
        For nibble extraction, saturation, and frame geometry.

    `Codebook`:
        `PredictorTable`:
            Normalizes the coefficients argument.

Intended Usage:
    Decoding never fails. The number of samples is derived from the byte length unless an
    explicit `sample_count` is given, which is how a container's declared length trims the
    odd trailing nibble of a short final frame.
'''

from typing import Optional

# Import helper functions
from ..Helpers import *

from .Codebook import PredictorTable

def decode_gc_adpcm(adpcm: bytes, coefficients, sample_count: Optional[int] = None, history: tuple[int, int] = (0, 0)) -> list[int]:
  table = PredictorTable.coerce(coefficients)

  available = byte_count_to_sample_count(len(adpcm))
  if sample_count is None or sample_count > available:
    sample_count = available

  pcm = []
  if sample_count <= 0:
    return pcm

  hist_1, hist_2 = history
  in_index = 0

  frame_count = divide_by_round_up(sample_count, SAMPLES_PER_FRAME)
  for _ in range(frame_count):
    predictor_scale = adpcm[in_index]
    in_index += 1

    scale = (1 << low_nibble(predictor_scale)) * 2048
    coef_1, coef_2 = table.pair(high_nibble(predictor_scale) & 0x7)

    samples_to_read = min(SAMPLES_PER_FRAME, sample_count - len(pcm))
    for s in range(samples_to_read):
      if s % 2 == 0:
        adpcm_sample = high_nibble_signed(adpcm[in_index])
      else:
        adpcm_sample = low_nibble_signed(adpcm[in_index])
        in_index += 1

      distance = scale * adpcm_sample
      predicted_sample = coef_1 * hist_1 + coef_2 * hist_2
      sample = clamp_16((predicted_sample + distance + 1024) >> 11)

      hist_2 = hist_1
      hist_1 = sample
      pcm.append(sample)

  return pcm

if __name__ == '__main__':
  pass

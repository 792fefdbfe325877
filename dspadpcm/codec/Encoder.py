'''
### Encoder Module

This module encodes 16-bit PCM into a GC-ADPCM byte stream.

Functions:
    `encode_gc_adpcm`:
        Encodes a full channel of PCM with a given predictor table.

Functionality:
    - Split the PCM into 14-sample frames, carrying the two last reconstructed samples of a
      frame into the next as prediction history.
    - Encode every frame with each of the 8 predictors, searching for the smallest scale
      exponent whose residuals fit in 4 bits, and keep the predictor with the lowest squared
      reconstruction error.
    - Reconstruct every sample exactly as a decoder would, so the encoder's history never
      drifts from the decoder's.

Dependencies:
    `Helpers`:
        For nibble packing, saturation, and frame geometry.

    `Codebook`:
        `PredictorTable`:
            Normalizes the coefficients argument.

Intended Usage:
    The returned stream is exactly `sample_count_to_byte_count(len(pcm))` bytes long. The
    unused nibbles of a short final frame are zero.
'''

# Import helper functions
from ..Helpers import *

from .Codebook import PredictorTable

MAX_SCALE_POWER : Final = 12

# Rounding bias applied to the single precision quotient before truncation
ROUNDING_BIAS : Final = 0.4999999

class FrameCandidate:
  ''' Holds the result of encoding one frame with one predictor '''
  def __init__(self):
    self.scale_power    = 0
    self.total_distance = 0.0

    # Residuals and reconstructed samples, the latter preceded by the two history samples
    self.adpcm_out: list[int] = []
    self.pcm_out:   list[int] = []

def dsp_encode_coefficient(pcm_in: list[int], sample_count: int, coef_1: int, coef_2: int) -> FrameCandidate:
  '''
  Encodes one frame with a single predictor pair.

  `pcm_in` holds the two history samples followed by the frame's samples.
  '''
  candidate = FrameCandidate()
  candidate.adpcm_out = [0] * SAMPLES_PER_FRAME
  pcm_out = [0] * (SAMPLES_PER_FRAME + 2)
  pcm_out[0] = pcm_in[0]
  pcm_out[1] = pcm_in[1]

  # Encode the frame with a scale of 1
  max_distance = 0
  for s in range(sample_count):
    input_sample = pcm_in[s + 2]
    predicted_sample = divide_truncate(pcm_in[s] * coef_2 + pcm_in[s + 1] * coef_1, 2048)
    distance = clamp_16(input_sample - predicted_sample)

    if abs(distance) > abs(max_distance):
      max_distance = distance

  # Use the maximum distance of the frame to find a scale that will fit it
  scale_power = 0
  while scale_power <= MAX_SCALE_POWER and (max_distance > 7 or max_distance < -8):
    max_distance = divide_truncate(max_distance, 2)
    scale_power += 1

  scale_power = -1 if scale_power <= 1 else scale_power - 2

  while True:
    scale_power += 1
    scale = (1 << scale_power) * 2048
    total_distance = 0.0
    max_overflow = 0

    for s in range(sample_count):
      input_sample = pcm_in[s + 2] * 2048
      predicted_sample = pcm_out[s] * coef_2 + pcm_out[s + 1] * coef_1
      distance = input_sample - predicted_sample

      quotient = round_to_f32(round_to_f32(float(distance)) / scale)
      if distance > 0:
        unclamped_adpcm_sample = int(quotient + ROUNDING_BIAS)
      else:
        unclamped_adpcm_sample = int(quotient - ROUNDING_BIAS)

      adpcm_sample = clamp_4(unclamped_adpcm_sample)

      if adpcm_sample != unclamped_adpcm_sample:
        overflow = abs(unclamped_adpcm_sample - adpcm_sample)
        if overflow > max_overflow:
          max_overflow = overflow

      candidate.adpcm_out[s] = adpcm_sample

      # Decode sample to use as history
      corrected_sample = predicted_sample + adpcm_sample * scale
      pcm_out[s + 2] = clamp_16((corrected_sample + 1024) >> 11)

      actual_distance = float(pcm_in[s + 2] - pcm_out[s + 2])
      total_distance += actual_distance * actual_distance

    # Nothing coarser to try, keep the residuals of the largest scale
    if scale_power >= MAX_SCALE_POWER:
      break

    x = max_overflow
    while x > 256:
      scale_power += 1
      if scale_power >= MAX_SCALE_POWER:
        scale_power = MAX_SCALE_POWER - 1

      x >>= 1

    if scale_power < MAX_SCALE_POWER and max_overflow > 1:
      continue
    break

  candidate.scale_power = scale_power
  candidate.total_distance = total_distance
  candidate.pcm_out = pcm_out
  return candidate

def dsp_encode_frame(pcm_in: list[int], sample_count: int, table: PredictorTable) -> tuple[bytes, list[int]]:
  ''' Returns the 8 encoded bytes of a frame and the winning reconstructed samples '''
  best_index = 0
  best = None
  for index in range(NUM_PREDICTORS):
    coef_1, coef_2 = table.pair(index)
    candidate = dsp_encode_coefficient(pcm_in, sample_count, coef_1, coef_2)

    if best is None or candidate.total_distance < best.total_distance:
      best = candidate
      best_index = index

  residuals = best.adpcm_out
  for s in range(sample_count, SAMPLES_PER_FRAME):
    residuals[s] = 0

  frame = bytearray(BYTES_PER_FRAME)
  frame[0] = combine_nibbles(best_index, best.scale_power)
  for i in range(7):
    frame[i + 1] = combine_nibbles(residuals[i * 2], residuals[i * 2 + 1])

  return bytes(frame), best.pcm_out

def encode_gc_adpcm(pcm, coefficients, history: tuple[int, int] = (0, 0)) -> bytes:
  '''
  Encodes PCM samples to GC-ADPCM.

  `history` is the `(hist_1, hist_2)` pair the first frame is predicted from.
  '''
  table = PredictorTable.coerce(coefficients)
  pcm = [int(s) for s in pcm]
  sample_count = len(pcm)

  adpcm = bytearray(sample_count_to_byte_count(sample_count))
  hist_1, hist_2 = history

  frame_count = divide_by_round_up(sample_count, SAMPLES_PER_FRAME)
  for frame in range(frame_count):
    src_index = frame * SAMPLES_PER_FRAME
    samples_to_copy = min(sample_count - src_index, SAMPLES_PER_FRAME)

    pcm_buffer = [hist_2, hist_1] + pcm[src_index:src_index + samples_to_copy]
    pcm_buffer += [0] * (SAMPLES_PER_FRAME - samples_to_copy)

    # A short final frame is scored on its real samples only, not on the zero padding
    frame_bytes, pcm_out = dsp_encode_frame(pcm_buffer, samples_to_copy, table)

    bytes_to_copy = sample_count_to_byte_count(samples_to_copy)
    dst_index = frame * BYTES_PER_FRAME
    adpcm[dst_index:dst_index + bytes_to_copy] = frame_bytes[:bytes_to_copy]

    hist_2 = pcm_out[samples_to_copy]
    hist_1 = pcm_out[samples_to_copy + 1]

  return bytes(adpcm)

if __name__ == '__main__':
  pass

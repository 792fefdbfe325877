'''
### Coefficients Module

This module derives the predictor table of a GC-ADPCM channel from its PCM samples.

Functions:
    `analyze_coefficients`:
        Computes the 8 predictor pairs best suited to a PCM signal.

Functionality:
    - Walk the signal one 14-sample frame at a time, with the previous frame as history.
    - Solve the 2-tap linear prediction normal equations of every frame with enough energy,
      discarding degenerate and unstable solutions.
    - Cluster the per-frame solutions into 8 centroids by repeated binary splitting and
      Lloyd refinement, comparing candidates in the reflection coefficient domain.
    - Convert every centroid to fixed-point coefficients with an implicit scale of 2048.

Dependencies:
    `Helpers`:
        For the frame geometry and rounding with 16-bit saturation.

    `Codebook`:
        `PredictorTable`:
            The value type returned to callers.

Intended Usage:
    `analyze_coefficients` never fails. A silent or very short signal produces no usable
    frames and yields a table built from the identity starting vector, which still decodes
    to finite samples.
'''

import sys

# Import helper functions
from ..Helpers import *

from .Codebook import PredictorTable

# Frames whose zero-lag energy does not exceed this are skipped
ENERGY_THRESHOLD : Final = 10.0

# Reflection coefficients are kept strictly inside the unit interval
REFLECTION_LIMIT : Final = 0.9999999999

# Pivot ratio below which a frame's normal equations are treated as singular
SINGULAR_RATIO : Final = 1.0e-10

# Offset applied to a centroid to create its sibling at every split
SPLIT_OFFSET : Final = (0.0, -1.0, 0.0)
SPLIT_SCALE  : Final = 0.01

# Lloyd passes run after every split
REFINE_PASSES : Final = 2

''' Per-Frame Analysis '''
def inner_product_merge(pcm_hist: list[int]) -> list[float]:
  out = [0.0, 0.0, 0.0]
  for i in range(3):
    for x in range(SAMPLES_PER_FRAME):
      out[i] -= pcm_hist[SAMPLES_PER_FRAME + x - i] * pcm_hist[SAMPLES_PER_FRAME + x]

  return out

def outer_product_merge(mtx: list[list[float]], pcm_hist: list[int]) -> None:
  for x in range(1, 3):
    for y in range(1, 3):
      mtx[x][y] = 0.0
      for z in range(SAMPLES_PER_FRAME):
        mtx[x][y] += pcm_hist[SAMPLES_PER_FRAME + z - x] * pcm_hist[SAMPLES_PER_FRAME + z - y]

def analyze_ranges(mtx: list[list[float]], vec_idxs: list[int]) -> bool:
  ''' LU-decomposes the 2x2 system in place with partial pivoting, returns True if singular '''
  recips = [0.0, 0.0, 0.0]

  # Get greatest distance from zero
  for x in range(1, 3):
    val = max(abs(mtx[x][1]), abs(mtx[x][2]))
    if val < sys.float_info.epsilon:
      return True

    recips[x] = 1.0 / val

  max_index = 0
  for i in range(1, 3):
    for x in range(1, i):
      tmp = mtx[x][i]
      for y in range(1, x):
        tmp -= mtx[x][y] * mtx[y][i]
      mtx[x][i] = tmp

    val = 0.0
    for x in range(i, 3):
      tmp = mtx[x][i]
      for y in range(1, i):
        tmp -= mtx[x][y] * mtx[y][i]

      mtx[x][i] = tmp
      tmp = abs(tmp) * recips[x]
      if tmp >= val:
        val = tmp
        max_index = x

    if max_index != i:
      mtx[max_index][1], mtx[i][1] = mtx[i][1], mtx[max_index][1]
      mtx[max_index][2], mtx[i][2] = mtx[i][2], mtx[max_index][2]
      recips[max_index] = recips[i]

    vec_idxs[i] = max_index

    if mtx[i][i] == 0.0:
      return True

    if i != 2:
      tmp = 1.0 / mtx[i][i]
      for x in range(i + 1, 3):
        mtx[x][i] *= tmp

  # Get range
  min_value = 1.0e10
  max_value = 0.0
  for i in range(1, 3):
    tmp = abs(mtx[i][i])
    if tmp < min_value:
      min_value = tmp
    if tmp > max_value:
      max_value = tmp

  return min_value / max_value < SINGULAR_RATIO

def bidirectional_filter(mtx: list[list[float]], vec_idxs: list[int], vec_out: list[float]) -> None:
  x = 0
  for i in range(1, 3):
    index = vec_idxs[i]
    tmp = vec_out[index]
    vec_out[index] = vec_out[i]
    if x != 0:
      for y in range(x, i):
        tmp -= vec_out[y] * mtx[i][y]
    elif tmp != 0.0:
      x = i
    vec_out[i] = tmp

  for i in range(2, 0, -1):
    tmp = vec_out[i]
    for y in range(i + 1, 3):
      tmp -= vec_out[y] * mtx[i][y]
    vec_out[i] = tmp / mtx[i][i]

  vec_out[0] = 1.0

def quadratic_merge(in_out: list[float]) -> bool:
  ''' Converts the solution to reflection form in place, returns True if unstable '''
  v2 = in_out[2]
  tmp = 1.0 - (v2 * v2)

  if tmp == 0.0:
    return True

  v0 = (in_out[0] - (v2 * v2)) / tmp
  v1 = (in_out[1] - (in_out[1] * v2)) / tmp

  in_out[0] = v0
  in_out[1] = v1

  return abs(v1) > 1.0

def finish_record(in_r: list[float]) -> list[float]:
  for z in range(1, 3):
    if in_r[z] >= 1.0:
      in_r[z] = REFLECTION_LIMIT
    elif in_r[z] <= -1.0:
      in_r[z] = -REFLECTION_LIMIT

  return [1.0, (in_r[2] * in_r[1]) + in_r[1], in_r[2]]

''' Clustering '''
def matrix_filter(src: list[float]) -> list[float]:
  ''' Maps a record from reflection form back to filter coefficients '''
  mtx = [[0.0, 0.0, 0.0] for _ in range(3)]

  mtx[2][0] = 1.0
  for i in range(1, 3):
    mtx[2][i] = -src[i]

  for i in range(2, 0, -1):
    val = 1.0 - (mtx[i][i] * mtx[i][i])
    for y in range(1, i + 1):
      mtx[i - 1][y] = ((mtx[i][i] * mtx[i][y]) + mtx[i][y]) / val

  dst = [1.0, 0.0, 0.0]
  for i in range(1, 3):
    for y in range(1, i + 1):
      dst[i] += mtx[i][y] * dst[i - y]

  return dst

def merge_finish_record(src: list[float]) -> list[float]:
  ''' Maps averaged filter coefficients back to a clamped reflection-form record '''
  dst = [1.0, 0.0, 0.0]
  tmp = [0.0, 0.0, 0.0]
  val = src[0]

  for i in range(1, 3):
    v2 = 0.0
    for y in range(1, i):
      v2 += dst[y] * src[i - y]

    if val > 0.0:
      dst[i] = -(v2 + src[i]) / val
    else:
      dst[i] = 0.0

    tmp[i] = dst[i]

    for y in range(1, i):
      dst[y] += dst[i] * dst[i - y]

    val *= 1.0 - (dst[i] * dst[i])

  return finish_record(tmp)

def contrast_vectors(source1: list[float], source2: list[float]) -> float:
  val = (source2[2] * source2[1] + -source2[1]) / (1.0 - source2[2] * source2[2])
  val1 = (source1[0] * source1[0]) + (source1[1] * source1[1]) + (source1[2] * source1[2])
  val2 = (source1[0] * source1[1]) + (source1[1] * source1[2])
  val3 = source1[0] * source1[2]
  return val1 + (2.0 * val * val2) + (2.0 * (-source2[1] * val + -source2[2]) * val3)

def filter_records(vec_best: list[list[float]], exp: int, records: list[list[float]], filtered: list[list[float]]) -> None:
  ''' Runs the Lloyd passes for the first `exp` centroids of `vec_best` '''
  for _ in range(REFINE_PASSES):
    counts = [0] * exp
    sums = [[0.0, 0.0, 0.0] for _ in range(exp)]

    for record, record_filtered in zip(records, filtered):
      index = 0
      value = 1.0e30
      for i in range(exp):
        distance = contrast_vectors(vec_best[i], record)
        if distance < value:
          value = distance
          index = i

      counts[index] += 1
      for i in range(3):
        sums[index][i] += record_filtered[i]

    for i in range(exp):
      # Centroids nothing was assigned to keep their previous value
      if counts[i] == 0:
        continue

      for y in range(3):
        sums[i][y] /= counts[i]

      vec_best[i] = merge_finish_record(sums[i])

''' Analysis '''
def _collect_records(pcm) -> list[list[float]]:
  pcm_hist = [0] * (SAMPLES_PER_FRAME * 2)
  mtx = [[0.0, 0.0, 0.0] for _ in range(3)]
  vec_idxs = [0, 0, 0]
  records = []

  for frame_start in range(0, len(pcm), SAMPLES_PER_FRAME):
    frame = [int(s) for s in pcm[frame_start:frame_start + SAMPLES_PER_FRAME]]

    # Previous frame becomes history, a short final frame is zero padded
    pcm_hist[:SAMPLES_PER_FRAME] = pcm_hist[SAMPLES_PER_FRAME:]
    pcm_hist[SAMPLES_PER_FRAME:] = frame + [0] * (SAMPLES_PER_FRAME - len(frame))

    vec1 = inner_product_merge(pcm_hist)
    if abs(vec1[0]) <= ENERGY_THRESHOLD:
      continue

    outer_product_merge(mtx, pcm_hist)
    if analyze_ranges(mtx, vec_idxs):
      continue

    bidirectional_filter(mtx, vec_idxs, vec1)
    if quadratic_merge(vec1):
      continue

    records.append(finish_record(vec1))

  return records

def analyze_coefficients(pcm) -> PredictorTable:
  records = _collect_records(pcm)
  filtered = [matrix_filter(record) for record in records]

  vec1 = [1.0, 0.0, 0.0]
  if records:
    for record_filtered in filtered:
      for y in range(1, 3):
        vec1[y] += record_filtered[y]

    for y in range(1, 3):
      vec1[y] /= len(records)

  vec_best = [[0.0, 0.0, 0.0] for _ in range(NUM_PREDICTORS)]
  vec_best[0] = merge_finish_record(vec1)

  # Split every centroid in two until there are 8 of them
  exp = 1
  while exp < NUM_PREDICTORS:
    for i in range(exp):
      vec_best[exp + i] = [(SPLIT_SCALE * SPLIT_OFFSET[y]) + vec_best[i][y] for y in range(3)]

    exp <<= 1
    filter_records(vec_best, exp, records, filtered)

  coefficients = []
  for centroid in vec_best:
    coefficients.append(round_saturate_16(-centroid[1] * 2048.0))
    coefficients.append(round_saturate_16(-centroid[2] * 2048.0))

  return PredictorTable(coefficients)

if __name__ == '__main__':
  pass

'''
### Codec Package

This package implements the GC-ADPCM (DSP-ADPCM) codec used by GameCube and Wii audio.

Modules:
    `Codebook`:
        Defines the `PredictorTable` class holding the 8 fixed-point predictor pairs of a
        channel, with methods for binary parsing, serialization, and YAML conversion.

    `Coefficients`:
        Derives a predictor table from PCM samples.

    `Encoder`:
        Encodes PCM samples into 8-byte frames of 14 four-bit residuals.

    `Decoder`:
        Decodes GC-ADPCM frames back into PCM samples.

Intended Usage:
    All functions are pure and operate on in-memory sequences. Channels are independent and
    can be processed in any order.
'''

from .Codebook import PredictorTable
from .Coefficients import analyze_coefficients
from .Encoder import encode_gc_adpcm
from .Decoder import decode_gc_adpcm

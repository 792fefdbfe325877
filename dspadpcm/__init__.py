'''
### dspadpcm Package

This package converts audio between 16-bit PCM and GC-ADPCM (the 4-bit DSP-ADPCM codec of
GameCube and Wii audio), and reads and writes the IDSP container that carries it.

Modules:
    `Enums`:
        Defines enumeration classes for channel header fields and converter output types.

    `Errors`:
        Defines the exceptions raised for malformed containers.

    `Helpers`:
        Provides nibble packing, saturation, and frame geometry helpers.

    `YAMLSerializer`:
        Configures YAML output so coefficient pairs stay on a single line.

    `codec.Codebook`:
        Defines the `PredictorTable` class, the 8 fixed-point predictor pairs of a channel.

    `codec.Coefficients`:
        Derives a predictor table from PCM.

    `codec.Encoder`:
        Encodes PCM to GC-ADPCM frames.

    `codec.Decoder`:
        Decodes GC-ADPCM frames to PCM.

    `container.Idsp`:
        Core class representing an IDSP stream, with binary and YAML conversion.

    `container.Interleave`:
        Splits and merges interleaved channel payloads.

Functionality:
    - Analyze, encode, and decode GC-ADPCM channels.
    - Parse and serialize IDSP containers, including interleaved multi-channel payloads.
    - Dump container headers to YAML and build containers from YAML stream settings.

Dependencies:
    `struct`:
        For byte-level unpacking and packing.

    `yaml`:
        For reading stream settings and writing header dumps.

Intended Usage:
    Import the codec functions and `IdspContainer` from the package root. The command line
    converter in `dsp_converter.py` wires them to WAV and IDSP files.
'''

from .codec import PredictorTable, analyze_coefficients, encode_gc_adpcm, decode_gc_adpcm
from .container import (
  IdspContainer,
  IdspChannel,
  AdpcmContext,
  read_idsp,
  write_idsp,
  read_idsp_bytes,
  write_idsp_bytes,
  interleave,
  deinterleave,
)
from .Errors import IdspError, InvalidHeaderError, InvalidAudioLengthError
from .Helpers import (
  SAMPLES_PER_FRAME,
  NIBBLES_PER_FRAME,
  BYTES_PER_FRAME,
  sample_count_to_byte_count,
  sample_count_to_nibble_count,
  byte_count_to_sample_count,
  nibble_count_to_sample_count,
)

__version__ = '2026.10.19'

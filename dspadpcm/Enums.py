'''
### Enums Module

This module defines enumerations used throughout the project to classify and interpret
constants found in IDSP channel headers and in the converter's command line.

Classes:
    `AudioFormat`:
        Enumerates the sample formats a DSP channel header can declare.

    `LoopFlag`:
        Enumerates the values of the 16-bit looping flag of a channel header.

    `OutputType`:
        Enumerates the output types the converter can write.

Dependencies:
    `enum`:
        Used for defining enumeration types.

Intended Usage:
    This module should be imported wherever constant classification is needed during
    binary parsing, binary conversion, or YAML conversion.
'''

from enum import *


class AudioFormat(IntEnum):
    ADPCM = 0x00
    PCM16 = 0x0A
    PCM8 = 0x19


class LoopFlag(IntEnum):
    NONE = 0
    LOOPING = 1


class OutputType(Enum):
    WAV = 'wav'
    YAML = 'yaml'


def resolve_enum_value(enum_class, value) -> int:
    ''' Accepts either an enum member name or a raw integer from YAML '''
    if isinstance(value, str):
        return enum_class[value].value
    return enum_class(value).value


if __name__ == '__main__':
    pass

'''
### Container Package

This package reads and writes IDSP, the multi-channel container for GC-ADPCM streams.

Modules:
    `Idsp`:
        Core class representing an entire IDSP stream: its stream header, its channel headers,
        and the payload of every channel.

    `Interleave`:
        Splits and merges the channel payloads stored as alternating fixed-size blocks.

    `structs.Channel`:
        Defines the `IdspChannel` class representing a single channel header.

    `structs.Context`:
        Defines the `AdpcmContext` class representing a start or loop decoder context.

Intended Usage:
    Containers are built fully in memory and serialized with a single call.
'''

from .Idsp import IdspContainer, read_idsp, write_idsp, read_idsp_bytes, write_idsp_bytes
from .Interleave import interleave, deinterleave
from .structs.Channel import IdspChannel
from .structs.Context import AdpcmContext

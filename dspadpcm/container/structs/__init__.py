'''
### Structs Package

This package provides class definitions and associated parsing, serialization, and YAML
conversion methods for the per-channel structures of an IDSP container.

Modules:
    `Channel`:
        Defines the `IdspChannel` class representing a DSP channel header and the channel's
        GC-ADPCM payload.

    `Context`:
        Defines the `AdpcmContext` class representing the decoder state stored for the start
        point and the loop point of a channel.

Functionality:
    - Parse structures from raw binary data (`from_bytes`).
    - Serialize objects back to binary format (`to_bytes`).
    - Convert structures to and from YAML dictionaries (`to_yaml`, `from_yaml`).
'''

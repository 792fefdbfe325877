'''
### Errors Module

This module defines the exceptions raised while parsing or building IDSP containers.

Classes:
    `IdspError`:
        Base class for all container errors.

    `InvalidHeaderError`:
        The data does not start with the IDSP magic, or is too short for its declared headers.

    `InvalidAudioLengthError`:
        The declared audio length does not divide evenly between the channels, or runs past
        the end of the data.

Intended Usage:
    File system errors are not wrapped; `OSError` propagates unchanged from `read_idsp` and
    `write_idsp`. The codec functions never raise on malformed ADPCM data.
'''

class IdspError(ValueError):
  ''' Base class for IDSP container errors '''


class InvalidHeaderError(IdspError):
  ''' Raised when the container header is not a valid IDSP header '''


class InvalidAudioLengthError(IdspError):
  ''' Raised when the audio payload length does not match the channel layout '''


if __name__ == '__main__':
  pass

import pytest

from dspadpcm import InvalidAudioLengthError
from dspadpcm.container.Interleave import deinterleave, interleave


def test_blocks_alternate_between_channels():
    assert interleave([b'abcde', b'ABCDE'], 2) == b'abABcdCDeE'


def test_zero_interleave_is_a_single_block():
    assert interleave([b'abc', b'ABC'], 0) == b'abcABC'
    assert deinterleave(b'abcABC', 0, 2) == [b'abc', b'ABC']


@pytest.mark.parametrize("interleave_size", [0, 1, 3, 8, 10, 16])
@pytest.mark.parametrize("channel_count", [1, 2, 3])
def test_deinterleave_inverts_interleave(interleave_size, channel_count):
    channels = [bytes((c * 40 + i) & 0xFF for i in range(10)) for c in range(channel_count)]
    data = interleave(channels, interleave_size)

    assert len(data) == 10 * channel_count
    assert deinterleave(data, interleave_size, channel_count) == channels


def test_output_size_pads_the_last_block():
    data = interleave([b'abc', b'ABC'], 2, output_size=4)

    assert data == b'abABc\x00C\x00'
    assert deinterleave(data, 2, 2, output_size=3) == [b'abc', b'ABC']


def test_unequal_channels_are_rejected():
    with pytest.raises(InvalidAudioLengthError):
        interleave([b'abc', b'ab'], 2)


def test_length_must_split_evenly():
    with pytest.raises(InvalidAudioLengthError):
        deinterleave(b'abcde', 1, 2)


def test_channel_count_must_be_positive():
    with pytest.raises(InvalidAudioLengthError):
        deinterleave(b'abcd', 1, 0)


def test_no_channels():
    assert interleave([], 8) == b''

import struct

import pytest

from dspadpcm import (
    IdspChannel,
    IdspContainer,
    IdspError,
    InvalidAudioLengthError,
    InvalidHeaderError,
    PredictorTable,
    decode_gc_adpcm,
    read_idsp,
    read_idsp_bytes,
    sample_count_to_byte_count,
    write_idsp,
    write_idsp_bytes,
)
from dspadpcm.YAMLSerializer import dump_yaml, load_yaml

from conftest import make_sine


@pytest.fixture
def mono(sine, sine_table):
    return IdspContainer.from_pcm([sine], 32000, coefficients=[sine_table])


@pytest.fixture
def stereo(sine_table):
    left = make_sine(100)
    right = make_sine(100, amplitude=3000, period=20)
    return IdspContainer.from_pcm([left, right], 44100, interleave_size=8, coefficients=[sine_table, sine_table])


''' Writing '''
def test_stream_header_layout(mono):
    data = mono.to_bytes()

    assert data[:4] == b'IDSP'
    assert struct.unpack('>I 10i', data[4:0x30]) == (0, 1, 32000, 1000, 0, 0, 0, 0x40, 0x60, 0xA0, 572)
    assert data[0x30:0x40] == bytes(16)
    assert len(data) == 0xA0 + 572


def test_channel_header_layout(mono, sine_table):
    data = mono.to_bytes()
    channel = data[0x40:0xA0]

    assert struct.unpack('>3i 2h 3i', channel[:0x1C]) == (1000, 1144, 32000, 0, 0, 2, 1143, 2)
    assert PredictorTable.from_bytes(0x1C, channel) == sine_table
    assert channel[0x3E] == 0
    assert channel[0x3F] == data[0xA0]
    assert channel[0x4A:] == bytes(0x16)


def test_audio_follows_headers(mono):
    data = mono.to_bytes()
    assert data[0xA0:] == mono.channels[0].audio


''' Reading '''
def test_container_round_trip(mono, sine, sine_table):
    parsed = IdspContainer.from_bytes(mono.to_bytes())

    assert parsed.channel_count == 1
    assert parsed.sample_rate == 32000
    assert parsed.sample_count == 1000
    assert parsed.interleave_size == 0
    assert not parsed.looping
    assert parsed.channels[0].coefficients == sine_table
    assert parsed.channels[0].audio == mono.channels[0].audio
    assert parsed.to_pcm() == [decode_gc_adpcm(mono.channels[0].audio, sine_table, 1000)]
    assert parsed.to_bytes() == mono.to_bytes()


def test_interleaved_round_trip(stereo, sine_table):
    data = write_idsp_bytes(stereo)
    parsed = read_idsp_bytes(data)

    assert parsed.channel_count == 2
    assert parsed.interleave_size == 8
    assert parsed.audio_data_length == sample_count_to_byte_count(100)
    assert [c.audio for c in parsed.channels] == [c.audio for c in stereo.channels]
    assert parsed.to_pcm() == [decode_gc_adpcm(c.audio, sine_table, 100) for c in stereo.channels]


def test_file_round_trip(tmp_path, mono):
    path = tmp_path / "stream.idsp"
    write_idsp(str(path), mono)

    assert path.read_bytes() == mono.to_bytes()
    assert read_idsp(str(path)).to_pcm() == mono.to_pcm()


def test_missing_file_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        read_idsp(str(tmp_path / "missing.idsp"))


''' Invalid data '''
@pytest.mark.parametrize("data", [b'', b'RIFF' + bytes(60), b'idsp' + bytes(60)])
def test_bad_magic(data):
    with pytest.raises(InvalidHeaderError):
        IdspContainer.from_bytes(data)


def test_truncated_header():
    with pytest.raises(InvalidHeaderError):
        IdspContainer.from_bytes(b'IDSP' + bytes(8))


def test_no_channels(mono):
    data = mono.to_bytes()
    with pytest.raises(InvalidHeaderError):
        IdspContainer.from_bytes(data[:8] + struct.pack('>i', 0) + data[12:])


def test_truncated_audio(mono):
    with pytest.raises(InvalidAudioLengthError):
        IdspContainer.from_bytes(mono.to_bytes()[:-1])


def test_errors_are_value_errors():
    assert issubclass(InvalidHeaderError, IdspError)
    assert issubclass(InvalidAudioLengthError, IdspError)
    assert issubclass(IdspError, ValueError)


''' Building '''
def test_analyzes_missing_coefficients():
    pcm = make_sine(200)
    container = IdspContainer.from_pcm([pcm], 22050)

    table = container.channels[0].coefficients
    assert len(table) == 16
    assert container.to_pcm()[0] == decode_gc_adpcm(container.channels[0].audio, table, 200)


def test_unequal_channels_are_rejected():
    with pytest.raises(InvalidAudioLengthError):
        IdspContainer.from_pcm([[0] * 10, [0] * 11], 32000)


def test_invalid_loop_points_are_rejected():
    with pytest.raises(ValueError):
        IdspContainer.from_pcm([[0] * 100], 32000, loop_start=50, loop_end=40, looping=True)


def test_loop_context(sine, sine_table):
    container = IdspContainer.from_pcm([sine], 32000, loop_start=20, loop_end=90, looping=True, coefficients=[sine_table])
    channel = container.channels[0]
    decoded = decode_gc_adpcm(channel.audio, sine_table, 1000)

    assert container.looping
    assert (container.loop_start, container.loop_end) == (20, 90)
    assert channel.start_address == 24
    assert channel.end_address == 103
    assert channel.loop_context.predictor_scale == channel.audio[8]
    assert channel.loop_context.history == (decoded[19], decoded[18])

    parsed = IdspContainer.from_bytes(container.to_bytes())
    assert parsed.looping
    assert (parsed.loop_start, parsed.loop_end) == (20, 90)
    assert parsed.channels[0].loop_context == channel.loop_context


''' YAML '''
def test_yaml_settings_rebuild_the_same_stream(stereo):
    settings = load_yaml(dump_yaml(stereo.to_yaml()))

    assert settings['channel count'] == 2
    assert settings['channels'][0]['format'] == 'ADPCM'

    pcm = stereo.to_pcm()
    rebuilt = IdspContainer.from_yaml(settings, pcm, 44100)

    assert rebuilt.interleave_size == 8
    assert [c.coefficients for c in rebuilt.channels] == [c.coefficients for c in stereo.channels]


def test_yaml_loop_end_enables_looping(sine):
    container = IdspContainer.from_yaml({'loop start': 14, 'loop end': 500}, [sine], 32000)

    assert container.looping
    assert (container.loop_start, container.loop_end) == (14, 500)
    assert container.channels[0].start_address == 18


def test_channel_header_survives_yaml(sine, sine_table):
    container = IdspContainer.from_pcm([sine], 32000, loop_start=28, looping=True, coefficients=[sine_table])
    channel = container.channels[0]

    restored = IdspChannel.from_yaml(load_yaml(dump_yaml(channel.to_yaml())))
    assert restored.to_bytes() == channel.to_bytes()


def test_writing_leaves_the_container_untouched(stereo):
    before = dict(vars(stereo))
    channels_before = [dict(vars(channel)) for channel in stereo.channels]

    stereo.to_bytes()

    assert vars(stereo) == before
    assert [vars(channel) for channel in stereo.channels] == channels_before


@pytest.mark.parametrize("channel_header_size", [0, 0x20, 0x49])
def test_small_channel_headers_are_rejected(mono, channel_header_size):
    data = bytearray(mono.to_bytes())
    data[0x24:0x28] = struct.pack('>i', channel_header_size)

    with pytest.raises(InvalidHeaderError):
        IdspContainer.from_bytes(bytes(data))


def test_channel_count_beyond_the_data_is_rejected(mono):
    data = bytearray(mono.to_bytes())
    data[0x08:0x0C] = struct.pack('>i', 0x7FFFFFFF)

    with pytest.raises(InvalidHeaderError):
        IdspContainer.from_bytes(bytes(data))

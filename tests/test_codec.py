import pytest

from dspadpcm import (
    PredictorTable,
    analyze_coefficients,
    decode_gc_adpcm,
    encode_gc_adpcm,
    sample_count_to_byte_count,
)
from dspadpcm.Helpers import low_nibble

from conftest import make_sine


SILENCE_TABLE = [0, 0, 20, 0, 20, 0, 41, 0, 20, 0, 41, 0, 41, 0, 61, 0]


def squared_error(a, b):
    return sum((x - y) ** 2 for x, y in zip(a, b))


def assert_within_frame_step(pcm, adpcm, decoded):
    """Every sample must be within the quantization step of the frame that holds it."""
    assert len(decoded) == len(pcm)
    for i, (original, restored) in enumerate(zip(pcm, decoded)):
        exponent = low_nibble(adpcm[(i // 14) * 8])
        assert exponent < 12
        assert abs(original - restored) <= (2 << exponent) + 1, f"sample {i}"


''' Empty input '''
def test_empty_input(zero_table):
    assert encode_gc_adpcm([], zero_table) == b''
    assert decode_gc_adpcm(b'', zero_table) == []
    assert decode_gc_adpcm(b'', zero_table, 10) == []


''' Output length '''
@pytest.mark.parametrize("count", [1, 2, 5, 13, 14, 15, 28, 29, 100])
def test_encoded_length_follows_sample_count(count, sine_table):
    pcm = make_sine(count)
    adpcm = encode_gc_adpcm(pcm, sine_table)

    assert len(adpcm) == sample_count_to_byte_count(count)
    assert len(decode_gc_adpcm(adpcm, sine_table, count)) == count


''' Known frames '''
def test_silence_encodes_to_zero_frames(zero_table):
    assert encode_gc_adpcm([0] * 28, zero_table) == bytes(16)


def test_constant_frame(zero_table):
    adpcm = encode_gc_adpcm([7] * 14, zero_table)

    assert adpcm == b'\x00' + b'\x77' * 7
    assert decode_gc_adpcm(adpcm, zero_table) == [7] * 14


def test_short_final_frame_zeroes_unused_nibbles(zero_table):
    adpcm = encode_gc_adpcm([7] * 15, zero_table)

    assert adpcm == b'\x00' + b'\x77' * 7 + b'\x00\x70'
    assert decode_gc_adpcm(adpcm, zero_table) == [7] * 15 + [0]
    assert decode_gc_adpcm(adpcm, zero_table, 15) == [7] * 15


def test_short_final_frame_scores_real_samples_only(identity_table):
    # The last frame predicts 1000 from a history of 1024, so a small exponent fits it
    adpcm = encode_gc_adpcm([1000] * 15, identity_table)

    assert adpcm[0] == 0x07
    assert adpcm[8:] == b'\x02\xa0'
    assert decode_gc_adpcm(adpcm, identity_table, 15)[-1] == 1000


def test_sample_count_defaults_to_the_byte_length(zero_table):
    adpcm = encode_gc_adpcm([7] * 15, zero_table)

    assert decode_gc_adpcm(adpcm, zero_table, None) == decode_gc_adpcm(adpcm, zero_table)
    assert len(decode_gc_adpcm(adpcm, zero_table, sample_count=None)) == 16


def test_history_seeds_prediction(identity_table):
    assert encode_gc_adpcm([100] * 14, identity_table, history=(100, 0)) == bytes(8)
    assert decode_gc_adpcm(bytes(8), identity_table, history=(100, 50)) == [100] * 14


def test_predictor_index_uses_three_bits():
    table = PredictorTable([0] * 14 + [2048, 0])

    assert decode_gc_adpcm(b'\xf0' + bytes(7), table, history=(10, 0)) == [10] * 14


''' Saturation '''
def test_decoder_saturates_high():
    table = PredictorTable([4096, 0] + [0] * 14)
    pcm = decode_gc_adpcm(b'\x0c' + b'\x77' * 7, table)

    assert pcm[0] == 28672
    assert pcm[1:] == [32767] * 13


def test_decoder_saturates_low():
    table = PredictorTable([4096, 0] + [0] * 14)
    pcm = decode_gc_adpcm(b'\x0c' + b'\x88' * 7, table)

    assert pcm == [-32768] * 14


def test_full_scale_input_stays_in_range(zero_table):
    pcm = [32767, -32768] * 50
    adpcm = encode_gc_adpcm(pcm, zero_table)
    decoded = decode_gc_adpcm(adpcm, zero_table, len(pcm))

    assert len(adpcm) == sample_count_to_byte_count(len(pcm))
    assert all(-32768 <= s <= 32767 for s in decoded)


''' Round trip '''
def test_round_trip_within_quantization_step(sine, sine_table):
    adpcm = encode_gc_adpcm(sine, sine_table)
    decoded = decode_gc_adpcm(adpcm, sine_table, len(sine))

    assert_within_frame_step(sine, adpcm, decoded)


def test_round_trip_with_short_final_frame(sine_table):
    pcm = make_sine(1003, amplitude=12000, period=37)
    adpcm = encode_gc_adpcm(pcm, sine_table)
    decoded = decode_gc_adpcm(adpcm, sine_table, len(pcm))

    assert_within_frame_step(pcm, adpcm, decoded)


def test_encoding_is_deterministic(sine, sine_table):
    assert encode_gc_adpcm(sine, sine_table) == encode_gc_adpcm(sine, sine_table)


''' Coefficient analysis '''
def test_silence_analysis_is_finite():
    assert analyze_coefficients([0] * 1000).coefficients == SILENCE_TABLE


def test_empty_analysis_matches_silence():
    assert analyze_coefficients([]).coefficients == SILENCE_TABLE


def test_short_input_analysis():
    table = analyze_coefficients([1000, -1000, 500, 0, 250])

    assert len(table) == 16
    assert all(-32768 <= c <= 32767 for c in table)


def test_analysis_is_deterministic(sine):
    assert analyze_coefficients(sine) == analyze_coefficients(sine)


def test_analyzed_table_beats_silent_predictors(sine, zero_table):
    table = analyze_coefficients(sine)
    assert all(isinstance(c, int) and -32768 <= c <= 32767 for c in table)

    adpcm = encode_gc_adpcm(sine, table)
    decoded = decode_gc_adpcm(adpcm, table, len(sine))
    assert_within_frame_step(sine, adpcm, decoded)

    silent = decode_gc_adpcm(encode_gc_adpcm(sine, zero_table), zero_table, len(sine))
    assert squared_error(sine, decoded) < squared_error(sine, silent)


def test_analysis_of_noisy_signal_round_trips():
    pcm = [a + b for a, b in zip(make_sine(700, 6000, 50), make_sine(700, 2000, 9, 1.0))]
    table = analyze_coefficients(pcm)

    adpcm = encode_gc_adpcm(pcm, table)
    assert_within_frame_step(pcm, adpcm, decode_gc_adpcm(adpcm, table, len(pcm)))

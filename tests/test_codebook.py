import pytest

from dspadpcm import PredictorTable


def test_defaults_to_silence():
    assert PredictorTable().coefficients == [0] * 16


def test_rejects_wrong_length():
    with pytest.raises(ValueError):
        PredictorTable([0] * 15)


def test_rejects_values_outside_int16():
    with pytest.raises(ValueError):
        PredictorTable([32768] + [0] * 15)


def test_pairs_follow_flat_order():
    table = PredictorTable(list(range(16)))

    assert table.pair(0) == (0, 1)
    assert table.pair(7) == (14, 15)
    assert table.pairs[3] == (6, 7)
    assert PredictorTable.from_pairs(table.pairs) == table


def test_binary_layout_is_big_endian():
    table = PredictorTable([-2, 1] + [0] * 14)
    raw = table.to_bytes()

    assert len(raw) == 0x20
    assert raw[:4] == b'\xff\xfe\x00\x01'
    assert PredictorTable.from_bytes(0, raw) == table


def test_yaml_accepts_pairs_and_flat_lists():
    table = PredictorTable([1, -1] * 8)

    assert PredictorTable.from_yaml(table.to_yaml()) == table
    assert PredictorTable.from_yaml([1, -1] * 8) == table


def test_coerce_and_equality():
    table = PredictorTable([5] * 16)

    assert PredictorTable.coerce(table) is table
    assert PredictorTable.coerce([5] * 16) == table
    assert table == [5] * 16
    assert len(table) == 16
    assert list(table) == [5] * 16

import math

import pytest

from dspadpcm import PredictorTable


def make_sine(count, amplitude=8000, period=64, phase=0.0):
    """Generates a sine wave as a list of 16-bit samples."""
    return [int(round(amplitude * math.sin(2 * math.pi * i / period + phase))) for i in range(count)]


@pytest.fixture
def sine():
    return make_sine(1000)


@pytest.fixture
def zero_table():
    return PredictorTable([0] * 16)


@pytest.fixture
def identity_table():
    """Predictor 0 repeats the previous sample, every other predictor is silent."""
    return PredictorTable([2048, 0] + [0] * 14)


@pytest.fixture
def sine_table():
    """A hand-made table whose predictor 3 models a sine of period 64."""
    c = int(round(2 * math.cos(2 * math.pi / 64) * 2048))
    return PredictorTable.from_pairs([
        (0, 0), (2048, 0), (4096, -2048), (c, -2048),
        (1024, 0), (3072, -1024), (2048, -1024), (0, -2048),
    ])

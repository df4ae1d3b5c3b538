import random

import pytest

from sudoku_codec import grid_from_string

SOLVED = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)

PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)


@pytest.fixture
def solved():
    return grid_from_string(SOLVED)


@pytest.fixture
def puzzle():
    return grid_from_string(PUZZLE)


@pytest.fixture
def empty():
    return [[0] * 9 for _ in range(9)]


@pytest.fixture
def rng():
    return random.Random(20240601)

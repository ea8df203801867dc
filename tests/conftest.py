from datetime import datetime, timezone

import pytest

from bingo.pool import DrawnNumber
from bingo.utils import letter_for

# Rows of the sample card, center free:
#  1 16 31 46 61
#  2 17 32 47 62
#  3 18 -- 48 63
#  4 19 34 49 64
#  5 20 35 50 65
SAMPLE_CARD = [
    1, 16, 31, 46, 61,
    2, 17, 32, 47, 62,
    3, 18, 48, 63,
    4, 19, 34, 49, 64,
    5, 20, 35, 50, 65,
]

TS = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_card():
    return list(SAMPLE_CARD)


@pytest.fixture
def calls():
    def make(*numbers):
        return [DrawnNumber(letter=letter_for(n), number=n, timestamp=TS) for n in numbers]
    return make


@pytest.fixture
def grid_of():
    def make(cells):
        cells = set(cells)
        return [[(r, c) in cells for c in range(5)] for r in range(5)]
    return make

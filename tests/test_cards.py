import random
from types import SimpleNamespace

import pytest

from bingo.cards import (
    DuplicateNumber,
    InvalidCardError,
    NotANumber,
    OutOfRangeForColumn,
    WrongCount,
    flatten,
    parse_card_text,
    to_grid,
    to_matched_grid,
)
from bingo.utils import generate_card, get_card


def test_to_grid_layout(sample_card):
    grid = to_grid(sample_card)
    assert grid[0] == [1, 16, 31, 46, 61]
    assert grid[2] == [3, 18, None, 48, 63]
    assert grid[4] == [5, 20, 35, 50, 65]


def test_flatten_reverses_to_grid(sample_card):
    assert flatten(to_grid(sample_card)) == sample_card
    for i in range(1, 30):
        card = get_card(i)
        assert flatten(to_grid(card)) == card
    card = generate_card(random.Random(3))
    assert flatten(to_grid(card)) == card


@pytest.mark.parametrize("size", [0, 23, 25])
def test_wrong_count(sample_card, size):
    card = (sample_card * 2)[:size]
    with pytest.raises(WrongCount) as exc:
        to_grid(card)
    assert exc.value.count == size
    assert exc.value.reason == "wrong_count"


def test_number_in_wrong_column(sample_card):
    sample_card[0] = 20
    with pytest.raises(OutOfRangeForColumn) as exc:
        to_grid(sample_card)
    err = exc.value
    assert err.column == "B"
    assert err.expected == (1, 15)
    assert err.actual == 20
    assert err.position == 0
    assert isinstance(err, InvalidCardError)
    assert err.as_dict()["expected"] == [1, 15]


def test_out_of_range_in_column_after_center(sample_card):
    # position 12 is row 2, column G
    sample_card[12] = 33
    with pytest.raises(OutOfRangeForColumn) as exc:
        to_grid(sample_card)
    assert exc.value.column == "G"
    assert exc.value.expected == (46, 60)


def test_duplicate_number(sample_card):
    sample_card[5] = 1
    with pytest.raises(DuplicateNumber) as exc:
        to_grid(sample_card)
    assert exc.value.number == 1
    assert exc.value.position == 5
    assert exc.value.reason == "duplicate_number"


def test_matched_grid_center_only_when_nothing_called(sample_card):
    grid = to_matched_grid(sample_card, [])
    assert sum(cell for row in grid for cell in row) == 1
    assert grid[2][2] is True


def test_matched_grid_marks_called_cells(sample_card, calls):
    grid = to_matched_grid(sample_card, calls(1, 17, 50, 70))
    assert grid[0][0] is True
    assert grid[1][1] is True
    assert grid[4][3] is True
    assert grid[0][4] is False


def test_matched_grid_requires_matching_letter(sample_card):
    wrong_letter = [SimpleNamespace(letter="I", number=1), SimpleNamespace(letter="B", number=16)]
    grid = to_matched_grid(sample_card, wrong_letter)
    assert grid[0][0] is False
    assert grid[0][1] is False


def test_parse_card_text(sample_card):
    text = ", ".join(str(n) for n in sample_card)
    assert parse_card_text(text) == sample_card
    assert parse_card_text(" ".join(str(n) for n in sample_card)) == sample_card


def test_parse_card_text_errors(sample_card):
    with pytest.raises(NotANumber) as exc:
        parse_card_text("1, 16, x")
    assert exc.value.token == "x"
    with pytest.raises(WrongCount):
        parse_card_text(",".join(str(n) for n in sample_card[:23]))

"""Card validation and grid mapping.

A card is the flat list of 24 numbers a player holds. ``to_grid`` lays it out
as a 5x5 grid with ``None`` at the free center, ``to_matched_grid`` marks the
cells whose ``(letter, number)`` pair has been called.
"""
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .utils import CARD_LENGTH, CENTER, LETTERS, LETTER_RANGES, SIZE, position_to_cell

Grid = List[List[Optional[int]]]
MatchedGrid = Tuple[Tuple[bool, ...], ...]


class InvalidCardError(ValueError):
    reason = "invalid_card"

    def as_dict(self) -> dict:
        return {"reason": self.reason, "message": str(self)}


class WrongCount(InvalidCardError):
    reason = "wrong_count"

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"A card must contain exactly {CARD_LENGTH} numbers, got {count}.")

    def as_dict(self) -> dict:
        return {**super().as_dict(), "count": self.count}


class DuplicateNumber(InvalidCardError):
    reason = "duplicate_number"

    def __init__(self, number: int, position: int):
        self.number = number
        self.position = position
        super().__init__(f"Number {number} appears more than once (position {position + 1}).")

    def as_dict(self) -> dict:
        return {**super().as_dict(), "number": self.number, "position": self.position}


class OutOfRangeForColumn(InvalidCardError):
    reason = "out_of_range_for_column"

    def __init__(self, column: str, expected: Tuple[int, int], actual: int, position: int):
        self.column = column
        self.expected = expected
        self.actual = actual
        self.position = position
        super().__init__(
            f"Column {column} takes numbers {expected[0]}-{expected[1]}, got {actual} "
            f"(position {position + 1})."
        )

    def as_dict(self) -> dict:
        return {
            **super().as_dict(),
            "column": self.column,
            "expected": list(self.expected),
            "actual": self.actual,
            "position": self.position,
        }


class NotANumber(InvalidCardError):
    reason = "not_a_number"

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"{token!r} is not a number.")


def validate_card(card: Sequence[int]) -> List[int]:
    numbers = list(card)
    if len(numbers) != CARD_LENGTH:
        raise WrongCount(len(numbers))
    seen = set()
    for i, n in enumerate(numbers):
        _, col = position_to_cell(i)
        letter = LETTERS[col]
        start, end = LETTER_RANGES[letter]
        if not start <= n <= end:
            raise OutOfRangeForColumn(letter, (start, end), n, i)
        if n in seen:
            raise DuplicateNumber(n, i)
        seen.add(n)
    return numbers


def to_grid(card: Sequence[int]) -> Grid:
    numbers = validate_card(card)
    grid: Grid = [[None] * SIZE for _ in range(SIZE)]
    for i, n in enumerate(numbers):
        r, c = position_to_cell(i)
        grid[r][c] = n
    return grid


def flatten(grid: Grid) -> List[int]:
    out = []
    for r in range(SIZE):
        for c in range(SIZE):
            if (r, c) == CENTER:
                continue
            out.append(grid[r][c])
    return out


def to_matched_grid(card: Sequence[int], history: Iterable) -> MatchedGrid:
    """Mark the card against the calls so far.

    ``history`` holds DrawnNumbers (anything with ``letter`` and ``number``).
    A cell matches only when its column letter and number were called
    together, so 10 called as "I" never marks a B cell.
    """
    grid = to_grid(card)
    called = {(d.letter, d.number) for d in history}
    rows = []
    for r in range(SIZE):
        row = []
        for c in range(SIZE):
            if (r, c) == CENTER:
                row.append(True)
            else:
                row.append((LETTERS[c], grid[r][c]) in called)
        rows.append(tuple(row))
    return tuple(rows)


def parse_card_text(text: str) -> List[int]:
    tokens = [t for t in re.split(r"[,\s;]+", text.strip()) if t]
    numbers = []
    for t in tokens:
        try:
            numbers.append(int(t))
        except ValueError:
            raise NotANumber(t) from None
    return validate_card(numbers)

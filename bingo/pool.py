import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Tuple, Union

from .utils import LETTERS, LETTER_RANGES, in_range

# Shared default source; tests inject their own Random
_system_random = random.SystemRandom()


@dataclass(frozen=True)
class DrawnNumber:
    letter: str
    number: int
    timestamp: datetime

    def __post_init__(self):
        if self.letter not in LETTER_RANGES:
            raise ValueError(f"unknown letter {self.letter!r}")
        if not in_range(self.letter, self.number):
            raise ValueError(f"{self.number} is not in the {self.letter} range")

    @property
    def label(self) -> str:
        return f"{self.letter}-{self.number}"

    def to_dict(self) -> dict:
        return {"letter": self.letter, "number": self.number, "timestamp": self.timestamp.isoformat()}

    @classmethod
    def from_dict(cls, data: dict) -> "DrawnNumber":
        return cls(
            letter=data["letter"],
            number=int(data["number"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
        )


class PoolExhausted:
    """Returned by ``draw`` once all 75 numbers are out."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "EXHAUSTED"


EXHAUSTED = PoolExhausted()


def available_numbers(history: Iterable[DrawnNumber]) -> List[Tuple[str, int]]:
    drawn = {(d.letter, d.number) for d in history}
    available = []
    for letter in LETTERS:
        start, end = LETTER_RANGES[letter]
        for n in range(start, end + 1):
            if (letter, n) not in drawn:
                available.append((letter, n))
    return available


def draw(
    history: Iterable[DrawnNumber],
    rng=None,
    now: Optional[Callable[[], datetime]] = None,
) -> Union[DrawnNumber, PoolExhausted]:
    """Pick one undrawn number uniformly at random.

    The caller appends the result to its history; ``history`` is not touched.
    """
    available = available_numbers(history)
    if not available:
        return EXHAUSTED
    letter, number = (rng or _system_random).choice(available)
    stamp = now() if now else datetime.now(timezone.utc)
    return DrawnNumber(letter=letter, number=number, timestamp=stamp)

import random
from datetime import datetime, timezone

import pytest

from bingo.pool import EXHAUSTED, DrawnNumber, PoolExhausted, available_numbers, draw
from bingo.utils import in_range


class FirstChoice:
    """Random source that always takes the first candidate and records pool sizes."""

    def __init__(self):
        self.sizes = []

    def choice(self, seq):
        self.sizes.append(len(seq))
        return seq[0]


def test_draw_from_fresh_pool():
    result = draw([], rng=random.Random(1))
    assert isinstance(result, DrawnNumber)
    assert in_range(result.letter, result.number)


def test_draw_never_repeats_and_exhausts_after_75():
    rng = random.Random(42)
    history = []
    for _ in range(75):
        result = draw(history, rng=rng)
        assert result, "pool exhausted early"
        assert (result.letter, result.number) not in {(d.letter, d.number) for d in history}
        history.append(result)
    assert len({(d.letter, d.number) for d in history}) == 75
    last = draw(history, rng=rng)
    assert last is EXHAUSTED
    assert not last
    assert isinstance(last, PoolExhausted)


def test_draw_does_not_touch_history(calls):
    history = calls(1, 2, 3)
    before = list(history)
    draw(history, rng=random.Random(0))
    assert history == before


def test_choice_is_over_the_whole_remaining_pool(calls):
    rng = FirstChoice()
    first = draw([], rng=rng)
    assert (first.letter, first.number) == ("B", 1)
    second = draw(calls(1), rng=rng)
    assert (second.letter, second.number) == ("B", 2)
    assert rng.sizes == [75, 74]


def test_injected_clock():
    stamp = datetime(2030, 5, 1, tzinfo=timezone.utc)
    result = draw([], rng=random.Random(0), now=lambda: stamp)
    assert result.timestamp == stamp


def test_available_numbers_order(calls):
    available = available_numbers(calls(1, 75))
    assert len(available) == 73
    assert available[0] == ("B", 2)
    assert available[-1] == ("O", 74)


def test_drawn_number_checks_letter_range():
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        DrawnNumber(letter="I", number=10, timestamp=stamp)
    with pytest.raises(ValueError):
        DrawnNumber(letter="Z", number=10, timestamp=stamp)


def test_drawn_number_dict_form():
    stamp = datetime(2024, 1, 1, 8, 30, tzinfo=timezone.utc)
    d = DrawnNumber(letter="G", number=52, timestamp=stamp)
    assert d.label == "G-52"
    assert DrawnNumber.from_dict(d.to_dict()) == d

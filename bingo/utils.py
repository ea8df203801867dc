import random
from typing import List, Optional, Tuple

# B I N G O columns with ranges (1-15, 16-30, 31-45, 46-60, 61-75)
# A card is 24 numbers laid out row-major around a FREE center

LETTERS = ("B", "I", "N", "G", "O")

RANGES = [
    (1, 15),   # B
    (16, 30),  # I
    (31, 45),  # N
    (46, 60),  # G
    (61, 75),  # O
]

LETTER_RANGES = dict(zip(LETTERS, RANGES))

SIZE = 5
CENTER = (2, 2)
CARD_LENGTH = 24
BUILTIN_CARD_LIMIT = 200


def letter_for(number: int) -> str:
    for letter, (start, end) in LETTER_RANGES.items():
        if start <= number <= end:
            return letter
    raise ValueError(f"{number} is not a bingo number (1-75)")


def in_range(letter: str, number: int) -> bool:
    start, end = LETTER_RANGES[letter]
    return start <= number <= end


def position_to_cell(i: int) -> Tuple[int, int]:
    # Linear index in the 24-number card -> (row, col), skipping the center
    j = i if i < 12 else i + 1
    return j // SIZE, j % SIZE


def _mulberry32(seed: int):
    def rnd():
        nonlocal seed
        seed &= 0xFFFFFFFF
        seed = (seed + 0x6D2B79F5) & 0xFFFFFFFF
        t = (seed ^ (seed >> 15)) * (1 | seed)
        t &= 0xFFFFFFFF
        t = (t + ((t ^ (t >> 7)) * (61 | t))) ^ t
        t &= 0xFFFFFFFF
        return ((t ^ (t >> 14)) & 0xFFFFFFFF) / 4294967296
    return rnd


def _shuffle(arr: List[int], seed: int) -> List[int]:
    a = list(arr)
    rnd = _mulberry32(seed)
    for i in range(len(a) - 1, 0, -1):
        j = int(rnd() * (i + 1))
        a[i], a[j] = a[j], a[i]
    return a


def _columns_to_card(columns: List[List[int]]) -> List[int]:
    card: List[int] = []
    for r in range(SIZE):
        for c in range(SIZE):
            if (r, c) == CENTER:
                continue
            card.append(columns[c][r])
    return card


def build_card_from_seed(seed: int) -> List[int]:
    # Build 5 columns deterministically from the seed
    columns: List[List[int]] = []
    for idx, (start, end) in enumerate(RANGES):
        arr = list(range(start, end + 1))
        shuffled = _shuffle(arr, seed + idx * 1000)
        columns.append(shuffled[:5])
    return _columns_to_card(columns)


def generate_card(rng: Optional[random.Random] = None) -> List[int]:
    """Random valid card; each column drawn without replacement from its range."""
    rng = rng or random.Random()
    columns = [sorted(rng.sample(range(start, end + 1), 5)) for start, end in RANGES]
    return _columns_to_card(columns)


def get_card(index: int, limit: int = BUILTIN_CARD_LIMIT) -> List[int]:
    # Clamp to 1..limit
    i = max(1, min(limit, int(index)))
    return build_card_from_seed(i)

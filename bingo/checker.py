"""Win pattern evaluation.

``evaluate`` is a pure function of a 5x5 matched grid and a ``RuleConfig``.
Classic rules count completed units (rows, columns, diagonals, corner sets,
plus, x) towards a target; modern rules check one fixed shape.
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from .cards import MatchedGrid, to_matched_grid
from .utils import CENTER, SIZE

CLASSIC = "classic"
MODERN = "modern"
CATEGORIES = (CLASSIC, MODERN)

FULL_HOUSE = "full_house"

# Scan order matters: earlier units win the highlight when several qualify
LINE_TYPES = (
    "horizontal",
    "vertical",
    "diagonal",
    "four_corners",
    "small_corners",
    "plus",
    "x",
)

MODERN_PATTERNS = (
    "full_house",
    "t_shape",
    "u_shape",
    "l_shape",
    "x_shape",
    "plus_sign",
    "diamond",
    "one_line",
    "two_lines",
    "three_lines",
)

PATTERN_DIFFICULTY = {
    "one_line": "easy",
    "two_lines": "medium",
    "three_lines": "hard",
    "full_house": "hard",
    "t_shape": "medium",
    "u_shape": "medium",
    "x_shape": "medium",
    "l_shape": "medium",
    "plus_sign": "easy",
    "diamond": "medium",
}

DEFAULT_LINE_TYPES = ("horizontal", "vertical", "diagonal")

Cells = FrozenSet[Tuple[int, int]]

ALL_CELLS: Cells = frozenset((r, c) for r in range(SIZE) for c in range(SIZE))
ROWS: List[Cells] = [frozenset((r, c) for c in range(SIZE)) for r in range(SIZE)]
COLS: List[Cells] = [frozenset((r, c) for r in range(SIZE)) for c in range(SIZE)]
MAIN_DIAGONAL: Cells = frozenset((i, i) for i in range(SIZE))
ANTI_DIAGONAL: Cells = frozenset((i, SIZE - 1 - i) for i in range(SIZE))
FOUR_CORNERS: Cells = frozenset({(0, 0), (0, 4), (4, 0), (4, 4)})
SMALL_CORNERS: Cells = frozenset({(1, 1), (1, 3), (3, 1), (3, 3)})
PLUS: Cells = ROWS[2] | COLS[2]
X: Cells = MAIN_DIAGONAL | ANTI_DIAGONAL
DIAMOND: Cells = frozenset({(0, 2), (1, 1), (1, 3), (2, 0), (2, 2), (2, 4), (3, 1), (3, 3), (4, 2)})

SHAPES = {
    "full_house": ALL_CELLS,
    "t_shape": ROWS[0] | COLS[2],
    "u_shape": COLS[0] | COLS[4] | ROWS[4],
    "l_shape": COLS[0] | ROWS[4],
    "x_shape": X,
    "plus_sign": PLUS,
    "diamond": DIAMOND,
}

ROW_PRESETS = {"two_lines": 2, "three_lines": 3}


@dataclass(frozen=True)
class RuleConfig:
    category: str = CLASSIC
    selected_pattern: Optional[str] = None
    classic_lines_target: int = 1
    classic_line_types: FrozenSet[str] = field(default_factory=lambda: frozenset(DEFAULT_LINE_TYPES))

    def __post_init__(self):
        if self.category not in CATEGORIES:
            raise ValueError(f"unknown pattern category {self.category!r}")
        if self.category == MODERN and self.selected_pattern not in MODERN_PATTERNS:
            raise ValueError(f"unknown modern pattern {self.selected_pattern!r}")
        if self.category == CLASSIC and self.selected_pattern not in (None, FULL_HOUSE):
            raise ValueError(f"classic rules take no pattern other than {FULL_HOUSE!r}")
        try:
            types = frozenset(self.classic_line_types)
            target = max(1, int(self.classic_lines_target))
        except TypeError:
            raise ValueError("classic_line_types must be a list of names and classic_lines_target a number") from None
        unknown = types - set(LINE_TYPES)
        if unknown:
            raise ValueError(f"unknown line types: {', '.join(sorted(unknown))}")
        object.__setattr__(self, "classic_line_types", types)
        object.__setattr__(self, "classic_lines_target", target)

    @classmethod
    def from_dict(cls, data: dict) -> "RuleConfig":
        line_types = data.get("classic_line_types")
        return cls(
            category=data.get("category") or CLASSIC,
            selected_pattern=data.get("selected_pattern") or None,
            classic_lines_target=data.get("classic_lines_target") or 1,
            classic_line_types=DEFAULT_LINE_TYPES if line_types is None else line_types,
        )

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "selected_pattern": self.selected_pattern,
            "classic_lines_target": self.classic_lines_target,
            "classic_line_types": [t for t in LINE_TYPES if t in self.classic_line_types],
        }


@dataclass(frozen=True)
class WinResult:
    won: bool
    mask: MatchedGrid
    units: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"won": self.won, "mask": [list(row) for row in self.mask], "units": list(self.units)}


def _normalise(grid: Sequence[Sequence[bool]]) -> MatchedGrid:
    # The free center counts as matched whatever the caller passed
    return tuple(
        tuple(True if (r, c) == CENTER else bool(grid[r][c]) for c in range(SIZE))
        for r in range(SIZE)
    )


def _complete(grid: MatchedGrid, cells: Iterable[Tuple[int, int]]) -> bool:
    return all(grid[r][c] for r, c in cells)


def _mask(cells: Iterable[Tuple[int, int]]) -> MatchedGrid:
    cells = set(cells)
    return tuple(tuple((r, c) in cells for c in range(SIZE)) for r in range(SIZE))


def _classic_units(line_types: FrozenSet[str]) -> Iterator[Tuple[str, Cells]]:
    if "horizontal" in line_types:
        for r in range(SIZE):
            yield f"row:{r}", ROWS[r]
    if "vertical" in line_types:
        for c in range(SIZE):
            yield f"column:{c}", COLS[c]
    if "diagonal" in line_types:
        yield "diagonal:main", MAIN_DIAGONAL
        yield "diagonal:anti", ANTI_DIAGONAL
    if "four_corners" in line_types:
        yield "four_corners", FOUR_CORNERS
    if "small_corners" in line_types:
        yield "small_corners", SMALL_CORNERS
    if "plus" in line_types:
        yield "plus", PLUS
    if "x" in line_types:
        yield "x", X


def _any_lines() -> Iterator[Tuple[str, Cells]]:
    for r in range(SIZE):
        yield f"row:{r}", ROWS[r]
    for c in range(SIZE):
        yield f"column:{c}", COLS[c]
    yield "diagonal:main", MAIN_DIAGONAL
    yield "diagonal:anti", ANTI_DIAGONAL


def _evaluate_classic(grid: MatchedGrid, config: RuleConfig) -> WinResult:
    if config.selected_pattern == FULL_HOUSE:
        if _complete(grid, ALL_CELLS):
            return WinResult(True, _mask(ALL_CELLS), (FULL_HOUSE,))
        return WinResult(False, _mask(()))

    target = config.classic_lines_target
    cells = set()
    units = []
    for name, unit in _classic_units(config.classic_line_types):
        if len(units) >= target:
            break
        if _complete(grid, unit):
            units.append(name)
            cells |= unit
    return WinResult(len(units) >= target, _mask(cells), tuple(units))


def _evaluate_modern(grid: MatchedGrid, pattern: Optional[str]) -> WinResult:
    empty = WinResult(False, _mask(()))
    if pattern in SHAPES:
        shape = SHAPES[pattern]
        if _complete(grid, shape):
            return WinResult(True, _mask(shape), (pattern,))
        return empty
    if pattern == "one_line":
        for name, line in _any_lines():
            if _complete(grid, line):
                return WinResult(True, _mask(line), (name,))
        return empty
    if pattern in ROW_PRESETS:
        # Rows only; columns and diagonals do not count for these presets
        needed = ROW_PRESETS[pattern]
        rows = [r for r in range(SIZE) if _complete(grid, ROWS[r])][:needed]
        if len(rows) < needed:
            return empty
        cells = set().union(*(ROWS[r] for r in rows))
        return WinResult(True, _mask(cells), tuple(f"row:{r}" for r in rows))
    return empty


def evaluate(grid: Sequence[Sequence[bool]], config: RuleConfig) -> WinResult:
    grid = _normalise(grid)
    if config.category == CLASSIC:
        return _evaluate_classic(grid, config)
    return _evaluate_modern(grid, config.selected_pattern)


def check_card(card: Sequence[int], history: Sequence, config: RuleConfig) -> WinResult:
    return evaluate(to_matched_grid(card, history), config)


def first_winning_call(card: Sequence[int], history: Sequence, config: RuleConfig) -> Optional[int]:
    """Index of the call that first completed the pattern on ``card``."""
    history = list(history)
    for i in range(len(history)):
        if check_card(card, history[: i + 1], config).won:
            return i
    return None


def check_call_timing(
    card: Sequence[int],
    history: Sequence,
    config: RuleConfig,
    allowed_late_calls: Optional[int],
) -> Tuple[bool, Optional[str]]:
    # A claim is late when more than allowed_late_calls balls came out after the winning one
    if allowed_late_calls is None:
        return True, None
    first = first_winning_call(card, history, config)
    if first is None:
        return False, "not_achieved"
    if len(history) - 1 - first > allowed_late_calls:
        return False, "too_late"
    return True, None

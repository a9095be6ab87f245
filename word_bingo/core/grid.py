from __future__ import annotations

from dataclasses import dataclass
import re


_RANK_RE = re.compile(r"^\s*(\d+)\s*(?:[x×X*]\s*(\d+))?\s*$")


@dataclass(frozen=True)
class GridRank:
    rows: int
    cols: int

    def __post_init__(self) -> None:
        for name in ("rows", "cols"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be a whole number, got {value!r}")
            if value < 2:
                raise ValueError(f"{name} must be at least 2, got {value}")

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    @property
    def label(self) -> str:
        return f"{self.rows}x{self.cols}"

    @classmethod
    def square(cls, size: int) -> "GridRank":
        return cls(rows=size, cols=size)

    @classmethod
    def parse(cls, text: str) -> "GridRank":
        """Parse "4x5", "4×5" or "4" (square)."""
        m = _RANK_RE.match(text or "")
        if not m:
            raise ValueError(f"Grid must look like 3x3 or 4, got {text!r}")
        rows = int(m.group(1))
        cols = int(m.group(2)) if m.group(2) else rows
        return cls(rows=rows, cols=cols)


@dataclass(frozen=True)
class GridPreset:
    rank: GridRank
    description: str

    @property
    def label(self) -> str:
        return f"{self.rank.rows}×{self.rank.cols}"

    @property
    def words_needed(self) -> int:
        return self.rank.cell_count


GRID_PRESETS: tuple[GridPreset, ...] = (
    GridPreset(GridRank(3, 3), "Perfect for quick games"),
    GridPreset(GridRank(4, 4), "Balanced difficulty"),
    GridPreset(GridRank(5, 5), "Classic Bingo experience"),
)

# Bounds offered by the UI for custom grids; the engine itself has no upper bound.
UI_MIN_SIZE = 2
UI_MAX_SIZE = 8

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from reportlab.pdfbase.pdfmetrics import stringWidth

from .grid import GridRank


logger = logging.getLogger(__name__)

DEFAULT_FONT_NAME = "Helvetica"

# (largest grid side, font size in points); first matching row wins.
FONT_SIZE_TABLE: tuple[tuple[int, float], ...] = (
    (3, 11.0),
    (4, 9.0),
)
SMALLEST_FONT_SIZE = 7.0

Measure = Callable[[str, float], float]


@dataclass(frozen=True)
class FittedText:
    lines: tuple[str, ...]
    font_size: float
    line_height: float
    offset_y: float
    degraded: bool = False

    @property
    def block_height(self) -> float:
        return len(self.lines) * self.line_height


def font_size_for_rank(rank: GridRank) -> float:
    side = max(rank.rows, rank.cols)
    for limit, size in FONT_SIZE_TABLE:
        if side <= limit:
            return size
    return SMALLEST_FONT_SIZE


def helvetica_measure(font_name: str = DEFAULT_FONT_NAME) -> Measure:
    def measure(text: str, size: float) -> float:
        return stringWidth(text, font_name, size)

    return measure


def wrap_words(text: str, max_width: float, font_size: float, measure: Measure) -> list[str]:
    """
    Greedy wrap at single spaces. A word wider than ``max_width`` keeps a line of its own.

    Lines only ever break at one space, so ``" ".join(lines) == text`` holds even
    when the phrase carries runs of spaces.
    """
    if not text:
        return []
    lines: list[str] = []
    current: list[str] = []
    for word in text.split(" "):
        trial = " ".join(current + [word])
        # Empty pieces are the extra spaces of a run; they stay on the current line.
        if not current or not word or measure(trial, font_size) <= max_width:
            current.append(word)
            continue
        lines.append(" ".join(current))
        current = [word]
    if current:
        lines.append(" ".join(current))
    return lines


def fit_text(
    text: str,
    max_width: float,
    max_height: float,
    font_size: float,
    *,
    measure: Measure | None = None,
    min_font_size: float = 6,
    leading_ratio: float = 1.15,
) -> FittedText:
    measure = measure or helvetica_measure()

    size = font_size
    lines = wrap_words(text, max_width, size, measure)
    while size > min_font_size and len(lines) * size * leading_ratio > max_height:
        size = max(min_font_size, size - 0.5)
        lines = wrap_words(text, max_width, size, measure)

    line_height = size * leading_ratio
    total_h = len(lines) * line_height
    too_wide = any(measure(line, size) > max_width for line in lines)
    degraded = too_wide or total_h > max_height
    if degraded:
        # Rendered anyway; the full text is never cut.
        logger.debug("Text %r does not fit %.1fx%.1f at %.1fpt", text, max_width, max_height, size)

    return FittedText(
        lines=tuple(lines),
        font_size=size,
        line_height=line_height,
        offset_y=(max_height - total_h) / 2,
        degraded=degraded,
    )

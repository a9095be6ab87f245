from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .grid import GridRank


@dataclass(frozen=True)
class CellBox:
    """A rectangle in page space: origin at the top-left corner, y grows downward."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


def compute_cell_boxes(
    page_width: float,
    page_height: float,
    margin: float,
    rank: GridRank,
    grid_top: float,
    grid_bottom: float | None = None,
) -> list[CellBox]:
    """
    Lay out ``rank.rows * rank.cols`` cells in row-major order.

    Cells span the full width between the margins. Square ranks get square cells;
    other ranks split the height between ``grid_top`` and ``grid_bottom`` evenly.
    When the grid would run past ``grid_bottom`` both cell dimensions are scaled
    down by the same factor and the grid is centred horizontally.
    """
    if grid_bottom is None:
        grid_bottom = page_height - margin
    grid_bottom = min(grid_bottom, page_height)

    available_w = page_width - 2 * margin
    available_h = grid_bottom - grid_top
    if available_w <= 0 or available_h <= 0 or grid_top < 0:
        raise ValueError(
            f"No room for a grid: width {available_w:.2f}, height {available_h:.2f}"
        )

    cell_w = available_w / rank.cols
    if rank.is_square:
        cell_h = cell_w
    else:
        cell_h = available_h / rank.rows

    if rank.rows * cell_h > available_h:
        scale = available_h / (rank.rows * cell_h)
        cell_w *= scale
        cell_h *= scale

    x0 = margin + (available_w - rank.cols * cell_w) / 2
    boxes: list[CellBox] = []
    for row in range(rank.rows):
        for col in range(rank.cols):
            boxes.append(
                CellBox(
                    x=x0 + col * cell_w,
                    y=grid_top + row * cell_h,
                    width=cell_w,
                    height=cell_h,
                )
            )
    return boxes


def grid_bounds(boxes: Sequence[CellBox]) -> CellBox:
    if not boxes:
        raise ValueError("grid_bounds needs at least one box")
    left = min(b.x for b in boxes)
    top = min(b.y for b in boxes)
    right = max(b.right for b in boxes)
    bottom = max(b.bottom for b in boxes)
    return CellBox(x=left, y=top, width=right - left, height=bottom - top)

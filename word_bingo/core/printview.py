from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from jinja2 import Environment
from markupsafe import Markup
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from .errors import ExportFailure
from .generator import Card
from .geometry import compute_cell_boxes
from .grid import GridRank
from .layout import CardSlot, OutputMode, plan_pages
from .pdf import write_atomic
from .text_fit import fit_text, font_size_for_rank


PAGE_W, PAGE_H = A4
PAGE_MARGIN = 15 * mm
TITLE_H = 10 * mm
FOOTER_H = 10 * mm
CELL_PADDING = 1.5 * mm
# 1px collapsed table border, in points.
BORDER_W = 0.75
# Left unused at the bottom of each card region.
PRINT_SLACK = 4.0


PRINT_CSS = """
@page { size: A4; margin: 15mm; }
.bingo-card { margin: 0; break-inside: avoid; page-break-inside: avoid; }
.bingo-card-title {
  box-sizing: border-box; height: %(title_h).2fpt; line-height: %(title_h).2fpt; margin: 0; overflow: hidden;
  text-align: center; font: bold 16pt Helvetica, Arial, sans-serif;
}
.bingo-grid { border-collapse: collapse; margin: 0 auto; table-layout: fixed; }
.bingo-grid td {
  border: 1px solid #000; padding: 0; text-align: center; vertical-align: middle;
  font-family: Helvetica, Arial, sans-serif; line-height: 1.15; overflow: visible;
}
.cut-line {
  box-sizing: border-box; height: %(footer_h).2fpt; margin: 0; padding-top: 8pt;
  text-align: center; font-size: 8pt; line-height: 1.2;
}
.cut-line span { display: block; border-top: 1px dashed #000; padding-top: 2pt; }
.card-preview .bingo-card { margin-bottom: 12pt; }
#print-region .page-break { break-after: page; page-break-after: always; }
@media print {
  body { margin: 0; }
  body * { visibility: hidden; }
  #print-region, #print-region * { visibility: visible; }
  #print-region { position: absolute; left: 0; top: 0; width: 100%%; }
  .no-print { display: none !important; }
}
""" % {"title_h": TITLE_H, "footer_h": FOOTER_H}


_env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)

_CARD_MACRO = """
{% macro card_block(slot) %}
<div class="bingo-card" data-label="{{ slot.label }}">
  <h3 class="bingo-card-title">{{ slot.title }}</h3>
  <table class="bingo-grid" style="width: {{ '%.2f'|format(grid_w) }}pt">
  {% for row in slot.rows %}
    <tr>
    {% for cell in row %}
      <td style="width: {{ '%.2f'|format(cell_w) }}pt; height: {{ '%.2f'|format(cell_h) }}pt; font-size: {{ cell.font_size }}pt">
        {%- for line in cell.lines %}{{ line }}{% if not loop.last %}<br>{% endif %}{% endfor -%}
      </td>
    {% endfor %}
    </tr>
  {% endfor %}
  </table>
  {% if cut_label %}<div class="cut-line"><span>{{ cut_label }}</span></div>{% endif %}
</div>
{% endmacro %}
"""

_REGION_TEMPLATE = _env.from_string(
    _CARD_MACRO
    + """
<div id="print-region">
{% for page in pages %}
  <section class="print-page{% if not loop.last %} page-break{% endif %}" data-page="{{ page.index }}">
  {% for slot in page.slots %}
    {{ card_block(slot) }}
  {% endfor %}
  </section>
{% endfor %}
</div>
"""
)

_PREVIEW_TEMPLATE = _env.from_string(
    _CARD_MACRO
    + """
<div class="card-preview">
{% for slot in slots %}
  {{ card_block(slot) }}
{% endfor %}
</div>
"""
)

_DOCUMENT_TEMPLATE = _env.from_string(
    """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Bingo cards {{ rank_label }}</title>
    <style>{{ css }}</style>
  </head>
  <body>
    {{ region }}
    {% if auto_print %}<script>window.addEventListener("load", function () { window.print(); });</script>{% endif %}
  </body>
</html>
"""
)


@dataclass(frozen=True)
class _Cell:
    lines: tuple[str, ...]
    font_size: float


@dataclass(frozen=True)
class _SlotView:
    label: int
    title: str
    rows: list[list[_Cell]]


@dataclass(frozen=True)
class _PageView:
    index: int
    slots: list[_SlotView]


def _cell_size(rank: GridRank) -> tuple[float, float]:
    region_h = (PAGE_H - 2 * PAGE_MARGIN) / OutputMode.COMPACT.cards_per_page
    boxes = compute_cell_boxes(
        PAGE_W - (rank.cols + 1) * BORDER_W,
        PAGE_H,
        PAGE_MARGIN,
        rank,
        grid_top=PAGE_MARGIN + TITLE_H,
        grid_bottom=PAGE_MARGIN + region_h - FOOTER_H - (rank.rows + 1) * BORDER_W - PRINT_SLACK,
    )
    return boxes[0].width, boxes[0].height


def print_card_height(rank: GridRank) -> float:
    """Rendered height of one printed card in points: title, bordered grid and cut line."""
    _, cell_h = _cell_size(rank)
    return TITLE_H + rank.rows * cell_h + (rank.rows + 1) * BORDER_W + FOOTER_H


def _slot_view(slot: CardSlot, rank: GridRank, title_prefix: str, cell_w: float, cell_h: float) -> _SlotView:
    font_size = font_size_for_rank(rank)
    rows: list[list[_Cell]] = []
    for row in slot.card.rows(rank):
        cells = []
        for text in row:
            fitted = fit_text(text, cell_w - 2 * CELL_PADDING, cell_h - 2 * CELL_PADDING, font_size)
            cells.append(_Cell(lines=fitted.lines, font_size=fitted.font_size))
        rows.append(cells)
    return _SlotView(label=slot.label, title=f"{title_prefix} #{slot.label}", rows=rows)


def render_print_region(
    cards: Sequence[Card],
    rank: GridRank,
    *,
    title_prefix: str = "Bingo Card",
    cut_label: str = "Cut along the dashed line",
) -> Markup:
    """Two cards per page; every page block but the last forces a page break."""
    cell_w, cell_h = _cell_size(rank)
    pages = [
        _PageView(
            index=page.page_index,
            slots=[_slot_view(s, rank, title_prefix, cell_w, cell_h) for s in page.slots],
        )
        for page in plan_pages(cards, OutputMode.COMPACT)
    ]
    html = _REGION_TEMPLATE.render(
        pages=pages,
        cell_w=cell_w,
        cell_h=cell_h,
        grid_w=cell_w * rank.cols,
        cut_label=cut_label,
    )
    return Markup(html)


def render_card_preview(cards: Sequence[Card], rank: GridRank) -> Markup:
    cell_w, cell_h = _cell_size(rank)
    slots = [
        _slot_view(CardSlot(card=card, label=i), rank, "Sample Card", cell_w, cell_h)
        for i, card in enumerate(cards, start=1)
    ]
    html = _PREVIEW_TEMPLATE.render(
        slots=slots,
        cell_w=cell_w,
        cell_h=cell_h,
        grid_w=cell_w * rank.cols,
        cut_label=None,
    )
    return Markup(html)


def render_print_document(cards: Sequence[Card], rank: GridRank, *, auto_print: bool = True) -> str:
    try:
        region = render_print_region(cards, rank)
        return _DOCUMENT_TEMPLATE.render(
            rank_label=rank.label,
            css=Markup(PRINT_CSS),
            region=region,
            auto_print=auto_print,
        )
    except Exception as exc:
        raise ExportFailure(f"Failed to build the print view for {len(cards)} {rank.label} cards") from exc


def save_print_document(path: Path, cards: Sequence[Card], rank: GridRank) -> Path:
    """Write the standalone print page to ``path``; on failure the target is left untouched."""
    html = render_print_document(cards, rank)
    return write_atomic(Path(path), html.encode("utf-8"))

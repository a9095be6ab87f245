from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
import logging
import os
from pathlib import Path
import tempfile
from typing import Iterable, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import Canvas

from .errors import ExportFailure
from .generator import Card
from .geometry import CellBox, compute_cell_boxes, grid_bounds
from .grid import GridRank
from .layout import OutputMode, PageDescriptor, plan_pages
from .text_fit import DEFAULT_FONT_NAME, fit_text, font_size_for_rank, helvetica_measure


logger = logging.getLogger(__name__)

# Helvetica cap height is roughly 70% of the font size.
_CAP_HEIGHT_RATIO = 0.70


@dataclass(frozen=True)
class RenderOptions:
    title_prefix: str = "Bingo Card"
    cut_label: str = "Cut along the dashed line"
    page_size: tuple[float, float] = A4
    margin: float = 15 * mm
    mode: OutputMode = OutputMode.DOCUMENT
    show_footer: bool = True
    font_name: str = DEFAULT_FONT_NAME
    title_font_name: str = "Helvetica-Bold"


def export_filename(rank: GridRank) -> str:
    return f"bingo-cards-{rank.label}.pdf"


def _draw_cell(
    canvas: Canvas,
    text: str,
    box: CellBox,
    *,
    page_h: float,
    font_name: str,
    font_size: float,
    padding: float,
) -> None:
    canvas.rect(box.x, page_h - box.bottom, box.width, box.height, stroke=1, fill=0)

    inner_w = box.width - 2 * padding
    inner_h = box.height - 2 * padding
    fitted = fit_text(
        text,
        inner_w,
        inner_h,
        font_size,
        measure=helvetica_measure(font_name),
    )

    canvas.setFont(font_name, fitted.font_size)
    lh = fitted.line_height
    cap_h = fitted.font_size * _CAP_HEIGHT_RATIO
    block_top = box.y + padding + fitted.offset_y
    for i, line in enumerate(fitted.lines):
        baseline = block_top + i * lh + (lh + cap_h) / 2
        canvas.drawCentredString(box.x + box.width / 2, page_h - baseline, line)


def _draw_card(
    canvas: Canvas,
    card: Card,
    label: int,
    rank: GridRank,
    opts: RenderOptions,
    *,
    region_top: float,
    region_bottom: float,
) -> None:
    page_w, page_h = opts.page_size
    title_h = 10 * mm
    footer_h = 10 * mm if opts.show_footer else 0

    canvas.setStrokeColorRGB(0, 0, 0)
    canvas.setLineWidth(1)

    canvas.setFont(opts.title_font_name, 16)
    canvas.drawCentredString(page_w / 2, page_h - (region_top + 6 * mm), f"{opts.title_prefix} #{label}")

    boxes = compute_cell_boxes(
        page_w,
        page_h,
        opts.margin,
        rank,
        grid_top=region_top + title_h,
        grid_bottom=region_bottom - footer_h,
    )
    font_size = font_size_for_rank(rank)
    padding = min(1.5 * mm, boxes[0].width / 10)
    for text, box in zip(card.words, boxes):
        _draw_cell(
            canvas,
            text,
            box,
            page_h=page_h,
            font_name=opts.font_name,
            font_size=font_size,
            padding=padding,
        )

    if not opts.show_footer:
        return

    bounds = grid_bounds(boxes)
    cut_y = page_h - (bounds.bottom + 5 * mm)
    canvas.saveState()
    canvas.setLineWidth(0.5)
    canvas.setDash(4, 3)
    canvas.line(opts.margin, cut_y, page_w - opts.margin, cut_y)
    canvas.restoreState()
    canvas.setFont(opts.font_name, 8)
    canvas.drawCentredString(page_w / 2, cut_y - 4 * mm, opts.cut_label)


def render_cards_pdf(
    cards: Sequence[Card],
    rank: GridRank,
    opts: RenderOptions | None = None,
    *,
    pages: Iterable[PageDescriptor] | None = None,
) -> bytes:
    opts = opts or RenderOptions()
    if pages is None:
        pages = plan_pages(cards, opts.mode)

    buf = BytesIO()
    canvas = Canvas(buf, pagesize=opts.page_size)
    canvas.setTitle(f"Bingo cards {rank.label}")
    _, page_h = opts.page_size
    region_h = (page_h - 2 * opts.margin) / opts.mode.cards_per_page

    drawn = 0
    for page in pages:
        for i, slot in enumerate(page.slots):
            region_top = opts.margin + i * region_h
            _draw_card(
                canvas,
                slot.card,
                slot.label,
                rank,
                opts,
                region_top=region_top,
                region_bottom=region_top + region_h,
            )
        canvas.showPage()
        drawn += 1

    if not drawn:
        raise ValueError("Nothing to render: the card batch is empty")

    canvas.save()
    return buf.getvalue()


def export_pdf(
    cards: Sequence[Card],
    rank: GridRank,
    opts: RenderOptions | None = None,
    *,
    pages: Iterable[PageDescriptor] | None = None,
) -> bytes:
    try:
        return render_cards_pdf(cards, rank, opts, pages=pages)
    except Exception as exc:
        raise ExportFailure(f"Failed to build the PDF for {len(cards)} {rank.label} cards") from exc


def write_atomic(path: Path, data: bytes) -> Path:
    """Replace ``path`` with ``data`` in one step; a failed write leaves no partial file."""
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=".bingo-", suffix=path.suffix, dir=path.parent)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise ExportFailure(f"Unable to write {path}") from exc
    logger.info("Wrote %s (%d bytes)", path, len(data))
    return path


def save_pdf(
    path: Path,
    cards: Sequence[Card],
    rank: GridRank,
    opts: RenderOptions | None = None,
    *,
    pages: Iterable[PageDescriptor] | None = None,
) -> Path:
    """Write the PDF to ``path``; on failure the target is left untouched."""
    return write_atomic(Path(path), export_pdf(cards, rank, opts, pages=pages))

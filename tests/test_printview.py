import math
from pathlib import Path
import re

import pytest

from word_bingo.core import printview
from word_bingo.core.errors import ExportFailure
from word_bingo.core.generator import generate_cards
from word_bingo.core.grid import GridRank
from word_bingo.core.printview import (
    PRINT_CSS,
    print_card_height,
    render_card_preview,
    render_print_document,
    render_print_region,
    save_print_document,
)


@pytest.mark.parametrize("n", [1, 2, 5, 10])
def test_print_region_pages_and_breaks(rank_3x3, words_3x3, n):
    html = render_print_region(generate_cards(words_3x3, n), rank_3x3)
    pages = math.ceil(n / 2)
    assert html.count('class="print-page') == pages
    assert html.count("page-break") == pages - 1
    assert html.count('class="bingo-card"') == n


def test_print_region_labels_follow_batch_order(rank_3x3, words_3x3):
    html = render_print_region(generate_cards(words_3x3, 3), rank_3x3)
    assert html.index("Bingo Card #1") < html.index("Bingo Card #2") < html.index("Bingo Card #3")
    assert html.count("Cut along the dashed line") == 3


def test_print_region_escapes_words(rank_3x3):
    words = ["<b>bold</b>"] + [f"w{i}" for i in range(8)]
    html = render_print_region(generate_cards(words, 1), rank_3x3)
    assert "<b>bold" not in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html


def test_print_region_uses_shared_font_table(words_3x3, rank_3x3):
    html = render_print_region(generate_cards(words_3x3, 1), rank_3x3)
    assert "font-size: 11.0pt" in html


def test_print_document_hides_everything_else(rank_3x3, words_3x3):
    html = render_print_document(generate_cards(words_3x3, 4), rank_3x3)
    assert html.startswith("<!doctype html>")
    assert "visibility: hidden" in html
    assert 'id="print-region"' in html
    assert "window.print()" in html


def test_print_document_wraps_errors(monkeypatch, rank_3x3, words_3x3):
    def boom(*args, **kwargs):
        raise RuntimeError("template broke")

    monkeypatch.setattr(printview, "render_print_region", boom)
    with pytest.raises(ExportFailure):
        render_print_document(generate_cards(words_3x3, 1), rank_3x3)


def test_card_preview(rank_3x3, words_3x3):
    html = render_card_preview(generate_cards(words_3x3, 2), rank_3x3)
    assert "Sample Card #1" in html
    assert "Sample Card #2" in html
    assert "cut-line" not in html


@pytest.mark.parametrize(
    "rank",
    [GridRank(2, 2), GridRank(3, 3), GridRank(4, 4), GridRank(5, 5), GridRank(8, 8), GridRank(3, 5), GridRank(8, 2), GridRank(2, 8)],
)
def test_two_printed_cards_fit_one_page(rank):
    assert 2 * print_card_height(rank) <= printview.PAGE_H - 2 * printview.PAGE_MARGIN


def test_print_css_pins_title_and_cut_line_heights():
    assert f"height: {printview.TITLE_H:.2f}pt" in PRINT_CSS
    assert f"height: {printview.FOOTER_H:.2f}pt" in PRINT_CSS
    assert ".bingo-card { margin: 0;" in PRINT_CSS
    assert "100%;" in PRINT_CSS


def test_rendered_cells_match_height_budget(rank_3x3, words_3x3):
    html = render_print_region(generate_cards(words_3x3, 2), rank_3x3)
    grid_h = print_card_height(rank_3x3) - printview.TITLE_H - printview.FOOTER_H - 4 * printview.BORDER_W
    heights = re.findall(r"height: ([\d.]+)pt", html)
    assert len(heights) == 18
    for h in heights:
        assert float(h) == pytest.approx(grid_h / 3, abs=0.01)


def test_save_print_document_writes_complete_file(tmp_path: Path, rank_3x3, words_3x3):
    target = tmp_path / "cards.html"
    save_print_document(target, generate_cards(words_3x3, 3), rank_3x3)
    html = target.read_text(encoding="utf-8")
    assert html.startswith("<!doctype html>")
    assert html.count('class="print-page') == 2
    assert [p.name for p in tmp_path.iterdir()] == ["cards.html"]


def test_save_print_document_leaves_existing_file_on_failure(monkeypatch, tmp_path: Path, rank_3x3, words_3x3):
    target = tmp_path / "cards.html"
    target.write_text("previous", encoding="utf-8")

    def boom(*args, **kwargs):
        raise RuntimeError("template broke")

    monkeypatch.setattr(printview, "render_print_region", boom)
    with pytest.raises(ExportFailure):
        save_print_document(target, generate_cards(words_3x3, 1), rank_3x3)
    assert target.read_text(encoding="utf-8") == "previous"
    assert [p.name for p in tmp_path.iterdir()] == ["cards.html"]

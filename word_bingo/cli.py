from __future__ import annotations

import argparse
from pathlib import Path
import sys

from word_bingo.config import configure_logging, load_settings
from word_bingo.core.generator import generate_batch
from word_bingo.core.grid import GridRank
from word_bingo.core.layout import OutputMode, plan_pages
from word_bingo.core.parser import parse_word_list_text, word_count_status
from word_bingo.core.pdf import RenderOptions, export_filename, save_pdf
from word_bingo.core.printview import save_print_document


def _import_tqdm():
    try:
        from tqdm import tqdm
    except ModuleNotFoundError as exc:  # pragma: no cover - depends on local env
        raise RuntimeError(
            "Missing dependency: tqdm.\n"
            "Install it with:\n"
            "  python3 -m pip install -e ."
        ) from exc
    return tqdm


def _read_words(path: Path) -> list[str]:
    if not path.exists():
        raise RuntimeError(
            "Word list not found:\n"
            f"  {path}\n"
            "\n"
            "Tip: put one word or phrase per line in a .txt file and pass --words /path/to/words.txt"
        )
    return parse_word_list_text(path.read_text(encoding="utf-8")).words


def _default_output(rank: GridRank, fmt: str) -> Path:
    name = export_filename(rank)
    if fmt == "html":
        name = name[: -len(".pdf")] + ".html"
    return Path(name)


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Generate randomized word bingo cards as a PDF or a print-ready HTML page.")
    parser.add_argument("--words", required=True, help="Path to a .txt file with one word or phrase per line")
    parser.add_argument("--grid", default="3x3", help='Grid size, e.g. "3x3", "4x5" or "5" (default: 3x3)')
    parser.add_argument("--count", type=int, default=settings.default_card_count, help="Number of cards to generate")
    parser.add_argument("--format", choices=["pdf", "html"], default="pdf", help="Output format (default: pdf)")
    parser.add_argument(
        "--layout",
        choices=[m.value for m in OutputMode],
        default=OutputMode.DOCUMENT.value,
        help="PDF layout: one card per page (document) or two (compact); HTML is always compact",
    )
    parser.add_argument("--seed", type=int, default=None, help="Optional seed for reproducible cards")
    parser.add_argument("--output", default=None, help="Output path (default: bingo-cards-<rows>x<cols>.pdf)")
    parser.add_argument("--dry-run", action="store_true", help="Validate input and report what would be written")
    parser.add_argument("--verbose", action="store_true", help="Log debug details")
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else settings.log_level)

    try:
        rank = GridRank.parse(args.grid)
    except ValueError as exc:
        raise RuntimeError(str(exc)) from exc

    words = _read_words(Path(args.words).expanduser())
    status = word_count_status(words, rank)
    if not status.is_valid:
        raise RuntimeError(
            f"The {rank.label} grid needs exactly {status.required} words, found {status.actual}.\n"
            f"{status.message}"
        )

    mode = OutputMode.parse(args.layout)
    out = Path(args.output).expanduser() if args.output else _default_output(rank, args.format)
    if args.format == "html":
        mode = OutputMode.COMPACT

    if args.dry_run:
        print(f"[dry-run] Would write {args.count} {rank.label} cards ({mode.value} layout) to {out}")
        return 0

    batch = generate_batch(rank, words, args.count, seed=args.seed, max_count=settings.max_cards)

    if args.format == "html":
        save_print_document(out, batch.cards, rank)
    else:
        tqdm = _import_tqdm()
        pages = plan_pages(batch.cards, mode)
        save_pdf(
            out,
            batch.cards,
            rank,
            RenderOptions(mode=mode),
            pages=tqdm(pages, desc="Rendering", unit="page"),
        )

    print(f"Wrote {len(batch)} cards to {out}")
    return 0


def run() -> None:
    try:
        raise SystemExit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        raise SystemExit(130)
    except Exception as exc:
        msg = str(exc).rstrip() or repr(exc)
        if "\n" in msg:
            first, rest = msg.split("\n", 1)
            print(f"ERROR: {first}", file=sys.stderr)
            print(rest, file=sys.stderr)
        else:
            print(f"ERROR: {msg}", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    run()

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, Sequence

from .grid import GridRank


_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class WordListResult:
    words: list[str]
    ignored_lines: int


@dataclass(frozen=True)
class WordCountStatus:
    required: int
    actual: int

    @property
    def is_valid(self) -> bool:
        return self.actual == self.required

    @property
    def missing(self) -> int:
        return max(0, self.required - self.actual)

    @property
    def extra(self) -> int:
        return max(0, self.actual - self.required)

    @property
    def message(self) -> str:
        if self.is_valid:
            return f"Perfect! You have exactly {self.required} words. Ready to generate cards!"
        if self.missing:
            return f"You need {self.missing} more {_plural_word(self.missing)}."
        return f"You have {self.extra} too many {_plural_word(self.extra)}. Please remove some."


def _plural_word(n: int) -> str:
    return "word" if n == 1 else "words"


def _iter_lines(text: str) -> Iterable[str]:
    for raw in text.splitlines():
        yield _WS_RE.sub(" ", raw).strip()


def parse_word_list_text(text: str) -> WordListResult:
    words: list[str] = []
    ignored = 0

    for line in _iter_lines(text or ""):
        if not line:
            ignored += 1
            continue
        words.append(line)

    return WordListResult(words=words, ignored_lines=ignored)


def word_count_status(words: Sequence[str], rank: GridRank) -> WordCountStatus:
    return WordCountStatus(required=rank.cell_count, actual=len(words))

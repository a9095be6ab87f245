from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math
from typing import Sequence

from .generator import Card


class OutputMode(Enum):
    DOCUMENT = "document"
    COMPACT = "compact"

    @property
    def cards_per_page(self) -> int:
        return 1 if self is OutputMode.DOCUMENT else 2

    @classmethod
    def parse(cls, value: str) -> "OutputMode":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown layout {value!r}; expected one of: {choices}") from None


@dataclass(frozen=True)
class CardSlot:
    card: Card
    label: int


@dataclass(frozen=True)
class PageDescriptor:
    page_index: int
    slots: tuple[CardSlot, ...]


def page_count(card_count: int, mode: OutputMode) -> int:
    return math.ceil(card_count / mode.cards_per_page)


def plan_pages(cards: Sequence[Card], mode: OutputMode) -> list[PageDescriptor]:
    per_page = mode.cards_per_page
    # Labels follow batch position and are never renumbered per page.
    slots = [CardSlot(card=card, label=i) for i, card in enumerate(cards, start=1)]
    return [
        PageDescriptor(page_index=page, slots=tuple(slots[start : start + per_page]))
        for page, start in enumerate(range(0, len(slots), per_page))
    ]

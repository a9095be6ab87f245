from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import Iterator, Sequence, TypeVar

from .errors import InvalidWordCount
from .grid import GridRank


logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_CARDS = 100


@dataclass(frozen=True)
class Card:
    words: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.words)

    def rows(self, rank: GridRank) -> Iterator[tuple[str, ...]]:
        for r in range(rank.rows):
            yield self.words[r * rank.cols : (r + 1) * rank.cols]


@dataclass(frozen=True)
class CardBatch:
    rank: GridRank
    cards: tuple[Card, ...]
    seed: int | None = None

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Return a shuffled copy of ``items`` (Fisher-Yates); the input is left untouched."""
    out = list(items)
    if len(out) <= 1:
        return out

    randrange = (rng or random).randrange
    for i in range(len(out) - 1, 0, -1):
        j = randrange(i + 1)
        out[i], out[j] = out[j], out[i]
    return out


def validate_word_count(words: Sequence[str], rank: GridRank) -> None:
    if len(words) != rank.cell_count:
        raise InvalidWordCount(required=rank.cell_count, actual=len(words))


def generate_cards(
    words: Sequence[str],
    count: int,
    *,
    seed: int | None = None,
    max_count: int = MAX_CARDS,
) -> list[Card]:
    if not words:
        raise InvalidWordCount(required=None, actual=0)
    if count < 1 or count > max_count:
        raise ValueError(f"count must be between 1 and {max_count}, got {count}")

    rng = random.Random(seed)
    source = tuple(words)
    # Cards are independent shuffles; duplicates across the batch are allowed.
    cards = [Card(words=tuple(shuffle(source, rng))) for _ in range(count)]
    logger.info("Generated %d cards from %d words", len(cards), len(source))
    return cards


def generate_batch(
    rank: GridRank,
    words: Sequence[str],
    count: int,
    *,
    seed: int | None = None,
    max_count: int = MAX_CARDS,
) -> CardBatch:
    validate_word_count(words, rank)
    cards = generate_cards(words, count, seed=seed, max_count=max_count)
    return CardBatch(rank=rank, cards=tuple(cards), seed=seed)

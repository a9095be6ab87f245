"""
Step wizard as an explicit state machine.

    intro -> grid -> words -> generate

Every state is immutable; transitions return a new state and raise
``WizardError`` (or ``InvalidWordCount``) when the move is not allowed.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import random
from typing import Any, Mapping, Sequence, Union

from .errors import WizardError
from .generator import MAX_CARDS, CardBatch, generate_batch, validate_word_count
from .grid import GridRank


logger = logging.getLogger(__name__)

DEFAULT_CARD_COUNT = 10


@dataclass(frozen=True)
class IntroStep:
    name = "intro"


@dataclass(frozen=True)
class GridStep:
    rank: GridRank | None = None
    name = "grid"


@dataclass(frozen=True)
class WordsStep:
    rank: GridRank
    words: tuple[str, ...] = ()
    name = "words"


@dataclass(frozen=True)
class GenerateStep:
    rank: GridRank
    words: tuple[str, ...]
    seed: int
    count: int = DEFAULT_CARD_COUNT
    name = "generate"

    def batch(self, *, max_count: int = MAX_CARDS) -> CardBatch:
        return generate_batch(self.rank, self.words, self.count, seed=self.seed, max_count=max_count)


WizardState = Union[IntroStep, GridStep, WordsStep, GenerateStep]


def _new_seed() -> int:
    return random.randrange(2**31)


def _expect(state: WizardState, cls: type) -> None:
    if not isinstance(state, cls):
        raise WizardError(f"Cannot do that from the {state.name} step")


def start(state: WizardState) -> GridStep:
    _expect(state, IntroStep)
    return GridStep()


def select_rank(state: WizardState, rank: GridRank) -> GridStep:
    _expect(state, GridStep)
    return GridStep(rank=rank)


def grid_next(state: WizardState, words: Sequence[str] = ()) -> WordsStep:
    _expect(state, GridStep)
    if state.rank is None:
        raise WizardError("Choose a grid size first")
    return WordsStep(rank=state.rank, words=tuple(words))


def change_words(state: WizardState, words: Sequence[str]) -> WordsStep:
    _expect(state, WordsStep)
    return replace(state, words=tuple(words))


def words_next(state: WizardState, count: int = DEFAULT_CARD_COUNT) -> GenerateStep:
    _expect(state, WordsStep)
    validate_word_count(state.words, state.rank)
    return GenerateStep(rank=state.rank, words=state.words, seed=_new_seed(), count=count)


def set_count(state: WizardState, count: int, *, max_count: int = MAX_CARDS) -> GenerateStep:
    _expect(state, GenerateStep)
    if count < 1 or count > max_count:
        raise WizardError(f"Number of cards must be between 1 and {max_count}")
    return replace(state, count=count, seed=_new_seed())


def regenerate(state: WizardState) -> GenerateStep:
    _expect(state, GenerateStep)
    return replace(state, seed=_new_seed())


def back(state: WizardState) -> WizardState:
    if isinstance(state, GenerateStep):
        return WordsStep(rank=state.rank, words=state.words)
    if isinstance(state, WordsStep):
        return GridStep(rank=state.rank)
    return IntroStep()


def state_to_dict(state: WizardState) -> dict[str, Any]:
    data: dict[str, Any] = {"step": state.name}
    rank = getattr(state, "rank", None)
    if rank is not None:
        data["rank"] = [rank.rows, rank.cols]
    if isinstance(state, (WordsStep, GenerateStep)):
        data["words"] = list(state.words)
    if isinstance(state, GenerateStep):
        data["seed"] = state.seed
        data["count"] = state.count
    return data


def state_from_dict(data: Mapping[str, Any] | None) -> WizardState:
    if not data:
        return IntroStep()
    try:
        step = data.get("step")
        rank = GridRank(*data["rank"]) if data.get("rank") else None
        words = tuple(str(w) for w in data.get("words", ()))
        if step == "grid":
            return GridStep(rank=rank)
        if step == "words" and rank is not None:
            return WordsStep(rank=rank, words=words)
        if step == "generate" and rank is not None:
            return GenerateStep(rank=rank, words=words, seed=int(data["seed"]), count=int(data["count"]))
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Discarding malformed wizard state: %s", exc)
    return IntroStep()

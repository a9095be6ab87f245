from collections import Counter
import random

import pytest

from word_bingo.core.errors import InvalidWordCount
from word_bingo.core.generator import Card, generate_batch, generate_cards, shuffle
from word_bingo.core.grid import GridRank


@pytest.mark.parametrize("k", [2, 3, 9, 16, 64])
def test_shuffle_preserves_multiset_and_length(k):
    items = [f"w{i % 5}" for i in range(k)]
    out = shuffle(items)
    assert len(out) == k
    assert Counter(out) == Counter(items)


def test_shuffle_does_not_mutate_input():
    items = list(range(20))
    snapshot = list(items)
    out = shuffle(items, random.Random(7))
    assert items == snapshot
    assert out is not items


@pytest.mark.parametrize("items", [[], ["only"]])
def test_shuffle_small_inputs_are_noops(items):
    assert shuffle(items) == items


def test_shuffle_reaches_every_permutation():
    rng = random.Random(0)
    seen = {tuple(shuffle("abc", rng)) for _ in range(600)}
    assert len(seen) == 6


def test_generate_cards_are_permutations(words_3x3):
    cards = generate_cards(words_3x3, 10)
    assert len(cards) == 10
    for card in cards:
        assert isinstance(card, Card)
        assert len(card) == 9
        assert sorted(card.words) == sorted(words_3x3)


def test_generate_cards_seed_is_reproducible(words_3x3):
    a = generate_cards(words_3x3, 5, seed=42)
    b = generate_cards(words_3x3, 5, seed=42)
    assert a == b


def test_generate_cards_rejects_empty_list():
    with pytest.raises(InvalidWordCount):
        generate_cards([], 3)


@pytest.mark.parametrize("count", [0, -1, 101])
def test_generate_cards_rejects_out_of_range_count(words_3x3, count):
    with pytest.raises(ValueError):
        generate_cards(words_3x3, count)


def test_duplicate_cards_are_allowed():
    # Two words only have two arrangements; a batch of 10 must repeat.
    cards = generate_cards(["a", "b"], 10, seed=1)
    assert len(cards) == 10
    assert len(set(cards)) <= 2


def test_generate_batch_scenario(rank_3x3, words_3x3):
    batch = generate_batch(rank_3x3, words_3x3, 10)
    assert len(batch) == 10
    for card in batch:
        assert Counter(card.words) == Counter(words_3x3)


def test_generate_batch_rejects_wrong_word_count():
    rank = GridRank(4, 4)
    words = [f"word {i}" for i in range(15)]
    with pytest.raises(InvalidWordCount) as info:
        generate_batch(rank, words, 5)
    assert info.value.required == 16
    assert info.value.actual == 15


def test_card_rows(rank_3x3, words_3x3):
    card = Card(words=tuple(words_3x3))
    rows = list(card.rows(rank_3x3))
    assert rows[0] == ("Coffee", "Remote Work", "Zoom Call")
    assert len(rows) == 3

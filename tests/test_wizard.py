import pytest

from word_bingo.core import wizard
from word_bingo.core.errors import InvalidWordCount, WizardError
from word_bingo.core.grid import GridRank


def _to_words(state, words):
    state = wizard.start(state)
    state = wizard.select_rank(state, GridRank(3, 3))
    state = wizard.grid_next(state)
    return wizard.change_words(state, words)


def test_happy_path(words_3x3):
    state = _to_words(wizard.IntroStep(), words_3x3)
    state = wizard.words_next(state, count=10)
    assert isinstance(state, wizard.GenerateStep)
    batch = state.batch()
    assert len(batch) == 10
    assert batch == state.batch()


def test_words_next_requires_exact_count(words_3x3):
    state = _to_words(wizard.IntroStep(), words_3x3[:8])
    with pytest.raises(InvalidWordCount):
        wizard.words_next(state)


def test_grid_next_requires_a_rank():
    with pytest.raises(WizardError):
        wizard.grid_next(wizard.GridStep())


def test_transitions_from_wrong_state_are_rejected():
    with pytest.raises(WizardError):
        wizard.select_rank(wizard.IntroStep(), GridRank(3, 3))
    with pytest.raises(WizardError):
        wizard.regenerate(wizard.GridStep())


def test_back_walks_to_intro(words_3x3):
    state = wizard.words_next(_to_words(wizard.IntroStep(), words_3x3))
    state = wizard.back(state)
    assert isinstance(state, wizard.WordsStep)
    assert state.words == tuple(words_3x3)
    state = wizard.back(state)
    assert state == wizard.GridStep(rank=GridRank(3, 3))
    assert isinstance(wizard.back(state), wizard.IntroStep)
    assert isinstance(wizard.back(wizard.IntroStep()), wizard.IntroStep)


def test_set_count_bounds(words_3x3):
    state = wizard.words_next(_to_words(wizard.IntroStep(), words_3x3))
    assert wizard.set_count(state, 25).count == 25
    with pytest.raises(WizardError):
        wizard.set_count(state, 0)
    with pytest.raises(WizardError):
        wizard.set_count(state, 101)


@pytest.mark.parametrize(
    "state",
    [
        wizard.IntroStep(),
        wizard.GridStep(),
        wizard.GridStep(rank=GridRank(4, 5)),
        wizard.WordsStep(rank=GridRank(3, 3), words=("a", "b")),
        wizard.GenerateStep(rank=GridRank(2, 2), words=("a", "b", "c", "d"), seed=99, count=7),
    ],
)
def test_session_round_trip(state):
    assert wizard.state_from_dict(wizard.state_to_dict(state)) == state


@pytest.mark.parametrize(
    "data",
    [None, {}, {"step": "words"}, {"step": "generate", "rank": [3, 3]}, {"step": "grid", "rank": [1, 9]}, {"step": "bogus"}],
)
def test_malformed_session_falls_back_to_intro(data):
    assert isinstance(wizard.state_from_dict(data), wizard.IntroStep)

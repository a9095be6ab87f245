import pytest

from word_bingo.core.grid import GridRank


SCENARIO_WORDS = [
    "Coffee",
    "Remote Work",
    "Zoom Call",
    "Deadline",
    "Email",
    "Meeting",
    "Laptop",
    "Team Chat",
    "Project",
]


@pytest.fixture
def words_3x3() -> list[str]:
    return list(SCENARIO_WORDS)


@pytest.fixture
def rank_3x3() -> GridRank:
    return GridRank(3, 3)

import os

import pytest

from word_bingo.config import DEV_SECRET_KEY, load_settings


ENV_NAMES = ("WORD_BINGO_SECRET_KEY", "FLASK_SECRET_KEY", "WORD_BINGO_MAX_CARDS", "WORD_BINGO_DEFAULT_CARDS", "WORD_BINGO_LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env():
    # load_dotenv writes straight into os.environ; restore it afterwards.
    saved = {name: os.environ.pop(name, None) for name in ENV_NAMES}
    yield
    for name, value in saved.items():
        os.environ.pop(name, None)
        if value is not None:
            os.environ[name] = value


def test_defaults(tmp_path):
    settings = load_settings(tmp_path / "missing.env")
    assert settings.secret_key == DEV_SECRET_KEY
    assert settings.max_cards == 100
    assert settings.default_card_count == 10
    assert settings.log_level == "INFO"


def test_reads_env_file(tmp_path):
    env = tmp_path / ".env"
    env.write_text('WORD_BINGO_SECRET_KEY="s3cret"\nWORD_BINGO_MAX_CARDS=50\nWORD_BINGO_LOG_LEVEL=debug\n', encoding="utf-8")
    settings = load_settings(env)
    assert settings.secret_key == "s3cret"
    assert settings.max_cards == 50
    assert settings.log_level == "DEBUG"


def test_flask_secret_key_fallback(tmp_path):
    os.environ["FLASK_SECRET_KEY"] = "'from-flask'"
    assert load_settings(tmp_path / "missing.env").secret_key == "from-flask"


@pytest.mark.parametrize(
    "name,value",
    [("WORD_BINGO_MAX_CARDS", "lots"), ("WORD_BINGO_MAX_CARDS", "0"), ("WORD_BINGO_DEFAULT_CARDS", "500")],
)
def test_bad_numbers(tmp_path, name, value):
    os.environ[name] = value
    with pytest.raises(ValueError):
        load_settings(tmp_path / "missing.env")

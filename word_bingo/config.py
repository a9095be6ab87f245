from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from .core.generator import MAX_CARDS
from .core.wizard import DEFAULT_CARD_COUNT


DEV_SECRET_KEY = "dev-secret-key"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    secret_key: str = DEV_SECRET_KEY
    max_cards: int = MAX_CARDS
    default_card_count: int = DEFAULT_CARD_COUNT
    preview_count: int = 2
    log_level: str = "INFO"


def _normalize_env_value(value: str) -> str:
    v = (value or "").strip()
    if len(v) >= 2 and ((v[0] == v[-1] == '"') or (v[0] == v[-1] == "'")):
        v = v[1:-1].strip()
    return v


def _env(name: str, default: str = "") -> str:
    return _normalize_env_value(os.getenv(name, default))


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a whole number, got {raw!r}") from None


def load_settings(env_file: Path | None = None) -> Settings:
    load_dotenv(dotenv_path=env_file)

    secret_key = _env("WORD_BINGO_SECRET_KEY") or _env("FLASK_SECRET_KEY") or DEV_SECRET_KEY
    max_cards = _env_int("WORD_BINGO_MAX_CARDS", MAX_CARDS)
    default_count = _env_int("WORD_BINGO_DEFAULT_CARDS", DEFAULT_CARD_COUNT)
    if max_cards < 1:
        raise ValueError("WORD_BINGO_MAX_CARDS must be at least 1")
    if not 1 <= default_count <= max_cards:
        raise ValueError(f"WORD_BINGO_DEFAULT_CARDS must be between 1 and {max_cards}")

    return Settings(
        secret_key=secret_key,
        max_cards=max_cards,
        default_card_count=default_count,
        log_level=(_env("WORD_BINGO_LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)

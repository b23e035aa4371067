from __future__ import annotations

import logging
import os
from typing import Optional

_TRUTHY = ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in _TRUTHY


def highscores_path() -> str:
    return os.getenv("MEMORY_HIGHSCORES", os.path.join("data", "highscores.json"))


def default_pairs() -> int:
    return max(1, _env_int("MEMORY_DEFAULT_PAIRS", 5))


def highscore_capacity() -> int:
    return max(1, _env_int("MEMORY_HIGHSCORE_CAPACITY", 10))


def max_sessions() -> int:
    return max(1, _env_int("MEMORY_MAX_SESSIONS", 1000))


def mismatch_delay_seconds() -> float:
    """How long the CLI keeps a failed pair visible before turning it back down."""
    return max(0, _env_int("MEMORY_MISMATCH_DELAY_MS", 500)) / 1000.0


def debug_enabled() -> bool:
    return _env_flag("MEMORY_DEBUG")


def setup_logging(level: Optional[str] = None) -> None:
    """Configures root logging once for the CLI and the Flask entry point."""
    if level is None:
        level = "DEBUG" if debug_enabled() else os.getenv("MEMORY_LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

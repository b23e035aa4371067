from __future__ import annotations

# Facade module that re-exports the memory_core API.
# The Flask app, the CLI entry point and the tests import from here.
# Single-responsibility modules live under memory_core/*.

try:
    from .memory_core.card import Card  # type: ignore
    from .memory_core.board import Board  # type: ignore
    from .memory_core.deal import deal_values, make_symbols  # type: ignore
    from .memory_core.scoring import calculate_score  # type: ignore
    from .memory_core.timer import Stopwatch  # type: ignore
    from .memory_core.state import CardView, GameSnapshot, TurnState  # type: ignore
    from .memory_core.engine import Game, SaveResult  # type: ignore
    from .memory_core.highscores import (  # type: ignore
        AddResult,
        HighScoreEntry,
        HighScoreStore,
        describe,
        sort_and_trim,
    )
    from .memory_core.errors import InvalidArgumentError  # type: ignore
except ImportError:
    from memory_core.card import Card
    from memory_core.board import Board
    from memory_core.deal import deal_values, make_symbols
    from memory_core.scoring import calculate_score
    from memory_core.timer import Stopwatch
    from memory_core.state import CardView, GameSnapshot, TurnState
    from memory_core.engine import Game, SaveResult
    from memory_core.highscores import (
        AddResult,
        HighScoreEntry,
        HighScoreStore,
        describe,
        sort_and_trim,
    )
    from memory_core.errors import InvalidArgumentError

__all__ = [
    "AddResult",
    "Board",
    "Card",
    "CardView",
    "Game",
    "GameSnapshot",
    "HighScoreEntry",
    "HighScoreStore",
    "InvalidArgumentError",
    "SaveResult",
    "Stopwatch",
    "TurnState",
    "calculate_score",
    "deal_values",
    "describe",
    "make_symbols",
    "sort_and_trim",
]


def main() -> None:
    # CLI driver delegated to memory_core.cli
    try:
        from .memory_core.cli import main as _main  # type: ignore
    except ImportError:
        from memory_core.cli import main as _main
    raise SystemExit(_main())


if __name__ == '__main__':
    main()

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Callable, NamedTuple, Optional, Tuple

from .board import Board
from .card import Card
from .errors import InvalidArgumentError
from .highscores import HighScoreEntry, HighScoreStore
from .scoring import calculate_score
from .state import CardView, GameSnapshot, TurnState
from .timer import Stopwatch

logger = logging.getLogger(__name__)


class SaveResult(NamedTuple):
    added: bool
    rank: int
    entry: HighScoreEntry


class Game:
    """
    Single-player memory game: one board, one stopwatch, one attempt counter.

    A failed pair stays face up in MISMATCH_PENDING until the caller invokes
    resolve_pending_mismatch(); the game never waits on its own. Instances
    share no state, so a server can run one per session.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._board = Board()
        self._stopwatch = Stopwatch(clock)
        self._attempts = 0
        self._first: Optional[Card] = None
        self._pending: Optional[Tuple[Card, Card]] = None
        self._state = TurnState.IDLE

    # ---------- Lifecycle ----------

    def start(self, pair_count: int, seed: Optional[int] = None) -> None:
        """Deals a fresh board and restarts the clock. An invalid pair_count leaves the current game as is."""
        self._board.initialize(pair_count, seed)
        self._attempts = 0
        self._first = None
        self._pending = None
        self._state = TurnState.IDLE
        self._stopwatch.restart()
        logger.debug("game started with %d pairs", pair_count)

    def flip_card(self, card_id: int) -> bool:
        """
        Turns a card face up and advances the turn.

        Returns False, changing nothing, for an unknown id, a card that is
        already face up or matched, or while a mismatch is pending.
        """
        if self._state in (TurnState.MISMATCH_PENDING, TurnState.COMPLETED):
            return False
        card = self._board.get(card_id)
        if card is None or card.is_face_up or card.is_matched:
            return False

        card.flip()
        if self._first is None:
            self._first = card
            self._state = TurnState.ONE_FLIPPED
            return True

        first, self._first = self._first, None
        self._attempts += 1
        if first.value == card.value:
            first.match()
            card.match()
            if self._board.all_matched():
                self._stopwatch.stop()
                self._state = TurnState.COMPLETED
                logger.debug("game completed in %d attempts, %.2fs", self._attempts, self._stopwatch.elapsed())
            else:
                self._state = TurnState.IDLE
        else:
            self._pending = (first, card)
            self._state = TurnState.MISMATCH_PENDING
        return True

    @property
    def has_pending_mismatch(self) -> bool:
        return self._state is TurnState.MISMATCH_PENDING

    def resolve_pending_mismatch(self) -> bool:
        """Turns the mismatched pair back down. Returns False when there was nothing to resolve."""
        if self._state is not TurnState.MISMATCH_PENDING or self._pending is None:
            return False
        for card in self._pending:
            if card.is_face_up:
                card.flip()
        self._pending = None
        self._state = TurnState.IDLE
        return True

    # ---------- Queries ----------

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def cards(self) -> Tuple[CardView, ...]:
        return tuple(CardView.of(c) for c in self._board)

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def pair_count(self) -> int:
        return self._board.pair_count

    @property
    def is_completed(self) -> bool:
        return self._board.all_matched()

    @property
    def elapsed_seconds(self) -> float:
        return self._stopwatch.elapsed()

    @property
    def elapsed_time(self) -> timedelta:
        return timedelta(seconds=self._stopwatch.elapsed())

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            cards=self.cards,
            attempts=self._attempts,
            elapsed_seconds=self._stopwatch.elapsed(),
            state=self._state,
            pair_count=self._board.pair_count,
        )

    def pretty(self) -> str:
        return self._board.pretty()

    # ---------- Scoring ----------

    def _whole_seconds(self) -> int:
        return int(math.floor(self._stopwatch.elapsed()))

    def calculate_score(self) -> int:
        if not self.is_completed:
            return 0
        return calculate_score(
            card_count=len(self._board),
            seconds=max(1, self._whole_seconds()),
            attempts=max(1, self._attempts),
        )

    def save_high_score(self, store: Optional[HighScoreStore], player_name: str) -> SaveResult:
        """
        Offers the finished game to store.

        An unfinished game is not persisted: the result carries a zero-score
        entry with the current stats, added=False and rank=-1.
        """
        if store is None:
            raise InvalidArgumentError("store is required to save a high score")

        if not self.is_completed:
            entry = HighScoreEntry(
                player_name=player_name,
                score=0,
                cards=len(self._board),
                attempts=self._attempts,
                duration_seconds=self._whole_seconds(),
                date_achieved=datetime.now(),
            )
            return SaveResult(added=False, rank=-1, entry=entry)

        entry = HighScoreEntry(
            player_name=player_name,
            score=self.calculate_score(),
            cards=len(self._board),
            attempts=max(1, self._attempts),
            duration_seconds=max(1, self._whole_seconds()),
            date_achieved=datetime.now(),
        )
        added, rank = store.add_or_update(entry)
        return SaveResult(added=added, rank=rank, entry=entry)

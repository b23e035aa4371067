from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .card import Card


class TurnState(str, Enum):
    IDLE = "idle"
    ONE_FLIPPED = "one_flipped"
    MISMATCH_PENDING = "mismatch_pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class CardView:
    """Read-only copy of a card handed out to presentation layers."""
    id: int
    value: str
    is_face_up: bool
    is_matched: bool

    @classmethod
    def of(cls, card: Card) -> 'CardView':
        return cls(id=card.id, value=card.value, is_face_up=card.is_face_up, is_matched=card.is_matched)


@dataclass(frozen=True)
class GameSnapshot:
    """Everything a presentation layer needs to draw one frame of the game."""
    cards: Tuple[CardView, ...]
    attempts: int
    elapsed_seconds: float
    state: TurnState
    pair_count: int

    @property
    def completed(self) -> bool:
        return self.state is TurnState.COMPLETED

    @property
    def pending_mismatch(self) -> bool:
        return self.state is TurnState.MISMATCH_PENDING

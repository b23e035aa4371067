from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

from .card import Card
from .deal import deal_values
from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class Board:
    """Ordered collection of cards. Every value on a populated board appears exactly twice."""

    def __init__(self) -> None:
        self._cards: List[Card] = []
        self._by_id: Dict[int, Card] = {}

    def initialize(self, pair_count: int, seed: Optional[int] = None) -> None:
        """Clears the board and deals pair_count shuffled pairs with positional ids 0..2N-1."""
        if isinstance(pair_count, bool) or not isinstance(pair_count, int) or pair_count < 1:
            raise InvalidArgumentError(f"pair_count must be an integer >= 1, got {pair_count!r}")
        values = deal_values(pair_count, seed)
        self._cards = [Card(id=i, value=v) for i, v in enumerate(values)]
        self._by_id = {c.id: c for c in self._cards}
        logger.debug("dealt %d cards (seed=%r)", len(self._cards), seed)

    @property
    def cards(self) -> List[Card]:
        return self._cards

    @property
    def pair_count(self) -> int:
        return len(self._cards) // 2

    def get(self, card_id: int) -> Optional[Card]:
        return self._by_id.get(card_id)

    def all_matched(self) -> bool:
        return bool(self._cards) and all(c.is_matched for c in self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def pretty(self, columns: Optional[int] = None) -> str:
        """Generates a human-readable grid: '#' face down, the value when face up, '[v]' when matched."""
        if not self._cards:
            return ""
        if columns is None:
            columns = 4 if len(self._cards) <= 16 else 6
        width = max(len(c.value) for c in self._cards) + 2
        id_width = len(str(len(self._cards) - 1))
        lines: List[str] = []
        for start in range(0, len(self._cards), columns):
            row: List[str] = []
            for card in self._cards[start:start + columns]:
                if card.is_matched:
                    face = f"[{card.value}]"
                elif card.is_face_up:
                    face = card.value
                else:
                    face = "#"
                row.append(f"{card.id:>{id_width}}:{face:<{width}}")
            lines.append(" ".join(row).rstrip())
        return "\n".join(lines)

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class Card:
    """A single card on the board. Matched cards stay face up for good."""
    id: int
    value: str
    is_face_up: bool = field(default=False)
    is_matched: bool = field(default=False)

    def flip(self) -> None:
        """Toggles the face-up flag; a matched card ignores the call."""
        if self.is_matched:
            return
        self.is_face_up = not self.is_face_up

    def match(self) -> None:
        if self.is_matched:
            return
        self.is_matched = True
        self.is_face_up = True


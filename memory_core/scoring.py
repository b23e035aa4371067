from __future__ import annotations


def calculate_score(card_count: int, seconds: int, attempts: int) -> int:
    """
    Score for a finished game.

    Larger boards are rewarded quadratically; time and attempts are linear
    penalties: floor(card_count**2 / (seconds * attempts) * 1000).
    Returns 0 if any argument is not positive. There is no upper bound.
    """
    if card_count <= 0 or seconds <= 0 or attempts <= 0:
        return 0
    # Integer arithmetic keeps the floor exact (e.g. 16000 // 30 == 533).
    return (card_count * card_count * 1000) // (seconds * attempts)

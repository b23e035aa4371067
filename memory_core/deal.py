from __future__ import annotations

import random
import string
from typing import List, Optional

# Single-character symbols first so small boards stay readable in a terminal.
SYMBOL_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def make_symbols(pair_count: int) -> List[str]:
    """Returns pair_count distinct symbols, falling back to 'S<n>' once the alphabet runs out."""
    symbols: List[str] = list(SYMBOL_ALPHABET[:pair_count])
    n = len(SYMBOL_ALPHABET)
    while len(symbols) < pair_count:
        symbols.append(f"S{n}")
        n += 1
    return symbols


def deal_values(pair_count: int, seed: Optional[int] = None) -> List[str]:
    """Creates the shuffled deck for pair_count pairs. The same seed always yields the same order."""
    rng = random.Random(seed)
    deck: List[str] = []
    for symbol in make_symbols(pair_count):
        deck.extend((symbol, symbol))
    # random.Random.shuffle is a Fisher-Yates shuffle driven by rng alone.
    rng.shuffle(deck)
    return deck

from __future__ import annotations

import argparse
import time
from datetime import timedelta
from typing import List, Optional, Sequence

from . import config
from .engine import Game
from .highscores import HighScoreStore, describe


def format_elapsed(t: timedelta) -> str:
    """MM:SS, minutes keep counting past 59."""
    total = int(t.total_seconds())
    return f"{total // 60:02d}:{total % 60:02d}"


def _parse_ids(text: str) -> Optional[List[int]]:
    sep = ',' if ',' in text else ' '
    try:
        return [int(t) for t in text.split(sep) if t.strip() != '']
    except ValueError:
        return None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Memory match: flip cards, find pairs, beat the high scores')
    parser.add_argument('--pairs', type=int, default=None, help='Number of pairs on the board (default: MEMORY_DEFAULT_PAIRS or 5)')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the deal')
    parser.add_argument('--name', default=None, help='Player name for the high score ledger')
    parser.add_argument('--db', default=None, help='High score JSON file (default: MEMORY_HIGHSCORES)')
    parser.add_argument('--delay-ms', type=int, default=None, help='How long a mismatched pair stays visible')
    parser.add_argument('--scores', action='store_true', help='Print the high score ledger and exit')
    parser.add_argument('--clear-scores', action='store_true', help='Empty the high score ledger and exit')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config.setup_logging()

    store = HighScoreStore(args.db or config.highscores_path(), capacity=config.highscore_capacity())

    if args.clear_scores:
        store.clear()
        print('High scores cleared.')
        return 0
    if args.scores:
        print(describe(store.get_top(store.capacity)))
        return 0

    pairs = args.pairs if args.pairs is not None else config.default_pairs()
    delay = args.delay_ms / 1000.0 if args.delay_ms is not None else config.mismatch_delay_seconds()

    game = Game()
    try:
        game.start(pairs, seed=args.seed)
    except ValueError as e:
        print(f'error: {e}')
        return 2

    print(f'{game.pair_count} pairs dealt. Enter a card id, or two ids like "3 7". q quits.')
    print(game.pretty())

    while not game.is_completed:
        text = input(f'[{format_elapsed(game.elapsed_time)} | attempts {game.attempts}] > ').strip()
        if text.lower() in ('q', 'quit', 'exit'):
            print('Bye.')
            return 0
        ids = _parse_ids(text)
        if not ids:
            print('Could not parse. Try again.')
            continue
        for card_id in ids:
            if not game.flip_card(card_id):
                print(f'Card {card_id} cannot be flipped right now.')
        print(game.pretty())
        if game.has_pending_mismatch:
            print('No match.')
            time.sleep(delay)
            game.resolve_pending_mismatch()
            print(game.pretty())

    score = game.calculate_score()
    print(f'All pairs found in {game.attempts} attempts and {format_elapsed(game.elapsed_time)}. Score: {score}')

    name = args.name or input('Your name for the high scores: ').strip() or 'Player'
    result = game.save_high_score(store, name)
    if result.added:
        print(f'New high score! Rank {result.rank}.')
    else:
        print('Not in the top list this time.')
    print(describe(store.get_top(store.capacity)))
    return 0

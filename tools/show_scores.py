from __future__ import annotations

import argparse
import json
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from game import HighScoreStore, describe  # type: ignore
from memory_core import config  # type: ignore


def main() -> None:
    ap = argparse.ArgumentParser(description='Dump the high score ledger')
    ap.add_argument('--db', default=None, help='Ledger JSON path (default: MEMORY_HIGHSCORES)')
    ap.add_argument('-n', type=int, default=None, help='How many entries to show')
    ap.add_argument('--json', action='store_true', help='Print raw JSON records instead of a table')
    args = ap.parse_args()

    store = HighScoreStore(args.db or config.highscores_path(), capacity=config.highscore_capacity())
    entries = store.get_top(args.n if args.n is not None else store.capacity)
    if args.json:
        print(json.dumps([e.to_json() for e in entries], indent=2))
    else:
        print(f'ledger: {os.path.abspath(store.path)}')
        print(describe(entries))


if __name__ == '__main__':
    main()

"""
Memory-match core Python package.

This package contains the game engine and the high-score ledger, kept free
of any presentation concerns so the Flask app, the CLI and the tests can all
drive the same logic.
Modules:
- card.py: Card
- deal.py: symbol generation and seeded shuffling
- board.py: Board
- scoring.py: calculate_score
- timer.py: Stopwatch
- state.py: TurnState, CardView, GameSnapshot
- engine.py: Game, SaveResult
- highscores.py: HighScoreEntry, HighScoreStore, AddResult
- config.py, errors.py, cli.py
"""

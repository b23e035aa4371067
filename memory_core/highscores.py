from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, NamedTuple

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10

# One lock per ledger file, shared by every store pointing at it.
_PATH_LOCKS: Dict[str, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: str) -> threading.Lock:
    key = os.path.normcase(os.path.abspath(path))
    with _PATH_LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = threading.Lock()
            _PATH_LOCKS[key] = lock
        return lock


def _ensure_dir(p: str) -> None:
    d = os.path.dirname(p)
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)


def _naive(dt: datetime) -> datetime:
    # Keep every timestamp comparable: aware values are converted to local naive time.
    if dt.tzinfo is not None:
        return dt.astimezone().replace(tzinfo=None)
    return dt


@dataclass(frozen=True)
class HighScoreEntry:
    """One result on the ledger. Score may be 0 for an attempt that did not qualify."""
    player_name: str
    score: int
    cards: int
    attempts: int
    duration_seconds: int
    date_achieved: datetime

    def to_json(self) -> Dict[str, Any]:
        return {
            "playerName": self.player_name,
            "score": int(self.score),
            "cards": int(self.cards),
            "attempts": int(self.attempts),
            "durationSeconds": int(self.duration_seconds),
            "dateAchieved": self.date_achieved.isoformat(),
        }

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> 'HighScoreEntry':
        """Builds an entry from its ledger record. Raises KeyError/ValueError/TypeError/OverflowError on bad input."""
        return cls(
            player_name=str(obj["playerName"]),
            score=int(obj["score"]),
            cards=int(obj["cards"]),
            attempts=int(obj["attempts"]),
            duration_seconds=int(obj["durationSeconds"]),
            date_achieved=_naive(datetime.fromisoformat(str(obj["dateAchieved"]))),
        )


class AddResult(NamedTuple):
    added: bool
    rank: int


def sort_key(entry: HighScoreEntry):
    """Score descending, then shorter duration, then earlier achievement."""
    return (-entry.score, entry.duration_seconds, _naive(entry.date_achieved))


def sort_and_trim(entries: List[HighScoreEntry], capacity: int = DEFAULT_CAPACITY) -> List[HighScoreEntry]:
    # sorted() is stable: on a full tie the entry already on the ledger keeps its place.
    return sorted(entries, key=sort_key)[:max(0, capacity)]


class HighScoreStore:
    """
    Top list of high scores backed by a human-readable JSON file.

    A missing or unreadable file is an empty ledger. Each add is a locked
    read-modify-write, and the file is replaced atomically so readers never
    see a half-written ledger.
    """

    def __init__(self, path: str, capacity: int = DEFAULT_CAPACITY) -> None:
        self.path = path
        self.capacity = int(capacity)
        self._lock = _lock_for(path)

    def _load(self) -> List[HighScoreEntry]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.debug("ignoring unreadable ledger %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            logger.debug("ignoring ledger %s: top-level value is not a list", self.path)
            return []
        entries: List[HighScoreEntry] = []
        for rec in data:
            if not isinstance(rec, dict):
                continue
            try:
                entries.append(HighScoreEntry.from_json(rec))
            except (KeyError, ValueError, TypeError, OverflowError):
                logger.debug("skipping malformed ledger record %r", rec)
        return entries

    def _save(self, entries: List[HighScoreEntry]) -> None:
        _ensure_dir(self.path)
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, tmp_path = tempfile.mkstemp(prefix=".highscores-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([e.to_json() for e in entries], f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get_top(self, n: int = DEFAULT_CAPACITY) -> List[HighScoreEntry]:
        """Returns at most min(n, capacity) entries in ledger order. Never raises on a bad file."""
        if n <= 0:
            return []
        with self._lock:
            entries = self._load()
        return sort_and_trim(entries, min(n, self.capacity))

    def add_or_update(self, entry: HighScoreEntry) -> AddResult:
        """
        Offers entry to the ledger and persists the result.

        The ledger is rewritten even when the candidate does not make the
        cut. Returns whether it survived and its 1-based rank (-1 if not).
        """
        with self._lock:
            ledger = sort_and_trim(self._load(), self.capacity)
            ledger.append(entry)
            ledger = sort_and_trim(ledger, self.capacity)
            rank = -1
            for i, e in enumerate(ledger):
                if e is entry:
                    rank = i + 1
                    break
            self._save(ledger)
        added = rank != -1
        logger.info(
            "high score %d for %r %s (rank %d)",
            entry.score, entry.player_name, "added" if added else "rejected", rank,
        )
        return AddResult(added=added, rank=rank)

    def clear(self) -> None:
        with self._lock:
            try:
                os.remove(self.path)
            except FileNotFoundError:
                pass
        logger.info("cleared ledger %s", self.path)


def describe(entries: List[HighScoreEntry]) -> str:
    """Formats a ledger as a numbered text table."""
    if not entries:
        return "No high scores yet!"
    lines = ["===== HIGH SCORES ====="]
    for i, e in enumerate(entries):
        lines.append(
            f"{i + 1:>2}. {e.player_name}: {e.score} "
            f"(cards: {e.cards}, attempts: {e.attempts}, time: {e.duration_seconds}s, "
            f"{e.date_achieved:%Y-%m-%d %H:%M})"
        )
    return "\n".join(lines)

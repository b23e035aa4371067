from __future__ import annotations

import logging
import os
import sys
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

# Ensure package imports work when executed directly from repo root
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from memory_core import config
from memory_core.engine import Game
from memory_core.errors import InvalidArgumentError
from memory_core.highscores import HighScoreEntry, HighScoreStore
from memory_core.state import GameSnapshot

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.setdefault("HIGHSCORES_PATH", config.highscores_path())
app.config.setdefault("HIGHSCORE_CAPACITY", config.highscore_capacity())
app.config.setdefault("MAX_SESSIONS", config.max_sessions())


# ---------- Sessions ----------

@dataclass
class _Session:
    game: Game
    lock: threading.Lock = field(default_factory=threading.Lock)


# Each session owns its Game; nothing mutable is shared between sessions.
_SESSIONS: "OrderedDict[str, _Session]" = OrderedDict()
_SESSIONS_LOCK = threading.Lock()


def _register(game: Game) -> str:
    sid = uuid.uuid4().hex
    with _SESSIONS_LOCK:
        _SESSIONS[sid] = _Session(game=game)
        while len(_SESSIONS) > int(app.config["MAX_SESSIONS"]):
            evicted, _ = _SESSIONS.popitem(last=False)
            logger.debug("evicted session %s", evicted)
    return sid


def _lookup(sid: Any) -> Optional[_Session]:
    if not isinstance(sid, str):
        return None
    with _SESSIONS_LOCK:
        sess = _SESSIONS.get(sid)
        if sess is not None:
            _SESSIONS.move_to_end(sid)
        return sess


def _store() -> HighScoreStore:
    return HighScoreStore(app.config["HIGHSCORES_PATH"], capacity=int(app.config["HIGHSCORE_CAPACITY"]))


# ---------- JSON helpers ----------

def state_to_json(s: GameSnapshot) -> Dict[str, Any]:
    """Face-down values are hidden so a client cannot peek."""
    return {
        "cards": [
            {
                "id": int(c.id),
                "value": c.value if (c.is_face_up or c.is_matched) else None,
                "isFaceUp": bool(c.is_face_up),
                "isMatched": bool(c.is_matched),
            }
            for c in s.cards
        ],
        "attempts": int(s.attempts),
        "elapsedSeconds": round(float(s.elapsed_seconds), 3),
        "completed": s.completed,
        "pendingMismatch": s.pending_mismatch,
        "turnState": s.state.value,
        "pairCount": int(s.pair_count),
    }


def entry_to_json(e: HighScoreEntry) -> Dict[str, Any]:
    return e.to_json()


def _json_body() -> Dict[str, Any]:
    """Request body as a dict; anything else (array, scalar, bad JSON) reads as empty."""
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else {}


def _int_field(body: Dict[str, Any], key: str) -> int:
    val = body.get(key)
    if isinstance(val, bool) or not isinstance(val, (int, str)):
        raise ValueError(f"{key} must be an integer")
    return int(val)


def _error(message: str, status: int) -> Tuple[Any, int]:
    return jsonify({"ok": False, "error": message}), status


def _session_or_404(sid: Any) -> Tuple[Optional[_Session], Optional[Tuple[Any, int]]]:
    sess = _lookup(sid)
    if sess is None:
        return None, _error("unknown session", 404)
    return sess, None


@app.errorhandler(InvalidArgumentError)
def _invalid_argument(e: InvalidArgumentError) -> Any:
    return _error(str(e), 400)


# ---------- Game API ----------

@app.get("/api/health")
def api_health() -> Any:
    with _SESSIONS_LOCK:
        count = len(_SESSIONS)
    return jsonify({"ok": True, "sessions": count})


@app.post("/api/new")
def api_new() -> Any:
    body = _json_body()
    try:
        pairs = _int_field(body, "pairs") if "pairs" in body else config.default_pairs()
        seed = _int_field(body, "seed") if body.get("seed") is not None else None
    except ValueError as e:
        return _error(str(e), 400)
    game = Game()
    game.start(pairs, seed=seed)
    sid = _register(game)
    return jsonify({"ok": True, "sessionId": sid, "state": state_to_json(game.snapshot())})


@app.get("/api/state/<sid>")
def api_state(sid: str) -> Any:
    sess, err = _session_or_404(sid)
    if err:
        return err
    with sess.lock:
        snap = sess.game.snapshot()
    return jsonify({"ok": True, "state": state_to_json(snap)})


@app.post("/api/flip")
def api_flip() -> Any:
    body = _json_body()
    sess, err = _session_or_404(body.get("sessionId"))
    if err:
        return err
    try:
        card_id = _int_field(body, "cardId")
    except ValueError as e:
        return _error(str(e), 400)
    with sess.lock:
        accepted = sess.game.flip_card(card_id)
        snap = sess.game.snapshot()
    return jsonify({"ok": True, "accepted": accepted, "state": state_to_json(snap)})


@app.post("/api/resolve")
def api_resolve() -> Any:
    body = _json_body()
    sess, err = _session_or_404(body.get("sessionId"))
    if err:
        return err
    with sess.lock:
        resolved = sess.game.resolve_pending_mismatch()
        snap = sess.game.snapshot()
    return jsonify({"ok": True, "resolved": resolved, "state": state_to_json(snap)})


@app.get("/api/score/<sid>")
def api_score(sid: str) -> Any:
    sess, err = _session_or_404(sid)
    if err:
        return err
    with sess.lock:
        score = sess.game.calculate_score()
        completed = sess.game.is_completed
    return jsonify({"ok": True, "score": score, "completed": completed})


# ---------- High score API ----------

@app.get("/api/highscores")
def api_highscores() -> Any:
    try:
        n = int(request.args.get("n", app.config["HIGHSCORE_CAPACITY"]))
    except ValueError:
        return _error("n must be an integer", 400)
    entries = _store().get_top(n)
    return jsonify({"ok": True, "entries": [entry_to_json(e) for e in entries]})


@app.post("/api/highscores/save")
def api_highscores_save() -> Any:
    body = _json_body()
    sess, err = _session_or_404(body.get("sessionId"))
    if err:
        return err
    name = str(body.get("playerName") or "").strip()
    if not name:
        return _error("playerName required", 400)
    with sess.lock:
        result = sess.game.save_high_score(_store(), name)
    return jsonify({
        "ok": True,
        "added": bool(result.added),
        "rank": int(result.rank),
        "entry": entry_to_json(result.entry),
    })


@app.post("/api/highscores/clear")
def api_highscores_clear() -> Any:
    _store().clear()
    return jsonify({"ok": True})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    config.setup_logging()
    debug = config.debug_enabled() or os.getenv("FLASK_DEBUG", "0").lower() in ("1", "true", "yes", "on")
    port = int(os.getenv("PORT", "5000"))
    app.run(host="127.0.0.1", port=port, debug=debug)

"""
project: Cavern Explorer
module: cavern_api.py
License: MIT

Cavern Explorer game API.

Games live in a small in-process store keyed by a random id; nothing is
persisted. Each game gets its own seeded random source so a given seed and
config always produce the same cave.

    POST /api/cavern/games                 {"seed"?, "config"?} -> 201 new game
    GET  /api/cavern/games/<gid>           full game (grid rows, state, stats)
    POST /api/cavern/games/<gid>/move      {"direction": "up|down|left|right"}
    POST /api/cavern/games/<gid>/break     {"row": int, "col": int}
    POST /api/cavern/games/<gid>/reset     {"config"?} merged over the current config
    GET  /api/cavern/games/<gid>/stats     tile counts and region count
"""
import random
import threading
import uuid
from typing import NamedTuple

from flask import Blueprint, current_app, jsonify, request

from cavern.cave import CavernGame, coerce_seed, from_mapping
from cavern.cave.game import DIRECTIONS
from cavern.logging_utils import get_logger

bp_cavern = Blueprint("cavern", __name__)

log = get_logger("cavern.api")


class GameEntry(NamedTuple):
    seed: int
    game: CavernGame
    lock: threading.Lock


# gid -> GameEntry. The store lock covers the dict only; each game has its own
# lock held for every read or mutation of that game.
_games = {}
_games_lock = threading.Lock()


def _store_game(seed, game):
    gid = uuid.uuid4().hex[:12]
    limit = current_app.config.get("CAVERN_MAX_GAMES", 32)
    with _games_lock:
        _games[gid] = GameEntry(seed, game, threading.Lock())
        while len(_games) > limit:
            oldest = next(iter(_games))
            _games.pop(oldest, None)
    return gid


def _get_game(gid):
    with _games_lock:
        return _games.get(gid)


def _game_payload(gid, seed, game, include_grid=True):
    data = game.to_dict(include_grid=include_grid)
    data["id"] = gid
    data["seed"] = seed
    data["regionCount"] = game.region_count
    return data


def _not_found():
    return jsonify({"error": "game not found"}), 404


@bp_cavern.route("/api/cavern/games", methods=["POST"])
def new_game():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object body required"}), 400
    try:
        seed = coerce_seed(data.get("seed"))
        config = from_mapping(data.get("config"))
    except (TypeError, ValueError, AttributeError) as e:
        return jsonify({"error": str(e)}), 400
    game = CavernGame(config, random.Random(seed))
    gid = _store_game(seed, game)
    log.info(event="cavern_game_created", gid=gid, seed=seed, rows=config.rows, cols=config.cols)
    return jsonify(_game_payload(gid, seed, game)), 201


@bp_cavern.route("/api/cavern/games/<gid>", methods=["GET"])
def get_game(gid):
    entry = _get_game(gid)
    if entry is None:
        return _not_found()
    with entry.lock:
        return jsonify(_game_payload(gid, entry.seed, entry.game))


@bp_cavern.route("/api/cavern/games/<gid>/move", methods=["POST"])
def move(gid):
    entry = _get_game(gid)
    if entry is None:
        return _not_found()
    data = request.get_json(silent=True) or {}
    direction = data.get("direction") if isinstance(data, dict) else None
    if direction not in DIRECTIONS:
        return jsonify({"error": f"direction must be one of {', '.join(DIRECTIONS)}"}), 400
    with entry.lock:
        moved = entry.game.move(direction)
        return jsonify({"moved": moved, "state": entry.game.get_game_state().to_dict()})


@bp_cavern.route("/api/cavern/games/<gid>/break", methods=["POST"])
def break_wall(gid):
    entry = _get_game(gid)
    if entry is None:
        return _not_found()
    data = request.get_json(silent=True) or {}
    row = data.get("row") if isinstance(data, dict) else None
    col = data.get("col") if isinstance(data, dict) else None
    if any(isinstance(v, bool) or not isinstance(v, int) for v in (row, col)):
        return jsonify({"error": "row and col must be integers"}), 400
    with entry.lock:
        game = entry.game
        broken = game.handle_click(row, col)
        cell = game.get_cell(row, col)
        return jsonify(
            {
                "broken": broken,
                "cell": cell.to_dict() if cell is not None else None,
                "state": game.get_game_state().to_dict(),
            }
        )


@bp_cavern.route("/api/cavern/games/<gid>/reset", methods=["POST"])
def reset(gid):
    entry = _get_game(gid)
    if entry is None:
        return _not_found()
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object body required"}), 400
    with entry.lock:
        game = entry.game
        try:
            config = from_mapping(data.get("config"), base=game.config)
        except (TypeError, ValueError, AttributeError) as e:
            return jsonify({"error": str(e)}), 400
        game.reset(**config.to_dict())
        return jsonify(_game_payload(gid, entry.seed, game))


@bp_cavern.route("/api/cavern/games/<gid>/stats", methods=["GET"])
def stats(gid):
    entry = _get_game(gid)
    if entry is None:
        return _not_found()
    with entry.lock:
        return jsonify(entry.game.get_stats().to_dict())

"""
project: Cavern Explorer
module: high_scores.py
License: MIT

High score CRUD API.

    GET    /api/highscores        top entries by score (descending)
    GET    /api/highscores/<id>   single entry or 404
    POST   /api/highscores        {"playerName": str, "score": int} -> 201
    DELETE /api/highscores/<id>   204 or 404

The timestamp is always assigned by the server; any client value is ignored.
"""
import logging

from flask import Blueprint, current_app, jsonify, request, url_for

from cavern import db
from cavern.models.high_score import HighScore

bp_high_scores = Blueprint("high_scores", __name__)

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 80


def _parse_score_payload(data):
    """Return (player_name, score) or raise ValueError with a client-facing message."""
    if not isinstance(data, dict):
        raise ValueError("JSON object body required")
    name = data.get("playerName", data.get("player_name"))
    if not isinstance(name, str) or not name.strip():
        raise ValueError("playerName is required")
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"playerName must be at most {MAX_NAME_LENGTH} characters")
    score = data.get("score")
    if isinstance(score, bool) or not isinstance(score, int):
        raise ValueError("score must be an integer")
    return name, score


@bp_high_scores.route("/api/highscores", methods=["GET"])
def list_high_scores():
    limit = current_app.config.get("HIGH_SCORES_LIMIT", 10)
    rows = (
        HighScore.query.order_by(HighScore.score.desc(), HighScore.achieved_at.asc(), HighScore.id.asc())
        .limit(limit)
        .all()
    )
    return jsonify([r.to_dict() for r in rows])


@bp_high_scores.route("/api/highscores/<int:score_id>", methods=["GET"])
def get_high_score(score_id: int):
    row = db.session.get(HighScore, score_id)
    if row is None:
        return jsonify({"error": "not found"}), 404
    return jsonify(row.to_dict())


@bp_high_scores.route("/api/highscores", methods=["POST"])
def create_high_score():
    data = request.get_json(silent=True)
    try:
        name, score = _parse_score_payload(data)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    row = HighScore(player_name=name, score=score)
    db.session.add(row)
    db.session.commit()
    logger.info("High score recorded id=%s player=%s score=%s", row.id, name, score)
    resp = jsonify(row.to_dict())
    resp.status_code = 201
    resp.headers["Location"] = url_for("high_scores.get_high_score", score_id=row.id)
    return resp


@bp_high_scores.route("/api/highscores/<int:score_id>", methods=["DELETE"])
def delete_high_score(score_id: int):
    row = db.session.get(HighScore, score_id)
    if row is None:
        return jsonify({"error": "not found"}), 404
    db.session.delete(row)
    db.session.commit()
    return "", 204

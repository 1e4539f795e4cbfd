"""
project: Cavern Explorer
module: __init__.py
License: MIT

Flask application factory and core extensions setup.

This module wires together the Flask app and SQLAlchemy. Configuration is
sourced from environment variables with reasonable defaults for development.
A local `instance/` directory is used for SQLite and other runtime data.
"""

import logging
import os
import sqlite3
import uuid
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Load .env if present so `SECRET_KEY`, `DATABASE_URL`, etc. can be supplied
# without exporting shell variables during development.
load_dotenv()

# Instance-relative config so ./instance holds local data (e.g., SQLite at ./instance/cavern.db)
app = Flask(__name__, instance_relative_config=True)

os.makedirs(app.instance_path, exist_ok=True)

secret_key = os.getenv("SECRET_KEY", "dev-secret-change-me")
database_url = os.getenv("DATABASE_URL")

# During pytest runs, isolate to a separate test database
if not database_url:
    is_pytest = bool(os.getenv("PYTEST_CURRENT_TEST"))
    db_filename = "cavern_test.db" if is_pytest else "cavern.db"
    db_path = Path(app.instance_path) / db_filename
    # Use POSIX path for SQLAlchemy URI compatibility across OS
    database_url = f"sqlite:///{db_path.as_posix()}"

app.config.update(
    SECRET_KEY=secret_key,
    SQLALCHEMY_DATABASE_URI=database_url,
    SQLALCHEMY_TRACK_MODIFICATIONS=False,
    JSON_SORT_KEYS=False,
    # Cavern game feature flags / limits
    CAVERN_ENABLE_GENERATION_METRICS=bool(os.getenv("CAVERN_ENABLE_GENERATION_METRICS", "1") == "1"),
    CAVERN_MAX_GAMES=int(os.getenv("CAVERN_MAX_GAMES", "32")),
    HIGH_SCORES_LIMIT=int(os.getenv("HIGH_SCORES_LIMIT", "10")),
)

engine_opts = {}
if database_url.startswith("sqlite:///"):
    engine_opts["connect_args"] = {
        "timeout": 10,  # busy timeout (seconds) for sqlite
        "check_same_thread": False,
    }
db = SQLAlchemy(app, session_options={"expire_on_commit": False}, engine_options=engine_opts)


@event.listens_for(Engine, "connect")
def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: D401
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=10000")  # 10 seconds
    cursor.close()


# Register HTTP blueprints (import after app/db created)
from cavern.routes.cavern_api import bp_cavern  # noqa: E402
from cavern.routes.high_scores import bp_high_scores  # noqa: E402

app.register_blueprint(bp_high_scores)
app.register_blueprint(bp_cavern)


def create_app():
    """Return the Flask app instance with its tables created."""
    with app.app_context():
        db.create_all()
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal server error", "error_id": error_id}), 500

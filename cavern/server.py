"""
project: Cavern Explorer
module: server.py
License: MIT

Server bootstrap helpers: table creation, logging setup, and the dev server.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from cavern import app, db


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Ensure DB tables exist, configure logging, and run the Flask server."""
    with app.app_context():
        db.create_all()
        _configure_logging()
    try:
        print(f"[INFO] Starting Flask server on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging():
    """Configure logging to both console and a rotating file in instance/.

    The file path will be instance/app.log. Retains a few backups to avoid growth.
    """
    log_dir = app.instance_path
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, "app.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    root.addHandler(file_handler)
    root.addHandler(console)

"""Cavern Explorer CLI entry point.

Provides subcommands for running the web server, printing a freshly
generated cave, and listing the high score table. Accepts configuration via
flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
_COLOR_ENABLED = True

# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    if not sys.stdout.isatty():  # pragma: no cover - environment dependent
        _COLOR_ENABLED = False
except (AttributeError, ValueError):  # pragma: no cover
    _COLOR_ENABLED = False


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()

CELL_COLORS = {
    "#": Fore.WHITE + Style.DIM,
    ".": Fore.YELLOW,
    "~": Fore.BLUE + Style.BRIGHT,
    "*": Fore.MAGENTA + Style.BRIGHT,
    "E": Fore.GREEN,
    "@": Fore.RED + Style.BRIGHT,
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Cavern Explorer

    Run the Flask web server, print a procedurally generated cave, or list
    the high score table. Configuration can be provided via CLI flags or
    environment variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST            Bind address for the web server (default: 0.0.0.0)
          PORT            Port for the web server (default: 5000)
          DATABASE_URL    SQLAlchemy database URI (default: sqlite:///instance/cavern.db)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a 20x60 cave for a fixed seed
          python run.py cave --rows 20 --cols 60 --seed 42

          # Show the top ten scores
          python run.py scores
        """
    )

    parser = argparse.ArgumentParser(
        prog="Cavern",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Cavern Explorer {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the Flask web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask server (high score and cavern game APIs)",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/cavern.db)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # cave subcommand
    cave_parser = subparsers.add_parser(
        "cave",
        help="Generate a cave and print it as text",
        formatter_class=argparse.RawTextHelpFormatter,
        description=dedent(
            """
            Generate a cave and print it. Legend:
              #  wall     .  floor     ~  water
              *  crystal  @  player start
            """
        ),
    )
    cave_parser.add_argument("--rows", type=int, default=None, help="Grid rows (default: 30)")
    cave_parser.add_argument("--cols", type=int, default=None, help="Grid columns (default: 40)")
    cave_parser.add_argument("--seed", default=None, help="Seed (int or string) for a reproducible cave")
    cave_parser.add_argument("--fill", dest="fill_probability", type=float, default=None, help="Initial wall probability")
    cave_parser.add_argument("--smooth", dest="smoothing_iterations", type=int, default=None, help="Smoothing passes")
    cave_parser.add_argument("--min-region", dest="min_region_size", type=int, default=None, help="Smallest region kept")
    cave_parser.add_argument("--water", dest="water_chance", type=float, default=None, help="Water chance on open floor")
    cave_parser.add_argument("--crystal", dest="crystal_chance", type=float, default=None, help="Crystal chance on walls")
    cave_parser.add_argument("--stats", action="store_true", help="Print generation metrics after the map")
    cave_parser.set_defaults(command="cave")

    # scores subcommand
    scores_parser = subparsers.add_parser(
        "scores",
        help="List the high score table",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    scores_parser.add_argument("--limit", type=int, default=10, help="Number of entries (default: 10)")
    scores_parser.set_defaults(command="scores")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _colorize(line: str) -> str:
    if not _COLOR_ENABLED:
        return line
    return "".join(f"{CELL_COLORS.get(ch, '')}{ch}{Style.RESET_ALL}" for ch in line)


def _run_cave(args) -> int:
    import random

    from cavern.cave import FLOOR, CaveGenerator, coerce_seed, from_mapping
    from cavern.cave.render import render_rows

    overrides = {
        k: getattr(args, k)
        for k in (
            "rows",
            "cols",
            "fill_probability",
            "smoothing_iterations",
            "min_region_size",
            "water_chance",
            "crystal_chance",
        )
    }
    try:
        config = from_mapping(overrides)
        seed = coerce_seed(args.seed)
    except ValueError as e:
        print(f"[ERROR] {e}")
        return 1
    gen = CaveGenerator(config, random.Random(seed), seed=seed, enable_metrics=True)
    grid = gen.generate()
    start = None
    for row, col in grid.coords():
        if grid.cells[row][col].type == FLOOR:
            start = (row, col)
            break
    for line in render_rows(grid, start):
        print(_colorize(line))
    if args.stats:
        print()
        print(f"seed={seed} regions={gen.region_count}")
        for k, v in gen.metrics.items():
            if k != "phase_ms":
                print(f"  {k}: {v}")
    return 0


def _run_scores(args) -> int:
    from cavern import create_app
    from cavern.models.high_score import HighScore

    app = create_app()
    with app.app_context():
        rows = HighScore.query.order_by(HighScore.score.desc(), HighScore.id.asc()).limit(args.limit).all()
        if not rows:
            print("[EMPTY] No high scores yet.")
            return 0
        for rank, r in enumerate(rows, start=1):
            print(f"{rank:>3}. {r.player_name:<20} {r.score:>8}  {r.achieved_at:%Y-%m-%d %H:%M}")
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "cave":
        return _run_cave(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    env_db = os.getenv("DATABASE_URL")

    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    db_uri_cli = getattr(args, "db_uri", None)

    # Make DATABASE_URL available to the Flask app BEFORE importing it
    if db_uri_cli:
        os.environ["DATABASE_URL"] = db_uri_cli

    if mode == "scores":
        return _run_scores(args)

    db_banner = db_uri_cli or env_db or "auto (instance/cavern.db)"

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from cavern.logging_utils import log
    from cavern.server import start_server

    title = f"{Fore.CYAN}{Style.BRIGHT}Cavern Explorer{Style.RESET_ALL}" if _COLOR_ENABLED else "Cavern Explorer"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Database:'):12} {value(db_banner)}",
        divider,
        "",
    ]
    print("\n".join(lines))

    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
    log.info(event="startup", host=host, port=port, db=db_banner, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))

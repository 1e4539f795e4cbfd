"""Public cave package interface."""

from .cells import Cell
from .config import DEFAULT_CONFIG, CaveConfig, from_mapping
from .game import CaveStats, CavernGame, GameState
from .generator import CaveGenerator, generate_cave
from .grid import Grid
from .seeds import coerce_seed
from .tiles import CRYSTAL, ENTRANCE, FLOOR, WALL, WATER  # noqa: F401

__all__ = [
    "Cell",
    "Grid",
    "CaveConfig",
    "DEFAULT_CONFIG",
    "from_mapping",
    "CaveGenerator",
    "generate_cave",
    "CavernGame",
    "GameState",
    "CaveStats",
    "coerce_seed",
    "WALL",
    "FLOOR",
    "WATER",
    "CRYSTAL",
    "ENTRANCE",
]

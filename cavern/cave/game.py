"""Cavern Explorer game controller.

Consumes a generated grid and owns everything that happens afterwards:
player position, gem bookkeeping, death by water, winning, and wall
breaking. All actions return False (and change nothing) when refused.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from ..logging_utils import get_logger
from .cells import Cell
from .config import DEFAULT_CONFIG, CaveConfig
from .generator import CaveGenerator
from .grid import Grid
from .render import render_rows
from .tiles import CRYSTAL, FLOOR, WALL, WATER

log = get_logger("cavern.cave.game")

DIRECTIONS = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


@dataclass
class GameState:
    player_pos: Tuple[int, int]
    collected_gems: int
    total_gems: int
    is_dead: bool
    has_won: bool

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["player_pos"] = list(self.player_pos)
        return d


@dataclass
class CaveStats:
    total_floor: int
    total_wall: int
    total_water: int
    total_crystals: int
    region_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CavernGame:
    def __init__(self, config: CaveConfig = DEFAULT_CONFIG, rng=None):
        self.config = config
        self.rng = rng
        self.generator = CaveGenerator(config, rng)
        self.grid: Grid = Grid([])
        self._player_pos: Tuple[int, int] = (0, 0)
        self._collected_gems = 0
        self._total_gems = 0
        self._is_dead = False
        self._has_won = False
        self.generate()

    def generate(self) -> None:
        """Generate a new cave and place the player."""
        self.start(self.generator.generate())

    def start(self, grid: Grid) -> None:
        """Take ownership of a finished grid and reset all player state."""
        self.grid = grid
        self._collected_gems = 0
        self._is_dead = False
        self._has_won = False
        self._total_gems = self.grid.count_types()[CRYSTAL]
        self._place_player()
        log.debug(event="cavern_new_game", gems=self._total_gems, player=self._player_pos)

    def _place_player(self) -> None:
        # First floor cell in row-major order; stays at (0, 0) on an all-rock grid
        self._player_pos = (0, 0)
        for row, col in self.grid.coords():
            if self.grid.cells[row][col].type == FLOOR:
                self._player_pos = (row, col)
                return

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def player_pos(self) -> Tuple[int, int]:
        return self._player_pos

    @property
    def region_count(self) -> int:
        return self.generator.region_count

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        return self.grid.get_cell(row, col)

    def has_player(self, row: int, col: int) -> bool:
        return self._player_pos == (row, col)

    def _finished(self) -> bool:
        return self._is_dead or self._has_won

    def move(self, direction: str) -> bool:
        """Step the player one cell. Water kills, crystals are collected."""
        if self._finished():
            return False
        delta = DIRECTIONS.get(direction)
        if delta is None:
            return False
        row, col = self._player_pos[0] + delta[0], self._player_pos[1] + delta[1]
        cell = self.get_cell(row, col)
        if cell is None or cell.type == WALL:
            return False
        self._player_pos = (row, col)
        if cell.type == WATER:
            self._is_dead = True
            log.info(event="cavern_player_drowned", row=row, col=col)
            return True
        if cell.type == CRYSTAL:
            self._collected_gems += 1
            cell.type = FLOOR
            if self._collected_gems >= self._total_gems:
                self._has_won = True
                log.info(event="cavern_won", gems=self._collected_gems)
        return True

    def handle_click(self, row: int, col: int) -> bool:
        """Disintegrate a wall or crystal orthogonally adjacent to the player."""
        if self._finished():
            return False
        cell = self.get_cell(row, col)
        if cell is None or cell.type not in (WALL, CRYSTAL):
            return False
        if self.grid.is_border(row, col):
            return False
        dr = abs(row - self._player_pos[0])
        dc = abs(col - self._player_pos[1])
        if dr + dc != 1:
            return False
        here = self.get_cell(*self._player_pos)
        cell.type = FLOOR
        cell.region = here.region if here is not None and here.region > 0 else 1
        return True

    def get_game_state(self) -> GameState:
        return GameState(
            player_pos=self._player_pos,
            collected_gems=self._collected_gems,
            total_gems=self._total_gems,
            is_dead=self._is_dead,
            has_won=self._has_won,
        )

    def get_stats(self) -> CaveStats:
        counts = self.grid.count_types()
        return CaveStats(
            total_floor=counts[FLOOR],
            total_wall=counts[WALL],
            total_water=counts[WATER],
            total_crystals=counts[CRYSTAL],
            region_count=len(self.grid.region_ids()),
        )

    def reset(self, **overrides) -> None:
        """Start over, optionally merging config overrides over the current config."""
        if overrides:
            self.config = self.config.merged(**overrides)
            self.generator = CaveGenerator(self.config, self.rng)
        self.generate()

    def render(self):
        return render_rows(self.grid, self._player_pos)

    def to_dict(self, include_grid: bool = True) -> Dict[str, Any]:
        data = {
            "config": self.config.to_dict(),
            "state": self.get_game_state().to_dict(),
            "stats": self.get_stats().to_dict(),
        }
        if include_grid:
            data["grid"] = self.render()
        return data


__all__ = ["CavernGame", "GameState", "CaveStats", "DIRECTIONS"]

"""Feature decoration: water pools in open floor, crystals on cave walls.

Classification reads the input grid only; results are written to a copy, so a freshly
placed water or crystal cell never feeds a neighbor count in the same pass.

Crystal candidacy counts all eight neighbors, but a crystal only takes the
region of an orthogonal floor neighbor, so it always belongs to that
4-connected region. A candidate whose floor neighbors are all diagonal stays
wall.
"""
from __future__ import annotations

import random
from typing import Optional

from .config import CaveConfig
from .grid import Grid
from .tiles import CRYSTAL, FLOOR, WALL, WATER

WATER_MIN_FLOOR_NEIGHBORS = 6
CRYSTAL_FLOOR_NEIGHBORS = (1, 3)


def _orthogonal_floor_region(grid: Grid, row: int, col: int) -> Optional[int]:
    for _r, _c, cell in grid.neighbors(row, col, diagonal=False):
        if cell.type == FLOOR and cell.region > 0:
            return cell.region
    return None


def decorate(grid: Grid, config: CaveConfig, rng=None) -> Grid:
    """Return a decorated copy of ``grid``.

    * FLOOR with >= 6 floor neighbors -> WATER with ``water_chance`` (keeps its region).
    * Interior WALL with 1..3 floor neighbors -> CRYSTAL with ``crystal_chance``,
      joining the region of its first orthogonal floor neighbor.
    """
    if rng is None:
        rng = random
    out = grid.copy()
    lo, hi = CRYSTAL_FLOOR_NEIGHBORS
    for row in range(grid.rows):
        for col in range(grid.cols):
            cell = grid.cells[row][col]
            if cell.type == FLOOR:
                if grid.count_neighbors(row, col, FLOOR) >= WATER_MIN_FLOOR_NEIGHBORS:
                    if rng.random() < config.water_chance:
                        out.cells[row][col].type = WATER
            elif cell.type == WALL and not grid.is_border(row, col):
                floors = grid.count_neighbors(row, col, FLOOR)
                if lo <= floors <= hi and rng.random() < config.crystal_chance:
                    region = _orthogonal_floor_region(grid, row, col)
                    if region is None:
                        # no labeled orthogonal floor; a crystal here would be its own region
                        continue
                    target = out.cells[row][col]
                    target.type = CRYSTAL
                    target.region = region
    return out


__all__ = ["decorate"]

"""Initial noise fill and cellular automaton smoothing."""
from __future__ import annotations

import random

from .cells import Cell
from .config import CaveConfig
from .grid import Grid
from .tiles import FLOOR, WALL


def initial_fill(config: CaveConfig, rng=None) -> Grid:
    """Random wall/floor noise with a solid wall border. Regions start at 0."""
    if rng is None:
        rng = random
    rows, cols = config.rows, config.cols
    cells = []
    for row in range(rows):
        line = []
        for col in range(cols):
            border = row == 0 or col == 0 or row == rows - 1 or col == cols - 1
            # Border cells never consume a draw so interior noise is independent of grid edges
            is_wall = border or rng.random() < config.fill_probability
            line.append(Cell(WALL if is_wall else FLOOR, 0))
        cells.append(line)
    return Grid(cells)


def count_adjacent_walls(grid: Grid, row: int, col: int) -> int:
    """Walls in the 3x3 block centered on (row, col), the cell itself included.

    Out-of-bounds positions count as wall so edge cells trend toward rock.
    """
    count = 0
    for dr in (-1, 0, 1):
        for dc in (-1, 0, 1):
            r, c = row + dr, col + dc
            if r < 0 or r >= grid.rows or c < 0 or c >= grid.cols:
                count += 1
            elif grid.cells[r][c].type == WALL:
                count += 1
    return count


def smooth_step(grid: Grid) -> Grid:
    """One simultaneous automaton pass: >4 walls -> wall, <4 -> floor, ==4 keeps its type."""
    new_cells = []
    for row in range(grid.rows):
        line = []
        for col in range(grid.cols):
            walls = count_adjacent_walls(grid, row, col)
            if walls > 4 or grid.is_border(row, col):
                new_type = WALL
            elif walls < 4:
                new_type = FLOOR
            else:
                new_type = WALL if grid.cells[row][col].type == WALL else FLOOR
            line.append(Cell(new_type, 0))
        new_cells.append(line)
    return Grid(new_cells)


def smooth(grid: Grid, iterations: int) -> Grid:
    for _ in range(iterations):
        grid = smooth_step(grid)
    return grid


__all__ = ["initial_fill", "count_adjacent_walls", "smooth_step", "smooth"]

"""Region labeling (flood fill) and small-region pruning."""
from __future__ import annotations

from typing import Dict, List, NamedTuple

from .cells import Coord2D
from .grid import ORTHOGONAL, Grid
from .tiles import WALL


class RegionMap(NamedTuple):
    count: int
    members: Dict[int, List[Coord2D]]

    def sizes(self) -> Dict[int, int]:
        return {rid: len(cells) for rid, cells in self.members.items()}


def label_regions(grid: Grid) -> RegionMap:
    """Assign region ids 1..N to 4-connected non-wall components.

    Ids follow row-major order of each component's first cell. Every wall
    cell is reset to region 0. Member lists are in flood order.
    """
    rows, cols = grid.rows, grid.cols
    visited = [[False] * cols for _ in range(rows)]
    members: Dict[int, List[Coord2D]] = {}
    count = 0
    for row in range(rows):
        for col in range(cols):
            cell = grid.cells[row][col]
            if cell.type == WALL:
                cell.region = 0
                continue
            if visited[row][col]:
                continue
            count += 1
            members[count] = _flood_fill(grid, row, col, count, visited)
    return RegionMap(count, members)


def _flood_fill(grid: Grid, row: int, col: int, region: int, visited) -> List[Coord2D]:
    stack = [(row, col)]
    visited[row][col] = True
    filled: List[Coord2D] = []
    while stack:
        r, c = stack.pop()
        grid.cells[r][c].region = region
        filled.append((r, c))
        for dr, dc in ORTHOGONAL:
            nr, nc = r + dr, c + dc
            if 0 <= nr < grid.rows and 0 <= nc < grid.cols and not visited[nr][nc]:
                if grid.cells[nr][nc].type != WALL:
                    visited[nr][nc] = True
                    stack.append((nr, nc))
    return filled


def prune_small_regions(grid: Grid, min_size: int, region_map: RegionMap) -> int:
    """Wall over every region smaller than ``min_size``; returns how many were removed.

    Bookkeeping only: surviving regions keep their ids, no relabel happens.
    """
    pruned = 0
    for cells in region_map.members.values():
        if len(cells) >= min_size:
            continue
        for r, c in cells:
            cell = grid.cells[r][c]
            cell.type = WALL
            cell.region = 0
        pruned += 1
    return pruned


__all__ = ["RegionMap", "label_regions", "prune_small_regions"]

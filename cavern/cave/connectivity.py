"""Region connection: merge every surviving cave pocket into one component.

Each iteration relabels the grid, picks region 1 as the anchor, finds the
nearest other region and carves a two-wide L tunnel between their closest
sampled cells. A carve always joins the anchor with at least one other
region (the L path is contiguous and interior), so ``initial_count - 1``
iterations are enough; that is the default cap.

Nearest-region search is sampled (30 cells per region for the region
distance, 100 for the cell pair). It can miss the true closest pair and
produce a longer tunnel than necessary; the contract is "connected", not
"optimally connected".
"""
from __future__ import annotations

import random
from typing import Dict, List, NamedTuple, Optional, Tuple

from ..logging_utils import get_logger
from .cells import Coord2D
from .grid import Grid
from .regions import label_regions
from .tiles import FLOOR, WALL

log = get_logger("cavern.cave.connectivity")

DISTANCE_SAMPLE = 30
PAIR_SAMPLE = 100


class ConnectionReport(NamedTuple):
    region_count: int
    iterations: int
    tunnels: int
    cells_carved: int
    converged: bool


def sample_cells(cells: List[Coord2D], limit: int) -> List[Coord2D]:
    """At most ``limit`` cells taken at an even stride through ``cells``."""
    if len(cells) <= limit:
        return list(cells)
    stride = max(1, len(cells) // limit)
    return cells[::stride][:limit]


def _manhattan(a: Coord2D, b: Coord2D) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def region_distance(a: List[Coord2D], b: List[Coord2D], limit: int = DISTANCE_SAMPLE) -> int:
    best = None
    for p in sample_cells(a, limit):
        for q in sample_cells(b, limit):
            d = _manhattan(p, q)
            if best is None or d < best:
                best = d
    return best if best is not None else 0


def closest_pair(a: List[Coord2D], b: List[Coord2D], limit: int = PAIR_SAMPLE) -> Tuple[Coord2D, Coord2D]:
    best = None
    pair = (a[0], b[0])
    for p in sample_cells(a, limit):
        for q in sample_cells(b, limit):
            d = _manhattan(p, q)
            if best is None or d < best:
                best = d
                pair = (p, q)
    return pair


def nearest_region(members: Dict[int, List[Coord2D]], anchor: int) -> Optional[int]:
    """Region id closest to ``anchor``; lowest id wins ties."""
    anchor_cells = members[anchor]
    best_id = None
    best = None
    for rid in sorted(members):
        if rid == anchor:
            continue
        d = region_distance(anchor_cells, members[rid])
        if best is None or d < best:
            best, best_id = d, rid
    return best_id


def carve_tunnel(grid: Grid, start: Coord2D, end: Coord2D, region: int, rng=None) -> int:
    """Carve a 2-wide L-shaped tunnel from ``start`` to ``end``.

    Walks horizontally then vertically, or the reverse (one ``rng.random()``
    draw decides). Horizontal steps widen one row down, vertical steps one
    column right. Only wall cells change; border cells are never touched.
    Returns the number of cells converted to floor.
    """
    if rng is None:
        rng = random
    horizontal_first = rng.random() < 0.5
    carved = 0

    def dig(r: int, c: int) -> int:
        if not grid.in_bounds(r, c) or grid.is_border(r, c):
            return 0
        cell = grid.cells[r][c]
        if cell.type != WALL:
            return 0
        cell.type = FLOOR
        cell.region = region
        return 1

    r, c = start
    er, ec = end

    def walk_cols():
        nonlocal c, carved
        while c != ec:
            c += 1 if ec > c else -1
            carved += dig(r, c) + dig(r + 1, c)

    def walk_rows():
        nonlocal r, carved
        while r != er:
            r += 1 if er > r else -1
            carved += dig(r, c) + dig(r, c + 1)

    if horizontal_first:
        walk_cols()
        walk_rows()
    else:
        walk_rows()
        walk_cols()
    return carved


def connect_regions(grid: Grid, rng=None, max_iterations: Optional[int] = None) -> ConnectionReport:
    """Carve tunnels until a single region remains (or the cap is reached).

    The grid is relabeled at the start of every iteration and once more at
    the end, so region ids are consistent with the final topology. When the
    cap runs out with more than one region left the report says so and a
    warning is logged; the real count is reported.
    """
    if rng is None:
        rng = random
    region_map = label_regions(grid)
    cap = max_iterations if max_iterations is not None else max(0, region_map.count - 1)
    iterations = 0
    tunnels = 0
    cells_carved = 0
    while region_map.count > 1 and iterations < cap:
        iterations += 1
        anchor = 1
        target = nearest_region(region_map.members, anchor)
        if target is None:
            break
        a, b = closest_pair(region_map.members[anchor], region_map.members[target])
        cells_carved += carve_tunnel(grid, a, b, anchor, rng)
        tunnels += 1
        region_map = label_regions(grid)
    converged = region_map.count <= 1
    if not converged:
        log.warn(
            event="connect_regions_cap_reached",
            regions=region_map.count,
            iterations=iterations,
            cap=cap,
        )
    return ConnectionReport(region_map.count, iterations, tunnels, cells_carved, converged)


__all__ = [
    "ConnectionReport",
    "sample_cells",
    "region_distance",
    "closest_pair",
    "nearest_region",
    "carve_tunnel",
    "connect_regions",
]

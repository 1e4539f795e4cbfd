import random

from cavern.cave.connectivity import (
    carve_tunnel,
    closest_pair,
    connect_regions,
    nearest_region,
    region_distance,
    sample_cells,
)
from cavern.cave.grid import Grid
from cavern.cave.regions import label_regions
from cavern.cave.render import render_rows
from cavern.cave.tiles import FLOOR, WALL


def _two_points(rows=7, cols=9):
    grid = Grid.filled(rows, cols)
    grid.cells[1][1].type = FLOOR
    grid.cells[4][6].type = FLOOR
    return grid


def test_carve_tunnel_horizontal_first(fixed_random):
    grid = _two_points()
    carved = carve_tunnel(grid, (1, 1), (4, 6), 1, fixed_random(0.0))
    assert carved == 14
    for c in range(2, 7):
        assert grid.cells[1][c].type == FLOOR
        assert grid.cells[2][c].type == FLOOR
        assert grid.cells[1][c].region == 1
    for r in range(2, 5):
        assert grid.cells[r][6].type == FLOOR
        assert grid.cells[r][7].type == FLOOR
    assert grid.cells[3][1].type == WALL
    assert label_regions(grid).count == 1


def test_carve_tunnel_vertical_first(fixed_random):
    grid = _two_points()
    carved = carve_tunnel(grid, (1, 1), (4, 6), 2, fixed_random(0.9))
    assert carved == 14
    for r in range(2, 5):
        assert grid.cells[r][1].type == FLOOR
        assert grid.cells[r][2].type == FLOOR
    for c in range(2, 7):
        assert grid.cells[4][c].type == FLOOR
        assert grid.cells[5][c].type == FLOOR
    assert grid.cells[1][3].type == WALL
    assert grid.cells[5][3].region == 2
    assert label_regions(grid).count == 1


def test_carve_tunnel_never_touches_border(fixed_random):
    grid = Grid.filled(3, 7)
    grid.cells[1][1].type = FLOOR
    grid.cells[1][5].type = FLOOR
    carved = carve_tunnel(grid, (1, 1), (1, 5), 1, fixed_random(0.0))
    assert carved == 3
    assert render_rows(grid) == ["#######", "#.....#", "#######"]


def test_carve_tunnel_leaves_open_cells_alone(fixed_random):
    grid = Grid.from_strings(["#######", "#.....#", "#.....#", "#######"])
    label_regions(grid)
    assert carve_tunnel(grid, (1, 1), (1, 5), 7, fixed_random(0.0)) == 0
    assert grid.cells[1][3].region == 1


def test_sample_cells_bounds_and_stride():
    cells = [(0, i) for i in range(95)]
    sampled = sample_cells(cells, 30)
    assert len(sampled) == 30
    assert sampled[0] == (0, 0)
    assert sampled[1] == (0, 3)
    small = [(1, 1), (2, 2)]
    assert sample_cells(small, 30) == small
    assert sample_cells(small, 30) is not small


def test_region_distance_and_closest_pair():
    a = [(1, 1), (1, 2), (2, 2)]
    b = [(1, 6), (5, 5)]
    assert region_distance(a, b) == 4
    assert closest_pair(a, b) == ((1, 2), (1, 6))


def test_nearest_region_prefers_closest_then_lowest_id():
    members = {
        1: [(1, 1)],
        2: [(1, 9)],
        3: [(4, 1)],
        4: [(1, 3)],
    }
    assert nearest_region(members, 1) == 4
    members[4] = [(1, 5)]
    members[3] = [(5, 1)]
    assert nearest_region(members, 1) == 3
    assert nearest_region({1: [(1, 1)]}, 1) is None


def _islands():
    return Grid.from_strings([
        "##############",
        "#..####....###",
        "#..####....###",
        "##############",
        "##############",
        "#####...######",
        "#####...######",
        "##############",
    ])


def _open_cells_connected(grid):
    rmap = label_regions(grid)
    return rmap.count <= 1


def test_connect_regions_merges_everything(sequence_random):
    grid = _islands()
    report = connect_regions(grid, sequence_random([0.1, 0.8]))
    assert report.converged
    assert report.region_count == 1
    assert 1 <= report.tunnels <= 2
    assert report.iterations == report.tunnels
    assert report.cells_carved > 0
    assert _open_cells_connected(grid)
    for row, col in grid.coords():
        cell = grid.cells[row][col]
        if grid.is_border(row, col):
            assert cell.type == WALL
        if cell.type == WALL:
            assert cell.region == 0
        else:
            assert cell.region == 1


def test_connect_regions_single_region_is_noop(fixed_random):
    grid = Grid.from_strings(["#####", "#...#", "#####"])
    rng = fixed_random(0.0)
    report = connect_regions(grid, rng)
    assert report == (1, 0, 0, 0, True)
    assert rng.calls == 0


def test_connect_regions_no_regions(fixed_random):
    report = connect_regions(Grid.filled(6, 6), fixed_random(0.0))
    assert report.region_count == 0
    assert report.converged


def test_connect_regions_cap_reached_reports_real_count(fixed_random, capsys):
    grid = _islands()
    report = connect_regions(grid, fixed_random(0.0), max_iterations=0)
    assert not report.converged
    assert report.region_count == 3
    assert report.tunnels == 0
    out = capsys.readouterr().out
    assert "connect_regions_cap_reached" in out
    assert "regions=3" in out


def test_connect_regions_random_grids_always_converge():
    for seed in range(10):
        rng = random.Random(seed)
        grid = Grid.filled(20, 30)
        for row in range(1, 19):
            for col in range(1, 29):
                if rng.random() < 0.35:
                    grid.cells[row][col].type = FLOOR
        report = connect_regions(grid, rng)
        assert report.converged, f"seed {seed} left {report.region_count} regions"
        assert _open_cells_connected(grid)

"""Initial fill and cellular automaton smoothing."""

from cavern.cave.automaton import count_adjacent_walls, initial_fill, smooth, smooth_step
from cavern.cave.config import CaveConfig
from cavern.cave.grid import Grid
from cavern.cave.render import render_rows
from cavern.cave.tiles import FLOOR, WALL


def test_initial_fill_zero_probability_is_open_with_solid_border(fixed_random):
    cfg = CaveConfig(rows=6, cols=6, fill_probability=0.0)
    grid = initial_fill(cfg, fixed_random(0.0))
    for row, col in grid.coords():
        expected = WALL if grid.is_border(row, col) else FLOOR
        assert grid.cells[row][col].type == expected
        assert grid.cells[row][col].region == 0


def test_initial_fill_full_probability_is_solid(fixed_random):
    cfg = CaveConfig(rows=6, cols=6, fill_probability=1.0)
    grid = initial_fill(cfg, fixed_random(0.999))
    assert all(cell.type == WALL for line in grid.cells for cell in line)


def test_initial_fill_draws_once_per_interior_cell(fixed_random):
    cfg = CaveConfig(rows=5, cols=7, fill_probability=0.5)
    rng = fixed_random(0.4)
    grid = initial_fill(cfg, rng)
    assert rng.calls == 3 * 5
    # 0.4 < 0.5 -> every interior cell is wall
    assert grid.count_types()[FLOOR] == 0


def test_count_adjacent_walls_counts_self_and_out_of_bounds():
    grid = Grid.from_strings([
        "###",
        "#.#",
        "###",
    ])
    assert count_adjacent_walls(grid, 1, 1) == 8
    # corner: 5 out-of-bounds + itself + 2 walls + the floor
    assert count_adjacent_walls(grid, 0, 0) == 8
    open_grid = Grid.from_strings([".....", ".....", "....."])
    assert count_adjacent_walls(open_grid, 1, 2) == 0
    assert count_adjacent_walls(open_grid, 0, 2) == 3


def test_smooth_step_floor_holds_at_four_and_opens_below():
    grid = Grid.from_strings([
        "#####",
        "##..#",
        "#...#",
        "#..##",
        "#####",
    ])
    out = smooth_step(grid)
    assert render_rows(out) == [
        "#####",
        "##.##",
        "#...#",
        "##.##",
        "#####",
    ]


def test_smooth_step_wall_holds_at_four_and_fills_above():
    grid = Grid.from_strings([
        "#####",
        "##.##",
        "#.#.#",
        "##..#",
        "#####",
    ])
    # center has exactly 4 walls in its block (itself included) and stays wall;
    # every other interior cell sees 5+ and fills in
    assert count_adjacent_walls(grid, 2, 2) == 4
    out = smooth_step(grid)
    assert render_rows(out) == ["#####"] * 5


def test_smooth_step_wall_with_three_opens():
    grid = Grid.from_strings([
        "#######",
        "#.....#",
        "#.#.#.#",
        "#.##..#",
        "#.....#",
        "#######",
    ])
    assert count_adjacent_walls(grid, 2, 2) == 3
    out = smooth_step(grid)
    assert out.cells[2][2].type == FLOOR


def test_smooth_returns_new_grid_and_resets_regions():
    grid = Grid.from_strings(["#####", "#...#", "#...#", "#####"])
    for line in grid.cells:
        for cell in line:
            if cell.type == FLOOR:
                cell.region = 3
    before = render_rows(grid)
    out = smooth(grid, 2)
    assert out is not grid
    assert render_rows(grid) == before
    assert all(cell.region == 0 for line in out.cells for cell in line)


def test_smooth_zero_iterations_is_identity():
    grid = Grid.from_strings(["####", "#..#", "####"])
    assert smooth(grid, 0) is grid


def test_smooth_keeps_border_walls():
    import random

    cfg = CaveConfig(rows=12, cols=15, fill_probability=0.45)
    grid = smooth(initial_fill(cfg, random.Random(5)), 4)
    for row, col in grid.coords():
        if grid.is_border(row, col):
            assert grid.cells[row][col].type == WALL

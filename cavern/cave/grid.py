"""Row-major cave grid.

The grid owns its cells outright; phases that need a fresh grid call
``copy()`` or build one with ``Grid.filled``. Queries are total: anything
outside the grid comes back as ``None`` rather than raising.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Set, Tuple

from .cells import Cell, CellRows, Coord2D
from .render import CHAR_TO_TYPE
from .tiles import CELL_TYPES, WALL

ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
NEIGHBORS_8 = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))


class Grid:
    def __init__(self, cells: CellRows):
        self.cells = cells
        self.rows = len(cells)
        self.cols = len(cells[0]) if cells else 0

    @classmethod
    def filled(cls, rows: int, cols: int, cell_type: str = WALL) -> "Grid":
        return cls([[Cell(cell_type, 0) for _ in range(cols)] for _ in range(rows)])

    @classmethod
    def from_strings(cls, lines: List[str], legend: Optional[Dict[str, str]] = None) -> "Grid":
        """Build a grid from text rows (``#`` wall, ``.`` floor by default).

        Regions are left at 0; run the region analyzer to label them.
        """
        legend = legend or CHAR_TO_TYPE
        return cls([[Cell(legend[ch], 0) for ch in line] for line in lines])

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_border(self, row: int, col: int) -> bool:
        return row == 0 or col == 0 or row == self.rows - 1 or col == self.cols - 1

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def get_type(self, row: int, col: int) -> Optional[str]:
        cell = self.get_cell(row, col)
        return cell.type if cell is not None else None

    def coords(self) -> Iterator[Coord2D]:
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col

    def neighbors(self, row: int, col: int, diagonal: bool = True) -> Iterator[Tuple[int, int, Cell]]:
        """Yield in-bounds neighbors (row, col, cell) in row-major order."""
        offsets = NEIGHBORS_8 if diagonal else ORTHOGONAL
        for dr, dc in offsets:
            r, c = row + dr, col + dc
            if 0 <= r < self.rows and 0 <= c < self.cols:
                yield r, c, self.cells[r][c]

    def count_neighbors(self, row: int, col: int, cell_type: str) -> int:
        return sum(1 for _r, _c, cell in self.neighbors(row, col) if cell.type == cell_type)

    def copy(self) -> "Grid":
        return Grid([[cell.copy() for cell in line] for line in self.cells])

    def count_types(self) -> Dict[str, int]:
        counts = {t: 0 for t in CELL_TYPES}
        for line in self.cells:
            for cell in line:
                counts[cell.type] = counts.get(cell.type, 0) + 1
        return counts

    def region_ids(self) -> Set[int]:
        return {cell.region for line in self.cells for cell in line if cell.region > 0}

    def to_rows(self) -> List[List[dict]]:
        return [[cell.to_dict() for cell in line] for line in self.cells]

    def __len__(self):
        return self.rows

    def __getitem__(self, row: int) -> List[Cell]:
        return self.cells[row]

    def __repr__(self):
        return f"<Grid {self.rows}x{self.cols}>"

from typing import List, Tuple

from .tiles import WALL


class Cell:
    """Lightweight container for a cave grid cell."""
    __slots__ = ("type", "region")
    def __init__(self, type: str = WALL, region: int = 0):
        self.type = type
        self.region = region

    def copy(self) -> "Cell":
        return Cell(self.type, self.region)

    def to_dict(self):
        return {"type": self.type, "region": self.region}

    def __eq__(self, other):
        if not isinstance(other, Cell):
            return NotImplemented
        return self.type == other.type and self.region == other.region

    def __repr__(self):
        return f"Cell({self.type!r}, {self.region})"


Coord2D = Tuple[int, int]
CellRows = List[List[Cell]]

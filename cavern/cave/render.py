"""Character rendering helpers shared by the CLI and the JSON API."""
from typing import List, Optional, Tuple

from .tiles import CRYSTAL, ENTRANCE, FLOOR, WALL, WATER

TYPE_TO_CHAR = {
    WALL: "#",
    FLOOR: ".",
    WATER: "~",
    CRYSTAL: "*",
    ENTRANCE: "E",
}
CHAR_TO_TYPE = {ch: t for t, ch in TYPE_TO_CHAR.items()}
PLAYER_CHAR = "@"


def type_to_char(cell_type: str) -> str:
    return TYPE_TO_CHAR.get(cell_type, "?")


def render_rows(grid, player: Optional[Tuple[int, int]] = None) -> List[str]:
    lines = []
    for row in range(grid.rows):
        chars = [type_to_char(cell.type) for cell in grid.cells[row]]
        if player is not None and player[0] == row and 0 <= player[1] < grid.cols:
            chars[player[1]] = PLAYER_CHAR
        lines.append("".join(chars))
    return lines


def render_ascii(grid, player: Optional[Tuple[int, int]] = None) -> str:
    return "\n".join(render_rows(grid, player))

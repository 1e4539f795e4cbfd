# Cell type constants centralized for modular imports
WALL = "wall"
FLOOR = "floor"
WATER = "water"
CRYSTAL = "crystal"
ENTRANCE = "entrance"  # reserved for hand-placed cave mouths; the generator never emits it

CELL_TYPES = (WALL, FLOOR, WATER, CRYSTAL, ENTRANCE)

__all__ = ["WALL", "FLOOR", "WATER", "CRYSTAL", "ENTRANCE", "CELL_TYPES"]

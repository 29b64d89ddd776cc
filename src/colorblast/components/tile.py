from dataclasses import dataclass

@dataclass(slots=True)
class TileColor:
    """Palette color name of a tile.

    Display values live on the singleton Palette component.
    """
    name: str


@dataclass(slots=True)
class TileTier:
    """Display tier derived from the size of the group the tile currently belongs to."""
    tier: int = 0
    group_size: int = 0


@dataclass(slots=True)
class PooledTile:
    """Tag for tile entities parked in the pool and not on the board."""
    pass

from dataclasses import dataclass

@dataclass(slots=True)
class BoardPosition:
    """Grid coordinate of a placed tile, mirrored from Board.cells."""
    row: int
    col: int

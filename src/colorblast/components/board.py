from dataclasses import dataclass, field
from typing import List, Optional

@dataclass(slots=True)
class Board:
    """Fixed-size grid of tile entity ids; None marks an empty cell.

    cells[row][col] is the authoritative placement. A tile entity appears in at most one cell.
    """
    rows: int
    cols: int
    cells: List[List[Optional[int]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[None] * self.cols for _ in range(self.rows)]

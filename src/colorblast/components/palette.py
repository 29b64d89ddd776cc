from dataclasses import dataclass, field
from typing import Dict, List, Tuple

DEFAULT_PALETTE: Dict[str, Tuple[int, int, int]] = {
    'red':    (180, 60, 60),
    'green':  (80, 170, 80),
    'blue':   (70, 90, 180),
    'yellow': (200, 190, 80),
    'purple': (170, 80, 160),
    'pink':   (226, 62, 160),
}


@dataclass(slots=True)
class Palette:
    """Ordered color definitions stored on a single entity.

    The first ``active_count`` entries are the colors a level may spawn.
    """
    colors: Dict[str, Tuple[int, int, int]] = field(default_factory=lambda: dict(DEFAULT_PALETTE))
    active_count: int = 0

    def __post_init__(self) -> None:
        if not self.colors:
            raise ValueError("Palette needs at least one color")
        if self.active_count <= 0:
            self.active_count = len(self.colors)
        if self.active_count > len(self.colors):
            raise ValueError(
                f"Cannot activate {self.active_count} colors from a palette of {len(self.colors)}"
            )

    def defined_colors(self) -> List[str]:
        return list(self.colors.keys())

    def active_colors(self) -> List[str]:
        return self.defined_colors()[:self.active_count]

    def color_at(self, index: int) -> str:
        return self.defined_colors()[index]

    def index_of(self, name: str) -> int:
        return self.defined_colors().index(name)

    def rgb_for(self, name: str) -> Tuple[int, int, int]:
        return self.colors[name]

"""Resolution state resource describing where the turn pipeline currently is."""
from dataclasses import dataclass
from enum import Enum, auto


class ResolutionPhase(Enum):
    """Pipeline phases; only IDLE accepts a new selection."""
    IDLE = auto()
    RESOLVING = auto()
    SHUFFLING = auto()


@dataclass
class ResolutionState:
    """Singleton component storing the active resolution phase."""
    phase: ResolutionPhase = ResolutionPhase.IDLE

import random

from esper import World
from .events.bus import EventBus
from colorblast.components.board import Board
from colorblast.components.palette import DEFAULT_PALETTE, Palette
from colorblast.components.resolution_state import ResolutionPhase, ResolutionState
from colorblast.config import LevelConfig
from typing import Dict, Tuple


def create_world(
    event_bus: EventBus,
    config: LevelConfig,
    *,
    palette: Dict[str, Tuple[int, int, int]] | None = None,
    rng: random.Random | None = None,
) -> World:
    colors = dict(palette if palette is not None else DEFAULT_PALETTE)
    if config.color_count > len(colors):
        raise ValueError(
            f"Level activates {config.color_count} colors but the palette defines {len(colors)}"
        )
    world = World()
    # Shared by spawning and shuffling; seed it for reproducible boards.
    setattr(world, "random", rng or random.Random())

    world.create_entity(Board(rows=config.rows, cols=config.cols))
    world.create_entity(Palette(colors=colors, active_count=config.color_count))
    world.create_entity(ResolutionState(phase=ResolutionPhase.IDLE))
    return world

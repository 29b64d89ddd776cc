"""Wiring of the world, the event bus and every board system for one level."""
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Tuple

from esper import World

from colorblast.config import LevelConfig
from colorblast.events.bus import EventBus
from colorblast.systems.gravity import GravitySystem
from colorblast.systems.match import MatchSystem
from colorblast.systems.resolution import ResolutionSystem
from colorblast.systems.shuffle import ShuffleSystem
from colorblast.systems.spawn import SpawnSystem
from colorblast.systems.tile_pool_system import TileAllocator, TilePoolSystem
from colorblast.world import create_world


@dataclass(slots=True)
class ColorBlastEngine:
    world: World
    event_bus: EventBus
    config: LevelConfig
    allocator: TileAllocator
    match: MatchSystem
    gravity: GravitySystem
    spawn: SpawnSystem
    shuffle: ShuffleSystem
    resolution: ResolutionSystem


def create_engine(
    config: LevelConfig,
    *,
    event_bus: EventBus | None = None,
    palette: Dict[str, Tuple[int, int, int]] | None = None,
    rng: random.Random | None = None,
    allocator: TileAllocator | None = None,
) -> ColorBlastEngine:
    """Build every system for one level; the board starts empty until ``start_level``."""
    bus = event_bus or EventBus()
    world = create_world(bus, config, palette=palette, rng=rng)
    if allocator is None:
        allocator = TilePoolSystem(world, bus, initial_size=config.pool_multiplier * config.cell_count)
    match = MatchSystem(
        world, bus,
        match_threshold=config.match_threshold,
        tier_thresholds=config.tier_thresholds,
    )
    gravity = GravitySystem(world, bus, edge=config.gravity)
    spawn = SpawnSystem(world, bus, allocator, edge=config.gravity)
    shuffle = ShuffleSystem(world, bus, match_threshold=config.match_threshold)
    resolution = ResolutionSystem(
        world, bus,
        allocator=allocator,
        match=match,
        gravity=gravity,
        spawn=spawn,
        shuffler=shuffle,
    )
    return ColorBlastEngine(
        world=world,
        event_bus=bus,
        config=config,
        allocator=allocator,
        match=match,
        gravity=gravity,
        spawn=spawn,
        shuffle=shuffle,
        resolution=resolution,
    )

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Protocol

from esper import World

from colorblast.components.board_position import BoardPosition
from colorblast.components.tile import PooledTile, TileColor, TileTier
from colorblast.events.bus import EventBus, EVENT_TILE_ACQUIRED, EVENT_TILE_RELEASED

logger = logging.getLogger(__name__)


class TileAllocator(Protocol):
    """Capability the board needs from whoever owns tile lifetimes."""

    def acquire(self, color: str) -> int:
        ...

    def release(self, entity: int) -> None:
        ...


class TilePoolSystem:
    """Recycles tile entities instead of creating a fresh one per spawn.

    Released tiles are reset (tier and group size cleared) and handed out again in
    release order. The pool grows on demand when it runs dry.
    """

    def __init__(self, world: World, event_bus: EventBus, *, initial_size: int = 0) -> None:
        self.world = world
        self.event_bus = event_bus
        self._free: Deque[int] = deque()
        for _ in range(max(0, initial_size)):
            self._free.append(self._create_pooled())

    @property
    def available(self) -> int:
        return len(self._free)

    def acquire(self, color: str) -> int:
        entity = self._free.popleft() if self._free else self._create_pooled()
        self.world.remove_component(entity, PooledTile)
        self.world.add_component(entity, TileColor(name=color))
        self.event_bus.emit(EVENT_TILE_ACQUIRED, entity=entity, color=color)
        return entity

    def release(self, entity: int) -> None:
        if self.world.has_component(entity, PooledTile):
            raise ValueError(f"Tile {entity} was already released")
        if self.world.has_component(entity, BoardPosition):
            raise ValueError(f"Tile {entity} is still placed on the board")
        tier: TileTier = self.world.component_for_entity(entity, TileTier)
        tier.tier = 0
        tier.group_size = 0
        self.world.add_component(entity, PooledTile())
        self._free.append(entity)
        self.event_bus.emit(EVENT_TILE_RELEASED, entity=entity)

    def _create_pooled(self) -> int:
        # TileTier stays on the entity for its whole life so it never becomes component-less.
        entity = self.world.create_entity(TileTier(), TileColor(name=""), PooledTile())
        logger.debug("Created pooled tile %d", entity)
        return entity

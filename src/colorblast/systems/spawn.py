from __future__ import annotations

import logging
import random
from typing import List

from esper import World

from colorblast.config import GravityEdge
from colorblast.deltas import Position, TileSpawn
from colorblast.events.bus import EventBus, EVENT_TILES_SPAWNED
from colorblast.systems.board_ops import get_board, get_palette, iter_lines, place_tile
from colorblast.systems.tile_pool_system import TileAllocator

logger = logging.getLogger(__name__)


class SpawnSystem:
    """Fills emptied cells with fresh tiles of random active colors."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        allocator: TileAllocator,
        *,
        edge: GravityEdge = GravityEdge.ROW_START,
        rng: random.Random | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.allocator = allocator
        self.edge = edge
        candidate_rng = rng or getattr(world, "random", None)
        self._rng: random.Random = candidate_rng or random.Random()

    def spawn_new_tiles(self) -> List[TileSpawn]:
        """Fill the trailing empty run at the far edge of every line.

        Interior gaps are left alone; gravity is expected to have run first.
        """
        board = get_board(self.world)
        spawned: List[TileSpawn] = []
        for line in iter_lines(board, self.edge):
            empty = 0
            for row, col in reversed(line):
                if board.cells[row][col] is not None:
                    break
                empty += 1
            # Closest to the anchor edge first.
            for cell in line[len(line) - empty:]:
                spawned.append(self._spawn_at(cell))
        if spawned:
            logger.debug("Spawned %d tiles", len(spawned))
        self.event_bus.emit(EVENT_TILES_SPAWNED, spawned=spawned)
        return spawned

    def create_at_start(self) -> List[TileSpawn]:
        """Populate every empty cell, row-major, with no compaction step."""
        board = get_board(self.world)
        spawned: List[TileSpawn] = []
        for row in range(board.rows):
            for col in range(board.cols):
                if board.cells[row][col] is None:
                    spawned.append(self._spawn_at((row, col)))
        self.event_bus.emit(EVENT_TILES_SPAWNED, spawned=spawned)
        return spawned

    def random_color(self) -> str:
        return self._rng.choice(get_palette(self.world).active_colors())

    def _spawn_at(self, position: Position) -> TileSpawn:
        color = self.random_color()
        entity = self.allocator.acquire(color)
        place_tile(self.world, get_board(self.world), entity, position)
        return TileSpawn(entity, position, color)

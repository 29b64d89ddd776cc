from __future__ import annotations

import logging
from typing import List

from esper import World

from colorblast.config import GravityEdge
from colorblast.deltas import TileMove
from colorblast.events.bus import EventBus, EVENT_GRAVITY_APPLIED
from colorblast.systems.board_ops import get_board, iter_lines, move_tile

logger = logging.getLogger(__name__)


class GravitySystem:
    """Compacts the tiles of every line toward the configured anchor edge."""

    def __init__(self, world: World, event_bus: EventBus, *, edge: GravityEdge = GravityEdge.ROW_START) -> None:
        self.world = world
        self.event_bus = event_bus
        self.edge = edge

    def apply_gravity(self) -> List[TileMove]:
        """Stable compaction; only tiles that actually changed cell are reported."""
        board = get_board(self.world)
        moves: List[TileMove] = []
        for line in iter_lines(board, self.edge):
            write = 0
            for index, cell in enumerate(line):
                entity = board.cells[cell[0]][cell[1]]
                if entity is None:
                    continue
                if index != write:
                    target = line[write]
                    move_tile(self.world, board, cell, target)
                    moves.append(TileMove(entity, cell, target))
                write += 1
        if moves:
            logger.debug("Gravity moved %d tiles toward %s", len(moves), self.edge.value)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves)
        return moves

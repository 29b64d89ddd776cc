from __future__ import annotations

import logging
from collections import deque
from enum import IntEnum
from typing import Deque, Iterable, List, Sequence, Set

from esper import World

from colorblast.components.tile import TileTier
from colorblast.deltas import Position, TierChange, TileMove, TileRemoval, TileSpawn
from colorblast.events.bus import EventBus, EVENT_TIERS_CHANGED
from colorblast.systems.board_ops import (
    NEIGHBOR_OFFSETS,
    color_of,
    get_board,
    in_bounds,
    neighbors,
    position_of,
    require_in_bounds,
)

logger = logging.getLogger(__name__)


class Tier(IntEnum):
    DEFAULT = 0
    FIRST = 1
    SECOND = 2
    THIRD = 3


def tier_for_size(size: int, thresholds: Sequence[int]) -> Tier:
    """Number of ascending thresholds the group size strictly exceeds."""
    tier = 0
    for threshold in thresholds:
        if size > threshold:
            tier += 1
    return Tier(tier)


class MatchSystem:
    """Finds 4-connected same-color groups and keeps tile tiers in sync with them."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        match_threshold: int,
        tier_thresholds: Sequence[int],
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.match_threshold = match_threshold
        self.tier_thresholds = tuple(tier_thresholds)
        board = get_board(world)
        self._visited: List[List[bool]] = [[False] * board.cols for _ in range(board.rows)]
        self._queue: Deque[Position] = deque()
        self._group: List[int] = []

    def check_all(self) -> List[TierChange]:
        """Re-flood the whole board and refresh every tile's tier."""
        board = get_board(self.world)
        self._clear_visited()
        changes: List[TierChange] = []
        for row in range(board.rows):
            for col in range(board.cols):
                if self._visited[row][col] or board.cells[row][col] is None:
                    continue
                self._flood(row, col)
                changes.extend(self._apply_group(self._group))
        self._emit_changes(changes)
        return changes

    def check_affected(
        self,
        moved: Iterable[TileMove],
        spawned: Iterable[TileSpawn],
        removed: Iterable[TileRemoval] = (),
    ) -> List[TierChange]:
        """Refresh tiers only for groups touching cells that changed.

        A tile that did not move can still change group when its neighbor left or
        arrived, so the neighbors of both old and new coordinates are seeds too.
        """
        board = get_board(self.world)
        affected: Set[Position] = set()
        for move in moved:
            for cell in (move.source, move.target):
                affected.add(cell)
                affected.update(neighbors(board, *cell))
        for spawn in spawned:
            affected.add(spawn.position)
            affected.update(neighbors(board, *spawn.position))
        for removal in removed:
            affected.add(removal.position)
            affected.update(neighbors(board, *removal.position))
        self._clear_visited()
        changes: List[TierChange] = []
        for row, col in sorted(affected):
            if self._visited[row][col] or board.cells[row][col] is None:
                continue
            self._flood(row, col)
            changes.extend(self._apply_group(self._group))
        self._emit_changes(changes)
        return changes

    def get_group(self, row: int, col: int) -> List[int]:
        """Tiles of the group containing (row, col); empty when the cell is empty."""
        board = get_board(self.world)
        require_in_bounds(board, row, col)
        if board.cells[row][col] is None:
            return []
        self._clear_visited()
        return list(self._flood(row, col))

    def has_match_at(self, row: int, col: int) -> bool:
        return len(self.get_group(row, col)) >= self.match_threshold

    def is_deadlocked(self) -> bool:
        """True when no group reaches the match threshold; stops at the first one that does."""
        board = get_board(self.world)
        self._clear_visited()
        for row in range(board.rows):
            for col in range(board.cols):
                if self._visited[row][col] or board.cells[row][col] is None:
                    continue
                if len(self._flood(row, col)) >= self.match_threshold:
                    return False
        return True

    def find_groups(self) -> List[List[int]]:
        """Every group on the board in row-major discovery order."""
        board = get_board(self.world)
        self._clear_visited()
        groups: List[List[int]] = []
        for row in range(board.rows):
            for col in range(board.cols):
                if self._visited[row][col] or board.cells[row][col] is None:
                    continue
                groups.append(list(self._flood(row, col)))
        return groups

    def _flood(self, start_row: int, start_col: int) -> List[int]:
        board = get_board(self.world)
        color = color_of(self.world, board.cells[start_row][start_col])
        group = self._group
        queue = self._queue
        group.clear()
        queue.clear()
        queue.append((start_row, start_col))
        # Neighbors are enqueued unconditionally and filtered when popped.
        while queue:
            row, col = queue.popleft()
            if not in_bounds(board, row, col):
                continue
            if self._visited[row][col]:
                continue
            entity = board.cells[row][col]
            if entity is None:
                continue
            if color_of(self.world, entity) != color:
                continue
            self._visited[row][col] = True
            group.append(entity)
            for d_row, d_col in NEIGHBOR_OFFSETS:
                queue.append((row + d_row, col + d_col))
        return group

    def _apply_group(self, group: List[int]) -> List[TierChange]:
        size = len(group)
        tier = tier_for_size(size, self.tier_thresholds)
        changes: List[TierChange] = []
        for entity in group:
            tile_tier: TileTier = self.world.component_for_entity(entity, TileTier)
            if tile_tier.group_size == size and tile_tier.tier == tier:
                continue
            tier_changed = tile_tier.tier != tier
            tile_tier.group_size = size
            tile_tier.tier = int(tier)
            if tier_changed:
                changes.append(TierChange(entity, position_of(self.world, entity), int(tier), size))
        return changes

    def _clear_visited(self) -> None:
        for row in self._visited:
            row[:] = [False] * len(row)

    def _emit_changes(self, changes: List[TierChange]) -> None:
        if changes:
            logger.debug("Tier changed for %d tiles", len(changes))
            self.event_bus.emit(EVENT_TIERS_CHANGED, changes=changes)

from __future__ import annotations

import logging
import random
from typing import Dict, List, Optional, Set

from esper import World

from colorblast.components.board import Board
from colorblast.components.tile import TileColor
from colorblast.deltas import Position, ShuffleResult, TileMove, TileRecolor
from colorblast.events.bus import EventBus, EVENT_BOARD_SHUFFLED
from colorblast.systems.board_ops import (
    color_of,
    get_board,
    get_palette,
    neighbors,
    occupied_positions,
    position_of,
    swap_cells,
)

logger = logging.getLogger(__name__)


class ShuffleSystem:
    """Reorders tiles so that the board is guaranteed to hold a matchable group.

    A connected region of ``match_threshold`` cells is seeded with same-colored tiles
    and protected; every other occupied cell goes through a constrained Fisher-Yates
    permutation. When no color has enough tiles, the region tiles are recolored
    instead, which is the only place the engine changes a placed tile's color.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        match_threshold: int,
        rng: random.Random | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.match_threshold = match_threshold
        candidate_rng = rng or getattr(world, "random", None)
        self._rng: random.Random = candidate_rng or random.Random()
        self._protected: Set[Position] = set()

    def shuffle(self) -> ShuffleResult:
        board = get_board(self.world)
        occupied = occupied_positions(board)
        if len(occupied) < self.match_threshold:
            logger.warning(
                "Shuffle skipped: %d tiles cannot form a group of %d",
                len(occupied), self.match_threshold,
            )
            result = ShuffleResult(guaranteed=False)
            self.event_bus.emit(EVENT_BOARD_SHUFFLED, result=result)
            return result

        before: Dict[int, Position] = {board.cells[r][c]: (r, c) for r, c in occupied}
        buckets = self._bucket_by_color(board)
        self._protected.clear()
        region = self._pick_region(board, occupied)
        recolored: List[TileRecolor] = []
        target_color = self._find_color_for_guaranteed_match(buckets)
        if target_color is not None:
            self._place_tiles(board, region, buckets[target_color][:self.match_threshold])
        else:
            recolored = self._recolor_region(board, region)
        self._protected.update(region)

        self._shuffle_unprotected(board)

        moves = [
            TileMove(entity, source, position_of(self.world, entity))
            for entity, source in before.items()
            if position_of(self.world, entity) != source
        ]
        result = ShuffleResult(moves=moves, recolored=recolored, protected=list(region))
        logger.info(
            "Board shuffled: %d tiles moved, %d recolored, protected %s",
            len(moves), len(recolored), region,
        )
        self.event_bus.emit(EVENT_BOARD_SHUFFLED, result=result)
        return result

    def _bucket_by_color(self, board: Board) -> Dict[str, List[int]]:
        buckets: Dict[str, List[int]] = {}
        for row, col in occupied_positions(board):
            entity = board.cells[row][col]
            buckets.setdefault(color_of(self.world, entity), []).append(entity)
        return buckets

    def _find_color_for_guaranteed_match(self, buckets: Dict[str, List[int]]) -> Optional[str]:
        for color in get_palette(self.world).defined_colors():
            if len(buckets.get(color, ())) >= self.match_threshold:
                return color
        return None

    def _pick_region(self, board: Board, occupied: List[Position]) -> List[Position]:
        """Random connected set of ``match_threshold`` cells.

        Grows through occupied cells when the board allows it; only a sparse board
        falls back to growing through empty cells as well.
        """
        starts = list(occupied)
        self._rng.shuffle(starts)
        occupied_set = set(occupied)
        for start in starts:
            region = self._grow_region(board, start, lambda cell: cell in occupied_set)
            if region is not None:
                return region
        region = self._grow_region(board, starts[0], lambda cell: True)
        if region is None:
            raise RuntimeError(f"Board too small for a group of {self.match_threshold}")
        return region

    def _grow_region(self, board: Board, start: Position, allowed) -> Optional[List[Position]]:
        region = [start]
        seen = {start}
        frontier: List[Position] = []
        for cell in neighbors(board, *start):
            if allowed(cell):
                seen.add(cell)
                frontier.append(cell)
        while len(region) < self.match_threshold and frontier:
            cell = frontier.pop(self._rng.randrange(len(frontier)))
            region.append(cell)
            for nxt in neighbors(board, *cell):
                if nxt not in seen and allowed(nxt):
                    seen.add(nxt)
                    frontier.append(nxt)
        if len(region) < self.match_threshold:
            return None
        return region

    def _place_tiles(self, board: Board, region: List[Position], tiles: List[int]) -> None:
        # Earlier region cells already hold earlier tiles, so a later swap never displaces them.
        for cell, entity in zip(region, tiles):
            current = position_of(self.world, entity)
            if current != cell:
                swap_cells(self.world, board, current, cell)

    def _recolor_region(self, board: Board, region: List[Position]) -> List[TileRecolor]:
        empty_cells = [cell for cell in region if board.cells[cell[0]][cell[1]] is None]
        if empty_cells:
            region_set = set(region)
            donors = [cell for cell in occupied_positions(board) if cell not in region_set]
            for cell, donor in zip(empty_cells, donors):
                swap_cells(self.world, board, donor, cell)
        anchor = board.cells[region[0][0]][region[0][1]]
        target_color = color_of(self.world, anchor)
        recolored: List[TileRecolor] = []
        for row, col in region[1:]:
            entity = board.cells[row][col]
            tile_color: TileColor = self.world.component_for_entity(entity, TileColor)
            if tile_color.name == target_color:
                continue
            recolored.append(TileRecolor(entity, (row, col), tile_color.name, target_color))
            tile_color.name = target_color
        return recolored

    def _shuffle_unprotected(self, board: Board) -> None:
        total_cols = board.cols
        total = board.rows * board.cols
        for i in range(total - 1, 0, -1):
            row_i, col_i = divmod(i, total_cols)
            if board.cells[row_i][col_i] is None or (row_i, col_i) in self._protected:
                continue
            j = self._find_valid_swap_target(board, i, total)
            if j < 0:
                logger.warning("No swap target found for cell (%d, %d)", row_i, col_i)
                continue
            swap_cells(self.world, board, (row_i, col_i), divmod(j, total_cols))

    def _find_valid_swap_target(self, board: Board, index: int, max_attempts: int) -> int:
        for _ in range(max_attempts):
            j = self._rng.randint(0, index)
            row_j, col_j = divmod(j, board.cols)
            if board.cells[row_j][col_j] is not None and (row_j, col_j) not in self._protected:
                return j
        return -1

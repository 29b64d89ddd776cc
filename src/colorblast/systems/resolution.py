from __future__ import annotations

import logging
from typing import List, Optional

from esper import World

from colorblast.components.resolution_state import ResolutionPhase
from colorblast.deltas import ResolutionReport, TileRemoval
from colorblast.events.bus import (
    EventBus,
    EVENT_DEADLOCK_DETECTED,
    EVENT_GROUP_CLEARED,
    EVENT_LEVEL_STARTED,
    EVENT_MOVE_MADE,
    EVENT_RESOLUTION_COMPLETE,
    EVENT_RESOLUTION_PHASE_CHANGED,
    EVENT_SELECTION_REJECTED,
    EVENT_TILE_CLICK,
)
from colorblast.systems.board_ops import clear_cell, color_of, get_board, position_of
from colorblast.systems.gravity import GravitySystem
from colorblast.systems.match import MatchSystem
from colorblast.systems.resolution_state_utils import get_or_create_resolution_state
from colorblast.systems.shuffle import ShuffleSystem
from colorblast.systems.spawn import SpawnSystem
from colorblast.systems.tile_pool_system import TileAllocator

logger = logging.getLogger(__name__)


class ResolutionSystem:
    """Runs one turn: remove group, gravity, spawn, re-scan, shuffle when deadlocked.

    Only one resolution runs at a time. A selection arriving while the pipeline is
    not idle (for example from a subscriber reacting to a mid-turn event) is dropped.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        allocator: TileAllocator,
        match: MatchSystem,
        gravity: GravitySystem,
        spawn: SpawnSystem,
        shuffler: ShuffleSystem,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.allocator = allocator
        self.match = match
        self.gravity = gravity
        self.spawn = spawn
        self.shuffler = shuffler
        self.state = get_or_create_resolution_state(world)
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)

    @property
    def phase(self) -> ResolutionPhase:
        return self.state.phase

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.select(row, col)

    def start_level(self) -> ResolutionReport:
        """Fill the empty board, compute tiers and make sure a first move exists."""
        if self.state.phase is not ResolutionPhase.IDLE:
            raise RuntimeError(f"Cannot start a level while {self.state.phase.name.lower()}")
        report = ResolutionReport()
        self._set_phase(ResolutionPhase.RESOLVING)
        try:
            report.spawned = self.spawn.create_at_start()
            report.tier_changes = self.match.check_all()
            if self.match.is_deadlocked():
                self._run_shuffle(report)
        finally:
            self._set_phase(ResolutionPhase.IDLE)
        self.event_bus.emit(EVENT_LEVEL_STARTED, report=report)
        return report

    def select(self, row: int, col: int) -> Optional[ResolutionReport]:
        """Resolve the group at (row, col); None when the selection is dropped."""
        if self.state.phase is not ResolutionPhase.IDLE:
            logger.debug("Selection (%d, %d) dropped while %s", row, col, self.state.phase.name)
            self.event_bus.emit(EVENT_SELECTION_REJECTED, row=row, col=col, reason='busy', group_size=0)
            return None
        group = self.match.get_group(row, col)
        if len(group) < self.match.match_threshold:
            reason = 'empty' if not group else 'too_small'
            self.event_bus.emit(EVENT_SELECTION_REJECTED, row=row, col=col, reason=reason, group_size=len(group))
            return None

        report = ResolutionReport()
        self._set_phase(ResolutionPhase.RESOLVING)
        try:
            self.event_bus.emit(EVENT_MOVE_MADE, row=row, col=col, group_size=len(group))
            report.removed = self._remove_group(group)
            report.moved = self.gravity.apply_gravity()
            report.spawned = self.spawn.spawn_new_tiles()
            report.tier_changes = self.match.check_affected(report.moved, report.spawned, report.removed)
            if self.match.is_deadlocked():
                self._run_shuffle(report)
        finally:
            self._set_phase(ResolutionPhase.IDLE)
        logger.debug(
            "Resolved (%d, %d): removed=%d moved=%d spawned=%d shuffled=%s",
            row, col, len(report.removed), len(report.moved), len(report.spawned), report.shuffled,
        )
        self.event_bus.emit(EVENT_RESOLUTION_COMPLETE, report=report)
        return report

    def _remove_group(self, group: List[int]) -> List[TileRemoval]:
        board = get_board(self.world)
        removed: List[TileRemoval] = []
        for entity in group:
            position = position_of(self.world, entity)
            removed.append(TileRemoval(entity, position, color_of(self.world, entity)))
            clear_cell(self.world, board, position)
            self.allocator.release(entity)
        self.event_bus.emit(EVENT_GROUP_CLEARED, removed=removed)
        return removed

    def _run_shuffle(self, report: ResolutionReport) -> None:
        self._set_phase(ResolutionPhase.SHUFFLING)
        self.event_bus.emit(EVENT_DEADLOCK_DETECTED)
        result = self.shuffler.shuffle()
        report.shuffled = True
        report.shuffle_moves = result.moves
        report.recolored = result.recolored
        # Shuffled tiles all sit in new groups, so refresh the whole board.
        report.tier_changes.extend(self.match.check_all())

    def _set_phase(self, phase: ResolutionPhase) -> None:
        previous = self.state.phase
        if previous is phase:
            return
        self.state.phase = phase
        self.event_bus.emit(EVENT_RESOLUTION_PHASE_CHANGED, previous=previous, phase=phase)

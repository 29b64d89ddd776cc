"""Board deltas reported to whoever animates the board.

Every resolution step returns these records and emits them on the event bus.
Coordinates are grid indices; nothing here knows about screen space or timing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

Position = Tuple[int, int]


@dataclass(slots=True, frozen=True)
class TileRemoval:
    tile: int
    position: Position
    color: str


@dataclass(slots=True, frozen=True)
class TileMove:
    tile: int
    source: Position
    target: Position


@dataclass(slots=True, frozen=True)
class TileSpawn:
    tile: int
    position: Position
    color: str


@dataclass(slots=True, frozen=True)
class TileRecolor:
    tile: int
    position: Position
    previous: str
    color: str


@dataclass(slots=True, frozen=True)
class TierChange:
    tile: int
    position: Position
    tier: int
    group_size: int


@dataclass(slots=True)
class ShuffleResult:
    """Outcome of one deadlock shuffle.

    guaranteed is False only when the board holds fewer tiles than the match threshold,
    in which case nothing was changed.
    """
    moves: List[TileMove] = field(default_factory=list)
    recolored: List[TileRecolor] = field(default_factory=list)
    protected: List[Position] = field(default_factory=list)
    guaranteed: bool = True


@dataclass(slots=True)
class ResolutionReport:
    """Everything that happened to the board during one turn (or level start)."""
    removed: List[TileRemoval] = field(default_factory=list)
    moved: List[TileMove] = field(default_factory=list)
    spawned: List[TileSpawn] = field(default_factory=list)
    recolored: List[TileRecolor] = field(default_factory=list)
    tier_changes: List[TierChange] = field(default_factory=list)
    shuffled: bool = False
    shuffle_moves: List[TileMove] = field(default_factory=list)

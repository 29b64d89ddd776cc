from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that nobody else holds a reference to.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# INPUT
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                            # payload: row, col


# ============================================================================
# RESOLUTION FLOW
# ============================================================================
EVENT_SELECTION_REJECTED = "selection_rejected"            # payload: row, col, reason=str, group_size=int
EVENT_RESOLUTION_PHASE_CHANGED = "resolution_phase_changed"  # payload: previous=ResolutionPhase, phase=ResolutionPhase
EVENT_MOVE_MADE = "move_made"                              # payload: row, col, group_size=int
EVENT_GROUP_CLEARED = "group_cleared"                      # payload: removed=list[TileRemoval]
EVENT_RESOLUTION_COMPLETE = "resolution_complete"          # payload: report=ResolutionReport
EVENT_LEVEL_STARTED = "level_started"                      # payload: report=ResolutionReport


# ============================================================================
# BOARD MECHANICS
# ============================================================================
EVENT_GRAVITY_APPLIED = "gravity_applied"                  # payload: moves=list[TileMove]
EVENT_TILES_SPAWNED = "tiles_spawned"                      # payload: spawned=list[TileSpawn]
EVENT_TIERS_CHANGED = "tiers_changed"                      # payload: changes=list[TierChange]
EVENT_DEADLOCK_DETECTED = "deadlock_detected"              # payload: None
EVENT_BOARD_SHUFFLED = "board_shuffled"                    # payload: result=ShuffleResult


# ============================================================================
# TILE LIFECYCLE
# ============================================================================
EVENT_TILE_ACQUIRED = "tile_acquired"                      # payload: entity=int, color=str
EVENT_TILE_RELEASED = "tile_released"                      # payload: entity=int

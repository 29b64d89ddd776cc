"""Level configuration passed into the engine at construction time."""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Tuple

from colorblast.constants import (
    DEFAULT_COLOR_COUNT,
    DEFAULT_MATCH_THRESHOLD,
    DEFAULT_POOL_MULTIPLIER,
    DEFAULT_TIER_THRESHOLDS,
    GRID_COLS,
    GRID_ROWS,
    MAX_COLOR_COUNT,
)


class GravityEdge(Enum):
    """Edge every line compacts toward.

    ROW_START/ROW_END: lines are columns, tiles settle toward row 0 or the last row.
    COL_START/COL_END: lines are rows, tiles settle toward col 0 or the last column.
    """
    ROW_START = "row_start"
    ROW_END = "row_end"
    COL_START = "col_start"
    COL_END = "col_end"

    @property
    def lines_are_columns(self) -> bool:
        return self in (GravityEdge.ROW_START, GravityEdge.ROW_END)

    @property
    def anchored_at_start(self) -> bool:
        return self in (GravityEdge.ROW_START, GravityEdge.COL_START)


@dataclass(slots=True)
class LevelConfig:
    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    color_count: int = DEFAULT_COLOR_COUNT
    tier_thresholds: Tuple[int, int, int] = DEFAULT_TIER_THRESHOLDS
    match_threshold: int = DEFAULT_MATCH_THRESHOLD
    gravity: GravityEdge = GravityEdge.ROW_START
    pool_multiplier: int = DEFAULT_POOL_MULTIPLIER

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Board must have at least one row and column, got {self.rows}x{self.cols}")
        if not 1 <= self.color_count <= MAX_COLOR_COUNT:
            raise ValueError(f"color_count must be within [1, {MAX_COLOR_COUNT}], got {self.color_count}")
        thresholds = tuple(self.tier_thresholds)
        if len(thresholds) != 3:
            raise ValueError(f"Expected three tier thresholds, got {len(thresholds)}")
        if thresholds[0] < 1:
            raise ValueError("First tier threshold must be at least 1")
        if not thresholds[0] < thresholds[1] < thresholds[2]:
            raise ValueError(f"Tier thresholds must be strictly ascending, got {thresholds}")
        self.tier_thresholds = thresholds
        if not 1 <= self.match_threshold <= self.rows * self.cols:
            raise ValueError(
                f"match_threshold must be within [1, {self.rows * self.cols}], got {self.match_threshold}"
            )
        if not isinstance(self.gravity, GravityEdge):
            raise ValueError(f"gravity must be a GravityEdge, got {self.gravity!r}")
        if self.pool_multiplier < 0:
            raise ValueError("pool_multiplier cannot be negative")

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LevelConfig":
        """Build a config from loader data, e.g. a parsed level JSON entry."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown level config keys: {sorted(unknown)}")
        values = dict(data)
        gravity = values.get("gravity")
        if isinstance(gravity, str):
            try:
                values["gravity"] = GravityEdge[gravity.upper()]
            except KeyError as exc:
                raise ValueError(f"Unknown gravity edge '{gravity}'") from exc
        if "tier_thresholds" in values:
            values["tier_thresholds"] = tuple(values["tier_thresholds"])
        return cls(**values)

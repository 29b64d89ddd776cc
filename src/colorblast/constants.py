GRID_ROWS = 8
GRID_COLS = 8

# Upper bound on active colors per level.
MAX_COLOR_COUNT = 6
DEFAULT_COLOR_COUNT = 4

# Two orthogonally adjacent tiles of one color already form a match.
DEFAULT_MATCH_THRESHOLD = 2

# Group sizes that must be exceeded to reach tier 1, 2 and 3.
DEFAULT_TIER_THRESHOLDS = (4, 6, 8)

# Pool prewarm size is this factor times the number of cells.
DEFAULT_POOL_MULTIPLIER = 2

import pytest

from colorblast.config import GravityEdge, LevelConfig


def test_defaults_are_valid():
    config = LevelConfig()
    assert config.match_threshold == 2
    assert config.gravity is GravityEdge.ROW_START
    assert config.cell_count == config.rows * config.cols


@pytest.mark.parametrize(
    "overrides",
    [
        {"rows": 0},
        {"cols": 0},
        {"color_count": 0},
        {"color_count": 7},
        {"tier_thresholds": (4, 4, 8)},
        {"tier_thresholds": (6, 5, 8)},
        {"tier_thresholds": (0, 2, 3)},
        {"tier_thresholds": (2, 3)},
        {"match_threshold": 0},
        {"rows": 2, "cols": 2, "match_threshold": 5},
        {"gravity": "down"},
        {"pool_multiplier": -1},
    ],
)
def test_invalid_config_fails_fast(overrides):
    with pytest.raises(ValueError):
        LevelConfig(**overrides)


def test_from_dict_accepts_loader_data():
    config = LevelConfig.from_dict({
        "rows": 5,
        "cols": 6,
        "color_count": 3,
        "tier_thresholds": [3, 5, 7],
        "match_threshold": 3,
        "gravity": "col_start",
    })
    assert (config.rows, config.cols) == (5, 6)
    assert config.tier_thresholds == (3, 5, 7)
    assert config.gravity is GravityEdge.COL_START


def test_from_dict_rejects_unknown_keys_and_edges():
    with pytest.raises(ValueError):
        LevelConfig.from_dict({"rows": 5, "speed": 3})
    with pytest.raises(ValueError):
        LevelConfig.from_dict({"gravity": "sideways"})


def test_gravity_edge_geometry():
    assert GravityEdge.ROW_START.lines_are_columns and GravityEdge.ROW_START.anchored_at_start
    assert GravityEdge.ROW_END.lines_are_columns and not GravityEdge.ROW_END.anchored_at_start
    assert not GravityEdge.COL_START.lines_are_columns and GravityEdge.COL_START.anchored_at_start
    assert not GravityEdge.COL_END.lines_are_columns and not GravityEdge.COL_END.anchored_at_start

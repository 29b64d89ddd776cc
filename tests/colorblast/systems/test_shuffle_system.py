import random

import pytest

from colorblast.events.bus import EVENT_BOARD_SHUFFLED
from colorblast.systems.board_ops import get_board, occupied_positions, position_of
from tests.helpers import build_engine, color_counts, random_layout


def _tile_ids(engine):
    board = get_board(engine.world)
    return sorted(board.cells[r][c] for r, c in occupied_positions(board))


@pytest.mark.parametrize("seed", range(12))
def test_shuffle_guarantees_a_match_on_random_boards(seed):
    rng = random.Random(seed)
    engine = build_engine(random_layout(rng, 5, 6, "RGBYPK"), color_count=6, seed=seed)
    counts = color_counts(engine)
    tiles = _tile_ids(engine)

    result = engine.shuffle.shuffle()

    assert result.guaranteed
    assert not engine.match.is_deadlocked()
    assert color_counts(engine) == counts
    assert result.recolored == []
    assert _tile_ids(engine) == tiles
    for move in result.moves:
        assert position_of(engine.world, move.tile) == move.target
        assert move.source != move.target


@pytest.mark.parametrize("seed", range(6))
def test_checkerboard_deadlock_is_resolved(seed):
    engine = build_engine(["R G R G", "G R G R", "R G R G", "G R G R"], seed=seed)
    assert engine.match.is_deadlocked()
    events = []
    engine.event_bus.subscribe(EVENT_BOARD_SHUFFLED, lambda sender, **k: events.append(k["result"]))

    result = engine.shuffle.shuffle()

    assert not engine.match.is_deadlocked()
    assert color_counts(engine) == {"red": 8, "green": 8}
    assert len(result.protected) == 2
    (r1, c1), (r2, c2) = result.protected
    assert abs(r1 - r2) + abs(c1 - c2) == 1
    assert events == [result]


def test_single_color_board_shuffle_is_harmless():
    engine = build_engine(["R R R", "R R R", "R R R"], color_count=1)
    result = engine.shuffle.shuffle()
    assert result.guaranteed and result.recolored == []
    assert color_counts(engine) == {"red": 9}
    assert not engine.match.is_deadlocked()


@pytest.mark.parametrize("seed", range(6))
def test_no_pair_fallback_recolors_exactly_one_tile(seed):
    engine = build_engine(["R G", "B Y"], seed=seed)
    before = color_counts(engine)
    result = engine.shuffle.shuffle()

    assert not engine.match.is_deadlocked()
    assert len(result.recolored) == 1
    recolor = result.recolored[0]
    assert recolor.previous != recolor.color
    after = color_counts(engine)
    assert sum(after.values()) == 4
    assert after[recolor.color] == before[recolor.color] + 1
    assert after.get(recolor.previous, 0) == before[recolor.previous] - 1


@pytest.mark.parametrize("seed", range(6))
def test_line_board_protects_pairs_at_the_edge(seed):
    engine = build_engine(["R G R"], seed=seed)
    engine.shuffle.shuffle()
    assert not engine.match.is_deadlocked()
    assert color_counts(engine) == {"red": 2, "green": 1}


def test_sparse_board_pulls_tiles_together():
    engine = build_engine(["R . .", ". . .", ". . R"])
    result = engine.shuffle.shuffle()
    assert not engine.match.is_deadlocked()
    assert color_counts(engine) == {"red": 2}
    assert len(occupied_positions(get_board(engine.world))) == 2
    assert result.recolored == []


def test_sparse_board_without_pairs_falls_back_to_recolor():
    engine = build_engine(["R . .", ". . .", ". . G"])
    result = engine.shuffle.shuffle()
    assert not engine.match.is_deadlocked()
    assert len(result.recolored) == 1


def test_too_few_tiles_is_a_documented_no_op():
    engine = build_engine([". . .", ". R .", ". . ."])
    result = engine.shuffle.shuffle()
    assert not result.guaranteed
    assert result.moves == [] and result.recolored == []
    assert engine.match.is_deadlocked()

    empty = build_engine([". .", ". ."])
    assert not empty.shuffle.shuffle().guaranteed


@pytest.mark.parametrize("seed", range(6))
def test_higher_match_threshold_protects_a_connected_region(seed):
    engine = build_engine(["R G R G", "G R G R", "R G R G"], match_threshold=3, seed=seed)
    assert engine.match.is_deadlocked()
    result = engine.shuffle.shuffle()
    assert len(result.protected) == 3
    assert not engine.match.is_deadlocked()
    assert color_counts(engine) == {"red": 6, "green": 6}


def test_higher_threshold_fallback_recolors_region():
    engine = build_engine(["R G B", "Y R G"], match_threshold=3, seed=4)
    result = engine.shuffle.shuffle()
    assert not engine.match.is_deadlocked()
    assert 1 <= len(result.recolored) <= 2

from __future__ import annotations

import random
from collections import Counter
from typing import Sequence

from colorblast.components.tile import TileTier
from colorblast.config import LevelConfig
from colorblast.engine import ColorBlastEngine, create_engine
from colorblast.systems.board_ops import color_grid, fill_board_from_layout, get_board

LETTER_TO_COLOR = {
    "R": "red",
    "G": "green",
    "B": "blue",
    "Y": "yellow",
    "P": "purple",
    "K": "pink",
    ".": None,
}
COLOR_TO_LETTER = {v: k for k, v in LETTER_TO_COLOR.items() if v is not None}


def build_engine(layout: Sequence[str], *, seed: int = 0, **overrides) -> ColorBlastEngine:
    """Create an engine whose board holds the given layout.

    Each layout string is one row, cells separated by spaces, e.g. ``"R G ."``.
    """
    rows = [line.split() for line in layout]
    config = LevelConfig(rows=len(rows), cols=len(rows[0]), **overrides)
    engine = create_engine(config, rng=random.Random(seed))
    fill_board_from_layout(
        engine.world,
        get_board(engine.world),
        engine.allocator,
        [[LETTER_TO_COLOR[cell] for cell in row] for row in rows],
    )
    return engine


def board_letters(engine: ColorBlastEngine) -> list[str]:
    grid = color_grid(engine.world, get_board(engine.world))
    return [" ".join(COLOR_TO_LETTER[name] if name else "." for name in row) for row in grid]


def color_counts(engine: ColorBlastEngine) -> Counter:
    grid = color_grid(engine.world, get_board(engine.world))
    return Counter(name for row in grid for name in row if name is not None)


def random_layout(rng: random.Random, rows: int, cols: int, letters: str, *, empty_ratio: float = 0.0) -> list[str]:
    layout = []
    for _ in range(rows):
        cells = []
        for _ in range(cols):
            if empty_ratio and rng.random() < empty_ratio:
                cells.append(".")
            else:
                cells.append(rng.choice(letters))
        layout.append(" ".join(cells))
    return layout


def assert_tiers_consistent(engine: ColorBlastEngine) -> None:
    board = get_board(engine.world)
    for row in range(board.rows):
        for col in range(board.cols):
            entity = board.cells[row][col]
            if entity is None:
                continue
            tier = engine.world.component_for_entity(entity, TileTier)
            assert tier.group_size == len(engine.match.get_group(row, col)), (row, col)

"""Headless entry point for the colorblast board core.

Builds one level, then keeps selecting a random matchable group and prints the
board after every turn. Rendering, input and animation belong to the host game;
this driver only shows the board state transitions.

Run with: ``python src/main.py --rows 6 --cols 6 --colors 4 --moves 10 --seed 7``
"""
from __future__ import annotations

import argparse
import logging
import random
from typing import List, Optional

from colorblast.config import GravityEdge, LevelConfig
from colorblast.engine import ColorBlastEngine, create_engine
from colorblast.events.bus import EVENT_BOARD_SHUFFLED
from colorblast.systems.board_ops import color_grid, get_board, position_of


def render_board(engine: ColorBlastEngine) -> str:
    grid = color_grid(engine.world, get_board(engine.world))
    lines: List[str] = []
    for row in grid:
        lines.append(" ".join(name[0].upper() if name else "." for name in row))
    return "\n".join(lines)


def pick_selection(engine: ColorBlastEngine, rng: random.Random) -> Optional[tuple[int, int]]:
    groups = [g for g in engine.match.find_groups() if len(g) >= engine.config.match_threshold]
    if not groups:
        return None
    return position_of(engine.world, rng.choice(groups)[0])


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play random moves on a colorblast board.")
    parser.add_argument("--rows", type=int, default=8)
    parser.add_argument("--cols", type=int, default=8)
    parser.add_argument("--colors", type=int, default=4)
    parser.add_argument("--moves", type=int, default=10)
    parser.add_argument("--match-threshold", type=int, default=2)
    parser.add_argument("--gravity", choices=[edge.name.lower() for edge in GravityEdge], default="row_start")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    config = LevelConfig.from_dict({
        "rows": args.rows,
        "cols": args.cols,
        "color_count": args.colors,
        "match_threshold": args.match_threshold,
        "gravity": args.gravity,
    })
    rng = random.Random(args.seed)
    engine = create_engine(config, rng=rng)
    engine.event_bus.subscribe(
        EVENT_BOARD_SHUFFLED,
        lambda sender, **payload: print(f"-- shuffled ({len(payload['result'].moves)} tiles moved)"),
    )

    engine.resolution.start_level()
    print(render_board(engine))
    for turn in range(1, args.moves + 1):
        selection = pick_selection(engine, rng)
        if selection is None:
            print("No matchable group left")
            break
        report = engine.resolution.select(*selection)
        if report is None:
            continue
        print(f"\nturn {turn}: selected {selection}, removed {len(report.removed)}, spawned {len(report.spawned)}")
        print(render_board(engine))


if __name__ == "__main__":
    main()

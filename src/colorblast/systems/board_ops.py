from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from esper import World

from colorblast.components.board import Board
from colorblast.components.board_position import BoardPosition
from colorblast.components.palette import Palette
from colorblast.components.tile import TileColor
from colorblast.config import GravityEdge

Position = Tuple[int, int]

NEIGHBOR_OFFSETS: Tuple[Position, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board not found")


def get_palette(world: World) -> Palette:
    for _, palette in world.get_component(Palette):
        return palette
    raise RuntimeError("Palette definitions not found")


def in_bounds(board: Board, row: int, col: int) -> bool:
    return 0 <= row < board.rows and 0 <= col < board.cols


def require_in_bounds(board: Board, row: int, col: int) -> None:
    if not in_bounds(board, row, col):
        raise IndexError(f"Cell ({row}, {col}) is outside the {board.rows}x{board.cols} board")


def tile_at(board: Board, row: int, col: int) -> Optional[int]:
    require_in_bounds(board, row, col)
    return board.cells[row][col]


def position_of(world: World, entity: int) -> Position:
    pos: BoardPosition = world.component_for_entity(entity, BoardPosition)
    return pos.row, pos.col


def color_of(world: World, entity: int) -> str:
    return world.component_for_entity(entity, TileColor).name


def place_tile(world: World, board: Board, entity: int, position: Position) -> None:
    """Put an unplaced tile into an empty cell."""
    row, col = position
    require_in_bounds(board, row, col)
    if board.cells[row][col] is not None:
        raise ValueError(f"Cell {position} is already occupied")
    if world.has_component(entity, BoardPosition):
        raise ValueError(f"Tile {entity} is already placed at {position_of(world, entity)}")
    board.cells[row][col] = entity
    world.add_component(entity, BoardPosition(row=row, col=col))


def clear_cell(world: World, board: Board, position: Position) -> Optional[int]:
    """Empty a cell and return the tile that was there, if any."""
    row, col = position
    require_in_bounds(board, row, col)
    entity = board.cells[row][col]
    if entity is None:
        return None
    board.cells[row][col] = None
    world.remove_component(entity, BoardPosition)
    return entity


def move_tile(world: World, board: Board, source: Position, target: Position) -> int:
    """Move the tile at source into the empty target cell."""
    require_in_bounds(board, *source)
    require_in_bounds(board, *target)
    entity = board.cells[source[0]][source[1]]
    if entity is None:
        raise ValueError(f"No tile at {source} to move")
    if board.cells[target[0]][target[1]] is not None:
        raise ValueError(f"Cannot move onto occupied cell {target}")
    board.cells[source[0]][source[1]] = None
    board.cells[target[0]][target[1]] = entity
    pos: BoardPosition = world.component_for_entity(entity, BoardPosition)
    pos.row, pos.col = target
    return entity


def swap_cells(world: World, board: Board, a: Position, b: Position) -> None:
    """Exchange the contents of two cells; either may be empty."""
    require_in_bounds(board, *a)
    require_in_bounds(board, *b)
    if a == b:
        return
    ent_a = board.cells[a[0]][a[1]]
    ent_b = board.cells[b[0]][b[1]]
    board.cells[a[0]][a[1]] = ent_b
    board.cells[b[0]][b[1]] = ent_a
    if ent_a is not None:
        pos_a: BoardPosition = world.component_for_entity(ent_a, BoardPosition)
        pos_a.row, pos_a.col = b
    if ent_b is not None:
        pos_b: BoardPosition = world.component_for_entity(ent_b, BoardPosition)
        pos_b.row, pos_b.col = a


def occupied_positions(board: Board) -> List[Position]:
    """Row-major list of every occupied cell."""
    return [
        (row, col)
        for row in range(board.rows)
        for col in range(board.cols)
        if board.cells[row][col] is not None
    ]


def neighbors(board: Board, row: int, col: int) -> List[Position]:
    result: List[Position] = []
    for d_row, d_col in NEIGHBOR_OFFSETS:
        n_row, n_col = row + d_row, col + d_col
        if in_bounds(board, n_row, n_col):
            result.append((n_row, n_col))
    return result


def iter_lines(board: Board, edge: GravityEdge) -> Iterator[List[Position]]:
    """Yield every gravity line, each ordered from the anchor edge outward."""
    if edge.lines_are_columns:
        for col in range(board.cols):
            line = [(row, col) for row in range(board.rows)]
            yield line if edge.anchored_at_start else line[::-1]
    else:
        for row in range(board.rows):
            line = [(row, col) for col in range(board.cols)]
            yield line if edge.anchored_at_start else line[::-1]


def color_grid(world: World, board: Board) -> List[List[Optional[str]]]:
    """Snapshot of color names per cell (None for empty cells)."""
    return [
        [color_of(world, ent) if ent is not None else None for ent in row]
        for row in board.cells
    ]


def fill_board_from_layout(world: World, board: Board, allocator, layout: Sequence[Sequence[Optional[str]]]) -> List[int]:
    """Replace the board contents with the given color layout.

    Existing tiles are released to the allocator; None entries leave the cell empty.
    Returns the placed tiles in row-major order.
    """
    if len(layout) != board.rows or any(len(row) != board.cols for row in layout):
        raise ValueError(f"Layout does not match the {board.rows}x{board.cols} board")
    for position in occupied_positions(board):
        entity = clear_cell(world, board, position)
        allocator.release(entity)
    placed: List[int] = []
    for row, names in enumerate(layout):
        for col, name in enumerate(names):
            if name is None:
                continue
            entity = allocator.acquire(name)
            place_tile(world, board, entity, (row, col))
            placed.append(entity)
    return placed

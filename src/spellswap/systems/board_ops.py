from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from esper import World

from spellswap.components.board import Board
from spellswap.components.tile import EMPTY, Tile, TileSlot, base_of, is_empty
from spellswap.constants import MIN_MATCH_LENGTH

Position = Tuple[int, int]
Grid = List[List[Tile]]
Snapshot = Tuple[Tuple[Tile, ...], ...]

HORIZONTAL = "H"
VERTICAL = "V"


@dataclass(frozen=True, slots=True)
class Run:
    """Maximal line of three or more tiles sharing a base.

    Cells are ordered left to right for horizontal runs and top to bottom for
    vertical ones.
    """

    orientation: str
    cells: Tuple[Position, ...]
    base: int

    def __len__(self) -> int:
        return len(self.cells)


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: Position
    target: Position
    tile: Tile


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def get_entity_at(world: World, row: int, col: int) -> int | None:
    return get_board(world).cells.get((row, col))


def _slot_at(world: World, row: int, col: int) -> TileSlot:
    entity = get_entity_at(world, row, col)
    if entity is None:
        raise KeyError(f"No board cell at {(row, col)}")
    return world.component_for_entity(entity, TileSlot)


def tile_at(world: World, row: int, col: int) -> Tile:
    return _slot_at(world, row, col).tile


def set_tile_at(world: World, row: int, col: int, tile: Tile) -> None:
    _slot_at(world, row, col).tile = tile


def clear_tile(world: World, row: int, col: int) -> bool:
    """Empty a cell; return True only if it held a tile."""
    slot = _slot_at(world, row, col)
    if is_empty(slot.tile):
        return False
    slot.tile = EMPTY
    return True


def tile_grid(world: World) -> Grid:
    """Return a mutable row-major copy of the board's tiles."""
    board = get_board(world)
    grid: Grid = [[EMPTY] * board.cols for _ in range(board.rows)]
    for (row, col), entity in board.cells.items():
        grid[row][col] = world.component_for_entity(entity, TileSlot).tile
    return grid


def snapshot_board(world: World) -> Snapshot:
    return tuple(tuple(row) for row in tile_grid(world))


def count_empty_cells(world: World) -> int:
    return sum(1 for row in tile_grid(world) for tile in row if is_empty(tile))


def removed_in(snapshot: Snapshot) -> int:
    """Count the cleared cells of a post-clear snapshot."""
    return sum(1 for row in snapshot for tile in row if is_empty(tile))


def swap_tiles(world: World, src: Position, dst: Position) -> None:
    src_slot = _slot_at(world, *src)
    dst_slot = _slot_at(world, *dst)
    src_slot.tile, dst_slot.tile = dst_slot.tile, src_slot.tile


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def find_runs(grid: Sequence[Sequence[Tile]], min_length: int = MIN_MATCH_LENGTH) -> List[Run]:
    """Detect every maximal horizontal or vertical run of at least min_length."""
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    runs: List[Run] = []
    # Horizontal runs
    for r in range(rows):
        _collect_runs(runs, grid, HORIZONTAL, [(r, c) for c in range(cols)], min_length)
    # Vertical runs
    for c in range(cols):
        _collect_runs(runs, grid, VERTICAL, [(r, c) for r in range(rows)], min_length)
    return runs


def _collect_runs(
    runs: List[Run],
    grid: Sequence[Sequence[Tile]],
    orientation: str,
    line: List[Position],
    min_length: int,
) -> None:
    run: List[Position] = []
    last_base = None
    for row, col in line:
        bval = base_of(grid[row][col])
        if bval is not None and bval == last_base:
            run.append((row, col))
        else:
            if len(run) >= min_length:
                runs.append(Run(orientation, tuple(run), last_base))
            run = [(row, col)] if bval is not None else []
            last_base = bval
    if len(run) >= min_length:
        runs.append(Run(orientation, tuple(run), last_base))


def find_all_matches(world: World) -> List[Run]:
    return find_runs(tile_grid(world))


def has_line_match(grid: Sequence[Sequence[Tile]], pos: Position) -> bool:
    """Return True if pos is part of a horizontal or vertical run of three."""
    rows = len(grid)
    cols = len(grid[0]) if rows else 0
    row, col = pos
    bval = base_of(grid[row][col])
    if bval is None:
        return False
    # Horizontal sweep
    h_len = 1
    c_left = col - 1
    while c_left >= 0 and base_of(grid[row][c_left]) == bval:
        h_len += 1
        c_left -= 1
    c_right = col + 1
    while c_right < cols and base_of(grid[row][c_right]) == bval:
        h_len += 1
        c_right += 1
    if h_len >= MIN_MATCH_LENGTH:
        return True
    # Vertical sweep
    v_len = 1
    r_up = row - 1
    while r_up >= 0 and base_of(grid[r_up][col]) == bval:
        v_len += 1
        r_up -= 1
    r_down = row + 1
    while r_down < rows and base_of(grid[r_down][col]) == bval:
        v_len += 1
        r_down += 1
    return v_len >= MIN_MATCH_LENGTH


def predict_swap_creates_match(
    world: World, src: Position, dst: Position, *, grid: Grid | None = None
) -> bool:
    """Return True if swapping src/dst would put either endpoint in a run."""
    tiles = grid if grid is not None else tile_grid(world)
    swapped = [list(row) for row in tiles]
    (sr, sc), (dr, dc) = src, dst
    swapped[sr][sc], swapped[dr][dc] = swapped[dr][dc], swapped[sr][sc]
    return has_line_match(swapped, src) or has_line_match(swapped, dst)


def find_valid_swaps(world: World) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    board = get_board(world)
    rows, cols = board.rows, board.cols
    grid = tile_grid(world)
    swaps: List[Tuple[Position, Position]] = []
    for row in range(rows):
        for col in range(cols):
            pos = (row, col)
            if is_empty(grid[row][col]):
                continue
            right = (row, col + 1)
            if col + 1 < cols and not is_empty(grid[row][col + 1]):
                if predict_swap_creates_match(world, pos, right, grid=grid):
                    swaps.append((pos, right))
            down = (row + 1, col)
            if row + 1 < rows and not is_empty(grid[row + 1][col]):
                if predict_swap_creates_match(world, pos, down, grid=grid):
                    swaps.append((pos, down))
    return swaps

import logging
import random
from typing import Optional, Tuple

from esper import World

from spellswap.components.board import Board
from spellswap.components.board_position import BoardPosition
from spellswap.components.tile import EMPTY, Normal, TileSlot, base_of
from spellswap.constants import GRID_COLS, GRID_ROWS, ELEMENTS_COUNT, MIN_MATCH_LENGTH
from spellswap.events.bus import EventBus
from spellswap.systems import board_ops
from spellswap.systems.state_utils import get_world_random

logger = logging.getLogger(__name__)


class BoardSystem:
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        elements_count: int = ELEMENTS_COUNT,
    ):
        if rows < 1 or cols < 1:
            raise ValueError(f"Board needs at least one row and column, got {rows}x{cols}")
        if elements_count < MIN_MATCH_LENGTH:
            # With fewer than three elements the greedy fill can run out of choices.
            raise ValueError(f"elements_count must be at least {MIN_MATCH_LENGTH}, got {elements_count}")
        self.world = world
        self.event_bus = event_bus
        self.rows = rows
        self.cols = cols
        self.elements_count = elements_count
        board = Board(rows=rows, cols=cols, elements_count=elements_count)
        self.board_entity = self.world.create_entity(board)
        for r in range(rows):
            for c in range(cols):
                board.cells[(r, c)] = self.world.create_entity(BoardPosition(row=r, col=c), TileSlot(EMPTY))
        self._init_board()

    @property
    def rng(self) -> random.Random:
        return get_world_random(self.world)

    def _init_board(self):
        for r in range(self.rows):
            for c in range(self.cols):
                available = list(range(1, self.elements_count + 1))
                # Prevent horizontal triple: if the last two cells share a base, exclude it.
                if c >= 2:
                    left1 = self._get_base(r, c - 1)
                    left2 = self._get_base(r, c - 2)
                    if left1 == left2 and left1 in available:
                        available.remove(left1)
                # Prevent vertical triple: same for the two cells above.
                if r >= 2:
                    up1 = self._get_base(r - 1, c)
                    up2 = self._get_base(r - 2, c)
                    if up1 == up2 and up1 in available:
                        available.remove(up1)
                board_ops.set_tile_at(self.world, r, c, Normal(self.rng.choice(available)))
        logger.debug("Initialised %dx%d board with %d elements", self.rows, self.cols, self.elements_count)

    @staticmethod
    def is_adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        return board_ops.is_adjacent(a, b)

    def in_bounds(self, pos: Tuple[int, int]) -> bool:
        return 0 <= pos[0] < self.rows and 0 <= pos[1] < self.cols

    def _get_base(self, row: int, col: int) -> Optional[int]:
        return base_of(board_ops.tile_at(self.world, row, col))

import logging
from typing import List, Set, Tuple

from esper import World

from spellswap.components.board import Board
from spellswap.components.board_position import BoardPosition
from spellswap.components.drop_lock import DropLock
from spellswap.components.tile import EMPTY, Normal, is_empty
from spellswap.events.bus import EventBus, EVENT_GRAVITY_APPLIED, EVENT_REFILL_COMPLETED
from spellswap.systems.board_ops import GravityMove, get_board, set_tile_at, tile_at
from spellswap.systems.state_utils import get_world_random

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


class GravitySystem:
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    def locked_positions(self) -> Set[Position]:
        return {
            (pos.row, pos.col)
            for _, (_, pos) in self.world.get_components(DropLock, BoardPosition)
        }

    def drop(self) -> List[GravityMove]:
        """Let tiles fall past empty cells; locked cells hold still for this drop only."""
        board = get_board(self.world)
        locked = self.locked_positions()
        moves: List[GravityMove] = []
        for col in range(board.cols):
            moves.extend(self._drop_column(board, col, locked))
        # Locks apply to exactly one drop.
        for entity, _ in list(self.world.get_component(DropLock)):
            self.world.remove_component(entity, DropLock)
        logger.debug("Drop moved %d tiles (%d locked cells)", len(moves), len(locked))
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves, locked=sorted(locked))
        return moves

    def _drop_column(self, board: Board, col: int, locked: Set[Position]) -> List[GravityMove]:
        current = [tile_at(self.world, row, col) for row in range(board.rows)]
        # Unlocked slots from the floor upwards; locked rows keep whatever they hold.
        slots = [row for row in range(board.rows - 1, -1, -1) if (row, col) not in locked]
        movers = [(row, current[row]) for row in slots if not is_empty(current[row])]
        moves: List[GravityMove] = []
        for index, row in enumerate(slots):
            if index >= len(movers):
                set_tile_at(self.world, row, col, EMPTY)
                continue
            source_row, tile = movers[index]
            set_tile_at(self.world, row, col, tile)
            if source_row != row:
                moves.append(GravityMove(source=(source_row, col), target=(row, col), tile=tile))
        return moves

    def fill_blanks(self) -> List[Position]:
        """Give every empty cell a fresh normal tile; new runs are left for the cascade."""
        board = get_board(self.world)
        rng = get_world_random(self.world)
        spawned: List[Position] = []
        for row in range(board.rows):
            for col in range(board.cols):
                if not is_empty(tile_at(self.world, row, col)):
                    continue
                set_tile_at(self.world, row, col, Normal(rng.randint(1, board.elements_count)))
                spawned.append((row, col))
        if spawned:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=spawned)
        return spawned

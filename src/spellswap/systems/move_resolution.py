import logging
from typing import List, Optional, Tuple

from esper import World

from spellswap.components.cascade_state import MovePhase
from spellswap.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_SCORE_CHANGED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
)
from spellswap.systems.board import BoardSystem
from spellswap.systems.board_ops import Snapshot, snapshot_board, swap_tiles
from spellswap.systems.gravity import GravitySystem
from spellswap.systems.match import MatchSystem
from spellswap.systems.match_resolution import MatchResolutionSystem
from spellswap.systems.state_utils import (
    get_or_create_cascade_state,
    get_or_create_last_swap,
    get_or_create_score,
)

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


class MoveResolutionSystem:
    """Runs one player move from swap to the end of its cascade."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        board_system: BoardSystem,
        match_system: MatchSystem,
        resolution_system: MatchResolutionSystem,
        gravity_system: GravitySystem,
    ):
        self.world = world
        self.event_bus = event_bus
        self.board_system = board_system
        self.match_system = match_system
        self.resolution_system = resolution_system
        self.gravity_system = gravity_system
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = _as_position(kwargs.get('src'))
        dst = _as_position(kwargs.get('dst'))
        if src is None or dst is None:
            logger.debug("Ignoring swap request with payload %r", kwargs)
            return
        self.swap(src, dst)

    def swap(self, src: Position, dst: Position) -> Optional[List[Snapshot]]:
        """Swap two neighbouring tiles and resolve every resulting cascade.

        Returns None when the swap forms no run (the swap is undone), otherwise
        the post-clear and post-refill snapshots of each cascade step in order.
        """
        self._check_move(src, dst)
        state = get_or_create_cascade_state(self.world)
        last_swap = get_or_create_last_swap(self.world)
        last_swap.first, last_swap.second = src, dst
        swap_tiles(self.world, src, dst)
        state.phase = MovePhase.SWAPPED
        if not self.match_system.any_in_run((src, dst)):
            swap_tiles(self.world, src, dst)
            state.phase = MovePhase.IDLE
            logger.debug("Swap %s <-> %s formed no run; rolled back", src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
            return None
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst)
        return self._run_cascade()

    def _run_cascade(self) -> List[Snapshot]:
        state = get_or_create_cascade_state(self.world)
        score = get_or_create_score(self.world)
        snapshots: List[Snapshot] = []
        state.cascade_active = True
        state.cascade_depth = 0
        try:
            while True:
                state.phase = MovePhase.DETECTING
                runs = self.match_system.detect()
                state.phase = MovePhase.RESOLVING
                result = self.resolution_system.resolve(runs)
                if result.removed <= 0:
                    break
                state.cascade_depth += 1
                score.add(result.removed)
                self.event_bus.emit(EVENT_SCORE_CHANGED, score=score.value, delta=result.removed)
                self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.cascade_depth, removed=result.removed)
                snapshots.append(snapshot_board(self.world))
                state.phase = MovePhase.DROPPING
                self.gravity_system.drop()
                self.gravity_system.fill_blanks()
                snapshots.append(snapshot_board(self.world))
        finally:
            state.phase = MovePhase.IDLE
            state.cascade_active = False
        logger.debug("Move resolved in %d cascade steps, score now %d", state.cascade_depth, score.value)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=state.cascade_depth, snapshots=snapshots)
        return snapshots

    def _check_move(self, src: Position, dst: Position) -> None:
        for pos in (src, dst):
            if not self.board_system.in_bounds(pos):
                raise ValueError(f"Position {pos} is outside the {self.board_system.rows}x{self.board_system.cols} board")
        if not self.board_system.is_adjacent(src, dst):
            raise ValueError(f"Positions {src} and {dst} are not adjacent")


def _as_position(value) -> Optional[Position]:
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        return None
    if not all(isinstance(part, int) and not isinstance(part, bool) for part in value):
        return None
    return value[0], value[1]

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from esper import World

from spellswap.components.drop_lock import DropLock
from spellswap.components.tile import Special, is_empty, is_special
from spellswap.constants import SPECIAL_MATCH_LENGTH
from spellswap.events.bus import EventBus, EVENT_MATCH_CLEARED, EVENT_SPECIAL_SPAWNED
from spellswap.systems.board_ops import Run, clear_tile, get_board, get_entity_at, set_tile_at, tile_at, tile_grid
from spellswap.systems.effects.special_effect_system import SpecialEffectSystem, SpecialTrigger
from spellswap.systems.state_utils import get_or_create_last_swap, get_or_create_special_counter

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpawnedSpecial:
    uid: int
    base: int
    position: Position
    locked: bool


@dataclass(slots=True)
class ResolutionResult:
    removed: int = 0
    cleared: List[Position] = field(default_factory=list)
    triggers: List[SpecialTrigger] = field(default_factory=list)
    spawned: List[SpawnedSpecial] = field(default_factory=list)


class MatchResolutionSystem:
    def __init__(self, world: World, event_bus: EventBus, special_effects: SpecialEffectSystem):
        self.world = world
        self.event_bus = event_bus
        self.special_effects = special_effects

    def resolve(self, runs: Sequence[Run]) -> ResolutionResult:
        """Turn detected runs into cleared cells, fired specials and new specials."""
        if not runs:
            return ResolutionResult()
        grid = tile_grid(self.world)
        removal: Set[Position] = set()
        triggers: List[SpecialTrigger] = []
        pending: List[Tuple[Position, int]] = []
        for run in runs:
            special_cell = next((pos for pos in run.cells if is_special(grid[pos[0]][pos[1]])), None)
            # A special at the crossing of two runs still fires once.
            if special_cell is not None and all((t.row, t.col) != special_cell for t in triggers):
                triggers.append(SpecialTrigger(run.base, special_cell[0], special_cell[1]))
            if len(run) >= SPECIAL_MATCH_LENGTH:
                spawn_at = self.choose_special_position(run.cells)
                if all(pos != spawn_at for pos, _ in pending):
                    pending.append((spawn_at, run.base))
                removal.update(pos for pos in run.cells if pos != spawn_at)
            else:
                removal.update(run.cells)

        for trigger in triggers:
            self.special_effects.apply(trigger, removal)

        cleared = [pos for pos in sorted(removal) if clear_tile(self.world, *pos)]

        self._release_locks()
        spawned = [self._spawn_special(pos, base) for pos, base in pending]

        logger.debug(
            "Resolved %d runs: cleared %d cells, fired %d specials, spawned %d",
            len(runs), len(cleared), len(triggers), len(spawned),
        )
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=cleared, removed=len(cleared))
        return ResolutionResult(removed=len(cleared), cleared=cleared, triggers=triggers, spawned=spawned)

    def choose_special_position(self, cells: Sequence[Position]) -> Position:
        """Prefer the swap's first endpoint, then its second, then the run's middle."""
        last_swap = get_or_create_last_swap(self.world)
        for endpoint in (last_swap.first, last_swap.second):
            if endpoint is not None and endpoint in cells:
                return endpoint
        return cells[len(cells) // 2]

    def _spawn_special(self, pos: Position, base: int) -> SpawnedSpecial:
        uid = get_or_create_special_counter(self.world).mint()
        row, col = pos
        set_tile_at(self.world, row, col, Special(uid=uid, base=base))
        locked = not self._has_empty_below(row, col)
        if locked:
            entity: Optional[int] = get_entity_at(self.world, row, col)
            if entity is not None:
                self.world.add_component(entity, DropLock())
        self.event_bus.emit(EVENT_SPECIAL_SPAWNED, uid=uid, base=base, row=row, col=col, locked=locked)
        return SpawnedSpecial(uid=uid, base=base, position=pos, locked=locked)

    def _has_empty_below(self, row: int, col: int) -> bool:
        rows = get_board(self.world).rows
        return any(is_empty(tile_at(self.world, r, col)) for r in range(row + 1, rows))

    def _release_locks(self) -> None:
        for entity, _ in list(self.world.get_component(DropLock)):
            self.world.remove_component(entity, DropLock)

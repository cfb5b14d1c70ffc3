from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Set, Tuple

from esper import World

from spellswap.components.tile import is_empty
from spellswap.effects.factory import ensure_default_specials_registered
from spellswap.effects.registry import (
    SHAPE_CROSS,
    SHAPE_NEIGHBORS,
    SHAPE_RANDOM,
    SHAPE_ROW,
    SpecialEffectDefinition,
    SpecialEffectRegistry,
)
from spellswap.effects.sink import EffectSink
from spellswap.events.bus import EVENT_SPECIAL_TRIGGERED, EventBus
from spellswap.systems.board_ops import get_board, tile_grid
from spellswap.systems.state_utils import get_world_random

Position = Tuple[int, int]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpecialTrigger:
    base: int
    row: int
    col: int


class SpecialEffectSystem:
    """Fires consumed specials: widens the removal set and notifies the sink."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        sink: EffectSink,
        registry: SpecialEffectRegistry | None = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.sink = sink
        # An injected table is used as given; otherwise the shared defaults.
        self.registry = registry if registry is not None else ensure_default_specials_registered()

    def apply(self, trigger: SpecialTrigger, removal: Set[Position]) -> SpecialEffectDefinition:
        definition = self.registry.get(trigger.base)
        self.event_bus.emit(
            EVENT_SPECIAL_TRIGGERED,
            base=trigger.base,
            row=trigger.row,
            col=trigger.col,
            slug=definition.slug,
        )
        before = len(removal)
        removal.update(self._resolve_positions(definition, trigger))
        logger.debug(
            "Special %s at %s added %d cells to the removal set",
            definition.slug,
            (trigger.row, trigger.col),
            len(removal) - before,
        )
        self._notify(definition)
        return definition

    def _resolve_positions(self, definition: SpecialEffectDefinition, trigger: SpecialTrigger) -> List[Position]:
        board = get_board(self.world)
        rows, cols = board.rows, board.cols
        row, col = trigger.row, trigger.col
        shape = definition.shape
        positions: List[Position] = []
        if shape == SHAPE_ROW:
            positions = [(row, c) for c in range(cols)]
        elif shape == SHAPE_CROSS:
            positions = [(row, c) for c in range(cols)] + [(r, col) for r in range(rows)]
        elif shape == SHAPE_NEIGHBORS:
            for dr in (-1, 0, 1):
                for dc in (-1, 0, 1):
                    if dr == 0 and dc == 0:
                        continue
                    if board.in_bounds(row + dr, col + dc):
                        positions.append((row + dr, col + dc))
        elif shape == SHAPE_RANDOM:
            positions = self._random_occupied(definition.clear_count)
        return positions

    def _random_occupied(self, count: int) -> List[Position]:
        grid = tile_grid(self.world)
        candidates = [
            (r, c)
            for r, row in enumerate(grid)
            for c, tile in enumerate(row)
            if not is_empty(tile)
        ]
        rng = get_world_random(self.world)
        picked: List[Position] = []
        while candidates and len(picked) < count:
            picked.append(candidates.pop(rng.randrange(len(candidates))))
        return picked

    def _notify(self, definition: SpecialEffectDefinition) -> None:
        if definition.damage:
            self._call(definition, "on_enemy_damage", definition.damage)
        if definition.heal:
            self._call(definition, "on_player_heal", definition.heal)
        if definition.slow_ms:
            self._call(definition, "on_enemy_slow", definition.slow_factor, definition.slow_ms)
        if definition.stun_ms:
            self._call(definition, "on_enemy_stun", definition.stun_ms)
        if definition.lifesteal_ms:
            self._call(definition, "on_enable_lifesteal", definition.lifesteal_ms)

    def _call(self, definition: SpecialEffectDefinition, name: str, *args) -> None:
        callback = getattr(self.sink, name, None)
        if callback is None:
            # Sinks only implement the callbacks they care about.
            return
        # Sink failures are logged; the pass always completes.
        try:
            callback(*args)
        except Exception:
            logger.exception("Effect sink call %s%r failed for special '%s'", name, args, definition.slug)

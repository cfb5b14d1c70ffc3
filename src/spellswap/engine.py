"""Public entry point for the spellswap board engine.

Builds the ECS world, event bus and systems, and exposes the operations a
presentation layer needs: swap, board reads and score.
"""
from __future__ import annotations

import random
from typing import List, Optional, Tuple

from spellswap.constants import ELEMENTS_COUNT, GRID_COLS, GRID_ROWS
from spellswap.components.tile import Tile
from spellswap.effects.registry import SpecialEffectRegistry
from spellswap.effects.sink import EffectSink, NullEffectSink
from spellswap.events.bus import EventBus
from spellswap.systems import board_ops
from spellswap.systems.board import BoardSystem
from spellswap.systems.board_ops import Snapshot
from spellswap.systems.effects.special_effect_system import SpecialEffectSystem
from spellswap.systems.gravity import GravitySystem
from spellswap.systems.match import MatchSystem
from spellswap.systems.match_resolution import MatchResolutionSystem
from spellswap.systems.move_resolution import MoveResolutionSystem
from spellswap.systems.state_utils import get_or_create_score
from spellswap.world import create_world

Position = Tuple[int, int]


class BoardEngine:
    def __init__(
        self,
        rows: int = GRID_ROWS,
        columns: int = GRID_COLS,
        elements_count: int = ELEMENTS_COUNT,
        effect_sink: EffectSink | None = None,
        *,
        rng: random.Random | None = None,
        event_bus: EventBus | None = None,
        registry: SpecialEffectRegistry | None = None,
    ):
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.effect_sink = effect_sink if effect_sink is not None else NullEffectSink()
        self.world = create_world(rng=rng)
        self.board_system = BoardSystem(self.world, self.event_bus, rows, columns, elements_count)
        self.match_system = MatchSystem(self.world, self.event_bus)
        self.special_effect_system = SpecialEffectSystem(self.world, self.event_bus, self.effect_sink, registry)
        self.match_resolution_system = MatchResolutionSystem(self.world, self.event_bus, self.special_effect_system)
        self.gravity_system = GravitySystem(self.world, self.event_bus)
        self.move_resolution_system = MoveResolutionSystem(
            self.world,
            self.event_bus,
            self.board_system,
            self.match_system,
            self.match_resolution_system,
            self.gravity_system,
        )

    @property
    def rows(self) -> int:
        return self.board_system.rows

    @property
    def cols(self) -> int:
        return self.board_system.cols

    @property
    def elements_count(self) -> int:
        return self.board_system.elements_count

    @property
    def score(self) -> int:
        return get_or_create_score(self.world).value

    @property
    def board(self) -> Snapshot:
        return board_ops.snapshot_board(self.world)

    def tile_at(self, row: int, col: int) -> Tile:
        return board_ops.tile_at(self.world, row, col)

    def swap(self, a: Position, b: Position) -> Optional[List[Snapshot]]:
        return self.move_resolution_system.swap(a, b)

    def find_valid_swaps(self) -> List[Tuple[Position, Position]]:
        return board_ops.find_valid_swaps(self.world)

    def has_valid_moves(self) -> bool:
        return bool(self.find_valid_swaps())

    def count_empty_cells(self) -> int:
        return board_ops.count_empty_cells(self.world)

from __future__ import annotations

import random
from typing import Iterable, List, Sequence

from spellswap.components.tile import EMPTY, Empty, Normal, Special, Tile, base_of
from spellswap.engine import BoardEngine
from spellswap.systems.board_ops import set_tile_at
from spellswap.systems.state_utils import get_or_create_last_swap


class ScriptedRandom(random.Random):
    """Random whose randint/randrange answers come from scripts while they last.

    Build it with scripted_random(); random.Random's constructor is picky
    about extra arguments, so the scripts are attached after construction.
    """

    def __init__(self):
        super().__init__(0)
        self.script: list[int] = []
        self.ranges: list[int] = []

    def randint(self, a, b):
        if self.script:
            value = self.script.pop(0)
            assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
            return value
        return a + self._randbelow(b - a + 1)

    def randrange(self, start, stop=None, step=1):
        if self.ranges:
            return self.ranges.pop(0)
        return super().randrange(start, stop, step)


def scripted_random(script: Iterable[int] = (), ranges: Iterable[int] = ()) -> ScriptedRandom:
    rng = ScriptedRandom()
    rng.script = list(script)
    rng.ranges = list(ranges)
    return rng


class RecordingEffectSink:
    """Captures effect callbacks as (name, *args) tuples."""

    def __init__(self):
        self.calls: list[tuple] = []

    def on_enemy_damage(self, amount):
        self.calls.append(("enemy_damage", amount))

    def on_player_heal(self, amount):
        self.calls.append(("player_heal", amount))

    def on_enemy_slow(self, factor, duration_ms):
        self.calls.append(("enemy_slow", factor, duration_ms))

    def on_enemy_stun(self, duration_ms):
        self.calls.append(("enemy_stun", duration_ms))

    def on_enable_lifesteal(self, duration_ms):
        self.calls.append(("enable_lifesteal", duration_ms))


def pattern_grid(rows: int = 8, cols: int = 8, elements: int = 5) -> List[List[Tile]]:
    """Grid where no two neighbours in a row or column share a base."""
    return [[Normal((c + 2 * r) % elements + 1) for c in range(cols)] for r in range(rows)]


def checkerboard(rows: int, cols: int, first: int, second: int) -> List[List[Tile]]:
    return [[Normal(first if (r + c) % 2 == 0 else second) for c in range(cols)] for r in range(rows)]


def load_grid(engine: BoardEngine, grid: Sequence[Sequence[Tile | int | None]]) -> None:
    for r, row in enumerate(grid):
        for c, value in enumerate(row):
            if value is None:
                tile = EMPTY
            elif isinstance(value, (Empty, Normal, Special)):
                tile = value
            else:
                tile = Normal(value)
            set_tile_at(engine.world, r, c, tile)


def make_engine(
    grid: Sequence[Sequence[Tile | int | None]],
    *,
    elements: int = 5,
    script: Iterable[int] = (),
    ranges: Iterable[int] = (),
    sink=None,
    event_bus=None,
    registry=None,
) -> BoardEngine:
    rng = scripted_random(script, ranges)
    engine = BoardEngine(
        len(grid), len(grid[0]), elements, sink, rng=rng, event_bus=event_bus, registry=registry
    )
    load_grid(engine, grid)
    return engine


def set_last_swap(engine: BoardEngine, first=None, second=None) -> None:
    last_swap = get_or_create_last_swap(engine.world)
    last_swap.first, last_swap.second = first, second


def bases(snapshot) -> List[List[int | None]]:
    return [[base_of(tile) for tile in row] for row in snapshot]


def resolve_once(engine: BoardEngine):
    """Detect and resolve a single pass without gravity or refill."""
    runs = engine.match_system.detect()
    return engine.match_resolution_system.resolve(runs)

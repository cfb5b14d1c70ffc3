import logging

import pytest

from spellswap.components.tile import EMPTY, Normal, Special
from spellswap.effects.sink import EffectSink, EventBusEffectSink, NullEffectSink
from spellswap.events.bus import (
    EVENT_ENEMY_DAMAGE,
    EVENT_ENEMY_SLOW,
    EVENT_SPECIAL_TRIGGERED,
    EventBus,
)
from spellswap.systems.board_ops import find_all_matches, removed_in, tile_at

from tests.helpers import (
    RecordingEffectSink,
    bases,
    checkerboard,
    make_engine,
    pattern_grid,
    resolve_once,
)


def special_row_grid(base):
    """Checkerboard with a run of three `base` tiles in row 3; (3,0) holds the special."""
    first, second = (3, 4) if base in (1, 2) else (1, 2)
    grid = checkerboard(8, 8, first, second)
    grid[3][0] = Special(uid=99, base=base)
    grid[3][1] = Normal(base)
    grid[3][2] = Normal(base)
    return grid


def resolve_special(base, *, ranges=(), sink=None):
    sink = sink if sink is not None else RecordingEffectSink()
    engine = make_engine(special_row_grid(base), elements=7, ranges=ranges, sink=sink)
    assert len(find_all_matches(engine.world)) == 1
    return engine, sink, resolve_once(engine)


def test_dragon_slave_clears_the_whole_row():
    engine, sink, result = resolve_special(1)
    assert result.removed == 8
    assert all(tile_at(engine.world, 3, c) is EMPTY for c in range(8))
    assert sink.calls == [("enemy_damage", 15)]


def test_insatiable_hunger_only_grants_lifesteal():
    _, sink, result = resolve_special(2)
    assert result.removed == 3
    assert sink.calls == [("enable_lifesteal", 6000)]


def test_crystal_nova_clears_neighbours_and_slows():
    engine, sink, result = resolve_special(3)
    assert result.removed == 7
    assert set(result.cleared) == {(3, 0), (3, 1), (3, 2), (2, 0), (2, 1), (4, 0), (4, 1)}
    assert sink.calls == [("enemy_damage", 10), ("enemy_slow", 0.5, 6000)]


def test_frost_blast_slows_for_longer():
    _, sink, result = resolve_special(4)
    assert result.removed == 7
    assert sink.calls == [("enemy_damage", 8), ("enemy_slow", 0.5, 9000)]


def test_magic_missile_damages_and_stuns():
    _, sink, result = resolve_special(5)
    assert result.removed == 3
    assert sink.calls == [("enemy_damage", 20), ("enemy_stun", 3000)]


def test_splinter_blast_destroys_random_occupied_cells():
    # Always picking the first remaining candidate walks row 0 left to right.
    engine, sink, result = resolve_special(6, ranges=[0] * 5)
    assert result.removed == 8
    assert all(tile_at(engine.world, 0, c) is EMPTY for c in range(5))
    assert tile_at(engine.world, 0, 5) is not EMPTY
    assert sink.calls == [("enemy_damage", 12)]


def test_unknown_base_uses_arcane_cross():
    engine, sink, result = resolve_special(7)
    assert result.removed == 15
    assert all(tile_at(engine.world, 3, c) is EMPTY for c in range(8))
    assert all(tile_at(engine.world, r, 0) is EMPTY for r in range(8))
    assert sink.calls == [("enemy_damage", 10)]


def test_neighbour_shape_is_clipped_at_the_corner():
    grid = checkerboard(8, 8, 1, 2)
    grid[0][0] = Special(uid=1, base=3)
    grid[0][1] = Normal(3)
    grid[0][2] = Normal(3)
    engine = make_engine(grid, elements=7)
    result = resolve_once(engine)
    assert result.removed == 5
    assert set(result.cleared) == {(0, 0), (0, 1), (0, 2), (1, 0), (1, 1)}


def test_special_at_run_crossing_fires_once():
    grid = checkerboard(8, 8, 1, 2)
    for pos in ((3, 0), (3, 2), (2, 1), (4, 1)):
        grid[pos[0]][pos[1]] = Normal(5)
    grid[3][1] = Special(uid=4, base=5)
    sink = RecordingEffectSink()
    engine = make_engine(grid, elements=7, sink=sink)
    assert len(find_all_matches(engine.world)) == 2

    result = resolve_once(engine)

    assert len(result.triggers) == 1
    assert result.removed == 5
    assert sink.calls == [("enemy_damage", 20), ("enemy_stun", 3000)]


class FailingDamageSink(RecordingEffectSink):
    def on_enemy_damage(self, amount):
        raise RuntimeError("enemy already defeated")


def test_failing_sink_is_logged_and_resolution_continues(caplog):
    caplog.set_level(logging.ERROR, logger="spellswap")
    engine, sink, result = resolve_special(3, sink=FailingDamageSink())

    assert result.removed == 7
    assert sink.calls == [("enemy_slow", 0.5, 6000)]
    errors = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(errors) == 1
    assert "on_enemy_damage" in errors[0].getMessage()
    assert "crystal_nova" in errors[0].getMessage()
    assert errors[0].exc_info is not None


class DamageOnlySink:
    def __init__(self):
        self.damage = []

    def on_enemy_damage(self, amount):
        self.damage.append(amount)


def test_sink_without_some_callbacks_is_not_an_error(caplog):
    caplog.set_level(logging.DEBUG, logger="spellswap")
    sink = DamageOnlySink()
    _, _, result = resolve_special(3, sink=sink)

    assert result.removed == 7
    assert sink.damage == [10]
    assert [r for r in caplog.records if r.levelno >= logging.WARNING] == []


class QuietSink(RecordingEffectSink):
    def __len__(self):
        return 0


def test_falsy_sink_is_still_used():
    sink = QuietSink()
    engine, _, _ = resolve_special(5, sink=sink)

    assert engine.effect_sink is sink
    assert sink.calls == [("enemy_damage", 20), ("enemy_stun", 3000)]


def test_event_bus_sink_republishes_effects():
    bus = EventBus()
    received = []
    bus.subscribe(EVENT_ENEMY_DAMAGE, lambda sender, **kw: received.append(("damage", kw)))
    bus.subscribe(EVENT_ENEMY_SLOW, lambda sender, **kw: received.append(("slow", kw)))
    bus.subscribe(EVENT_SPECIAL_TRIGGERED, lambda sender, **kw: received.append(("triggered", kw)))

    engine = make_engine(special_row_grid(4), elements=7, sink=EventBusEffectSink(bus), event_bus=bus)
    resolve_once(engine)

    assert received == [
        ("triggered", {"base": 4, "row": 3, "col": 0, "slug": "frost_blast"}),
        ("damage", {"amount": 8}),
        ("slow", {"factor": 0.5, "duration_ms": 9000}),
    ]


def test_sinks_satisfy_the_protocol():
    assert isinstance(NullEffectSink(), EffectSink)
    assert isinstance(EventBusEffectSink(EventBus()), EffectSink)
    assert isinstance(RecordingEffectSink(), EffectSink)


def test_swap_into_row_clearing_special():
    grid = pattern_grid()
    # Row 2 reads S1 1 2 ...; dropping the 1 from (1,2) completes the run.
    grid[2][0] = Special(uid=7, base=1)
    grid[1][2] = Normal(1)
    sink = RecordingEffectSink()
    engine = make_engine(grid, script=[2, 3, 4, 5, 1, 2, 3, 4], sink=sink)

    snapshots = engine.swap((1, 2), (2, 2))

    assert snapshots is not None and len(snapshots) == 2
    cleared, refilled = snapshots
    assert all(tile is EMPTY for tile in cleared[2])
    assert removed_in(cleared) == 8
    assert engine.score == 8
    assert sink.calls == [("enemy_damage", 15)]
    assert bases(refilled)[0] == [2, 3, 4, 5, 1, 2, 3, 4]
    assert bases(refilled)[2] == [3, 4, 2, 1, 2, 3, 4, 5]


@pytest.mark.parametrize("base", [1, 3, 6, 7])
def test_board_effects_never_clear_outside_the_board(base):
    engine, _, result = resolve_special(base, ranges=[0] * 5)
    assert all(0 <= r < 8 and 0 <= c < 8 for r, c in result.cleared)
    assert len(set(result.cleared)) == result.removed

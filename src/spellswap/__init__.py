from spellswap.components.tile import EMPTY, Empty, Normal, Special, Tile, base_of
from spellswap.effects.sink import EffectSink, EventBusEffectSink, NullEffectSink
from spellswap.engine import BoardEngine
from spellswap.events.bus import EventBus
from spellswap.systems.board_ops import GravityMove, Run, Snapshot, removed_in

__all__ = [
    "BoardEngine",
    "EMPTY",
    "EffectSink",
    "Empty",
    "EventBus",
    "EventBusEffectSink",
    "GravityMove",
    "Normal",
    "NullEffectSink",
    "Run",
    "Snapshot",
    "Special",
    "Tile",
    "base_of",
    "removed_in",
]

from __future__ import annotations

from typing import Protocol, runtime_checkable

from spellswap.events.bus import (
    EVENT_ENEMY_DAMAGE,
    EVENT_ENEMY_SLOW,
    EVENT_ENEMY_STUN,
    EVENT_LIFESTEAL_ENABLED,
    EVENT_PLAYER_HEAL,
    EventBus,
)


@runtime_checkable
class EffectSink(Protocol):
    """Combat-side receiver for the side effects of consumed specials.

    Calls are synchronous notifications; implementations must not touch the
    board and should return quickly. A sink may leave out callbacks it does
    not care about; those are skipped.
    """

    def on_enemy_damage(self, amount: int) -> None: ...

    def on_player_heal(self, amount: int) -> None: ...

    def on_enemy_slow(self, factor: float, duration_ms: int) -> None: ...

    def on_enemy_stun(self, duration_ms: int) -> None: ...

    def on_enable_lifesteal(self, duration_ms: int) -> None: ...


class NullEffectSink:
    """Sink used when the caller does not care about combat effects."""

    def on_enemy_damage(self, amount: int) -> None:
        pass

    def on_player_heal(self, amount: int) -> None:
        pass

    def on_enemy_slow(self, factor: float, duration_ms: int) -> None:
        pass

    def on_enemy_stun(self, duration_ms: int) -> None:
        pass

    def on_enable_lifesteal(self, duration_ms: int) -> None:
        pass


class EventBusEffectSink:
    """Republishes effect callbacks as bus events for subscribers."""

    def __init__(self, event_bus: EventBus) -> None:
        self.event_bus = event_bus

    def on_enemy_damage(self, amount: int) -> None:
        self.event_bus.emit(EVENT_ENEMY_DAMAGE, amount=amount)

    def on_player_heal(self, amount: int) -> None:
        self.event_bus.emit(EVENT_PLAYER_HEAL, amount=amount)

    def on_enemy_slow(self, factor: float, duration_ms: int) -> None:
        self.event_bus.emit(EVENT_ENEMY_SLOW, factor=factor, duration_ms=duration_ms)

    def on_enemy_stun(self, duration_ms: int) -> None:
        self.event_bus.emit(EVENT_ENEMY_STUN, duration_ms=duration_ms)

    def on_enable_lifesteal(self, duration_ms: int) -> None:
        self.event_bus.emit(EVENT_LIFESTEAL_ENABLED, duration_ms=duration_ms)

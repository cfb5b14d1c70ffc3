from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps lambdas and bound methods of unreferenced systems alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c)


# ============================================================================
# MATCHING & RESOLUTION
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: runs=list[Run], positions=[(r,c),...], size=int
EVENT_SPECIAL_TRIGGERED = "special_triggered"      # payload: base=int, row=int, col=int, slug=str
EVENT_SPECIAL_SPAWNED = "special_spawned"          # payload: uid=int, base=int, row=int, col=int, locked=bool
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], removed=int


# ============================================================================
# GRAVITY & REFILL
# ============================================================================
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove], locked=[(r,c),...]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...]


# ============================================================================
# CASCADES & SCORE
# ============================================================================
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, removed=int
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, snapshots=list
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int


# ============================================================================
# COMBAT EFFECTS (published by EventBusEffectSink)
# ============================================================================
EVENT_ENEMY_DAMAGE = "enemy_damage"                # payload: amount=int
EVENT_PLAYER_HEAL = "player_heal"                  # payload: amount=int
EVENT_ENEMY_SLOW = "enemy_slow"                    # payload: factor=float, duration_ms=int
EVENT_ENEMY_STUN = "enemy_stun"                    # payload: duration_ms=int
EVENT_LIFESTEAL_ENABLED = "lifesteal_enabled"      # payload: duration_ms=int

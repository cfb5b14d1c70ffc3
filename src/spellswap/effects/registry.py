from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

# Board footprints a special can clear when it fires.
SHAPE_NONE = "none"
SHAPE_ROW = "row"
SHAPE_NEIGHBORS = "neighbors"
SHAPE_CROSS = "cross"
SHAPE_RANDOM = "random"

SHAPES = (SHAPE_NONE, SHAPE_ROW, SHAPE_NEIGHBORS, SHAPE_CROSS, SHAPE_RANDOM)


@dataclass(frozen=True, slots=True)
class SpecialEffectDefinition:
    """Static description of what a special tile does when a run consumes it.

    ``shape`` selects the extra cells added to the removal set; the remaining
    fields are the numbers handed to the effect sink. A value of zero means
    the corresponding callback is not fired.
    """

    slug: str
    display_name: str
    description: str = ""
    shape: str = SHAPE_NONE
    clear_count: int = 0
    damage: int = 0
    heal: int = 0
    slow_factor: float = 0.0
    slow_ms: int = 0
    stun_ms: int = 0
    lifesteal_ms: int = 0

    def __post_init__(self) -> None:
        if self.shape not in SHAPES:
            raise ValueError(f"Unknown special shape '{self.shape}' for '{self.slug}'")


class SpecialEffectRegistry:
    """In-memory table of special effects keyed by tile base.

    Bases without an entry resolve to the fallback definition.
    """

    def __init__(self) -> None:
        self._definitions: dict[int, SpecialEffectDefinition] = {}
        self._fallback: SpecialEffectDefinition | None = None

    def register(self, base: int, definition: SpecialEffectDefinition) -> None:
        if base in self._definitions:
            raise ValueError(f"Special effect for base {base} already registered")
        self._definitions[base] = definition

    def register_fallback(self, definition: SpecialEffectDefinition) -> None:
        self._fallback = definition

    def get(self, base: int) -> SpecialEffectDefinition:
        definition = self._definitions.get(base)
        if definition is not None:
            return definition
        if self._fallback is None:
            raise KeyError(f"No special effect registered for base {base}")
        return self._fallback

    def has(self, base: int) -> bool:
        return base in self._definitions

    def has_fallback(self) -> bool:
        return self._fallback is not None

    def all(self) -> Iterable[tuple[int, SpecialEffectDefinition]]:
        return tuple(sorted(self._definitions.items()))


default_special_registry = SpecialEffectRegistry()

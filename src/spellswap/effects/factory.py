from __future__ import annotations

from spellswap.constants import RANDOM_CLEAR_COUNT
from spellswap.effects.registry import (
    SHAPE_CROSS,
    SHAPE_NEIGHBORS,
    SHAPE_RANDOM,
    SHAPE_ROW,
    SpecialEffectDefinition,
    SpecialEffectRegistry,
    default_special_registry,
)


def ensure_default_specials_registered(
    registry: SpecialEffectRegistry | None = None,
) -> SpecialEffectRegistry:
    """Register the core special effects if they are not already present."""

    if registry is None:
        registry = default_special_registry

    def _register(base: int, definition: SpecialEffectDefinition) -> None:
        if registry.has(base):
            return
        registry.register(base, definition)

    _register(
        1,
        SpecialEffectDefinition(
            slug="dragon_slave",
            display_name="Dragon Slave",
            description="Burns away the special's whole row.",
            shape=SHAPE_ROW,
            damage=15,
        ),
    )
    _register(
        2,
        SpecialEffectDefinition(
            slug="insatiable_hunger",
            display_name="Insatiable Hunger",
            description="Grants lifesteal for a short while.",
            lifesteal_ms=6000,
        ),
    )
    _register(
        3,
        SpecialEffectDefinition(
            slug="crystal_nova",
            display_name="Crystal Nova",
            description="Shatters the surrounding tiles and chills the enemy.",
            shape=SHAPE_NEIGHBORS,
            damage=10,
            slow_factor=0.5,
            slow_ms=6000,
        ),
    )
    _register(
        4,
        SpecialEffectDefinition(
            slug="frost_blast",
            display_name="Frost Blast",
            description="Freezes the surrounding tiles and slows the enemy longer.",
            shape=SHAPE_NEIGHBORS,
            damage=8,
            slow_factor=0.5,
            slow_ms=9000,
        ),
    )
    _register(
        5,
        SpecialEffectDefinition(
            slug="magic_missile",
            display_name="Magic Missile",
            description="Strikes and stuns the enemy.",
            damage=20,
            stun_ms=3000,
        ),
    )
    _register(
        6,
        SpecialEffectDefinition(
            slug="splinter_blast",
            display_name="Splinter Blast",
            description="Scatters shards that destroy random tiles.",
            shape=SHAPE_RANDOM,
            clear_count=RANDOM_CLEAR_COUNT,
            damage=12,
        ),
    )
    if not registry.has_fallback():
        registry.register_fallback(
            SpecialEffectDefinition(
                slug="arcane_cross",
                display_name="Arcane Cross",
                description="Clears the special's row and column.",
                shape=SHAPE_CROSS,
                damage=10,
            )
        )
    return registry

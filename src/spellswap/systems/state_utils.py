import random
from typing import Type, TypeVar

from esper import World

from spellswap.components.cascade_state import CascadeState
from spellswap.components.last_swap import LastSwap
from spellswap.components.score import Score
from spellswap.components.special_counter import SpecialCounter

C = TypeVar("C")


def _get_or_create(world: World, component_type: Type[C]) -> C:
    existing = list(world.get_component(component_type))
    if existing:
        return existing[0][1]
    world.create_entity(component_type())
    return list(world.get_component(component_type))[0][1]


def get_or_create_cascade_state(world: World) -> CascadeState:
    """Return the shared CascadeState component, creating it if absent."""
    return _get_or_create(world, CascadeState)


def get_or_create_score(world: World) -> Score:
    return _get_or_create(world, Score)


def get_or_create_special_counter(world: World) -> SpecialCounter:
    return _get_or_create(world, SpecialCounter)


def get_or_create_last_swap(world: World) -> LastSwap:
    return _get_or_create(world, LastSwap)


def get_world_random(world: World) -> random.Random:
    """Return the generator attached by create_world, attaching one if missing."""
    rng = getattr(world, "random", None)
    if isinstance(rng, random.Random):
        return rng
    rng = random.Random()
    setattr(world, "random", rng)
    return rng

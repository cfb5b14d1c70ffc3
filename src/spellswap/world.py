import random

from esper import World

from spellswap.components.cascade_state import CascadeState
from spellswap.components.last_swap import LastSwap
from spellswap.components.score import Score
from spellswap.components.special_counter import SpecialCounter


def create_world(*, rng: random.Random | None = None) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())

    # Single state entity carrying per-game bookkeeping.
    world.create_entity(
        Score(),
        SpecialCounter(),
        LastSwap(),
        CascadeState(),
    )
    return world

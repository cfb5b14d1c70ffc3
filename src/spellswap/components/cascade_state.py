from dataclasses import dataclass
from enum import Enum, auto


class MovePhase(Enum):
    """Phases a single move passes through while it resolves."""
    IDLE = auto()
    SWAPPED = auto()
    DETECTING = auto()
    RESOLVING = auto()
    DROPPING = auto()


@dataclass(slots=True)
class CascadeState:
    """Tracks the move currently being resolved."""

    phase: MovePhase = MovePhase.IDLE
    cascade_active: bool = False
    cascade_depth: int = 0

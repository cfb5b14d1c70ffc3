from dataclasses import dataclass
from typing import Optional, Tuple

@dataclass(slots=True)
class LastSwap:
    """Endpoints of the most recent swap; drives special placement."""
    first: Optional[Tuple[int, int]] = None
    second: Optional[Tuple[int, int]] = None

from dataclasses import dataclass, field
from typing import Dict, Tuple

@dataclass(slots=True)
class Board:
    rows: int
    cols: int
    elements_count: int
    # (row, col) -> cell entity, filled once when the board is created
    cells: Dict[Tuple[int, int], int] = field(default_factory=dict)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

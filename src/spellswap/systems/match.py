from typing import Iterable, List, Tuple

from esper import World

from spellswap.events.bus import EventBus, EVENT_MATCH_FOUND
from spellswap.systems.board_ops import Run, find_runs, has_line_match, tile_grid


class MatchSystem:
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus

    def detect(self) -> List[Run]:
        """Scan every row and column for runs; announce them when found."""
        runs = find_runs(tile_grid(self.world))
        if runs:
            positions = sorted({pos for run in runs for pos in run.cells})
            self.event_bus.emit(EVENT_MATCH_FOUND, runs=runs, positions=positions, size=len(positions))
        return runs

    def any_in_run(self, positions: Iterable[Tuple[int, int]]) -> bool:
        # Only the given positions are checked, not the whole board.
        grid = tile_grid(self.world)
        return any(has_line_match(grid, pos) for pos in positions)

"""Obstacle generation by bounded rejection sampling."""

from typing import FrozenSet, Optional, Sequence

import numpy as np

from .errors import Unsatisfiable
from .grid import GridSpec, Position

# Rejected draws allowed per grid cell before giving up
DEFAULT_REJECTIONS_PER_CELL = 50


def excluded_cells(trail: Sequence[Position], grid: GridSpec) -> FrozenSet[Position]:
    """Cells that may never hold an obstacle: start, end and the trail."""
    return frozenset([grid.start, grid.end, *(Position(*p) for p in trail)])


def free_cell_count(trail: Sequence[Position], grid: GridSpec) -> int:
    """Number of cells available for obstacle placement."""
    excluded = {p for p in excluded_cells(trail, grid) if grid.is_in_bounds(p)}
    return grid.area - len(excluded)


def generate_obstacles(trail: Sequence[Position],
                       budget: int,
                       grid: GridSpec,
                       rng: np.random.Generator,
                       max_rejections: Optional[int] = None) -> FrozenSet[Position]:
    """
    Draw `budget` distinct obstacle cells uniformly at random.

    A draw is rejected if it hits the start, the end, a trail cell or an
    obstacle already accepted in this call. Raises Unsatisfiable when the
    grid cannot hold `budget` obstacles or when more than `max_rejections`
    draws were rejected (defaults to DEFAULT_REJECTIONS_PER_CELL * area).
    """
    if budget < 0:
        raise ValueError(f"obstacle budget must be non-negative, got {budget}")
    if budget == 0:
        return frozenset()

    available = free_cell_count(trail, grid)
    if available < budget:
        raise Unsatisfiable(budget, available)

    if max_rejections is None:
        max_rejections = DEFAULT_REJECTIONS_PER_CELL * grid.area

    blocked = excluded_cells(trail, grid)
    accepted = set()
    rejections = 0
    while len(accepted) < budget:
        candidate = Position(int(rng.integers(0, grid.rows)),
                             int(rng.integers(0, grid.columns)))
        if candidate in blocked or candidate in accepted:
            rejections += 1
            if rejections > max_rejections:
                raise Unsatisfiable(budget, available, rejections)
            continue
        accepted.add(candidate)

    return frozenset(accepted)

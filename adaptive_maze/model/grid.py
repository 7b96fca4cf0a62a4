"""Grid model for the adaptive maze simulation."""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple

import numpy as np

from .errors import InvalidConfiguration


class Position(NamedTuple):
    """Cell coordinate: x is the row index, y the column index."""
    x: int
    y: int


# Up, right, down, left. BFS tie-breaking depends on this order.
NEIGHBOR_OFFSETS = ((-1, 0), (0, 1), (1, 0), (0, -1))


@dataclass(frozen=True)
class GridSpec:
    """
    Immutable board description.

    Coordinate convention: Position(x, y) for the API, [x, y] for array
    indexing (rows first), matching how the board is displayed.
    """
    rows: int
    columns: int
    start: Position
    end: Position

    def __post_init__(self):
        if self.rows <= 0 or self.columns <= 0:
            raise InvalidConfiguration(
                f"grid dimensions must be positive, got {self.rows}x{self.columns}")
        # Accept plain tuples/lists from callers and config files
        object.__setattr__(self, 'start', Position(*self.start))
        object.__setattr__(self, 'end', Position(*self.end))
        if not self.is_in_bounds(self.start):
            raise InvalidConfiguration(f"start {tuple(self.start)} is outside the grid")
        if not self.is_in_bounds(self.end):
            raise InvalidConfiguration(f"end {tuple(self.end)} is outside the grid")

    @property
    def area(self) -> int:
        return self.rows * self.columns

    def is_in_bounds(self, pos) -> bool:
        """Check if cell lies within [0, rows) x [0, columns)."""
        x, y = pos
        return 0 <= x < self.rows and 0 <= y < self.columns

    def neighbors(self, pos) -> List[Position]:
        """In-bounds von Neumann neighbours in up, right, down, left order."""
        x, y = pos
        result = []
        for dx, dy in NEIGHBOR_OFFSETS:
            candidate = Position(x + dx, y + dy)
            if self.is_in_bounds(candidate):
                result.append(candidate)
        return result

    def cells(self) -> Iterator[Position]:
        """Every cell in row-major order."""
        for x in range(self.rows):
            for y in range(self.columns):
                yield Position(x, y)

    def mask(self, positions: Iterable) -> np.ndarray:
        """Boolean (rows, columns) array with the given cells set."""
        result = np.zeros((self.rows, self.columns), dtype=bool)
        for x, y in positions:
            if self.is_in_bounds((x, y)):
                result[x, y] = True
        return result

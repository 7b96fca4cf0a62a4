"""Breadth-first shortest path search around obstacles and the agent trail."""

from collections import deque
from typing import Dict, Iterable, List, Optional, Sequence

from .grid import GridSpec, Position


def find_path(trail: Sequence[Position],
              obstacles: Iterable[Position],
              grid: GridSpec,
              allow_fallback: bool = True) -> Optional[List[Position]]:
    """
    Find a shortest path from the trail tail to the grid end.

    Obstacles and every trail cell are impassable. Neighbours are expanded
    in GridSpec.neighbors order, which decides between equal-length paths.
    The returned path starts at the current cell and ends at `grid.end`.

    When the end is unreachable and `allow_fallback` is set, the first free
    cell (row-major) not reached by the search is returned as a one-element
    path. Otherwise None.
    """
    current = Position(*trail[-1])
    blocked = grid.mask(obstacles) | grid.mask(trail)

    # Visited is marked on enqueue so no cell is queued twice
    visited = grid.mask([current])
    came_from: Dict[Position, Position] = {}
    queue = deque([current])

    while queue:
        cell = queue.popleft()
        if cell == grid.end:
            return _reconstruct(came_from, cell)

        for nx, ny in grid.neighbors(cell):
            if blocked[nx, ny] or visited[nx, ny]:
                continue
            visited[nx, ny] = True
            neighbor = Position(nx, ny)
            came_from[neighbor] = cell
            queue.append(neighbor)

    if not allow_fallback:
        return None
    return _first_unvisited_free_cell(grid, blocked, visited)


def _reconstruct(came_from: Dict[Position, Position],
                 end: Position) -> List[Position]:
    """Walk the predecessor map back from the end and reverse it."""
    path = [end]
    while path[-1] in came_from:
        path.append(came_from[path[-1]])
    path.reverse()
    return path


def _first_unvisited_free_cell(grid: GridSpec, blocked, visited) -> Optional[List[Position]]:
    for cell in grid.cells():
        if not blocked[cell.x, cell.y] and not visited[cell.x, cell.y]:
            return [cell]
    return None

"""State and outcome value types for the adaptive maze simulation."""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

import numpy as np

from .errors import InvalidConfiguration
from .grid import GridSpec, Position


class EngineStatus(Enum):
    """Lifecycle of one scenario run."""
    RUNNING = "running"
    REACHED = "reached"
    EXHAUSTED = "exhausted"
    UNSATISFIABLE = "unsatisfiable"

    @property
    def is_terminal(self) -> bool:
        return self is not EngineStatus.RUNNING

    @property
    def outcome_kind(self) -> "Optional[OutcomeKind]":
        """Matching terminal outcome, or None while running."""
        if self is EngineStatus.RUNNING:
            return None
        return OutcomeKind(self.value)


class OutcomeKind(Enum):
    ADVANCED = "advanced"
    SHRUNK = "shrunk"
    REACHED = "reached"
    EXHAUSTED = "exhausted"
    UNSATISFIABLE = "unsatisfiable"


@dataclass(frozen=True)
class TickOutcome:
    """Result of a single tick."""
    kind: OutcomeKind
    position: Optional[Position] = None  # set for ADVANCED
    budget: Optional[int] = None         # set for SHRUNK
    reason: Optional[str] = None         # set for UNSATISFIABLE

    @classmethod
    def advanced(cls, position: Position) -> "TickOutcome":
        return cls(OutcomeKind.ADVANCED, position=Position(*position))

    @classmethod
    def shrunk(cls, budget: int) -> "TickOutcome":
        return cls(OutcomeKind.SHRUNK, budget=budget)

    @classmethod
    def reached(cls) -> "TickOutcome":
        return cls(OutcomeKind.REACHED)

    @classmethod
    def exhausted(cls) -> "TickOutcome":
        return cls(OutcomeKind.EXHAUSTED)

    @classmethod
    def unsatisfiable(cls, reason: str) -> "TickOutcome":
        return cls(OutcomeKind.UNSATISFIABLE, reason=reason)

    @property
    def is_terminal(self) -> bool:
        return self.kind in (OutcomeKind.REACHED, OutcomeKind.EXHAUSTED,
                             OutcomeKind.UNSATISFIABLE)

    def __str__(self) -> str:
        if self.kind is OutcomeKind.ADVANCED:
            return f"advanced to {tuple(self.position)}"
        if self.kind is OutcomeKind.SHRUNK:
            return f"shrunk budget to {self.budget}"
        if self.kind is OutcomeKind.UNSATISFIABLE:
            return f"unsatisfiable ({self.reason})"
        return self.kind.value


@dataclass(frozen=True)
class EngineState:
    """
    Complete state of one scenario run at a given tick.

    Never mutated; the engine's transition function returns a new value.
    """
    grid: GridSpec
    trail: Tuple[Position, ...]
    obstacles: FrozenSet[Position]
    budget: int
    status: EngineStatus = EngineStatus.RUNNING
    tick: int = 0

    @classmethod
    def initial(cls, grid: GridSpec, budget: int,
                obstacles: Iterable = ()) -> "EngineState":
        """Start-of-run state: trail [start], given obstacles, full budget."""
        if budget < 0:
            raise InvalidConfiguration(f"obstacle budget must be non-negative, got {budget}")
        obstacle_set = frozenset(Position(*o) for o in obstacles)
        for obstacle in obstacle_set:
            if not grid.is_in_bounds(obstacle):
                raise InvalidConfiguration(f"obstacle {tuple(obstacle)} is outside the grid")
            if obstacle in (grid.start, grid.end):
                raise InvalidConfiguration(
                    f"obstacle {tuple(obstacle)} overlaps the start or end cell")
        return cls(grid=grid, trail=(grid.start,), obstacles=obstacle_set, budget=budget)

    @property
    def position(self) -> Position:
        return self.trail[-1]

    def evolve(self, **changes) -> "EngineState":
        return replace(self, **changes)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of engine state for rendering and export."""
    tick: int
    trail: Tuple[Position, ...]
    obstacles: FrozenSet[Position]
    budget: int
    status: EngineStatus
    grid: GridSpec = field(repr=False)

    @classmethod
    def of(cls, state: EngineState) -> "Snapshot":
        return cls(tick=state.tick, trail=state.trail, obstacles=state.obstacles,
                   budget=state.budget, status=state.status, grid=state.grid)

    @property
    def position(self) -> Position:
        return self.trail[-1]

    @property
    def moves(self) -> int:
        return len(self.trail) - 1

    def obstacle_mask(self) -> np.ndarray:
        return self.grid.mask(self.obstacles)

    def trail_mask(self) -> np.ndarray:
        return self.grid.mask(self.trail)

    def to_csv_row(self, outcome: TickOutcome) -> Dict:
        """Convert to CSV-compatible format."""
        return {
            "tick": self.tick,
            "outcome": outcome.kind.value,
            "x": self.position.x,
            "y": self.position.y,
            "budget": self.budget,
            "obstacles": len(self.obstacles),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class RunResult:
    """Summary of run_to_completion; outcome is None when truncated."""
    ticks: int
    elapsed: float  # seconds
    outcome: Optional[OutcomeKind]
    final: Snapshot

    @property
    def truncated(self) -> bool:
        return self.outcome is None

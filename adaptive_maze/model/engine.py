"""Step engine for the adaptive maze simulation."""

import time
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

import numpy as np

from .errors import Unsatisfiable
from .grid import GridSpec
from .obstacles import DEFAULT_REJECTIONS_PER_CELL, generate_obstacles
from .pathfinder import find_path
from .state import (EngineState, EngineStatus, RunResult,
                    Snapshot, TickOutcome)


@dataclass(frozen=True)
class EngineSettings:
    max_rejections_per_cell: int = DEFAULT_REJECTIONS_PER_CELL
    allow_fallback: bool = True


def default_max_ticks(grid: GridSpec, budget: int) -> int:
    """Upper bound on ticks: every cell for every budget level, plus one."""
    return grid.area * max(budget, 1) + 1


def _terminal_outcome(state: EngineState) -> TickOutcome:
    if state.status is EngineStatus.REACHED:
        return TickOutcome.reached()
    if state.status is EngineStatus.EXHAUSTED:
        return TickOutcome.exhausted()
    return TickOutcome.unsatisfiable("obstacle generation failed earlier in this run")


def advance(state: EngineState,
            rng: np.random.Generator,
            settings: EngineSettings = EngineSettings()) -> Tuple[EngineState, TickOutcome]:
    """
    Execute one tick and return the new state with its outcome.

    1. Stop if the run is over or the agent stands on the end cell
    2. Search a path from the trail tail to the end
    3. Advance one cell along it, or shrink the budget when there is none
    4. Regenerate the obstacle set against the new trail and budget
    """
    if state.status.is_terminal:
        return state, _terminal_outcome(state)

    grid = state.grid
    if state.position == grid.end:
        return (state.evolve(status=EngineStatus.REACHED, tick=state.tick + 1),
                TickOutcome.reached())

    path = find_path(state.trail, state.obstacles, grid,
                     allow_fallback=settings.allow_fallback)

    # A one-cell path is the relocation fallback; it never moves the agent
    if path is not None and len(path) > 1:
        trail = state.trail + (path[1],)
        budget = state.budget
        outcome = TickOutcome.advanced(path[1])
    elif state.budget == 0:
        return (state.evolve(status=EngineStatus.EXHAUSTED, tick=state.tick + 1),
                TickOutcome.exhausted())
    else:
        trail = state.trail
        budget = state.budget - 1
        outcome = TickOutcome.shrunk(budget)

    try:
        obstacles = generate_obstacles(
            trail, budget, grid, rng,
            max_rejections=settings.max_rejections_per_cell * grid.area)
    except Unsatisfiable as exc:
        # The tick did not complete: keep the pre-tick trail and obstacles
        return (state.evolve(status=EngineStatus.UNSATISFIABLE, tick=state.tick + 1),
                TickOutcome.unsatisfiable(str(exc)))

    status = EngineStatus.REACHED if trail[-1] == grid.end else EngineStatus.RUNNING
    new_state = state.evolve(trail=trail, obstacles=obstacles, budget=budget,
                             status=status, tick=state.tick + 1)
    return new_state, outcome


class StepEngine:
    """
    Owns one scenario run: its state and its random generator.

    Instances share nothing, so several scenarios can run side by side.
    """

    def __init__(self, grid: GridSpec, budget: int,
                 seed: Optional[int] = None,
                 settings: Optional[EngineSettings] = None,
                 obstacles: Iterable = ()):
        self.settings = settings or EngineSettings()
        self.seed = seed
        self.initial_budget = budget
        self.state = EngineState.initial(grid, budget, obstacles)
        self.rng = np.random.default_rng(seed)

    @property
    def grid(self) -> GridSpec:
        return self.state.grid

    @property
    def budget(self) -> int:
        return self.state.budget

    @property
    def status(self) -> EngineStatus:
        return self.state.status

    def tick(self) -> TickOutcome:
        self.state, outcome = advance(self.state, self.rng, self.settings)
        return outcome

    def reset(self, grid: GridSpec, budget: int,
              seed: Optional[int] = None,
              obstacles: Iterable = ()) -> None:
        """Start over with a fresh trail; reseeds so runs can be replayed."""
        self.state = EngineState.initial(grid, budget, obstacles)
        self.initial_budget = budget
        if seed is not None:
            self.seed = seed
        self.rng = np.random.default_rng(self.seed)

    def snapshot(self) -> Snapshot:
        return Snapshot.of(self.state)

    def iter_ticks(self, max_ticks: Optional[int] = None) -> Iterator[Tuple[TickOutcome, Snapshot]]:
        """
        Yield (outcome, snapshot) per tick until the run is over.

        Pacing is left to the caller; nothing here sleeps.
        """
        if max_ticks is None:
            max_ticks = default_max_ticks(self.grid, self.initial_budget)
        for _ in range(max_ticks):
            outcome = self.tick()
            yield outcome, self.snapshot()
            if self.status.is_terminal:
                return

    def run_to_completion(self, max_ticks: Optional[int] = None) -> RunResult:
        """Tick until Reached/Exhausted/Unsatisfiable or `max_ticks` ticks."""
        ticks = 0
        started = time.perf_counter()
        for _ in self.iter_ticks(max_ticks):
            ticks += 1
        return self.result(ticks, time.perf_counter() - started)

    def result(self, ticks: int, elapsed: float) -> RunResult:
        """Summarise the run so far; the outcome follows the engine status."""
        return RunResult(ticks=ticks, elapsed=elapsed,
                         outcome=self.status.outcome_kind,
                         final=self.snapshot())

    def __repr__(self) -> str:
        return (f"StepEngine(pos={tuple(self.state.position)}, "
                f"budget={self.budget}, status={self.status.value})")


def configure(grid: GridSpec, budget: int,
              seed: Optional[int] = None,
              settings: Optional[EngineSettings] = None,
              obstacles: Iterable = ()) -> StepEngine:
    """Create an engine for a new scenario; raises InvalidConfiguration."""
    return StepEngine(grid, budget, seed=seed, settings=settings, obstacles=obstacles)


def tick(engine: StepEngine) -> TickOutcome:
    return engine.tick()


def reset(engine: StepEngine, grid: GridSpec, budget: int,
          seed: Optional[int] = None) -> None:
    engine.reset(grid, budget, seed=seed)


def snapshot(engine: StepEngine) -> Snapshot:
    return engine.snapshot()


def run_to_completion(engine: StepEngine, max_ticks: Optional[int] = None) -> RunResult:
    return engine.run_to_completion(max_ticks)

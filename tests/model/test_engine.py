"""Tests for adaptive_maze.model.engine module."""

import numpy as np
import pytest

from adaptive_maze.model import engine as engine_api
from adaptive_maze.model.engine import (EngineSettings, StepEngine, advance,
                                        configure, default_max_ticks)
from adaptive_maze.model.errors import InvalidConfiguration
from adaptive_maze.model.grid import GridSpec, Position
from adaptive_maze.model.state import (EngineState, EngineStatus, OutcomeKind,
                                       TickOutcome)


@pytest.fixture
def open_grid() -> GridSpec:
    return GridSpec(5, 5, (0, 0), (4, 4))


@pytest.fixture
def corridor() -> GridSpec:
    """1x4 board: one row, two free cells between start and end."""
    return GridSpec(1, 4, (0, 0), (0, 3))


def _run(engine: StepEngine, limit: int = 500):
    outcomes = []
    for _ in range(limit):
        outcome = engine.tick()
        outcomes.append(outcome)
        if outcome.is_terminal:
            break
    return outcomes


class TestConfigure:
    def test_initial_state(self, open_grid: GridSpec) -> None:
        engine = configure(open_grid, 3, seed=0)
        snap = engine.snapshot()
        assert snap.trail == (Position(0, 0),)
        assert snap.obstacles == frozenset()
        assert snap.budget == 3
        assert snap.status is EngineStatus.RUNNING
        assert snap.tick == 0

    def test_negative_budget_rejected(self, open_grid: GridSpec) -> None:
        with pytest.raises(InvalidConfiguration):
            configure(open_grid, -1)

    def test_initial_obstacle_on_start_rejected(self, open_grid: GridSpec) -> None:
        with pytest.raises(InvalidConfiguration):
            configure(open_grid, 2, obstacles=[(0, 0)])

    def test_initial_obstacle_out_of_bounds_rejected(self, open_grid: GridSpec) -> None:
        with pytest.raises(InvalidConfiguration):
            configure(open_grid, 2, obstacles=[(5, 0)])


class TestAdvance:
    def test_first_move_without_obstacles(self, open_grid: GridSpec) -> None:
        engine = configure(open_grid, 0, seed=0)
        outcome = engine.tick()
        assert outcome == TickOutcome.advanced((0, 1))
        assert engine.snapshot().trail == ((0, 0), (0, 1))

    def test_one_cell_per_tick(self, open_grid: GridSpec) -> None:
        engine = configure(open_grid, 4, seed=3)
        for _ in range(30):
            before = len(engine.snapshot().trail)
            outcome = engine.tick()
            after = len(engine.snapshot().trail)
            if outcome.kind is OutcomeKind.ADVANCED:
                assert after == before + 1
            else:
                assert after == before
            if outcome.is_terminal:
                break

    def test_obstacles_regenerated_with_unchanged_budget(self, open_grid: GridSpec) -> None:
        engine = configure(open_grid, 4, seed=9)
        outcome = engine.tick()
        assert outcome.kind is OutcomeKind.ADVANCED
        snap = engine.snapshot()
        assert snap.budget == 4
        assert len(snap.obstacles) == 4
        assert not snap.obstacles & set(snap.trail)

    def test_pure_transition_leaves_input_untouched(self, open_grid: GridSpec) -> None:
        state = EngineState.initial(open_grid, 2)
        new_state, outcome = advance(state, np.random.default_rng(0))
        assert state.trail == (open_grid.start,)
        assert state.tick == 0
        assert new_state.tick == 1
        assert outcome.kind is OutcomeKind.ADVANCED


class TestShrink:
    def test_boxed_start_shrinks_budget(self, open_grid: GridSpec) -> None:
        engine = configure(open_grid, 3, seed=1, obstacles=[(0, 1), (1, 0)])
        outcome = engine.tick()
        assert outcome == TickOutcome.shrunk(2)
        snap = engine.snapshot()
        assert snap.trail == ((0, 0),)
        assert snap.budget == 2
        assert len(snap.obstacles) == 2

    def test_budget_drops_by_one_until_a_path_opens(self, corridor: GridSpec) -> None:
        engine = configure(corridor, 2, seed=0, obstacles=[(0, 1), (0, 2)])
        outcomes = _run(engine)
        assert outcomes == [
            TickOutcome.shrunk(1),
            TickOutcome.shrunk(0),
            TickOutcome.advanced((0, 1)),
            TickOutcome.advanced((0, 2)),
            TickOutcome.advanced((0, 3)),
            TickOutcome.reached(),
        ]
        assert engine.snapshot().trail == ((0, 0), (0, 1), (0, 2), (0, 3))

    def test_fallback_path_counts_as_failure(self, open_grid: GridSpec) -> None:
        for fallback in (True, False):
            settings = EngineSettings(allow_fallback=fallback)
            engine = configure(open_grid, 1, seed=0, settings=settings,
                               obstacles=[(0, 1), (1, 0)])
            assert engine.tick() == TickOutcome.shrunk(0)
            assert engine.snapshot().trail == ((0, 0),)


class TestTerminalStates:
    def test_exhausted_when_budget_zero_and_no_path(self, open_grid: GridSpec) -> None:
        engine = configure(open_grid, 0, seed=0, obstacles=[(0, 1), (1, 0)])
        assert engine.tick() == TickOutcome.exhausted()
        assert engine.status is EngineStatus.EXHAUSTED
        snap = engine.snapshot()
        # Stays put until reset
        assert engine.tick() == TickOutcome.exhausted()
        assert engine.snapshot() == snap

    def test_reached_on_start_equal_end(self) -> None:
        engine = configure(GridSpec(3, 3, (1, 1), (1, 1)), 2, seed=0)
        assert engine.tick() == TickOutcome.reached()
        assert engine.status is EngineStatus.REACHED
        assert engine.snapshot().tick == 1

    def test_arriving_sets_reached_status(self) -> None:
        engine = configure(GridSpec(1, 2, (0, 0), (0, 1)), 0, seed=0)
        assert engine.tick() == TickOutcome.advanced((0, 1))
        assert engine.status is EngineStatus.REACHED
        assert engine.tick() == TickOutcome.reached()

    def test_unsatisfiable_keeps_pre_tick_state(self, corridor: GridSpec) -> None:
        # After one step only one free cell remains for two obstacles
        engine = configure(corridor, 2, seed=0)
        outcome = engine.tick()
        assert outcome.kind is OutcomeKind.UNSATISFIABLE
        assert "free cells" in outcome.reason
        snap = engine.snapshot()
        assert snap.status is EngineStatus.UNSATISFIABLE
        assert snap.trail == ((0, 0),)
        assert snap.budget == 2
        assert engine.tick().kind is OutcomeKind.UNSATISFIABLE


class TestReset:
    def test_reset_restores_start(self, open_grid: GridSpec) -> None:
        engine = configure(open_grid, 0, seed=0, obstacles=[(0, 1), (1, 0)])
        engine.tick()
        other = GridSpec(4, 6, (3, 0), (0, 5))
        engine.reset(other, 5)
        snap = engine.snapshot()
        assert snap.trail == ((3, 0),)
        assert snap.obstacles == frozenset()
        assert snap.budget == 5
        assert snap.status is EngineStatus.RUNNING
        assert engine.grid == other

    def test_reset_replays_identically(self) -> None:
        grid = GridSpec(10, 10, (0, 0), (9, 9))
        engine = configure(grid, 30, seed=42)
        first = _run(engine)
        first_trail = engine.snapshot().trail
        engine.reset(grid, 30)
        second = _run(engine)
        assert first == second
        assert engine.snapshot().trail == first_trail

    def test_independent_engines_with_same_seed_agree(self) -> None:
        grid = GridSpec(8, 8, (0, 0), (7, 7))
        a = configure(grid, 20, seed=7)
        b = configure(grid, 20, seed=7)
        trajectory_a, trajectory_b = [], []
        for _ in range(40):
            a.tick()
            b.tick()
            trajectory_a.append((a.snapshot().trail, a.budget))
            trajectory_b.append((b.snapshot().trail, b.budget))
        assert trajectory_a == trajectory_b


class TestRunToCompletion:
    def test_open_grid_reaches_end(self, open_grid: GridSpec) -> None:
        result = configure(open_grid, 0, seed=0).run_to_completion()
        assert result.outcome is OutcomeKind.REACHED
        assert not result.truncated
        assert result.ticks == 8
        assert result.final.moves == 8
        assert result.final.position == open_grid.end
        assert result.elapsed >= 0

    def test_arrival_on_last_allowed_tick(self, open_grid: GridSpec) -> None:
        result = configure(open_grid, 0, seed=0).run_to_completion(max_ticks=8)
        assert result.ticks == 8
        assert result.outcome is OutcomeKind.REACHED
        assert not result.truncated
        assert result.final.status is EngineStatus.REACHED

    def test_literal_limit_with_zero_budget(self) -> None:
        grid = GridSpec(1, 2, (0, 0), (0, 1))
        result = configure(grid, 0, seed=0).run_to_completion(
            max_ticks=grid.rows * grid.columns * 0 + 1)
        assert result.ticks == 1
        assert result.outcome is OutcomeKind.REACHED

    def test_literal_limit_after_shrinking(self, corridor: GridSpec) -> None:
        engine = configure(corridor, 2, seed=0, obstacles=[(0, 1), (0, 2)])
        limit = corridor.rows * corridor.columns * 2 + 1
        result = engine.run_to_completion(max_ticks=limit)
        assert result.ticks == 5
        assert result.outcome is OutcomeKind.REACHED

    def test_outcome_follows_engine_status(self, open_grid: GridSpec) -> None:
        engine = configure(open_grid, 0, seed=0, obstacles=[(0, 1), (1, 0)])
        result = engine.run_to_completion()
        assert result.ticks == 1
        assert result.outcome is OutcomeKind.EXHAUSTED
        assert EngineStatus.RUNNING.outcome_kind is None
        assert EngineStatus.UNSATISFIABLE.outcome_kind is OutcomeKind.UNSATISFIABLE

    def test_never_exceeds_max_ticks(self) -> None:
        grid = GridSpec(10, 10, (0, 0), (9, 9))
        result = configure(grid, 30, seed=1).run_to_completion(max_ticks=5)
        assert result.ticks <= 5

    def test_truncated_run_reports_no_outcome(self, open_grid: GridSpec) -> None:
        result = configure(open_grid, 0, seed=0).run_to_completion(max_ticks=3)
        assert result.ticks == 3
        assert result.truncated
        assert result.final.moves == 3

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_default_limit_bounds_the_run(self, seed: int) -> None:
        grid = GridSpec(6, 6, (0, 0), (5, 5))
        limit = default_max_ticks(grid, 10)
        result = configure(grid, 10, seed=seed).run_to_completion()
        assert result.ticks <= limit
        trail = result.final.trail
        assert len(set(trail)) == len(trail)
        assert all(abs(a.x - b.x) + abs(a.y - b.y) == 1
                   for a, b in zip(trail, trail[1:]))

    def test_iter_ticks_yields_snapshots(self, open_grid: GridSpec) -> None:
        engine = configure(open_grid, 0, seed=0)
        ticks = [snap.tick for _, snap in engine.iter_ticks()]
        assert ticks == list(range(1, 9))


class TestModuleInterface:
    def test_functions_delegate_to_handle(self, open_grid: GridSpec) -> None:
        handle = engine_api.configure(open_grid, 0, seed=0)
        assert engine_api.tick(handle).kind is OutcomeKind.ADVANCED
        assert engine_api.snapshot(handle).moves == 1
        engine_api.reset(handle, open_grid, 0)
        assert engine_api.snapshot(handle).moves == 0
        result = engine_api.run_to_completion(handle)
        assert result.outcome is OutcomeKind.REACHED

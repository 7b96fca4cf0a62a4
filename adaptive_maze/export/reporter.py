"""Summary report generation for the adaptive maze simulation."""

from typing import Optional, TYPE_CHECKING
from pathlib import Path

from ..model.state import OutcomeKind

if TYPE_CHECKING:
    from ..model.grid import GridSpec
    from ..model.state import RunResult, Snapshot, TickOutcome


class Reporter:
    """Accumulates tick outcomes and renders a formatted text report."""

    def __init__(self, config_path: str, seed: Optional[int], initial_budget: int):
        self.config_path = config_path
        self.seed = seed
        self.initial_budget = initial_budget
        self.moves = 0
        self.shrinks = 0
        self.peak_obstacles = 0
        self.longest_stall = 0
        self._stall = 0

    def update(self, outcome: "TickOutcome", snapshot: "Snapshot") -> None:
        """Accumulate statistics per tick."""
        if outcome.kind is OutcomeKind.ADVANCED:
            self.moves += 1
            self._stall = 0
        elif outcome.kind is OutcomeKind.SHRUNK:
            self.shrinks += 1
            self._stall += 1
            self.longest_stall = max(self.longest_stall, self._stall)

        self.peak_obstacles = max(self.peak_obstacles, len(snapshot.obstacles))

    def generate_summary(self, grid: "GridSpec",
                         result: "RunResult",
                         output_dir: Path,
                         csv_enabled: bool) -> str:
        """Returns formatted text report."""
        final = result.final
        if result.truncated:
            verdict = f"TRUNCATED after {result.ticks} ticks"
        else:
            verdict = result.outcome.value.upper()

        lines = [
            "",
            "=" * 80,
            "                    ADAPTIVE MAZE SIMULATION REPORT",
            "=" * 80,
            f"Configuration: {self.config_path}",
            f"Random Seed: {self.seed if self.seed is not None else 'None (random)'}",
            f"Grid: {grid.rows}x{grid.columns}  start {tuple(grid.start)}  end {tuple(grid.end)}",
            "",
            "RUN METRICS",
            "-" * 40,
            f"Result:                {verdict}",
            f"Total Ticks:           {result.ticks}",
            f"Moves:                 {self.moves}",
            f"Budget Reductions:     {self.shrinks}",
            f"Obstacle Budget:       {self.initial_budget} -> {final.budget}",
            f"Peak Obstacles:        {self.peak_obstacles}",
            f"Longest Stall:         {self.longest_stall} ticks",
            f"Execution Time:        {result.elapsed * 1000:.2f} ms",
            f"Final Position:        {tuple(final.position)}",
            "",
            "OUTPUT FILES",
            "-" * 40,
        ]

        if csv_enabled:
            lines.append(f"CSV Log:    {output_dir / 'tick_log.csv'}")
        else:
            lines.append("CSV Log:    (disabled)")

        lines.append("=" * 80)

        return "\n".join(lines)

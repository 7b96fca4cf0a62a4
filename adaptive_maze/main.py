#!/usr/bin/env python3
"""
Adaptive Maze Simulation

An agent walks from a start cell to an end cell along shortest paths while
the obstacle set is redrawn after every move. When the agent is boxed in the
obstacle budget shrinks until a path opens up or the budget runs out.

Usage:
    adaptive-maze --config configs/default.yaml [options]

Examples:
    adaptive-maze --config configs/default.yaml
    adaptive-maze --config configs/grid_10x10_30.yaml --seed 42 --out-dir results/
    adaptive-maze --config configs/grid_20x20_100.yaml --budget 150 --no-csv --quiet
    adaptive-maze --config configs/default.yaml --delay 0.25
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from adaptive_maze.config import load_config
from adaptive_maze.export.csv_writer import CSVWriter
from adaptive_maze.export.reporter import Reporter
from adaptive_maze.model.engine import StepEngine
from adaptive_maze.model.errors import InvalidConfiguration
from adaptive_maze.model.state import OutcomeKind, RunResult

EXIT_REACHED = 0
EXIT_CONFIG_ERROR = 1
EXIT_FAILED = 2
EXIT_TRUNCATED = 3


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Adaptive Maze Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    adaptive-maze --config configs/default.yaml
    adaptive-maze --config configs/grid_10x10_30.yaml --seed 42 --out-dir results/
    adaptive-maze --config configs/grid_20x20_100.yaml --budget 150 --no-csv --quiet
    adaptive-maze --config configs/default.yaml --delay 0.25
        """
    )

    # Required arguments
    parser.add_argument('--config', type=Path, required=True,
                        help='Path to YAML configuration file')

    # Optional overrides
    parser.add_argument('--budget', type=int, default=None,
                        help='Override initial obstacle budget')
    parser.add_argument('--max-ticks', type=int, default=None,
                        help='Override tick limit (default: rows*columns*budget+1)')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV tick log (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV tick log')

    parser.add_argument('--delay', type=float, default=0.0,
                        help='Seconds to wait between ticks, printing each one')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    return parser.parse_args(argv)


def exit_code_for(result: RunResult) -> int:
    if result.truncated:
        return EXIT_TRUNCATED
    if result.outcome is OutcomeKind.REACHED:
        return EXIT_REACHED
    return EXIT_FAILED


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    # Apply CLI overrides
    if args.budget is not None:
        config.obstacles.budget = args.budget
    if args.max_ticks is not None:
        config.max_ticks = args.max_ticks
    if args.csv is not None:
        config.csv_enabled = args.csv
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    config.out_dir = args.out_dir

    try:
        config.validate()
        grid = config.grid_spec()
        engine = StepEngine(grid, config.obstacles.budget,
                            seed=config.seed,
                            settings=config.engine_settings(),
                            obstacles=config.obstacles.initial)
        max_ticks = config.tick_limit()
    except InvalidConfiguration as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if not config.quiet:
        print(f"Initializing simulation...")
        print(f"  Grid: {grid.rows}x{grid.columns}")
        print(f"  Start: {tuple(grid.start)}  End: {tuple(grid.end)}")
        print(f"  Obstacle budget: {config.obstacles.budget}")
        print(f"  Max ticks: {max_ticks}")

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'tick_log.csv')
        csv_writer.open()

    reporter = Reporter(str(args.config), config.seed, config.obstacles.budget)

    # Main simulation loop
    if not config.quiet:
        print(f"\nRunning simulation...")

    ticks = 0
    started = time.perf_counter()
    try:
        for outcome, snapshot in engine.iter_ticks(max_ticks):
            ticks += 1

            if csv_writer:
                csv_writer.append(outcome, snapshot)
            reporter.update(outcome, snapshot)

            if args.delay > 0:
                if not config.quiet:
                    print(f"  Tick {snapshot.tick}: {outcome} "
                          f"(budget {snapshot.budget}, obstacles {len(snapshot.obstacles)})")
                time.sleep(args.delay)
            elif not config.quiet and ticks % 100 == 0:
                print(f"  Tick {ticks}: at {tuple(snapshot.position)}, budget {snapshot.budget}")

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nSimulation interrupted by user.")

    result = engine.result(ticks, time.perf_counter() - started)

    # Cleanup and final exports
    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'tick_log.csv'}")

    # Print summary report
    if not config.quiet and config.report_enabled:
        report = reporter.generate_summary(grid, result, config.out_dir,
                                           config.csv_enabled)
        print(report)

    return exit_code_for(result)


if __name__ == '__main__':
    sys.exit(main())

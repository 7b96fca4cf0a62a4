"""Model package for the adaptive maze simulation."""

from .errors import AdaptiveMazeError, InvalidConfiguration, Unsatisfiable
from .grid import GridSpec, Position
from .obstacles import generate_obstacles, free_cell_count
from .pathfinder import find_path
from .state import (EngineState, EngineStatus, OutcomeKind, RunResult,
                    Snapshot, TickOutcome)
from .engine import (EngineSettings, StepEngine, advance, configure,
                     default_max_ticks, reset, run_to_completion, snapshot, tick)

__all__ = [
    'AdaptiveMazeError',
    'InvalidConfiguration',
    'Unsatisfiable',
    'GridSpec',
    'Position',
    'generate_obstacles',
    'free_cell_count',
    'find_path',
    'EngineState',
    'EngineStatus',
    'OutcomeKind',
    'RunResult',
    'Snapshot',
    'TickOutcome',
    'EngineSettings',
    'StepEngine',
    'advance',
    'configure',
    'default_max_ticks',
    'reset',
    'run_to_completion',
    'snapshot',
    'tick',
]

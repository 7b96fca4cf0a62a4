"""Configuration dataclasses and YAML loader for the adaptive maze simulation."""

from dataclasses import dataclass, field
from typing import List, Tuple, Dict, Any, Optional
from pathlib import Path
import yaml

from .model.engine import EngineSettings, default_max_ticks
from .model.errors import InvalidConfiguration
from .model.grid import GridSpec
from .model.obstacles import DEFAULT_REJECTIONS_PER_CELL


@dataclass
class GridConfig:
    rows: int
    columns: int
    start: Tuple[int, int]
    end: Tuple[int, int]


@dataclass
class ObstacleConfig:
    budget: int
    max_rejections_per_cell: int = DEFAULT_REJECTIONS_PER_CELL
    initial: List[Tuple[int, int]] = field(default_factory=list)


@dataclass
class PathfinderConfig:
    relocation_fallback: bool = True


@dataclass
class SimulationConfig:
    grid: GridConfig
    obstacles: ObstacleConfig
    pathfinder: PathfinderConfig = field(default_factory=PathfinderConfig)
    max_ticks: Optional[int] = None
    seed: Optional[int] = None

    # Export flags (can be overridden by CLI)
    csv_enabled: bool = True
    report_enabled: bool = True
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))

    def grid_spec(self) -> GridSpec:
        """Build the validated grid; raises InvalidConfiguration."""
        return GridSpec(self.grid.rows, self.grid.columns,
                        self.grid.start, self.grid.end)

    def engine_settings(self) -> EngineSettings:
        return EngineSettings(
            max_rejections_per_cell=self.obstacles.max_rejections_per_cell,
            allow_fallback=self.pathfinder.relocation_fallback
        )

    def validate(self) -> None:
        """Check values that CLI overrides may have changed after loading."""
        if self.obstacles.budget < 0:
            raise InvalidConfiguration(
                f"obstacles.budget must be non-negative, got {self.obstacles.budget}")
        _check_optional_int(self.max_ticks, 'simulation.max_ticks', minimum=1)
        _check_optional_int(self.seed, 'simulation.seed', minimum=0)
        self.grid_spec()

    def tick_limit(self) -> int:
        if self.max_ticks is not None:
            return self.max_ticks
        return default_max_ticks(self.grid_spec(), self.obstacles.budget)


def _check_optional_int(value: Any, name: str, minimum: int) -> None:
    """Accept None or an int of at least `minimum`."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidConfiguration(f"{name} must be at least {minimum}, got {value}")


def _section(raw: Dict[str, Any], name: str, required: bool = True) -> Dict[str, Any]:
    """Fetch a mapping section from raw YAML data."""
    value = raw.get(name)
    if value is None:
        if required:
            raise InvalidConfiguration(f"missing '{name}' section")
        return {}
    if not isinstance(value, dict):
        raise InvalidConfiguration(f"'{name}' section must be a mapping")
    return value


def _parse_position(value: Any, name: str) -> Tuple[int, int]:
    """Parse a [x, y] pair from raw YAML data."""
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise InvalidConfiguration(f"'{name}' must be a [row, column] pair, got {value!r}")
    return int(value[0]), int(value[1])


def _parse_grid(grid_raw: Dict[str, Any]) -> GridConfig:
    try:
        return GridConfig(
            rows=int(grid_raw['rows']),
            columns=int(grid_raw['columns']),
            start=_parse_position(grid_raw.get('start', [0, 0]), 'grid.start'),
            end=_parse_position(grid_raw['end'], 'grid.end')
        )
    except KeyError as exc:
        raise InvalidConfiguration(f"missing grid key: {exc.args[0]}") from exc


def _parse_obstacles(obstacles_raw: Dict[str, Any]) -> ObstacleConfig:
    budget = int(obstacles_raw.get('budget', 0))
    if budget < 0:
        raise InvalidConfiguration(f"obstacles.budget must be non-negative, got {budget}")
    rejections = int(obstacles_raw.get('max_rejections_per_cell',
                                       DEFAULT_REJECTIONS_PER_CELL))
    if rejections <= 0:
        raise InvalidConfiguration("obstacles.max_rejections_per_cell must be positive")
    return ObstacleConfig(
        budget=budget,
        max_rejections_per_cell=rejections,
        initial=[_parse_position(p, 'obstacles.initial')
                 for p in obstacles_raw.get('initial') or []]
    )


def load_config(config_path: Path) -> SimulationConfig:
    """Load and validate YAML configuration file."""
    with open(config_path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise InvalidConfiguration(f"{config_path}: expected a mapping at top level")

    grid = _parse_grid(_section(raw, 'grid'))
    obstacles = _parse_obstacles(_section(raw, 'obstacles', required=False))

    pf_raw = _section(raw, 'pathfinder', required=False)
    pathfinder = PathfinderConfig(
        relocation_fallback=bool(pf_raw.get('relocation_fallback', True))
    )

    # Parse simulation and export config (optional)
    sim_raw = _section(raw, 'simulation', required=False)
    export_raw = _section(raw, 'export', required=False)

    config = SimulationConfig(
        grid=grid,
        obstacles=obstacles,
        pathfinder=pathfinder,
        max_ticks=sim_raw.get('max_ticks'),
        seed=sim_raw.get('seed'),
        csv_enabled=export_raw.get('csv', True),
        report_enabled=export_raw.get('report', True)
    )

    # Fail early on out-of-bounds positions and bad run limits
    config.validate()
    return config

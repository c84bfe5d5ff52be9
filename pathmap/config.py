# pathmap/config.py
from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import structlog
import yaml

log = structlog.get_logger()

PROJECT_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_FILE = PROJECT_DIR / "config" / "path_map.yaml"

DEFAULT_NODE_KINDS: Tuple[str, ...] = (
    "battle",
    "elite",
    "rest",
    "shop",
    "treasure",
    "mystery",
)


@dataclass
class MapConfig:
    """Parameters for one path map.

    ``x_max_size`` and ``y_padding`` scale the lattice onto the board.  The
    path segment's length and height come from the segment mesh bounds times
    its local scale, as a renderer would measure its prefab.
    """

    number_of_starting_points: int = 4
    map_length: int = 10
    max_width: int = 5
    x_max_size: float = 10.0
    y_padding: float = 2.0
    allow_crisscrossing: bool = False
    chance_path_middle: float = 0.5
    chance_path_side: float = 0.3
    multiplicative_space_between_lines: float = 2.5
    segment_mesh_size: Tuple[float, float, float] = (0.2, 0.05, 0.4)
    segment_scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    node_kinds: Tuple[str, ...] = DEFAULT_NODE_KINDS
    max_edge_rolls: int = 1000 # 0 = unbounded
    max_attempts: int = 0 # 0 = unbounded
    seed: Optional[int] = None

    # ------------------------------------------------------------------
    # derived values
    # ------------------------------------------------------------------
    @property
    def segment_length(self) -> float:
        return float(self.segment_mesh_size[2]) * float(self.segment_scale[2])

    @property
    def segment_height(self) -> float:
        return float(self.segment_mesh_size[1]) * float(self.segment_scale[1])

    def max_reachable_edges(self) -> int:
        """Upper bound on the connections a single attempt can produce."""
        floors_with_edges = self.map_length - 1
        if self.chance_path_side <= 0.0 or self.max_width == 1:
            # Only straight edges: one per node on each seeded column.
            return self.number_of_starting_points * floors_with_edges
        per_floor = 0
        for column in range(self.max_width):
            if self.chance_path_middle > 0.0:
                per_floor += 1
            if column > 0:
                per_floor += 1
            if column < self.max_width - 1:
                per_floor += 1
        return per_floor * floors_with_edges

    # ------------------------------------------------------------------
    # validation
    # ------------------------------------------------------------------
    def problems(self) -> List[str]:
        errors: List[str] = []
        if self.max_width < 1:
            errors.append(f"max_width must be >= 1, got {self.max_width}")
        if self.map_length < 2:
            errors.append(f"map_length must be >= 2, got {self.map_length}")
        if self.number_of_starting_points < 1:
            errors.append(
                f"number_of_starting_points must be >= 1, got {self.number_of_starting_points}"
            )
        if self.number_of_starting_points > self.max_width:
            errors.append(
                "Number of starting points greater than max_width "
                f"({self.number_of_starting_points} > {self.max_width})"
            )
        for name in ("chance_path_middle", "chance_path_side"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                errors.append(f"{name} must be between 0.0 and 1.0, got {value}")
        if self.x_max_size <= 0:
            errors.append(f"x_max_size must be positive, got {self.x_max_size}")
        if self.y_padding <= 0:
            errors.append(f"y_padding must be positive, got {self.y_padding}")
        if self.multiplicative_space_between_lines < 1.0:
            errors.append(
                "multiplicative_space_between_lines must be >= 1.0, "
                f"got {self.multiplicative_space_between_lines}"
            )
        if self.segment_length <= 0 or self.segment_height < 0:
            errors.append(
                "path segment needs a positive length and a non-negative height, "
                f"got length={self.segment_length} height={self.segment_height}"
            )
        if not self.node_kinds:
            errors.append("node_kinds must not be empty")
        if self.max_edge_rolls < 0:
            errors.append(f"max_edge_rolls must be >= 0, got {self.max_edge_rolls}")
        if self.max_attempts < 0:
            errors.append(f"max_attempts must be >= 0, got {self.max_attempts}")
        if errors:
            # The remaining checks assume sane dimensions and chances.
            return errors

        side_usable = self.chance_path_side > 0.0 and self.max_width > 1
        if self.chance_path_middle <= 0.0 and not side_usable:
            errors.append(
                "chance_path_middle is 0 and no side paths are possible; "
                "nodes could never connect to the next floor"
            )
        elif self.max_reachable_edges() <= self.map_length:
            errors.append(
                f"at most {self.max_reachable_edges()} connections are possible, "
                f"a board needs more than {self.map_length}"
            )
        return errors

    def validate(self) -> None:
        errors = self.problems()
        if errors:
            log.error("Invalid map configuration", errors=errors)
            raise ValueError(f"Invalid map configuration: {'; '.join(errors)}")
        if self.chance_path_middle <= 0.0 and not self.allow_crisscrossing:
            log.warning(
                "chance_path_middle is 0 with crisscrossing disabled; "
                "blocked nodes will exhaust max_edge_rolls and force regeneration",
                max_edge_rolls=self.max_edge_rolls,
            )

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MapConfig":
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "path_segment":
                value = value or {}
                if "mesh_size" in value:
                    kwargs["segment_mesh_size"] = _vector3(value["mesh_size"], "mesh_size")
                if "scale" in value:
                    kwargs["segment_scale"] = _vector3(value["scale"], "scale")
            elif key == "node_kinds":
                kwargs["node_kinds"] = tuple(str(kind) for kind in value)
            elif key in known:
                kwargs[key] = value
            else:
                log.warning("Ignoring unknown map config key", key=key)
        for key in ("number_of_starting_points", "map_length", "max_width", "max_edge_rolls", "max_attempts"):
            if key in kwargs:
                kwargs[key] = int(kwargs[key])
        for key in ("x_max_size", "y_padding", "chance_path_middle", "chance_path_side", "multiplicative_space_between_lines"):
            if key in kwargs:
                kwargs[key] = float(kwargs[key])
        if "allow_crisscrossing" in kwargs:
            kwargs["allow_crisscrossing"] = bool(kwargs["allow_crisscrossing"])
        if kwargs.get("seed") is not None:
            kwargs["seed"] = int(kwargs["seed"])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number_of_starting_points": self.number_of_starting_points,
            "map_length": self.map_length,
            "max_width": self.max_width,
            "x_max_size": self.x_max_size,
            "y_padding": self.y_padding,
            "allow_crisscrossing": self.allow_crisscrossing,
            "chance_path_middle": self.chance_path_middle,
            "chance_path_side": self.chance_path_side,
            "multiplicative_space_between_lines": self.multiplicative_space_between_lines,
            "path_segment": {
                "mesh_size": list(self.segment_mesh_size),
                "scale": list(self.segment_scale),
            },
            "node_kinds": list(self.node_kinds),
            "max_edge_rolls": self.max_edge_rolls,
            "max_attempts": self.max_attempts,
            "seed": self.seed,
        }


def _vector3(value: Any, name: str) -> Tuple[float, float, float]:
    try:
        x, y, z = (float(v) for v in value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a list of three numbers, got {value!r}") from e
    return x, y, z


# --- Config Loading Helpers ---
def load_yaml_config(config_path: Path, config_name: str) -> Dict[str, Any]:
    """Loads a generic YAML configuration file."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        raise FileNotFoundError(f"{config_name} configuration file not found: {config_path}")
    try:
        with config_path.open("r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
        if config_data is None:
            log.warning(f"{config_name} config file is empty.", path=str(config_path))
            return {}
        log.info(f"{config_name} config loaded", path=str(config_path))
        return config_data
    except yaml.YAMLError as e:
        log.error(f"Error parsing YAML for {config_name}", path=str(config_path), error=str(e), exc_info=True)
        raise


def load_map_config(config_path: Path | str = DEFAULT_CONFIG_FILE) -> MapConfig:
    """Load, build and validate a :class:`MapConfig` from YAML."""
    data = load_yaml_config(Path(config_path), "Map")
    if not isinstance(data, dict):
        raise ValueError(f"Map config must be a mapping, got {type(data).__name__}")
    config = MapConfig.from_dict(data.get("map", data))
    config.validate()
    return config

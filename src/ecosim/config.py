from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Type, TypeVar

import yaml


class InvalidParametersError(ValueError):
    """Raised when a parameter set is rejected before it reaches a world."""


class BoundaryType(str, Enum):
    WRAPAROUND = "wraparound"
    WALLS = "walls"


@dataclass(frozen=True)
class PredatorParameters:
    initial_energy: float = 100.0
    max_speed: float = 2.0
    perception_radius: float = 50.0
    capture_distance: float = 5.0
    energy_per_tick: float = 0.5
    energy_gain_from_prey: float = 50.0
    reproduction_threshold: float = 150.0
    reproduction_cost: float = 80.0
    initial_count: int = 10


@dataclass(frozen=True)
class PreyParameters:
    initial_energy: float = 80.0
    max_speed: float = 2.5
    detection_radius: float = 60.0
    flee_distance: float = 40.0
    energy_regeneration: float = 0.3
    energy_loss_fleeing: float = 0.2
    reproduction_threshold: float = 120.0
    reproduction_cost: float = 60.0
    initial_count: int = 50


@dataclass(frozen=True)
class WorldParameters:
    width: float = 800.0
    height: float = 600.0
    boundary_type: BoundaryType = BoundaryType.WRAPAROUND


@dataclass(frozen=True)
class SimulationParameters:
    tick_rate: float = 60.0
    max_agents: int = 1000
    enable_reproduction: bool = True

    @property
    def dt(self) -> float:
        return 1.0 / self.tick_rate


@dataclass(frozen=True)
class Parameters:
    predator: PredatorParameters = field(default_factory=PredatorParameters)
    prey: PreyParameters = field(default_factory=PreyParameters)
    world: WorldParameters = field(default_factory=WorldParameters)
    simulation: SimulationParameters = field(default_factory=SimulationParameters)

    def validate(self) -> None:
        """
        Check the constraints a world needs before it can run.

        Raises ``InvalidParametersError`` describing the first violation found.
        """

        if self.world.width <= 0 or self.world.height <= 0:
            raise InvalidParametersError("World dimensions must be positive")
        if self.predator.max_speed <= 0 or self.prey.max_speed <= 0:
            raise InvalidParametersError("Agent speeds must be positive")
        if self.predator.initial_energy <= 0 or self.prey.initial_energy <= 0:
            raise InvalidParametersError("Initial energy must be positive")
        if self.simulation.tick_rate <= 0:
            raise InvalidParametersError("Tick rate must be positive")

    @staticmethod
    def from_yaml(path: Path) -> "Parameters":
        data = yaml.safe_load(Path(path).read_text())
        return load_parameters(data or {})


_T = TypeVar("_T")


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    return float(value)


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError("booleans are not numbers")
    number = float(value)
    if not number.is_integer():
        raise ValueError("expected a whole number")
    return int(number)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError("expected true or false")


def _to_boundary(value: Any) -> BoundaryType:
    if isinstance(value, BoundaryType):
        return value
    return BoundaryType(str(value).lower())


# Annotations are strings under ``from __future__ import annotations``.
_CONVERTERS: Dict[str, Callable[[Any], Any]] = {
    "float": _to_float,
    "int": _to_int,
    "bool": _to_bool,
    "BoundaryType": _to_boundary,
}


def _section(cls: Type[_T], raw: Any, name: str) -> _T:
    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise InvalidParametersError(f"Section '{name}' must be a mapping")
    declared = {f.name: f.type for f in fields(cls)}
    unknown = sorted(set(raw) - set(declared))
    if unknown:
        raise InvalidParametersError(f"Unknown key '{name}.{unknown[0]}'")
    values = {}
    for key, value in raw.items():
        try:
            values[key] = _CONVERTERS[declared[key]](value)
        except (TypeError, ValueError):
            raise InvalidParametersError(f"Invalid value {value!r} for '{name}.{key}'") from None
    return cls(**values)


def load_parameters(raw: Dict[str, Any]) -> Parameters:
    if not isinstance(raw, dict):
        raise InvalidParametersError("Parameters must be a mapping")
    unknown = sorted(set(raw) - {"predator", "prey", "world", "simulation"})
    if unknown:
        raise InvalidParametersError(f"Unknown key '{unknown[0]}'")

    params = Parameters(
        predator=_section(PredatorParameters, raw.get("predator"), "predator"),
        prey=_section(PreyParameters, raw.get("prey"), "prey"),
        world=_section(WorldParameters, raw.get("world"), "world"),
        simulation=_section(SimulationParameters, raw.get("simulation"), "simulation"),
    )
    params.validate()
    return params

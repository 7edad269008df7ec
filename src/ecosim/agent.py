from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from pygame.math import Vector2

from .config import BoundaryType, PredatorParameters, PreyParameters
from .math2d import add, clamp_position, limit, scale, wrap_position

if TYPE_CHECKING:
    from .snapshot import PerceptionSnapshot

SpeciesParameters = Union[PredatorParameters, PreyParameters]


class AgentKind(str, Enum):
    PREDATOR = "Predator"
    PREY = "Prey"


@dataclass(slots=True)
class Agent:
    id: int
    kind: AgentKind
    position: Vector2
    params: SpeciesParameters
    energy: float
    max_speed: float
    velocity: Vector2 = field(default_factory=Vector2)
    age: int = 0

    @classmethod
    def predator(
        cls, agent_id: int, position: Vector2, params: PredatorParameters, energy: Optional[float] = None
    ) -> "Agent":
        return cls(
            id=agent_id,
            kind=AgentKind.PREDATOR,
            position=Vector2(position),
            params=params,
            energy=params.initial_energy if energy is None else energy,
            max_speed=params.max_speed,
        )

    @classmethod
    def prey(
        cls, agent_id: int, position: Vector2, params: PreyParameters, energy: Optional[float] = None
    ) -> "Agent":
        return cls(
            id=agent_id,
            kind=AgentKind.PREY,
            position=Vector2(position),
            params=params,
            energy=params.initial_energy if energy is None else energy,
            max_speed=params.max_speed,
        )

    @property
    def is_alive(self) -> bool:
        return self.energy > 0.0

    def update_position(self, snapshot: "PerceptionSnapshot") -> None:
        moved = add(self.position, scale(self.velocity, snapshot.dt))
        self.position = resolve_boundary(moved, snapshot.width, snapshot.height, snapshot.boundary_type)

    def set_velocity(self, velocity: Vector2) -> None:
        self.velocity = limit(velocity, self.max_speed)

    def consume_energy(self, amount: float) -> None:
        self.energy = max(0.0, self.energy - amount)

    def add_energy(self, amount: float) -> None:
        # No ceiling: gains accumulate without bound.
        self.energy += amount

    def increment_age(self) -> None:
        self.age += 1


def resolve_boundary(position: Vector2, width: float, height: float, boundary_type: BoundaryType) -> Vector2:
    if boundary_type == BoundaryType.WRAPAROUND:
        return wrap_position(position, width, height)
    return clamp_position(position, width, height)


@dataclass(frozen=True, slots=True)
class NoAction:
    pass


@dataclass(frozen=True, slots=True)
class Move:
    position: Vector2
    velocity: Vector2


@dataclass(frozen=True, slots=True)
class Consumed:
    target_id: int


@dataclass(frozen=True, slots=True)
class Reproduce:
    position: Vector2
    energy: float


Action = Union[NoAction, Move, Consumed, Reproduce]

NO_ACTION = NoAction()

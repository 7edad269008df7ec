from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Sequence, Tuple

from pygame.math import Vector2

from .agent import Agent
from .config import BoundaryType
from .math2d import distance_torus


@dataclass(frozen=True, slots=True)
class Sighting:
    agent_id: int
    position: Vector2
    distance: float


@dataclass(frozen=True, slots=True)
class PerceptionSnapshot:
    width: float
    height: float
    boundary_type: BoundaryType
    dt: float
    nearby_prey: Mapping[int, Tuple[Sighting, ...]] = field(default_factory=dict)
    nearby_predators: Mapping[int, Tuple[Sighting, ...]] = field(default_factory=dict)

    def prey_near(self, predator_id: int) -> Sequence[Sighting]:
        return self.nearby_prey.get(predator_id, ())

    def predators_near(self, prey_id: int) -> Sequence[Sighting]:
        return self.nearby_predators.get(prey_id, ())


def build_snapshot(
    predators: Sequence[Agent],
    prey: Sequence[Agent],
    width: float,
    height: float,
    boundary_type: BoundaryType,
    dt: float,
) -> PerceptionSnapshot:
    """
    Build the read-only view every agent decides against for one tick.

    Every predator/prey pair is measured once with the toroidal distance.
    A prey is visible to a predator inside the predator's perception radius.
    A predator is visible to a prey inside the larger of the predator's
    perception radius and the prey's detection radius.

    The pass is O(predators x prey). A spatial index can replace it as long
    as it returns the same filtered sightings.
    """

    prey_seen: Dict[int, List[Sighting]] = {hunter.id: [] for hunter in predators}
    predators_seen: Dict[int, List[Sighting]] = {target.id: [] for target in prey}

    for hunter in predators:
        hunter_pos = Vector2(hunter.position)
        perception = hunter.params.perception_radius
        hunter_list = prey_seen[hunter.id]
        for target in prey:
            dist = distance_torus(hunter_pos, target.position, width, height)
            if dist <= perception:
                hunter_list.append(Sighting(target.id, Vector2(target.position), dist))
            if dist <= max(perception, target.params.detection_radius):
                predators_seen[target.id].append(Sighting(hunter.id, hunter_pos, dist))

    return PerceptionSnapshot(
        width=width,
        height=height,
        boundary_type=boundary_type,
        dt=dt,
        nearby_prey=MappingProxyType({key: tuple(value) for key, value in prey_seen.items()}),
        nearby_predators=MappingProxyType({key: tuple(value) for key, value in predators_seen.items()}),
    )

from __future__ import annotations

from typing import Optional, Sequence

from pygame.math import Vector2

from .agent import NO_ACTION, Action, Agent, AgentKind, Consumed, Reproduce
from .math2d import add, from_angle, magnitude, normalize, scale, subtract
from .rng import SimulationRng
from .snapshot import PerceptionSnapshot, Sighting

SPAWN_RADIUS = 20.0
SPAWN_MARGIN = 10.0
PREDATOR_IDLE_DECAY = 0.95
PREY_ALERT_DECAY = 0.9
PREY_IDLE_DECAY = 0.95


def nearest(sightings: Sequence[Sighting]) -> Optional[Sighting]:
    best: Optional[Sighting] = None
    for sighting in sightings:
        if best is None or sighting.distance < best.distance:
            best = sighting
    return best


def seek(agent: Agent, target: Vector2) -> Vector2:
    desired = subtract(target, agent.position)
    if magnitude(desired) > 0.0:
        return scale(normalize(desired), agent.max_speed)
    return Vector2()


def flee(agent: Agent, threat: Vector2, rng: SimulationRng) -> Vector2:
    away = subtract(agent.position, threat)
    if magnitude(away) > 0.0:
        return scale(normalize(away), agent.max_speed)
    # Standing on the threat: any direction is as good as another.
    return from_angle(rng.next_angle(), agent.max_speed)


def _spawn_point(agent: Agent, snapshot: PerceptionSnapshot, rng: SimulationRng) -> Vector2:
    offset = from_angle(rng.next_angle(), rng.next_float() * SPAWN_RADIUS)
    spawn = add(agent.position, offset)
    margin_x = min(SPAWN_MARGIN, snapshot.width / 2.0)
    margin_y = min(SPAWN_MARGIN, snapshot.height / 2.0)
    return Vector2(
        min(max(spawn.x, margin_x), snapshot.width - margin_x),
        min(max(spawn.y, margin_y), snapshot.height - margin_y),
    )


def _try_reproduce(agent: Agent, snapshot: PerceptionSnapshot, rng: SimulationRng) -> Optional[Reproduce]:
    params = agent.params
    if agent.energy < params.reproduction_threshold:
        return None
    spawn = _spawn_point(agent, snapshot, rng)
    agent.consume_energy(params.reproduction_cost)
    return Reproduce(position=spawn, energy=params.initial_energy)


def decide_predator(agent: Agent, snapshot: PerceptionSnapshot, rng: SimulationRng) -> Action:
    """
    Advance one predator by a tick and report what it did.

    Metabolism and ageing always happen. A live predator then either
    captures the nearest prey in reach, reproduces, or moves; exactly one
    of those outcomes per tick.
    """

    params = agent.params
    agent.consume_energy(params.energy_per_tick * snapshot.dt)
    agent.increment_age()
    if not agent.is_alive:
        return NO_ACTION

    target = nearest(snapshot.prey_near(agent.id))
    if target is not None:
        if target.distance <= params.capture_distance:
            agent.add_energy(params.energy_gain_from_prey)
            return Consumed(target_id=target.agent_id)
        agent.set_velocity(seek(agent, target.position))
    else:
        agent.set_velocity(scale(agent.velocity, PREDATOR_IDLE_DECAY))

    birth = _try_reproduce(agent, snapshot, rng)
    if birth is not None:
        return birth

    agent.update_position(snapshot)
    return NO_ACTION


def decide_prey(agent: Agent, snapshot: PerceptionSnapshot, rng: SimulationRng) -> Action:
    """Advance one prey by a tick: graze, watch for predators, flee or breed."""

    params = agent.params
    agent.add_energy(params.energy_regeneration * snapshot.dt)
    agent.increment_age()
    if not agent.is_alive:
        return NO_ACTION

    threat = nearest(snapshot.predators_near(agent.id))
    if threat is not None and threat.distance <= params.flee_distance:
        agent.set_velocity(flee(agent, threat.position, rng))
        agent.consume_energy(params.energy_loss_fleeing * snapshot.dt)
    elif threat is not None:
        agent.set_velocity(scale(agent.velocity, PREY_ALERT_DECAY))
    else:
        agent.set_velocity(scale(agent.velocity, PREY_IDLE_DECAY))

    birth = _try_reproduce(agent, snapshot, rng)
    if birth is not None:
        return birth

    agent.update_position(snapshot)
    return NO_ACTION


def decide(agent: Agent, snapshot: PerceptionSnapshot, rng: SimulationRng) -> Action:
    if agent.kind == AgentKind.PREDATOR:
        return decide_predator(agent, snapshot, rng)
    return decide_prey(agent, snapshot, rng)

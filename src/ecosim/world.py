from __future__ import annotations

import logging
from time import perf_counter
from typing import List, Optional, Sequence, Set, Tuple

from pygame.math import Vector2

from .agent import Action, Agent, AgentKind, Consumed, Move, Reproduce, resolve_boundary
from .behaviors import decide
from .config import Parameters
from .metrics import TickMetrics
from .rng import SimulationRng
from .snapshot import PerceptionSnapshot, build_snapshot

logger = logging.getLogger(__name__)


class World:
    """
    Owns both populations and advances them one tick at a time.

    A tick builds a perception snapshot, lets every agent decide against
    it, commits the collected actions, culls starved agents and trims the
    population back under ``max_agents``.
    """

    def __init__(self, params: Optional[Parameters] = None, rng: Optional[SimulationRng] = None):
        params = Parameters() if params is None else params
        params.validate()
        self._params = params
        self._rng = SimulationRng() if rng is None else rng
        self._predators: List[Agent] = []
        self._prey: List[Agent] = []
        self._next_id = 1
        self._tick = 0
        self._metrics: TickMetrics | None = None
        self._bootstrap_population()
        logger.info(
            "World %.0fx%.0f (%s) seeded with %d predators and %d prey",
            params.world.width,
            params.world.height,
            params.world.boundary_type.value,
            len(self._predators),
            len(self._prey),
        )

    @property
    def parameters(self) -> Parameters:
        return self._params

    @property
    def predators(self) -> Tuple[Agent, ...]:
        return tuple(self._predators)

    @property
    def prey(self) -> Tuple[Agent, ...]:
        return tuple(self._prey)

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def metrics(self) -> TickMetrics | None:
        return self._metrics

    def predator_count(self) -> int:
        return len(self._predators)

    def prey_count(self) -> int:
        return len(self._prey)

    def total_agents(self) -> int:
        return len(self._predators) + len(self._prey)

    def average_predator_energy(self) -> float:
        return _average_energy(self._predators)

    def average_prey_energy(self) -> float:
        return _average_energy(self._prey)

    def update(self) -> TickMetrics:
        start = perf_counter()
        snapshot = self.snapshot()

        # Every agent reads the same snapshot; nothing is applied until all have decided.
        predator_actions = [decide(agent, snapshot, self._rng) for agent in self._predators]
        prey_actions = [decide(agent, snapshot, self._rng) for agent in self._prey]

        captures, births = self._commit(predator_actions, prey_actions, snapshot)
        deaths = self._remove_dead()
        evictions = self._enforce_capacity()

        self._tick += 1
        elapsed_ms = (perf_counter() - start) * 1000.0
        metrics = TickMetrics(
            tick=self._tick,
            predators=len(self._predators),
            prey=len(self._prey),
            births=births,
            captures=captures,
            deaths=deaths,
            evictions=evictions,
            average_predator_energy=self.average_predator_energy(),
            average_prey_energy=self.average_prey_energy(),
            tick_duration_ms=elapsed_ms,
        )
        self._metrics = metrics
        logger.debug(
            "tick %d: predators=%d prey=%d births=%d captures=%d deaths=%d evictions=%d",
            metrics.tick,
            metrics.predators,
            metrics.prey,
            births,
            captures,
            deaths,
            evictions,
        )
        return metrics

    def snapshot(self) -> PerceptionSnapshot:
        world = self._params.world
        return build_snapshot(
            self._predators,
            self._prey,
            world.width,
            world.height,
            world.boundary_type,
            self._params.simulation.dt,
        )

    def update_parameters(self, params: Parameters) -> None:
        """Swap in a new configuration. Agents already alive keep their own."""
        params.validate()
        self._params = params
        logger.info("Parameters replaced; %d live agents keep their previous settings", self.total_agents())

    def spawn_predators(self, count: int) -> int:
        return self._spawn(AgentKind.PREDATOR, count)

    def spawn_prey(self, count: int) -> int:
        return self._spawn(AgentKind.PREY, count)

    def clear_all(self) -> None:
        self._predators.clear()
        self._prey.clear()

    def reset(self) -> None:
        self.clear_all()
        self._rng.reset()
        self._tick = 0
        self._metrics = None
        self._bootstrap_population()
        logger.info("World reset with %d predators and %d prey", len(self._predators), len(self._prey))

    def _allocate_id(self) -> int:
        agent_id = self._next_id
        self._next_id += 1
        return agent_id

    def _create(self, kind: AgentKind, position: Vector2, energy: Optional[float] = None) -> Agent:
        if kind == AgentKind.PREDATOR:
            return Agent.predator(self._allocate_id(), position, self._params.predator, energy)
        return Agent.prey(self._allocate_id(), position, self._params.prey, energy)

    def _random_position(self) -> Vector2:
        return self._rng.next_position(self._params.world.width, self._params.world.height)

    def _bootstrap_population(self) -> None:
        for _ in range(self._params.predator.initial_count):
            self._predators.append(self._create(AgentKind.PREDATOR, self._random_position()))
        for _ in range(self._params.prey.initial_count):
            self._prey.append(self._create(AgentKind.PREY, self._random_position()))

    def _spawn(self, kind: AgentKind, count: int) -> int:
        target = self._predators if kind == AgentKind.PREDATOR else self._prey
        spawned = 0
        for _ in range(count):
            if self.total_agents() >= self._params.simulation.max_agents:
                break
            target.append(self._create(kind, self._random_position()))
            spawned += 1
        if spawned < count:
            logger.debug("Spawned %d of %d requested %s (capacity reached)", spawned, count, kind.value)
        return spawned

    def _commit(
        self,
        predator_actions: Sequence[Action],
        prey_actions: Sequence[Action],
        snapshot: PerceptionSnapshot,
    ) -> Tuple[int, int]:
        consumed: Set[int] = set()
        new_predators: List[Agent] = []
        new_prey: List[Agent] = []
        reproduction = self._params.simulation.enable_reproduction

        for agent, action in zip(self._predators, predator_actions):
            if isinstance(action, Consumed):
                consumed.add(action.target_id)
            elif isinstance(action, Reproduce) and reproduction:
                new_predators.append(self._create(AgentKind.PREDATOR, action.position, action.energy))
            elif isinstance(action, Move):
                self._apply_move(agent, action, snapshot)

        for agent, action in zip(self._prey, prey_actions):
            if isinstance(action, Reproduce) and reproduction:
                new_prey.append(self._create(AgentKind.PREY, action.position, action.energy))
            elif isinstance(action, Move):
                self._apply_move(agent, action, snapshot)

        before = len(self._prey)
        if consumed:
            self._prey = [agent for agent in self._prey if agent.id not in consumed]
        captures = before - len(self._prey)

        self._predators.extend(new_predators)
        self._prey.extend(new_prey)
        return captures, len(new_predators) + len(new_prey)

    @staticmethod
    def _apply_move(agent: Agent, action: Move, snapshot: PerceptionSnapshot) -> None:
        agent.set_velocity(action.velocity)
        agent.position = resolve_boundary(action.position, snapshot.width, snapshot.height, snapshot.boundary_type)

    def _remove_dead(self) -> int:
        before = self.total_agents()
        self._predators = [agent for agent in self._predators if agent.is_alive]
        self._prey = [agent for agent in self._prey if agent.is_alive]
        return before - self.total_agents()

    def _enforce_capacity(self) -> int:
        """Trim overflow from the oldest predators first, then the oldest prey."""
        overflow = self.total_agents() - self._params.simulation.max_agents
        if overflow <= 0:
            return 0
        before = self.total_agents()
        from_predators = min(overflow, len(self._predators))
        del self._predators[:from_predators]
        del self._prey[: overflow - from_predators]
        evicted = before - self.total_agents()
        logger.debug("Evicted %d agents to respect max_agents=%d", evicted, self._params.simulation.max_agents)
        return evicted


def _average_energy(agents: Sequence[Agent]) -> float:
    if not agents:
        return 0.0
    return sum(agent.energy for agent in agents) / len(agents)

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class TickMetrics:
    tick: int
    predators: int
    prey: int
    births: int
    captures: int
    deaths: int
    evictions: int
    average_predator_energy: float
    average_prey_energy: float
    tick_duration_ms: float = 0.0

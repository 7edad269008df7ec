from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path
from typing import Optional

from .config import Parameters
from .metrics import TickMetrics
from .rng import SimulationRng
from .world import World

logger = logging.getLogger(__name__)

_HEADER = [
    "tick",
    "predators",
    "prey",
    "births",
    "captures",
    "deaths",
    "evictions",
    "avg_predator_energy",
    "avg_prey_energy",
    "tick_ms",
]


def _format_row(metrics: TickMetrics, tick_ms: float) -> list[object]:
    return [
        metrics.tick,
        metrics.predators,
        metrics.prey,
        metrics.births,
        metrics.captures,
        metrics.deaths,
        metrics.evictions,
        f"{metrics.average_predator_energy:.4f}",
        f"{metrics.average_prey_energy:.4f}",
        f"{tick_ms:.3f}",
    ]


def run_headless(
    steps: int,
    config_path: Optional[Path] = None,
    log_path: Optional[Path] = None,
    seed: Optional[int] = None,
    deterministic_log: bool = False,
) -> Optional[TickMetrics]:
    params = Parameters.from_yaml(config_path) if config_path else Parameters()
    world = World(params, rng=SimulationRng(seed))
    metrics: Optional[TickMetrics] = None

    csv_file = Path(log_path).open("w", newline="") if log_path else None
    try:
        writer = csv.writer(csv_file) if csv_file else None
        if writer:
            writer.writerow(_HEADER)
        for _ in range(steps):
            metrics = world.update()
            if writer:
                tick_ms = 0.0 if deterministic_log else metrics.tick_duration_ms
                writer.writerow(_format_row(metrics, tick_ms))
            if world.total_agents() == 0:
                logger.info("Both populations extinct after %d ticks", metrics.tick)
                break
    finally:
        if csv_file:
            csv_file.close()

    if metrics is not None:
        logger.info(
            "Finished at tick %d with %d predators and %d prey",
            metrics.tick,
            metrics.predators,
            metrics.prey,
        )
    return metrics


def main() -> None:
    parser = argparse.ArgumentParser(description="Headless predator/prey simulation")
    parser.add_argument("--steps", type=int, default=3000)
    parser.add_argument("--config", type=Path, default=None, help="YAML parameter file")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log", type=Path, default=None, help="CSV file to write per-tick metrics")
    parser.add_argument(
        "--deterministic-log",
        action="store_true",
        help="Write tick_ms as 0.000 so logs from identical runs can be diffed.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every tick")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_headless(args.steps, args.config, args.log, seed=args.seed, deterministic_log=args.deterministic_log)


if __name__ == "__main__":
    main()

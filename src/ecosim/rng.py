from __future__ import annotations

import math
import random
from typing import Optional

from pygame.math import Vector2


class SimulationRng:
    """Random source shared by a world and its behaviours. Unseeded by default."""

    def __init__(self, seed: Optional[int] = None):
        self._seed = seed
        self._random = random.Random(seed)

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_angle(self) -> float:
        return self._random.random() * 2.0 * math.pi

    def next_position(self, width: float, height: float) -> Vector2:
        return Vector2(self._random.random() * width, self._random.random() * height)

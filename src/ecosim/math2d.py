from __future__ import annotations

import math

from pygame.math import Vector2


def magnitude(vector: Vector2) -> float:
    return math.sqrt(vector.x * vector.x + vector.y * vector.y)


def magnitude_squared(vector: Vector2) -> float:
    return vector.x * vector.x + vector.y * vector.y


def normalize(vector: Vector2) -> Vector2:
    # pygame raises on zero-length vectors; here they stay zero.
    mag = magnitude(vector)
    if mag > 0.0:
        return Vector2(vector.x / mag, vector.y / mag)
    return Vector2()


def scale(vector: Vector2, scalar: float) -> Vector2:
    return Vector2(vector.x * scalar, vector.y * scalar)


def limit(vector: Vector2, max_length: float) -> Vector2:
    if magnitude(vector) > max_length:
        return scale(normalize(vector), max_length)
    return Vector2(vector)


def add(a: Vector2, b: Vector2) -> Vector2:
    return Vector2(a.x + b.x, a.y + b.y)


def subtract(a: Vector2, b: Vector2) -> Vector2:
    return Vector2(a.x - b.x, a.y - b.y)


def distance(a: Vector2, b: Vector2) -> float:
    return magnitude(subtract(a, b))


def distance_squared(a: Vector2, b: Vector2) -> float:
    return magnitude_squared(subtract(a, b))


def _wrapped_delta(a: float, b: float, size: float) -> float:
    delta = abs(a - b)
    return min(delta, size - delta)


def distance_torus_squared(a: Vector2, b: Vector2, width: float, height: float) -> float:
    dx = _wrapped_delta(a.x, b.x, width)
    dy = _wrapped_delta(a.y, b.y, height)
    return dx * dx + dy * dy


def distance_torus(a: Vector2, b: Vector2, width: float, height: float) -> float:
    """Shortest distance between two points when opposite edges are joined."""
    return math.sqrt(distance_torus_squared(a, b, width, height))


def angle(vector: Vector2) -> float:
    return math.atan2(vector.y, vector.x)


def from_angle(theta: float, length: float) -> Vector2:
    return Vector2(math.cos(theta) * length, math.sin(theta) * length)


def wrap_position(position: Vector2, width: float, height: float) -> Vector2:
    """
    Fold a position back into ``[0, width) x [0, height)``.

    Only one world length is added or removed per axis, so a displacement
    larger than the world itself within a single tick is not fully folded.
    """

    x = position.x
    y = position.y
    if x < 0.0:
        x += width
    elif x >= width:
        x -= width
    if y < 0.0:
        y += height
    elif y >= height:
        y -= height
    return Vector2(x, y)


def clamp_position(position: Vector2, width: float, height: float) -> Vector2:
    return Vector2(_clamp_value(position.x, 0.0, width), _clamp_value(position.y, 0.0, height))


def _clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))

"""
Movement and overlap helpers for the server simulation.
Everything here is pure: no game state, no randomness.
"""

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; (x, y) is the top-left corner."""
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class Bounds:
    """The legal game area. Entities must fit entirely inside it."""
    width: float
    height: float

    def clamp_position(self, x: float, y: float,
                       entity_width: float, entity_height: float) -> Tuple[float, float]:
        """Pull a top-left position back inside the area for an entity of this size."""
        return (
            clamp(x, 0, self.width - entity_width),
            clamp(y, 0, self.height - entity_height)
        )

    def contains(self, rect: Rect) -> bool:
        return (0 <= rect.x <= self.width - rect.width
                and 0 <= rect.y <= self.height - rect.height)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def normalize_input(dx: float, dy: float) -> Tuple[float, float]:
    """
    Turn a raw direction into one with each component in [-1, 1]
    and length at most 1.

    Diagonals get scaled down so moving at an angle is no faster than
    moving along an axis. Vectors already short enough come back as-is.
    """
    dx = clamp(dx, -1.0, 1.0)
    dy = clamp(dy, -1.0, 1.0)

    length = math.hypot(dx, dy)
    if length > 1:
        return dx / length, dy / length
    return dx, dy


def rects_overlap(a: Rect, b: Rect) -> bool:
    """True unless the rectangles are separated on the x or y axis.
    Rectangles that only share an edge do not overlap."""
    return not (
        a.x + a.width <= b.x or   # a is left of b
        a.x >= b.x + b.width or   # a is right of b
        a.y + a.height <= b.y or  # a is above b
        a.y >= b.y + b.height     # a is below b
    )

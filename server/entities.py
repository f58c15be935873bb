"""
Server-side entities and the factory that spawns them.
"""

import itertools
import random
import secrets
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from shared.constants import COLLECTIBLE_VALUE_CHOICES
from shared.protocol import PlayerState, CollectibleState
from server.physics import Bounds, Rect


@dataclass
class Player:
    """Server-side player representation."""
    id: str
    x: float
    y: float
    score: int = 0

    def rect(self, width: float, height: float) -> Rect:
        return Rect(self.x, self.y, width, height)

    def to_state(self) -> PlayerState:
        """Convert to PlayerState for network transmission."""
        return PlayerState(id=self.id, x=self.x, y=self.y, score=self.score)


@dataclass(frozen=True)
class Collectible:
    """Server-side collectible. Never mutated, only replaced."""
    id: str
    x: float
    y: float
    value: int

    def rect(self, width: float, height: float) -> Rect:
        return Rect(self.x, self.y, width, height)

    def to_state(self) -> CollectibleState:
        """Convert to CollectibleState for network transmission."""
        return CollectibleState(x=self.x, y=self.y, value=self.value, id=self.id)


class EntityFactory:
    """
    Spawns players and collectibles.

    Positions come from an ordinary PRNG. Collectible values come from the
    OS entropy pool so a client can't work out the next coin's worth from
    a seed.
    """

    def __init__(self, position_rng: Optional[random.Random] = None,
                 value_choices: Sequence[int] = COLLECTIBLE_VALUE_CHOICES):
        self._position_rng = position_rng or random.Random()
        self._value_rng = secrets.SystemRandom()
        self._value_choices = tuple(value_choices)
        self._collectible_ids = itertools.count(1)

    def random_position(self, entity_width: float, entity_height: float,
                        bounds: Bounds) -> Tuple[float, float]:
        """Uniform top-left position that keeps the entity inside bounds."""
        x = self._position_rng.uniform(0, bounds.width - entity_width)
        y = self._position_rng.uniform(0, bounds.height - entity_height)
        return x, y

    def next_collectible_value(self) -> int:
        return self._value_rng.choice(self._value_choices)

    def next_collectible_id(self) -> str:
        return str(next(self._collectible_ids))

    def new_player(self, player_id: str, width: float, height: float,
                   bounds: Bounds) -> Player:
        x, y = self.random_position(width, height, bounds)
        return Player(id=player_id, x=x, y=y)

    def new_collectible(self, width: float, height: float,
                        bounds: Bounds) -> Collectible:
        x, y = self.random_position(width, height, bounds)
        return Collectible(
            id=self.next_collectible_id(),
            x=x,
            y=y,
            value=self.next_collectible_value()
        )

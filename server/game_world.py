"""
Server-side game world: authoritative players, the collectible, scores.
Single source of truth for all mutable game data.
"""

from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from shared.constants import (
    GAME_AREA_WIDTH, GAME_AREA_HEIGHT, PLAYER_WIDTH, PLAYER_HEIGHT,
    PLAYER_SPEED, COLLECTIBLE_WIDTH, COLLECTIBLE_HEIGHT
)
from shared.protocol import GameStateSnapshot
from server.entities import Player, Collectible, EntityFactory
from server.physics import Bounds, normalize_input, rects_overlap


@dataclass(frozen=True)
class WorldConfig:
    """Sizes and speeds the world runs with."""
    area_width: float = GAME_AREA_WIDTH
    area_height: float = GAME_AREA_HEIGHT
    player_width: float = PLAYER_WIDTH
    player_height: float = PLAYER_HEIGHT
    collectible_width: float = COLLECTIBLE_WIDTH
    collectible_height: float = COLLECTIBLE_HEIGHT
    player_speed: float = PLAYER_SPEED  # per tick

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.area_width, self.area_height)


@dataclass
class PendingMembershipChanges:
    """Joins and leaves collected between two ticks."""
    joins: List[str] = field(default_factory=list)
    leaves: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Pickup:
    """A player grabbed the collectible this tick."""
    player_id: str
    collectible_id: str
    value: int
    new_score: int


class GameWorld:
    """
    Authoritative game world.

    Network handlers only queue joins/leaves and overwrite the input map;
    the player collection itself only changes inside tick().
    """

    def __init__(self, config: Optional[WorldConfig] = None,
                 factory: Optional[EntityFactory] = None):
        self.config = config or WorldConfig()
        self.factory = factory or EntityFactory()

        # Insertion order is join order, which decides pickup ties
        self.players: Dict[str, Player] = {}
        self.inputs: Dict[str, Tuple[float, float]] = {}
        self.pending = PendingMembershipChanges()
        self.collectible: Collectible = self._spawn_collectible()

    @property
    def bounds(self) -> Bounds:
        return self.config.bounds

    @property
    def player_count(self) -> int:
        return len(self.players)

    def get_player(self, player_id: str) -> Optional[Player]:
        """Get a player by ID."""
        return self.players.get(player_id)

    def enqueue_join(self, player_id: str):
        """Queue a player to be added on the next tick."""
        self.pending.joins.append(player_id)

    def enqueue_leave(self, player_id: str):
        """Queue a player to be removed on the next tick."""
        self.pending.leaves.append(player_id)

    def set_input(self, player_id: str, dx: float, dy: float):
        """
        Record a player's desired direction - SERVER AUTHORITATIVE.
        Client only sends intent; the world clamps it and applies it on tick.
        Input for someone we don't know (already left, never joined) is dropped.
        """
        if player_id not in self.players and player_id not in self.pending.joins:
            return
        self.inputs[player_id] = normalize_input(dx, dy)

    def tick(self) -> Optional[Pickup]:
        """
        Advance the world by one tick. Order matters here:
        membership, then movement, then the pickup check.
        Returns the pickup that happened this tick, if any.
        """
        changes = self.pending
        self.pending = PendingMembershipChanges()

        self._apply_leaves(changes.leaves)
        self._apply_joins(changes.joins, exclude=set(changes.leaves))
        self._move_players()
        return self._check_pickup()

    def _apply_leaves(self, leaves: List[str]):
        for player_id in leaves:
            self.players.pop(player_id, None)
            self.inputs.pop(player_id, None)

    def _apply_joins(self, joins: List[str], exclude: set):
        cfg = self.config
        for player_id in joins:
            # A connection that went away before its join landed, or a repeat join
            if player_id in exclude or player_id in self.players:
                continue
            self.players[player_id] = self.factory.new_player(
                player_id, cfg.player_width, cfg.player_height, self.bounds
            )

    def _move_players(self):
        cfg = self.config
        for player in self.players.values():
            direction = self.inputs.get(player.id)
            if direction is None:
                continue
            dx, dy = direction
            player.x, player.y = self.bounds.clamp_position(
                player.x + dx * cfg.player_speed,
                player.y + dy * cfg.player_speed,
                cfg.player_width,
                cfg.player_height
            )

    def _check_pickup(self) -> Optional[Pickup]:
        cfg = self.config
        coin = self.collectible
        coin_rect = coin.rect(cfg.collectible_width, cfg.collectible_height)

        for player in self.players.values():
            if rects_overlap(coin_rect, player.rect(cfg.player_width, cfg.player_height)):
                player.score += coin.value
                self.collectible = self._spawn_collectible()
                # Only one pickup per tick; first player in join order wins
                return Pickup(player.id, coin.id, coin.value, player.score)
        return None

    def _spawn_collectible(self) -> Collectible:
        cfg = self.config
        return self.factory.new_collectible(
            cfg.collectible_width, cfg.collectible_height, self.bounds
        )

    def snapshot(self) -> GameStateSnapshot:
        """Get current game state for network transmission. Read only."""
        return GameStateSnapshot(
            players=[p.to_state() for p in self.players.values()],
            collectible=self.collectible.to_state()
        )

"""
Network protocol definitions for client-server messages.
Message types, dataclasses, validation and helper factory functions.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Tuple
import json
import math


class ProtocolError(ValueError):
    """A message did not have the shape the protocol requires."""


class HandshakeError(ProtocolError):
    """The server's new-player-response is unusable; the session can't go on."""


class MessageType(str, Enum):
    """All possible message types in the protocol."""

    # Client -> Server messages
    NEW_PLAYER = "new-player"                    # Client wants to join the game
    PLAYER_INPUT = "player-input"                # Client sends movement direction

    # Server -> Client messages
    NEW_PLAYER_RESPONSE = "new-player-response"  # Join acknowledged, sends player ID
    GAME_STATE = "game-state"                    # Full game state, once per tick


@dataclass
class PlayerState:
    """State of a single player as seen on the wire."""
    id: str
    x: float
    y: float
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "x": self.x, "y": self.y, "score": self.score}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "PlayerState":
        return PlayerState(
            id=data["id"],
            x=data["x"],
            y=data["y"],
            score=data["score"]
        )


@dataclass
class CollectibleState:
    """State of the collectible as seen on the wire."""
    x: float
    y: float
    value: int
    id: str

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "value": self.value, "id": self.id}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "CollectibleState":
        return CollectibleState(
            x=data["x"],
            y=data["y"],
            value=data["value"],
            id=data["id"]
        )


@dataclass
class GameStateSnapshot:
    """Complete game state at a point in time."""
    players: List[PlayerState]
    collectible: CollectibleState

    def to_dict(self) -> Dict[str, Any]:
        return {
            "players": [p.to_dict() for p in self.players],
            "collectible": self.collectible.to_dict()
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "GameStateSnapshot":
        if data.get("players") is None:
            raise ProtocolError("game-state missing players")
        if data.get("collectible") is None:
            raise ProtocolError("game-state missing collectible")
        try:
            return GameStateSnapshot(
                players=[PlayerState.from_dict(p) for p in data["players"]],
                collectible=CollectibleState.from_dict(data["collectible"])
            )
        except (KeyError, TypeError) as e:
            raise ProtocolError(f"game-state malformed: {e!r}") from e


@dataclass
class NewPlayerResponse:
    """Handshake data the client needs before it can find itself in snapshots."""
    game_area_width: int
    game_area_height: int
    player_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gameAreaWidth": self.game_area_width,
            "gameAreaHeight": self.game_area_height,
            "playerId": self.player_id
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "NewPlayerResponse":
        # Zero or empty values are as useless as missing ones
        for key in ("gameAreaWidth", "gameAreaHeight", "playerId"):
            if not data.get(key):
                raise HandshakeError(f"new-player-response missing {key}")
        return NewPlayerResponse(
            game_area_width=data["gameAreaWidth"],
            game_area_height=data["gameAreaHeight"],
            player_id=data["playerId"]
        )


class Message:
    """Base message class for all network communication."""

    def __init__(self, msg_type: MessageType, data: Optional[Dict[str, Any]] = None):
        self.type = msg_type
        self.data = data or {}

    def to_json(self) -> str:
        """Serialize message to JSON string."""
        return json.dumps({
            "type": self.type.value,
            "data": self.data
        })

    @staticmethod
    def from_json(json_str: str) -> "Message":
        """Deserialize message from JSON string.

        Raises ProtocolError for anything that isn't a known message with an
        object payload.
        """
        try:
            obj = json.loads(json_str)
            msg_type = MessageType(obj["type"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError, RecursionError) as e:
            raise ProtocolError(f"bad message: {e!r}") from e
        data = obj.get("data")
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ProtocolError(f"bad payload for {msg_type.value}: {type(data).__name__}")
        return Message(msg_type=msg_type, data=data)


def _is_number(value: Any) -> bool:
    # bool is an int subclass, but true/false is not a direction
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        # JSON ints can be far bigger than any float
        return math.isfinite(float(value))
    except OverflowError:
        return False


def parse_player_input(data: Dict[str, Any]) -> Optional[Tuple[float, float]]:
    """Return (dx, dy) from a player-input payload, or None if it is malformed."""
    dx = data.get("dx")
    dy = data.get("dy")
    if not (_is_number(dx) and _is_number(dy)):
        return None
    return float(dx), float(dy)


# =============================================================================
# MESSAGE FACTORIES - Convenience functions to create specific messages
# =============================================================================

def create_new_player_message() -> Message:
    """Create a join request message."""
    return Message(MessageType.NEW_PLAYER)


def create_player_input_message(dx: float, dy: float) -> Message:
    """Create an input message with the desired movement direction."""
    return Message(MessageType.PLAYER_INPUT, {"dx": dx, "dy": dy})


def create_new_player_response_message(width: int, height: int, player_id: str) -> Message:
    """Create the handshake reply for a new player."""
    return Message(
        MessageType.NEW_PLAYER_RESPONSE,
        NewPlayerResponse(width, height, player_id).to_dict()
    )


def create_game_state_message(state: GameStateSnapshot) -> Message:
    """Create a full game state message."""
    return Message(MessageType.GAME_STATE, state.to_dict())

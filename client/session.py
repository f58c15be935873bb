"""
Client-side session state: who we are, what the server last told us,
and which way we want to move. No pygame in here.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from shared.protocol import (
    Message, MessageType, NewPlayerResponse, GameStateSnapshot,
    PlayerState, CollectibleState
)
from client.rank import calculate_rank

# Movement keys -> unit direction they contribute
KEY_DIRECTIONS: Dict[str, Tuple[int, int]] = {
    "w": (0, -1),
    "a": (-1, 0),
    "s": (0, 1),
    "d": (1, 0),
}


def direction_from_keys(pressed: Iterable[str]) -> Tuple[int, int]:
    """Sum held movement keys into a raw (dx, dy); opposite keys cancel."""
    dx = dy = 0
    for key in set(pressed):
        kx, ky = KEY_DIRECTIONS.get(key, (0, 0))
        dx += kx
        dy += ky
    return dx, dy


class ClientSession:
    """
    Tracks the local view of the game.

    Raises HandshakeError on a bad new-player-response and ProtocolError on
    a bad game-state; the front end lets both propagate since neither leaves
    a playable session.
    """

    def __init__(self):
        self.started = False
        self.player_id: Optional[str] = None
        self.game_area_width: Optional[int] = None
        self.game_area_height: Optional[int] = None

        self.player: Optional[PlayerState] = None     # me
        self.other_players: List[PlayerState] = []
        self.collectible: Optional[CollectibleState] = None

    def handle_message(self, message: Message):
        if message.type == MessageType.NEW_PLAYER_RESPONSE:
            self.handle_new_player_response(message.data)
        elif message.type == MessageType.GAME_STATE:
            self.handle_game_state(message.data)

    def handle_new_player_response(self, data: dict):
        response = NewPlayerResponse.from_dict(data)
        self.game_area_width = response.game_area_width
        self.game_area_height = response.game_area_height
        # Used to pick ourselves out of every game-state from now on
        self.player_id = response.player_id
        self.started = True
        print(f"[CLIENT] Joined as {self.player_id} "
              f"({self.game_area_width}x{self.game_area_height} area)")

    def handle_game_state(self, data: dict):
        if not self.started:
            return
        snapshot = GameStateSnapshot.from_dict(data)

        # Our id can be missing for the tick or two before our join lands
        self.player = next((p for p in snapshot.players if p.id == self.player_id), None)
        self.other_players = [p for p in snapshot.players if p.id != self.player_id]
        self.collectible = snapshot.collectible

    @property
    def score_text(self) -> str:
        return str(self.player.score) if self.player else "?"

    @property
    def rank_text(self) -> str:
        if self.player is None:
            return "Rank: ?/?"
        return calculate_rank(self.player, self.other_players)

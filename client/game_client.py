"""
Main game client for Coin Race.
Ties together the pygame window, the network thread and the session state.
"""

import pygame
import sys
from typing import Set

# Add parent directory to path for imports
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shared.constants import WINDOW_WIDTH, WINDOW_HEIGHT, CLIENT_TICK_RATE

from client.network import NetworkClient
from client.renderer import GameRenderer
from client.session import ClientSession, direction_from_keys


# pygame key -> movement key name used by the session
MOVEMENT_KEYS = {
    pygame.K_w: "w", pygame.K_UP: "w",
    pygame.K_a: "a", pygame.K_LEFT: "a",
    pygame.K_s: "s", pygame.K_DOWN: "s",
    pygame.K_d: "d", pygame.K_RIGHT: "d",
}


class CoinRaceClient:
    """Main game client class."""

    def __init__(self):
        pygame.init()
        pygame.display.set_caption("Coin Race")
        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        self.clock = pygame.time.Clock()

        self.renderer = GameRenderer(self.screen)
        self.network = NetworkClient()
        self.session = ClientSession()

        self.running = True
        self.pressed_keys: Set[str] = set()
        self.last_direction = None

    def start(self):
        """Kick things off for the client."""
        print("[CLIENT] Starting")
        self.network.connect()
        self.run()

    def run(self):
        """Main game loop."""
        try:
            while self.running:
                self.handle_events()
                self.process_network_messages()
                self.render()
                pygame.display.flip()
                self.clock.tick(CLIENT_TICK_RATE)
        finally:
            self.cleanup()

    def handle_events(self):
        """Handle Pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key in MOVEMENT_KEYS:
                    self.pressed_keys.add(MOVEMENT_KEYS[event.key])
                    self.emit_player_input()

            elif event.type == pygame.KEYUP:
                if event.key in MOVEMENT_KEYS:
                    self.pressed_keys.discard(MOVEMENT_KEYS[event.key])
                    self.emit_player_input()

    def emit_player_input(self, force: bool = False):
        """Tell the server our direction, but only when it actually changed."""
        if not self.session.started:
            return
        direction = direction_from_keys(self.pressed_keys)
        if direction == self.last_direction and not force:
            return
        self.last_direction = direction
        self.network.send_input(*direction)

    def process_network_messages(self):
        """Feed server messages into the session. Protocol errors are fatal."""
        for message in self.network.get_messages():
            was_started = self.session.started
            self.session.handle_message(message)

            if self.session.started and not was_started:
                self.renderer.set_game_area(
                    self.session.game_area_width, self.session.game_area_height
                )
                # Start sending input straight away
                self.emit_player_input(force=True)

    def render(self):
        session = self.session
        if not session.started:
            self.renderer.render_connecting()
            return
        self.renderer.render_game(
            session.player, session.other_players, session.collectible,
            session.score_text, session.rank_text
        )

    def cleanup(self):
        print("[CLIENT] Shutting down")
        self.network.disconnect()
        pygame.quit()


def main():
    print("=" * 50)
    print("  COIN RACE - Client")
    print("=" * 50)
    client = CoinRaceClient()
    client.start()


if __name__ == "__main__":
    main()

"""
Pygame renderer for Coin Race.
Draws the game area, players, the collectible and the HUD line.
"""

import pygame
from typing import List, Optional

from shared.constants import (
    PLAYER_WIDTH, PLAYER_HEIGHT, COLLECTIBLE_WIDTH, COLLECTIBLE_HEIGHT,
    COLLECTIBLE_COLORS, LOCAL_PLAYER_COLOR, OTHER_PLAYER_COLOR, GAME_AREA_MARGIN
)
from shared.protocol import PlayerState, CollectibleState


# Color definitions
BACKGROUND_COLOR = (51, 51, 51)
OUTLINE_COLOR = (170, 170, 170)
TEXT_COLOR = (255, 255, 255)


class GameRenderer:
    """Handles all Pygame rendering for the game."""

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self.width = screen.get_width()
        self.height = screen.get_height()

        pygame.font.init()
        self.font = pygame.font.Font(None, 28)

        self.offset_x = GAME_AREA_MARGIN
        self.set_game_area(self.width - GAME_AREA_MARGIN * 2, self.height - GAME_AREA_MARGIN * 4)

    def set_game_area(self, area_width: int, area_height: int):
        """Anchor the game area to the bottom-left corner of the window."""
        self.area_width = area_width
        self.area_height = area_height
        self.offset_y = self.height - area_height - GAME_AREA_MARGIN

    def render_hud(self, score: str, rank: str):
        """Background, area outline and the one-line HUD."""
        self.screen.fill(BACKGROUND_COLOR)

        outline = 2
        pygame.draw.rect(
            self.screen, OUTLINE_COLOR,
            (self.offset_x - outline, self.offset_y - outline,
             self.area_width + outline * 2, self.area_height + outline * 2),
            outline
        )

        left = self.font.render("Controls: WASD", True, TEXT_COLOR)
        self.screen.blit(left, left.get_rect(left=10, top=15))

        title = self.font.render("Coin Race", True, TEXT_COLOR)
        self.screen.blit(title, title.get_rect(centerx=self.width // 2, top=15))

        right = self.font.render(f"Score: {score}   {rank}", True, TEXT_COLOR)
        self.screen.blit(right, right.get_rect(right=self.width - 10, top=15))

    def render_collectible(self, collectible: Optional[CollectibleState]):
        if collectible is None:
            return
        color = COLLECTIBLE_COLORS.get(collectible.value, COLLECTIBLE_COLORS[3])
        rect = pygame.Rect(
            self.offset_x + collectible.x, self.offset_y + collectible.y,
            COLLECTIBLE_WIDTH, COLLECTIBLE_HEIGHT
        )
        pygame.draw.ellipse(self.screen, color, rect)

    def render_player(self, player: PlayerState, is_local: bool = False):
        color = LOCAL_PLAYER_COLOR if is_local else OTHER_PLAYER_COLOR
        rect = pygame.Rect(
            self.offset_x + player.x, self.offset_y + player.y,
            PLAYER_WIDTH, PLAYER_HEIGHT
        )
        pygame.draw.rect(self.screen, color, rect)

    def render_game(self, me: Optional[PlayerState], others: List[PlayerState],
                    collectible: Optional[CollectibleState], score: str, rank: str):
        """Full frame, drawn back to front."""
        self.render_hud(score, rank)
        self.render_collectible(collectible)
        for player in others:
            self.render_player(player)
        if me is not None:
            self.render_player(me, is_local=True)

    def render_connecting(self):
        self.screen.fill(BACKGROUND_COLOR)
        text = self.font.render("Connecting...", True, TEXT_COLOR)
        self.screen.blit(text, text.get_rect(center=(self.width // 2, self.height // 2)))

"""
Shared constants for Coin Race.
Used by both server and client.
"""

import os

# =============================================================================
# NETWORK SETTINGS
# =============================================================================
SERVER_HOST = os.environ.get("HOST", "localhost")
SERVER_PORT = int(os.environ.get("PORT", "8765"))

# =============================================================================
# GAME AREA SETTINGS
# =============================================================================
GAME_AREA_WIDTH = 600
GAME_AREA_HEIGHT = 400

# =============================================================================
# PLAYER SETTINGS
# =============================================================================
PLAYER_WIDTH = 30
PLAYER_HEIGHT = 30
PLAYER_SPEED = 5  # Pixels per tick
LOCAL_PLAYER_COLOR = (65, 105, 225)   # Royal Blue
OTHER_PLAYER_COLOR = (220, 20, 60)    # Crimson

# =============================================================================
# COLLECTIBLE SETTINGS
# =============================================================================
COLLECTIBLE_WIDTH = 15
COLLECTIBLE_HEIGHT = 15
# One entry per outcome, so 1 is three times as likely as 3
COLLECTIBLE_VALUE_CHOICES = (1, 1, 1, 2, 2, 3)
COLLECTIBLE_COLORS = {
    1: (205, 127, 50),    # Bronze
    2: (192, 192, 192),   # Silver
    3: (255, 215, 0),     # Gold
}

# =============================================================================
# TIMING SETTINGS
# =============================================================================
SERVER_TICK_RATE = 60  # Ticks (and game-state broadcasts) per second
CLIENT_TICK_RATE = 60  # Client frames per second

# =============================================================================
# WINDOW SETTINGS
# =============================================================================
WINDOW_WIDTH = GAME_AREA_WIDTH + 40
WINDOW_HEIGHT = GAME_AREA_HEIGHT + 80
GAME_AREA_MARGIN = 20  # Gap between the game area and the window edges

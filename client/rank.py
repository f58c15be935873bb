"""
Leaderboard position for the local player, worked out on the client.
"""

import sys
from typing import List, Optional, Sequence

from shared.protocol import PlayerState


def _tie_group_size(ranked: List[PlayerState], start: int) -> int:
    """How many players from `start` on share ranked[start]'s score."""
    score = ranked[start].score
    end = start + 1
    while end < len(ranked) and ranked[end].score == score:
        end += 1
    return end - start


def rank_position(ranked: List[PlayerState], me: PlayerState) -> Optional[int]:
    """Walk tie groups of an already score-sorted list; None if `me` isn't in it."""
    current_rank = 1
    i = 0
    while i < len(ranked):
        group = _tie_group_size(ranked, i)
        if any(p is me for p in ranked[i:i + group]):
            return current_rank
        current_rank += group
        i += group
    return None


def calculate_rank(me: PlayerState, others: Sequence[PlayerState]) -> str:
    """
    Competition ranking ("1224" style): tied players share a rank and the
    next rank skips ahead by the size of the tie, so [10, 10, 8] -> 1, 1, 3.

    `me` is found by identity, not equality, so an identical-looking other
    player can't be mistaken for us.
    """
    total_players = len(others) + 1
    ranked = sorted([*others, me], key=lambda p: p.score, reverse=True)

    position = rank_position(ranked, me)
    if position is not None:
        return f"Rank: {position}/{total_players}"

    # Unreachable while `me` is in the list we just built
    print(f"[RANK] Failed to calculate rank of player {me!r}, other players: {list(others)!r}",
          file=sys.stderr)
    return f"Rank: ?/{total_players}"

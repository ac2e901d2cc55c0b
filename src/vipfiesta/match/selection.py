"""VIP selection strategies.

random       uniform over all candidates
top_players  uniform over the best ``pool_size`` candidates, ranked by
             kills desc, deaths asc, player id asc
"""

from __future__ import annotations

import random
from typing import Sequence

from .state import MatchState

STRATEGIES = ("random", "top_players")


def rank_candidates(candidates: Sequence[int], state: MatchState) -> list[int]:
    """Order candidates best-first by (kills desc, deaths asc, id asc)."""

    def key(player_id: int) -> tuple[int, int, int]:
        c = state.counters(player_id)
        kills = c.kills if c else 0
        deaths = c.deaths if c else 0
        return (-kills, deaths, player_id)

    return sorted(candidates, key=key)


def select_vip(
    candidates: Sequence[int],
    state: MatchState,
    rng: random.Random,
    strategy: str = "random",
    pool_size: int = 3,
) -> int | None:
    """Pick a VIP from ``candidates``. Returns None when there are none."""
    if not candidates:
        return None
    if strategy == "top_players":
        ranked = rank_candidates(candidates, state)
        pool = ranked[: max(1, min(pool_size, len(ranked)))]
        return rng.choice(pool)
    if strategy != "random":
        raise ValueError(f"Unknown VIP selection strategy: {strategy}")
    return rng.choice(list(candidates))

"""Reconcile MatchState maps with the live roster.

A set reconciliation, not a delta: every call rebuilds the expected key sets
from the platform's player list, defaults missing entries, and prunes stale
ones.  Calling it twice with an unchanged roster is a no-op, so hooks call
it on every join, leave, team switch and death without bookkeeping.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from .state import MatchState, PlayerCounters

if TYPE_CHECKING:
    from vipfiesta.platform.base import GamePlatform


def sync_roster(state: MatchState, platform: GamePlatform) -> bool:
    """Reconcile ``state`` with the platform roster.

    Returns True if any key was added or removed.  Never assigns a VIP.
    """
    seen_players: set[int] = set()
    seen_teams: set[int] = set()
    changed = False

    for player_id in platform.players():
        team_id = platform.team_of(player_id)
        if team_id is None:
            continue
        seen_players.add(player_id)
        seen_teams.add(team_id)

        if player_id not in state.players:
            state.players[player_id] = PlayerCounters()
            changed = True
        if team_id not in state.team_vip_kills:
            state.team_vip_kills[team_id] = 0
            changed = True
        if team_id not in state.team_vips:
            state.team_vips[team_id] = None
            changed = True

    for player_id in [p for p in state.players if p not in seen_players]:
        del state.players[player_id]
        changed = True
    for team_id in [t for t in state.team_vip_kills if t not in seen_teams]:
        del state.team_vip_kills[team_id]
        changed = True
    for team_id in [t for t in state.team_vips if t not in seen_teams]:
        del state.team_vips[team_id]
        changed = True

    if changed:
        logger.debug(f"Roster synced: {len(seen_players)} players on {len(seen_teams)} teams")
    return changed

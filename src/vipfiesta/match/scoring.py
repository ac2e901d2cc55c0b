"""EliminationProcessor — the only writer of score counters.

For every death event (victim, killer-or-None):

  - killer absent or equal to the victim is a suicide: only the victim's
    death counter moves, nobody is credited a kill
  - otherwise the killer gets +1 kill (team kills included)
  - the victim gets +1 death
  - if the victim was their team's VIP and the killer is on a different
    team, the killer's team and the killer get +1 VIP kill
  - if the victim was their team's VIP (any cause) the VIP slot is cleared
    and a delayed reassignment is scheduled

After a VIP kill the killer's team is checked against the target; reaching
it ends the match exactly once.  Once ended with ``stop_counting_after_win``
set, further eliminations change nothing.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from vipfiesta.comms.event_bus import EventBus
    from vipfiesta.platform.base import GamePlatform

    from .notifications import Notifier
    from .state import MatchState
    from .vip import VipAssignments


@dataclass
class EliminationResult:
    """What a single death event did to the match."""

    victim_id: int
    killer_id: int | None
    victim_team_id: int | None
    killer_team_id: int | None
    counted: bool = True
    suicide: bool = False
    victim_was_vip: bool = False
    vip_kill: bool = False
    match_won: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


class EliminationProcessor:
    """Consumes death events and updates kill / death / VIP-kill counters."""

    def __init__(
        self,
        state: MatchState,
        platform: GamePlatform,
        vips: VipAssignments,
        notifier: Notifier,
        event_bus: EventBus,
        target_vip_kills: int = 3,
        stop_counting_after_win: bool = True,
        announce_on_target_reached: bool = True,
    ) -> None:
        self._state = state
        self._platform = platform
        self._vips = vips
        self._notifier = notifier
        self._event_bus = event_bus
        self.target_vip_kills = target_vip_kills
        self.stop_counting_after_win = stop_counting_after_win
        self.announce_on_target_reached = announce_on_target_reached

    @property
    def frozen(self) -> bool:
        return self._state.ended and self.stop_counting_after_win

    def process(self, victim_id: int, killer_id: int | None = None) -> EliminationResult:
        state = self._state
        victim_team = self._platform.team_of(victim_id)
        suicide = killer_id is None or killer_id == victim_id
        killer_team = None if suicide else self._platform.team_of(killer_id)

        result = EliminationResult(
            victim_id=victim_id,
            killer_id=None if suicide else killer_id,
            victim_team_id=victim_team,
            killer_team_id=killer_team,
            suicide=suicide,
        )

        if self.frozen:
            result.counted = False
            logger.debug(f"Elimination of {victim_id} ignored: scoring frozen")
            return result

        killer = None if suicide else state.counters(killer_id)
        if killer is not None:
            killer.kills += 1
        victim = state.counters(victim_id)
        if victim is not None:
            victim.deaths += 1

        result.victim_was_vip = state.is_vip(victim_id, victim_team)
        result.vip_kill = (
            result.victim_was_vip
            and killer is not None
            and killer_team is not None
            and killer_team != victim_team
        )

        if result.vip_kill:
            state.team_vip_kills[killer_team] = state.team_vip_kills.get(killer_team, 0) + 1
            killer.vip_kills += 1

        if result.victim_was_vip:
            self._notifier.vip_died(victim_team)
            self._vips.clear_on_death(victim_team)

        if result.vip_kill:
            total = state.team_vip_kills[killer_team]
            logger.info(f"Team {killer_team} killed a VIP ({total}/{self.target_vip_kills})")
            self._notifier.vip_killed(killer_id, killer_team, total)
            result.match_won = self._check_win(killer_team)

        logger.debug(
            f"Elimination: victim={victim_id} killer={result.killer_id} "
            f"vip={result.victim_was_vip} vip_kill={result.vip_kill}"
        )
        self._event_bus.publish("player_eliminated", result.to_dict())
        return result

    def _check_win(self, team_id: int) -> bool:
        if self._state.ended:
            return False
        if self._state.team_vip_kills.get(team_id, 0) < self.target_vip_kills:
            return False
        if self.announce_on_target_reached:
            self._notifier.team_wins(team_id)
        return self.end_match(team_id, "target_reached")

    def end_match(self, winner_team_id: int | None, reason: str) -> bool:
        """Mark the match ended and end the round. Returns False if already ended."""
        if self._state.ended:
            return False
        self._state.ended = True
        self._state.winner_team_id = winner_team_id
        self._state.end_reason = reason
        logger.info(f"Match ended ({reason}), winner: team {winner_team_id}")
        self._platform.end_round(winner_team_id)
        self._event_bus.publish("match_ended", {
            "winner_team_id": winner_team_id, "reason": reason,
        })
        return True

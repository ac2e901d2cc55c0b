"""VipAssignments — per-team VIP lifecycle.

States per team (the value of ``MatchState.team_vips[team_id]``):

  Unassigned (None) -> Assigned (player_id) -> Unassigned -> ...

Transitions:
  assign_if_missing   deploy / join / switch-in / initial sweep; synchronous
  clear_on_death      VIP died; reassignment scheduled after the delay
  release             VIP left or switched away; reassigned immediately
                      (or after the delay when the switch policy says so)

Once a win freezes the match, no transition assigns a new VIP.

A pending reassignment task acts as the team's cooldown: while it is
pending, assign_if_missing is a no-op, so a teammate deploying during the
delay does not short-circuit it.  When the task fires it re-checks that the
team is still on the roster, still has no VIP, and that the match has not
been frozen by a win.

Candidates are always current members of the team (per the platform) that
are known to the roster and are not VIP of another team, so an assignment
can never violate the one-VIP-per-team / one-team-per-VIP invariant.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from loguru import logger

from .selection import select_vip

if TYPE_CHECKING:
    from vipfiesta.comms.event_bus import EventBus
    from vipfiesta.platform.base import GamePlatform

    from .notifications import Notifier
    from .scheduler import TaskScheduler
    from .state import MatchState


class VipAssignments:
    """The VIP assignment state machine for every team."""

    def __init__(
        self,
        state: MatchState,
        platform: GamePlatform,
        scheduler: TaskScheduler,
        notifier: Notifier,
        event_bus: EventBus,
        rng: random.Random | None = None,
        strategy: str = "random",
        pool_size: int = 3,
        reassign_delay: float = 5.0,
        freeze_after_win: bool = True,
    ) -> None:
        self._state = state
        self._platform = platform
        self._scheduler = scheduler
        self._notifier = notifier
        self._event_bus = event_bus
        self._rng = rng or random.Random()
        self.strategy = strategy
        self.pool_size = pool_size
        self.reassign_delay = reassign_delay
        self.freeze_after_win = freeze_after_win

    # -- Queries -------------------------------------------------------------

    @staticmethod
    def task_key(team_id: int) -> tuple[str, int]:
        return ("reassign", team_id)

    def is_cooling_down(self, team_id: int) -> bool:
        return self._scheduler.is_pending(self.task_key(team_id))

    def candidates(self, team_id: int) -> list[int]:
        return [
            pid for pid in self._platform.members(team_id)
            if pid in self._state.players and self._state.vip_team_of(pid) is None
        ]

    def _reassignment_allowed(self) -> bool:
        return not (self._state.ended and self.freeze_after_win)

    # -- Transitions ---------------------------------------------------------

    def assign_if_missing(self, team_id: int | None) -> int | None:
        """Assign a VIP to ``team_id`` if it has none. Returns the new VIP."""
        if team_id is None or team_id not in self._state.team_vips:
            return None
        if self._state.team_vips[team_id] is not None:
            return None
        if self.is_cooling_down(team_id) or not self._reassignment_allowed():
            return None
        return self._assign(team_id)

    def assign_all_missing(self) -> list[int]:
        assigned = []
        for team_id in sorted(self._state.team_vips):
            vip_id = self.assign_if_missing(team_id)
            if vip_id is not None:
                assigned.append(vip_id)
        return assigned

    def clear_on_death(self, team_id: int) -> bool:
        """Unassign the dead VIP and schedule the delayed replacement."""
        vip_id = self._state.team_vips.get(team_id)
        if vip_id is None:
            return False
        self._state.team_vips[team_id] = None
        logger.info(f"Team {team_id} VIP {vip_id} died")
        self._event_bus.publish("vip_cleared", {
            "team_id": team_id, "player_id": vip_id, "reason": "death",
        })
        self.schedule_reassignment(team_id, self.reassign_delay)
        return True

    def release(self, player_id: int, team_id: int, reason: str, delayed: bool = False) -> int | None:
        """Unassign a VIP who left or switched away from ``team_id``.

        Reassigns from the remaining members immediately unless ``delayed``.
        Returns the replacement VIP, if one was chosen now.
        """
        if self._state.team_vips.get(team_id) == player_id:
            self._state.team_vips[team_id] = None
        logger.info(f"Team {team_id} VIP {player_id} released ({reason})")
        self._event_bus.publish("vip_cleared", {
            "team_id": team_id, "player_id": player_id, "reason": reason,
        })
        if team_id not in self._state.team_vips:
            return None
        if not self._reassignment_allowed():
            logger.debug(f"Replacement for team {team_id} skipped: match over")
            return None
        if delayed:
            self.schedule_reassignment(team_id, self.reassign_delay)
            return None
        self._scheduler.cancel(self.task_key(team_id))
        return self._assign(team_id)

    def schedule_reassignment(self, team_id: int, delay: float) -> None:
        self._scheduler.schedule(
            self._platform.now(),
            delay,
            lambda: self._reassign_task(team_id),
            key=self.task_key(team_id),
        )
        self._event_bus.publish("reassignment_scheduled", {"team_id": team_id, "delay": delay})

    # -- Internals -----------------------------------------------------------

    def _reassign_task(self, team_id: int) -> None:
        if not self._reassignment_allowed():
            logger.debug(f"Reassignment for team {team_id} skipped: match over")
            return
        if team_id not in self._state.team_vips:
            logger.debug(f"Reassignment for team {team_id} skipped: team gone")
            return
        if self._state.team_vips[team_id] is not None:
            return
        self._assign(team_id)

    def _assign(self, team_id: int) -> int | None:
        candidates = self.candidates(team_id)
        vip_id = select_vip(
            candidates, self._state, self._rng,
            strategy=self.strategy, pool_size=self.pool_size,
        )
        if vip_id is None:
            logger.debug(f"No VIP candidate on team {team_id}")
            return None
        self._state.team_vips[team_id] = vip_id
        logger.info(f"Team {team_id} VIP is now player {vip_id}")
        self._notifier.new_vip(team_id, vip_id)
        self._event_bus.publish("vip_assigned", {"team_id": team_id, "player_id": vip_id})
        return vip_id

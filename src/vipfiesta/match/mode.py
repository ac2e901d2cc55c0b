"""VipFiestaMode — lifecycle hooks for the VIP elimination game mode.

The embedding layer calls one hook per platform event and nothing else:

  on_match_start()                   once, when the mode starts
  ongoing_global()                   every tick
  ongoing_player(player_id)          every tick, per player
  on_player_deployed(player_id)
  on_player_died(victim_id, killer_id | None)
  on_player_joined(player_id)
  on_player_left(player_id)
  on_player_switched_team(player_id, new_team_id)
  on_time_limit_reached()

Every hook that can change membership starts with a roster sync, so the
components below always see MatchState keyed by the live roster.

Data flow per event:
  roster sync -> VIP state machine -> (deaths) elimination processor ->
  scoreboard rows + score panels + standings event
and per global tick:
  due reassignment tasks -> marker diff -> throttled pings
"""

from __future__ import annotations

import math
import random

from loguru import logger

from vipfiesta.app.config import VipFiestaSettings
from vipfiesta.comms.event_bus import EventBus
from vipfiesta.platform.base import GamePlatform

from .hud import HudStatus, IntroTracker, VipStatusTracker, hud_status
from .markers import MarkerScheduler
from .notifications import Notifier
from .ranking import ScorePanelEntry, TeamStanding, build_score_panel, compute_standings
from .roster import sync_roster
from .scheduler import TaskScheduler
from .scoreboard import Scoreboard, ScoreboardRow
from .scoring import EliminationProcessor, EliminationResult
from .state import MatchState
from .vip import VipAssignments

_INITIAL_SELECTION = "initial_selection"


class VipFiestaMode:
    """Owns one match: state, components, and the hook entry points."""

    def __init__(
        self,
        platform: GamePlatform,
        settings: VipFiestaSettings | None = None,
        event_bus: EventBus | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or VipFiestaSettings()
        self.platform = platform
        self.event_bus = event_bus or EventBus()
        self.state = MatchState()
        self.scheduler = TaskScheduler()
        self.notifier = Notifier(platform)

        s = self.settings
        self.vips = VipAssignments(
            self.state, platform, self.scheduler, self.notifier, self.event_bus,
            rng=rng or random.Random(s.random_seed),
            strategy=s.vip_selection,
            pool_size=s.top_players_pool_size,
            reassign_delay=s.reassign_delay_seconds,
            freeze_after_win=s.stop_counting_after_win,
        )
        self.scoring = EliminationProcessor(
            self.state, platform, self.vips, self.notifier, self.event_bus,
            target_vip_kills=s.target_vip_kills,
            stop_counting_after_win=s.stop_counting_after_win,
            announce_on_target_reached=s.announce_on_target_reached,
        )
        self.scoreboard = Scoreboard(self.state, platform, s.scoreboard.player_tie_base)
        self.markers = MarkerScheduler(self.state, platform, s.markers)
        self.vip_status = VipStatusTracker()
        self.intros = IntroTracker()
        self._hud_pushed: dict[int, HudStatus] = {}

    # -- Hooks ---------------------------------------------------------------

    def on_match_start(self) -> None:
        if self.state.started:
            return
        self.state.started = True
        self.platform.set_time_limit(self.settings.time_limit_seconds)
        self.scoreboard.initialize()
        self.notifier.game_starting()
        self._sync()
        self.scheduler.schedule(
            self.platform.now(),
            self.settings.initial_selection_delay_seconds,
            self.vips.assign_all_missing,
            key=_INITIAL_SELECTION,
        )
        logger.info(
            f"VIP match started: {len(self.state.team_vips)} teams, "
            f"target {self.settings.target_vip_kills} VIP kills"
        )
        self.event_bus.publish("match_started", {
            "target_vip_kills": self.settings.target_vip_kills,
            "time_limit_seconds": self.settings.time_limit_seconds,
        })
        self._refresh_scores()

    def ongoing_global(self) -> None:
        if not self.state.started:
            return
        now = self.platform.now()
        self.scheduler.run_due(now)
        self.markers.tick(now)

    def ongoing_player(self, player_id: int) -> None:
        if not self.state.started:
            return
        status = self.hud_status(player_id)
        if self.vip_status.observe(player_id, status.is_vip) and self.settings.hud_enabled:
            self.notifier.hud_became_vip(player_id)
        if self.settings.hud_enabled and self._hud_pushed.get(player_id) != status:
            self._hud_pushed[player_id] = status
            self.platform.show_hud_status(player_id, status)

    def on_player_deployed(self, player_id: int) -> None:
        if not self.state.started or self.state.ended:
            return
        self._sync()
        if self.settings.show_intro_on_deploy and self.intros.first_deploy(player_id):
            self.notifier.intro(player_id)
        self.vips.assign_if_missing(self.platform.team_of(player_id))

    def on_player_died(self, victim_id: int, killer_id: int | None = None) -> EliminationResult | None:
        if not self.state.started:
            return None
        self._sync()
        result = self.scoring.process(victim_id, killer_id)
        if result.counted:
            self._refresh_scores()
        return result

    def on_player_joined(self, player_id: int) -> None:
        self._sync()
        if self.state.started and not self.state.ended:
            self.vips.assign_if_missing(self.platform.team_of(player_id))
        self._refresh_scores()

    def on_player_left(self, player_id: int) -> None:
        old_team = self.state.vip_team_of(player_id)
        self._sync()
        self.vip_status.forget(player_id)
        self.intros.forget(player_id)
        self._hud_pushed.pop(player_id, None)
        if old_team is not None:
            self.vips.release(player_id, old_team, "left")
        self._refresh_scores()

    def on_player_switched_team(self, player_id: int, new_team_id: int | None = None) -> None:
        if new_team_id is None:
            new_team_id = self.platform.team_of(player_id)
        old_team = self.state.vip_team_of(player_id)
        self._sync()
        if old_team is not None and old_team != new_team_id:
            self.vips.release(
                player_id, old_team, "switched",
                delayed=self.settings.switch_reassign_delayed,
            )
        if self.state.started and not self.state.ended:
            self.vips.assign_if_missing(new_team_id)
        self._refresh_scores()

    def on_time_limit_reached(self) -> None:
        if not self.state.started or self.state.ended:
            return
        standings = self.standings()
        winner = standings[0].team_id if standings else None
        if winner is not None and self.settings.announce_winner_on_time_limit:
            self.notifier.team_wins(winner)
        self.scoring.end_match(winner, "time_limit")

    # -- Views ---------------------------------------------------------------

    def standings(self) -> list[TeamStanding]:
        return compute_standings(self.state.team_vip_kills)

    def score_panel(self, player_id: int) -> list[ScorePanelEntry]:
        return build_score_panel(
            self.standings(),
            self.platform.team_of(player_id),
            self.settings.target_vip_kills,
        )

    def hud_status(self, player_id: int) -> HudStatus:
        return hud_status(self.state, player_id, self.platform.team_of(player_id))

    def scoreboard_rows(self) -> list[ScoreboardRow]:
        return self.scoreboard.rows()

    def get_state(self) -> dict:
        data = self.state.to_dict()
        data["target_vip_kills"] = self.settings.target_vip_kills
        remaining = self.platform.remaining_time()
        # No limit set yet; inf is not valid JSON
        data["remaining_time"] = remaining if math.isfinite(remaining) else None
        data["standings"] = [s.to_dict() for s in self.standings()]
        data["reassigning_teams"] = sorted(
            t for t in self.state.team_vips if self.vips.is_cooling_down(t)
        )
        return data

    # -- Internals -----------------------------------------------------------

    def _sync(self) -> None:
        sync_roster(self.state, self.platform)

    def _refresh_scores(self) -> None:
        self.scoreboard.update()
        standings = self.standings()
        if self.settings.hud_enabled:
            for player_id in self.state.players:
                panel = build_score_panel(
                    standings,
                    self.platform.team_of(player_id),
                    self.settings.target_vip_kills,
                )
                self.platform.show_score_panel(player_id, panel)
        self.event_bus.publish("standings", {"standings": [s.to_dict() for s in standings]})


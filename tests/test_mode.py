"""Integration tests for VipFiestaMode hooks."""

from __future__ import annotations

import pytest

from conftest import make_settings, populate, reassign_after_delay
from vipfiesta.match.mode import VipFiestaMode
from vipfiesta.match.notifications import Notice
from vipfiesta.match.scoreboard import COLUMNS
from vipfiesta.platform.memory import InMemoryPlatform

pytestmark = pytest.mark.integration


class TestMatchStart:
    def test_start_sets_up_platform(self, platform, bus):
        populate(platform, {1: [1, 2], 2: [3, 4]})
        mode = VipFiestaMode(platform, make_settings(time_limit_minutes=2), event_bus=bus)
        started = bus.subscribe("match_started")
        mode.on_match_start()
        assert mode.state.started
        assert platform.remaining_time() == 120.0
        assert platform.scoreboard.columns == list(COLUMNS)
        assert len(platform.messages_with(Notice.GAME_STARTING.value)) == 1
        assert started.get_nowait()["data"]["target_vip_kills"] == 3

    def test_initial_selection_waits_for_delay(self, platform):
        populate(platform, {1: [1, 2], 2: [3, 4]})
        mode = VipFiestaMode(platform, make_settings(initial_selection_delay_seconds=5))
        mode.on_match_start()
        mode.ongoing_global()
        assert mode.state.assigned_vips() == {}
        platform.advance(5.0)
        mode.ongoing_global()
        assert set(mode.state.assigned_vips()) == {1, 2}

    def test_start_is_idempotent(self, make_mode):
        mode = make_mode()
        mode.on_match_start()
        assert len(mode.platform.messages_with(Notice.GAME_STARTING.value)) == 1

    def test_hooks_ignored_before_start(self, platform):
        populate(platform, {1: [1, 2]})
        mode = VipFiestaMode(platform, make_settings())
        mode.on_player_deployed(1)
        assert mode.on_player_died(1, 2) is None
        mode.ongoing_global()
        assert mode.state.assigned_vips() == {}
        assert platform.markers == {}


class TestDeploy:
    def test_deploy_assigns_missing_vip(self, platform):
        populate(platform, {1: [1, 2]})
        mode = VipFiestaMode(platform, make_settings(initial_selection_delay_seconds=30))
        mode.on_match_start()
        mode.on_player_deployed(2)
        assert mode.state.vip_of(1) in (1, 2)

    def test_intro_shown_on_first_deploy_only(self, make_mode):
        mode = make_mode()
        mode.on_player_deployed(4)
        mode.on_player_deployed(4)
        intros = mode.platform.messages_with(Notice.INTRO.value)
        assert [a.player_id for _, a in intros] == [4]

    def test_intro_disabled(self, make_mode):
        mode = make_mode(show_intro_on_deploy=False)
        mode.on_player_deployed(4)
        assert mode.platform.messages_with(Notice.INTRO.value) == []

    def test_deploy_does_not_skip_cooldown(self, make_mode):
        mode = make_mode()
        vip = mode.state.vip_of(1)
        mode.on_player_died(vip, 4)
        mode.on_player_deployed(next(p for p in (1, 2, 3) if p != vip))
        assert mode.state.vip_of(1) is None


class TestScenarios:
    def test_vip_killed_by_enemy(self, make_mode):
        mode = make_mode()
        vip = mode.state.vip_of(1)
        mode.on_player_died(vip, 5)
        assert mode.state.team_vip_kills[2] == 1
        assert mode.state.players[5].vip_kills == 1
        assert mode.state.vip_of(1) is None
        mode.platform.advance(4.0)
        mode.ongoing_global()
        assert mode.state.vip_of(1) is None
        mode.platform.advance(1.0)
        mode.ongoing_global()
        assert mode.state.vip_of(1) in (1, 2, 3)

    def test_vip_switches_to_team_with_vip(self, make_mode):
        mode = make_mode()
        vip = mode.state.vip_of(1)
        team2_vip = mode.state.vip_of(2)
        mode.platform.set_team(vip, 2)
        mode.on_player_switched_team(vip, 2)
        assert mode.state.vip_of(1) in {1, 2, 3} - {vip}
        assert mode.state.vip_of(2) == team2_vip
        assert not mode.vips.is_cooling_down(1)

    def test_switch_with_delayed_policy(self, make_mode):
        mode = make_mode(switch_reassign_delayed=True)
        vip = mode.state.vip_of(1)
        mode.platform.set_team(vip, 2)
        mode.on_player_switched_team(vip, 2)
        assert mode.state.vip_of(1) is None
        reassign_after_delay(mode)
        assert mode.state.vip_of(1) in {1, 2, 3} - {vip}

    def test_switch_into_new_team_makes_vip(self, make_mode):
        mode = make_mode()
        mover = next(p for p in (1, 2, 3) if p != mode.state.vip_of(1))
        mode.platform.set_team(mover, 8)
        mode.on_player_switched_team(mover)
        assert mode.state.vip_of(8) == mover

    def test_empty_team(self, make_mode):
        mode = make_mode()
        mode.state.team_vips[9] = None
        assert mode.vips.assign_if_missing(9) is None
        mode.ongoing_global()
        assert mode.platform.markers_for(9) == []


class TestLeave:
    def test_vip_leaves(self, make_mode):
        mode = make_mode()
        vip = mode.state.vip_of(2)
        mode.platform.remove_player(vip)
        mode.on_player_left(vip)
        assert vip not in mode.state.players
        assert mode.state.vip_of(2) in {4, 5, 6} - {vip}

    def test_last_member_leaves(self, make_mode):
        mode = make_mode(teams={1: [1, 2], 2: [3]})
        mode.platform.remove_player(3)
        mode.on_player_left(3)
        assert 2 not in mode.state.team_vips
        assert 2 not in mode.state.team_vip_kills
        mode.ongoing_global()
        assert all(scope != 2 for scope, _ in mode.markers.keys)

    @pytest.mark.parametrize("departure", ["left", "switched"])
    def test_vip_departure_after_win_is_not_replaced(self, make_mode, departure):
        mode = make_mode(target_vip_kills=1)
        mode.on_player_died(mode.state.vip_of(1), 4)
        assert mode.state.ended
        notices = len(mode.platform.messages_with(Notice.NEW_VIP.value))

        vip = mode.state.vip_of(2)
        if departure == "left":
            mode.platform.remove_player(vip)
            mode.on_player_left(vip)
        else:
            mode.platform.set_team(vip, 3)
            mode.on_player_switched_team(vip, 3)

        assert mode.state.vip_of(2) is None
        assert len(mode.platform.messages_with(Notice.NEW_VIP.value)) == notices

    def test_join_mid_match_creates_team_vip(self, make_mode):
        mode = make_mode()
        mode.platform.add_player(20, 4)
        mode.on_player_joined(20)
        assert mode.state.vip_of(4) == 20


class TestTimeLimit:
    def test_leader_wins(self, make_mode):
        mode = make_mode()
        mode.on_player_died(mode.state.vip_of(3), 4)
        mode.on_time_limit_reached()
        assert mode.state.ended
        assert mode.state.winner_team_id == 2
        assert mode.state.end_reason == "time_limit"
        wins = mode.platform.messages_with(Notice.TEAM_WINS.value)
        assert wins[0][0].args == (2,)

    def test_no_kills_lowest_team_id_wins(self, make_mode):
        mode = make_mode()
        mode.on_time_limit_reached()
        mode.on_time_limit_reached()
        assert mode.platform.round_winners == [1]

    def test_no_announcement_when_disabled(self, make_mode):
        mode = make_mode(announce_winner_on_time_limit=False)
        mode.on_time_limit_reached()
        assert mode.state.ended
        assert mode.platform.messages_with(Notice.TEAM_WINS.value) == []


class TestViews:
    def test_score_panel_pushed_on_elimination(self, make_mode):
        mode = make_mode()
        mode.on_player_died(mode.state.vip_of(1), 8)
        panel = mode.platform.score_panels[4]
        assert panel[0].team_id == 3
        assert panel[0].vip_kills == 1
        assert [e.is_viewer_team for e in panel] == [False, False, True]

    def test_scoreboard_rows_follow_ranking(self, make_mode):
        mode = make_mode()
        mode.on_player_died(mode.state.vip_of(1), 8)
        rows = mode.scoreboard_rows()
        assert rows[0].player_id == 8
        assert mode.platform.sorted_scoreboard()[0] == 8

    def test_get_state(self, make_mode):
        mode = make_mode()
        mode.on_player_died(mode.state.vip_of(1), 8)
        data = mode.get_state()
        assert data["started"] is True
        assert data["target_vip_kills"] == 3
        assert data["team_vip_kills"]["3"] == 1
        assert data["reassigning_teams"] == [1]
        assert data["standings"][0] == {"team_id": 3, "vip_kills": 1, "rank": 1}

    def test_markers_follow_vip_lifecycle(self, make_mode):
        mode = make_mode()
        mode.ongoing_global()
        assert len(mode.markers.keys) == 9
        vip = mode.state.vip_of(1)
        mode.platform.set_alive(vip, False)
        mode.on_player_died(vip, 4)
        mode.ongoing_global()
        assert len(mode.markers.keys) == 6


class TestSimulation:
    def test_random_match_finishes(self):
        from vipfiesta.simulation import MatchSimulator

        sim = MatchSimulator(teams=3, players_per_team=3, settings=make_settings(), seed=3)
        sim.run(max_seconds=120)
        assert sim.mode.state.ended
        assert sim.mode.state.winner_team_id in (1, 2, 3)
        for c in sim.mode.state.players.values():
            assert c.vip_kills <= c.kills

    def test_headless_platform_default(self):
        mode = VipFiestaMode(InMemoryPlatform(), make_settings())
        mode.on_match_start()
        assert mode.standings() == []

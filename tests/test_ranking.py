"""Unit tests for team standings, the composite sort key, and the score panel."""

from __future__ import annotations

import random

import pytest

from vipfiesta.match.ranking import (
    SortKeyWeights,
    TeamStanding,
    build_score_panel,
    compute_sort_keys,
    compute_standings,
    compute_team_ranks,
    rank_label,
    teams_to_display,
)
from vipfiesta.match.state import MatchState, PlayerCounters

pytestmark = pytest.mark.unit


def standings_for(*team_ids):
    return [TeamStanding(team_id=t, vip_kills=0, rank=i + 1) for i, t in enumerate(team_ids)]


class TestStandings:
    def test_ordered_by_vip_kills(self):
        standings = compute_standings({1: 0, 2: 3, 3: 1})
        assert [s.team_id for s in standings] == [2, 3, 1]
        assert [s.rank for s in standings] == [1, 2, 3]

    def test_ties_broken_by_team_id(self):
        ranks = compute_team_ranks({4: 2, 2: 2, 9: 0, 1: 2})
        assert ranks == {1: 1, 2: 2, 4: 3, 9: 4}

    def test_empty(self):
        assert compute_standings({}) == []


class TestRankLabel:
    @pytest.mark.parametrize("rank,label", [
        (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
        (11, "11th"), (12, "12th"), (13, "13th"),
        (21, "21st"), (22, "22nd"), (101, "101st"), (111, "111th"),
    ])
    def test_ordinals(self, rank, label):
        assert rank_label(rank) == label


class TestSortKeyWeights:
    def test_weights_from_maxima(self):
        w = SortKeyWeights.from_maxima(max_vip_kills=2, max_kills=4, max_deaths=1)
        assert w.deaths_weight == 100
        assert w.kills_weight == 200
        assert w.vip_weight == 1000
        assert w.team_weight == 3000
        assert w.encode(1, 2, 4, 1, 7) == 3107

    def test_tie_base_grows_with_player_ids(self):
        w = SortKeyWeights.from_maxima(0, 0, 0, max_player_id=250, min_tie_base=100)
        assert w.tie_base == 251
        assert w.encode(1, 0, 0, 0, 250) % w.tie_base == 250


def priority(state, ranks, team_of, player_id):
    c = state.players[player_id]
    return (ranks[team_of[player_id]], -c.vip_kills, -c.kills, c.deaths, player_id)


class TestSortKeys:
    def _random_state(self, seed):
        rng = random.Random(seed)
        state = MatchState()
        team_of = {}
        player_ids = rng.sample(range(1, 400), 40)
        for player_id in player_ids:
            kills = rng.randint(0, 12)
            state.players[player_id] = PlayerCounters(
                kills=kills,
                deaths=rng.randint(0, 9),
                vip_kills=rng.randint(0, min(kills, 3)),
            )
            team_of[player_id] = rng.randint(1, 5)
        for team_id in range(1, 6):
            state.team_vip_kills[team_id] = rng.randint(0, 4)
        return state, team_of

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_key_order_matches_priority_order(self, seed):
        state, team_of = self._random_state(seed)
        ranks = compute_team_ranks(state.team_vip_kills)
        keys = compute_sort_keys(state, team_of)

        by_key = sorted(keys, key=keys.get)
        by_priority = sorted(keys, key=lambda p: priority(state, ranks, team_of, p))
        assert by_key == by_priority
        assert len(set(keys.values())) == len(keys)

    def test_rank_dominates_every_player_stat(self):
        state = MatchState()
        state.players = {
            1: PlayerCounters(kills=0, deaths=50, vip_kills=0),
            2: PlayerCounters(kills=99, deaths=0, vip_kills=9),
        }
        state.team_vip_kills = {1: 1, 2: 0}
        keys = compute_sort_keys(state, {1: 1, 2: 2})
        assert keys[1] < keys[2]

    def test_unranked_team_sorts_last(self):
        state = MatchState()
        state.players = {1: PlayerCounters(), 2: PlayerCounters(kills=5, vip_kills=2)}
        state.team_vip_kills = {1: 0}
        keys = compute_sort_keys(state, {1: 1, 2: None})
        assert keys[1] < keys[2]

    def test_skips_players_without_counters(self):
        state = MatchState()
        state.players = {1: PlayerCounters()}
        state.team_vip_kills = {1: 0}
        assert set(compute_sort_keys(state, {1: 1, 2: 1})) == {1}


class TestTeamsToDisplay:
    def test_viewer_in_top_three(self):
        shown = teams_to_display(standings_for(5, 2, 7, 1, 3), viewer_team_id=2)
        assert [s.team_id for s in shown] == [5, 2, 7]

    def test_viewer_replaces_third_slot(self):
        shown = teams_to_display(standings_for(5, 2, 7, 1, 3), viewer_team_id=3)
        assert [s.team_id for s in shown] == [5, 2, 3]

    def test_no_viewer_team(self):
        shown = teams_to_display(standings_for(5, 2, 7, 1), viewer_team_id=None)
        assert [s.team_id for s in shown] == [5, 2, 7]

    def test_fewer_teams_than_slots(self):
        shown = teams_to_display(standings_for(4, 1), viewer_team_id=1)
        assert [s.team_id for s in shown] == [4, 1]

    def test_unknown_viewer_team(self):
        shown = teams_to_display(standings_for(5, 2, 7, 1), viewer_team_id=42)
        assert [s.team_id for s in shown] == [5, 2, 7]


class TestScorePanel:
    def test_entries(self):
        standings = compute_standings({1: 5, 2: 1, 3: 0, 4: 0})
        panel = build_score_panel(standings, viewer_team_id=4, target_vip_kills=3)
        assert [e.team_id for e in panel] == [1, 2, 4]
        assert [e.rank_label for e in panel] == ["1st", "2nd", "4th"]
        assert panel[0].progress == 1.0
        assert panel[1].progress == pytest.approx(1 / 3)
        assert [e.is_viewer_team for e in panel] == [False, False, True]

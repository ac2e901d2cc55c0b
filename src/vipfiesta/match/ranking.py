"""Composite ranking — team standings and the single-column scoreboard sort key.

Team ranks
  Teams sorted by VIP kills desc, ties by team id asc; ranks 1..N with no
  gaps (the tie-break makes every rank distinct).

Sort key
  The scoreboard widget sorts by one numeric column, so each player's
  position is packed into one integer, sorted ascending:

      team rank         asc   (most significant)
      player VIP kills  desc
      player kills      desc
      player deaths     asc
      player id         asc   (least significant)

  Each component gets a mixed-radix digit whose base is the current maximum
  in that category plus one, so no component can carry into the next.
  Bases grow with the match, which is why keys are recomputed from scratch
  on every update rather than cached.

Score panel
  The per-viewer list shown on the HUD: the top three teams, with the third
  slot replaced by the viewer's own team when it is not already shown.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, Mapping

from .state import MatchState

PANEL_SIZE = 3


@dataclass(frozen=True)
class TeamStanding:
    team_id: int
    vip_kills: int
    rank: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ScorePanelEntry:
    """One row of the per-viewer score panel."""

    team_id: int
    vip_kills: int
    rank: int
    rank_label: str
    progress: float
    is_viewer_team: bool

    def to_dict(self) -> dict:
        return asdict(self)


def compute_standings(team_vip_kills: Mapping[int, int]) -> list[TeamStanding]:
    ordered = sorted(team_vip_kills.items(), key=lambda item: (-item[1], item[0]))
    return [
        TeamStanding(team_id=team_id, vip_kills=kills, rank=index + 1)
        for index, (team_id, kills) in enumerate(ordered)
    ]


def compute_team_ranks(team_vip_kills: Mapping[int, int]) -> dict[int, int]:
    return {s.team_id: s.rank for s in compute_standings(team_vip_kills)}


def rank_label(rank: int) -> str:
    """English ordinal: 1st, 2nd, 3rd, 4th, 11th, 21st..."""
    if 10 <= rank % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(rank % 10, "th")
    return f"{rank}{suffix}"


@dataclass(frozen=True)
class SortKeyWeights:
    """Digit weights and ranges for the composite sort key."""

    team_weight: int
    vip_weight: int
    kills_weight: int
    deaths_weight: int
    tie_base: int
    vip_range: int
    kills_range: int
    deaths_range: int

    @classmethod
    def from_maxima(
        cls,
        max_vip_kills: int,
        max_kills: int,
        max_deaths: int,
        max_player_id: int = 0,
        min_tie_base: int = 100,
    ) -> SortKeyWeights:
        vip_range = max(1, max_vip_kills + 1)
        kills_range = max(1, max_kills + 1)
        deaths_range = max(1, max_deaths + 1)
        tie_base = max(min_tie_base, max_player_id + 1)

        deaths_weight = tie_base
        kills_weight = deaths_weight * deaths_range
        vip_weight = kills_weight * kills_range
        team_weight = vip_weight * vip_range
        return cls(
            team_weight=team_weight,
            vip_weight=vip_weight,
            kills_weight=kills_weight,
            deaths_weight=deaths_weight,
            tie_base=tie_base,
            vip_range=vip_range,
            kills_range=kills_range,
            deaths_range=deaths_range,
        )

    @classmethod
    def from_state(cls, state: MatchState, min_tie_base: int = 100) -> SortKeyWeights:
        counters = list(state.players.values())
        return cls.from_maxima(
            max_vip_kills=max((c.vip_kills for c in counters), default=0),
            max_kills=max((c.kills for c in counters), default=0),
            max_deaths=max((c.deaths for c in counters), default=0),
            max_player_id=max(state.players, default=0),
            min_tie_base=min_tie_base,
        )

    def encode(self, team_rank: int, vip_kills: int, kills: int, deaths: int, player_id: int) -> int:
        return (
            team_rank * self.team_weight
            + (self.vip_range - 1 - vip_kills) * self.vip_weight
            + (self.kills_range - 1 - kills) * self.kills_weight
            + deaths * self.deaths_weight
            + player_id % self.tie_base
        )


def compute_sort_keys(
    state: MatchState,
    team_of: Mapping[int, int | None],
    min_tie_base: int = 100,
) -> dict[int, int]:
    """Sort key for every player in ``team_of`` (player_id -> team_id)."""
    ranks = compute_team_ranks(state.team_vip_kills)
    unranked = len(ranks) + 1
    weights = SortKeyWeights.from_state(state, min_tie_base)

    keys: dict[int, int] = {}
    for player_id, team_id in team_of.items():
        c = state.counters(player_id)
        if c is None:
            continue
        team_rank = ranks.get(team_id, unranked) if team_id is not None else unranked
        keys[player_id] = weights.encode(team_rank, c.vip_kills, c.kills, c.deaths, player_id)
    return keys


def teams_to_display(
    standings: Iterable[TeamStanding],
    viewer_team_id: int | None,
    limit: int = PANEL_SIZE,
) -> list[TeamStanding]:
    """Top ``limit`` teams; the last slot goes to the viewer's team if it is not shown."""
    ordered = list(standings)
    top = ordered[:limit]
    if viewer_team_id is None or len(ordered) <= limit:
        return top
    if any(s.team_id == viewer_team_id for s in top):
        return top
    own = next((s for s in ordered if s.team_id == viewer_team_id), None)
    if own is None:
        return top
    return top[: limit - 1] + [own]


def build_score_panel(
    standings: Iterable[TeamStanding],
    viewer_team_id: int | None,
    target_vip_kills: int,
) -> list[ScorePanelEntry]:
    target = max(1, target_vip_kills)
    return [
        ScorePanelEntry(
            team_id=s.team_id,
            vip_kills=s.vip_kills,
            rank=s.rank,
            rank_label=rank_label(s.rank),
            progress=min(1.0, s.vip_kills / target),
            is_viewer_team=s.team_id == viewer_team_id,
        )
        for s in teams_to_display(standings, viewer_team_id)
    ]

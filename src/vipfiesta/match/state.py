"""MatchState — the single owner of all mutable match bookkeeping.

One instance per match, injected into every component.  Nothing here talks
to the platform; components read the platform and write here.

Maps:
  players         player_id -> PlayerCounters (kills, deaths, VIP kills)
  team_vip_kills  team_id -> VIP kills credited to that team
  team_vips       team_id -> current VIP player_id, or None while unassigned

A team key in ``team_vips`` means the team is present on the roster; the
roster synchronizer adds and prunes keys, the VIP state machine only ever
writes values.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class PlayerCounters:
    """Per-player scoring counters."""

    kills: int = 0
    deaths: int = 0
    vip_kills: int = 0

    def to_dict(self) -> dict:
        return {"kills": self.kills, "deaths": self.deaths, "vip_kills": self.vip_kills}


@dataclass
class MatchState:
    """Complete match state."""

    players: dict[int, PlayerCounters] = field(default_factory=dict)
    team_vip_kills: dict[int, int] = field(default_factory=dict)
    team_vips: dict[int, int | None] = field(default_factory=dict)
    started: bool = False
    ended: bool = False
    winner_team_id: int | None = None
    end_reason: str | None = None

    def vip_of(self, team_id: int) -> int | None:
        return self.team_vips.get(team_id)

    def vip_team_of(self, player_id: int) -> int | None:
        """Team for which ``player_id`` is currently VIP, if any."""
        for team_id, vip_id in self.team_vips.items():
            if vip_id == player_id:
                return team_id
        return None

    def is_vip(self, player_id: int, team_id: int | None) -> bool:
        return team_id is not None and self.team_vips.get(team_id) == player_id

    def assigned_vips(self) -> dict[int, int]:
        """team_id -> VIP for every team that currently has one."""
        return {t: v for t, v in self.team_vips.items() if v is not None}

    def counters(self, player_id: int) -> PlayerCounters | None:
        return self.players.get(player_id)

    def snapshot(self) -> dict:
        """Deep, comparable copy of every map."""
        return {
            "players": {pid: c.to_dict() for pid, c in self.players.items()},
            "team_vip_kills": dict(self.team_vip_kills),
            "team_vips": dict(self.team_vips),
        }

    def to_dict(self) -> dict:
        return {
            "started": self.started,
            "ended": self.ended,
            "winner_team_id": self.winner_team_id,
            "end_reason": self.end_reason,
            "team_vips": {str(t): v for t, v in self.team_vips.items()},
            "team_vip_kills": {str(t): k for t, k in self.team_vip_kills.items()},
            "players": {str(pid): c.to_dict() for pid, c in self.players.items()},
        }

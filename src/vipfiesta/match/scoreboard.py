"""Scoreboard feed: one row of values per player, sorted by a hidden key column."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from loguru import logger

from .ranking import compute_sort_keys

if TYPE_CHECKING:
    from vipfiesta.platform.base import GamePlatform

    from .state import MatchState

COLUMNS = ("Team", "VIP Kills", "Kills", "Deaths", "Sort Order")
COLUMN_WIDTHS = (25, 25, 25, 25, 0)
SORT_COLUMN = 4  # 0-based; the hidden sort key


@dataclass(frozen=True)
class ScoreboardRow:
    player_id: int
    team_id: int
    vip_kills: int
    kills: int
    deaths: int
    sort_key: int

    def values(self) -> tuple[int, int, int, int, int]:
        return (self.team_id, self.vip_kills, self.kills, self.deaths, self.sort_key)

    def to_dict(self) -> dict:
        return asdict(self)


class Scoreboard:
    """Pushes scoreboard rows computed from MatchState."""

    def __init__(self, state: MatchState, platform: GamePlatform, min_tie_base: int = 100) -> None:
        self._state = state
        self._platform = platform
        self.min_tie_base = min_tie_base

    def initialize(self) -> None:
        self._platform.set_scoreboard_columns(COLUMNS, COLUMN_WIDTHS)
        self._platform.set_scoreboard_sorting(SORT_COLUMN, ascending=True)

    def rows(self) -> list[ScoreboardRow]:
        """Rows for every roster player, best first."""
        team_of = {pid: self._platform.team_of(pid) for pid in self._state.players}
        keys = compute_sort_keys(self._state, team_of, self.min_tie_base)
        rows = []
        for player_id, key in keys.items():
            c = self._state.players[player_id]
            rows.append(ScoreboardRow(
                player_id=player_id,
                team_id=team_of.get(player_id) or 0,
                vip_kills=c.vip_kills,
                kills=c.kills,
                deaths=c.deaths,
                sort_key=key,
            ))
        rows.sort(key=lambda r: r.sort_key)
        return rows

    def update(self) -> list[ScoreboardRow]:
        rows = self.rows()
        for row in rows:
            self._platform.set_scoreboard_row(row.player_id, row.values())
        logger.debug(f"Scoreboard updated: {len(rows)} rows")
        return rows

"""InMemoryPlatform — a headless GamePlatform with a virtual clock.

Holds the roster, life state and positions in plain dicts and records every
outgoing call (messages, sounds, spots, markers, scoreboard rows) so tests
and the simulation script can inspect what the core asked for.  Time only
moves when ``advance()`` is called.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from .base import Audience, GamePlatform, Message, PlatformError, SpotMode, Vector

if TYPE_CHECKING:
    from vipfiesta.match.hud import HudStatus
    from vipfiesta.match.ranking import ScorePanelEntry


@dataclass
class SimPlayer:
    """A connected player in the in-memory world."""

    player_id: int
    team_id: int
    alive: bool = False
    position: Vector = (0.0, 0.0, 0.0)


@dataclass
class MarkerRecord:
    """A spawned world marker."""

    handle: int
    owner_team: int
    position: Vector
    icon: str
    color: tuple[float, float, float]
    moves: int = 0
    restyles: int = 0


@dataclass
class SpotRecord:
    player_id: int
    duration: float
    mode: SpotMode
    at: float


@dataclass
class ScoreboardLayout:
    columns: list[str] = field(default_factory=list)
    widths: list[int] = field(default_factory=list)
    sort_column: int | None = None
    ascending: bool = False


class InMemoryPlatform(GamePlatform):
    """Fully in-memory platform for tests and headless matches."""

    def __init__(self) -> None:
        self._players: dict[int, SimPlayer] = {}
        self._clock: float = 0.0
        self._time_limit: float | None = None
        self._next_handle: int = 1

        self.messages: list[tuple[Message, Audience]] = []
        self.sounds: list[tuple[str, Audience, float]] = []
        self.spots: list[SpotRecord] = []
        self.markers: dict[int, MarkerRecord] = {}
        self.scoreboard = ScoreboardLayout()
        self.scoreboard_rows: dict[int, tuple[int, ...]] = {}
        self.hud: dict[int, HudStatus] = {}
        self.score_panels: dict[int, list[ScorePanelEntry]] = {}
        self.round_winners: list[int | None] = []

        # Makes every marker primitive raise PlatformError
        self.fail_marker_ops: bool = False

    # -- World control (not part of GamePlatform) ------------------------------

    def add_player(
        self,
        player_id: int,
        team_id: int,
        alive: bool = True,
        position: Vector = (0.0, 0.0, 0.0),
    ) -> SimPlayer:
        player = SimPlayer(player_id, team_id, alive, position)
        self._players[player_id] = player
        return player

    def remove_player(self, player_id: int) -> None:
        self._players.pop(player_id, None)

    def set_team(self, player_id: int, team_id: int) -> None:
        self._players[player_id].team_id = team_id

    def set_alive(self, player_id: int, alive: bool) -> None:
        self._players[player_id].alive = alive

    def move(self, player_id: int, position: Vector) -> None:
        self._players[player_id].position = position

    def advance(self, seconds: float) -> float:
        self._clock += seconds
        return self._clock

    def messages_with(self, key: str) -> list[tuple[Message, Audience]]:
        return [(m, a) for m, a in self.messages if m.key == key]

    def markers_for(self, owner_team: int) -> list[MarkerRecord]:
        return [m for m in self.markers.values() if m.owner_team == owner_team]

    @property
    def time_limit(self) -> float | None:
        return self._time_limit

    # -- Identity --------------------------------------------------------------

    def players(self) -> list[int]:
        return list(self._players)

    def team_of(self, player_id: int) -> int | None:
        player = self._players.get(player_id)
        return player.team_id if player is not None else None

    # -- Life / position -------------------------------------------------------

    def is_alive(self, player_id: int) -> bool:
        player = self._players.get(player_id)
        return player is not None and player.alive

    def position(self, player_id: int) -> Vector | None:
        player = self._players.get(player_id)
        if player is None or not player.alive:
            return None
        return player.position

    # -- Messaging -------------------------------------------------------------

    def display_message(self, message: Message, audience: Audience) -> None:
        self.messages.append((message, audience))

    def play_sound(self, cue: str, audience: Audience, amplitude: float = 1.0) -> None:
        self.sounds.append((cue, audience, amplitude))

    def show_hud_status(self, player_id: int, status: HudStatus) -> None:
        self.hud[player_id] = status

    def show_score_panel(self, player_id: int, entries: Sequence[ScorePanelEntry]) -> None:
        self.score_panels[player_id] = list(entries)

    # -- Markers ---------------------------------------------------------------

    def spawn_marker(
        self,
        owner_team: int,
        position: Vector,
        icon: str,
        color: tuple[float, float, float],
    ) -> int:
        if self.fail_marker_ops:
            raise PlatformError("marker spawn rejected")
        handle = self._next_handle
        self._next_handle += 1
        self.markers[handle] = MarkerRecord(handle, owner_team, position, icon, color)
        return handle

    def move_marker(self, handle: int, position: Vector) -> None:
        if self.fail_marker_ops or handle not in self.markers:
            raise PlatformError(f"no marker {handle}")
        record = self.markers[handle]
        record.position = position
        record.moves += 1

    def restyle_marker(self, handle: int, icon: str, color: tuple[float, float, float]) -> None:
        if self.fail_marker_ops or handle not in self.markers:
            raise PlatformError(f"no marker {handle}")
        record = self.markers[handle]
        record.icon = icon
        record.color = color
        record.restyles += 1

    def destroy_marker(self, handle: int) -> None:
        if self.fail_marker_ops or handle not in self.markers:
            raise PlatformError(f"no marker {handle}")
        del self.markers[handle]

    def spot(self, player_id: int, duration: float, mode: SpotMode) -> None:
        self.spots.append(SpotRecord(player_id, duration, mode, self._clock))

    # -- Scoreboard ------------------------------------------------------------

    def set_scoreboard_columns(self, names: Sequence[str], widths: Sequence[int]) -> None:
        self.scoreboard.columns = list(names)
        self.scoreboard.widths = list(widths)

    def set_scoreboard_sorting(self, column: int, ascending: bool) -> None:
        self.scoreboard.sort_column = column
        self.scoreboard.ascending = ascending

    def set_scoreboard_row(self, player_id: int, values: Sequence[int]) -> None:
        self.scoreboard_rows[player_id] = tuple(values)

    def sorted_scoreboard(self) -> list[int]:
        """Player ids in the order the scoreboard widget would show them."""
        col = self.scoreboard.sort_column
        if col is None:
            return list(self.scoreboard_rows)
        rows = [(pid, vals) for pid, vals in self.scoreboard_rows.items() if pid in self._players]
        rows.sort(key=lambda item: item[1][col], reverse=not self.scoreboard.ascending)
        return [pid for pid, _ in rows]

    # -- Timing ----------------------------------------------------------------

    def now(self) -> float:
        return self._clock

    def remaining_time(self) -> float:
        if self._time_limit is None:
            return math.inf
        return max(0.0, self._time_limit - self._clock)

    def set_time_limit(self, seconds: float) -> None:
        self._time_limit = self._clock + seconds

    def end_round(self, winner_team_id: int | None) -> None:
        self.round_winners.append(winner_team_id)

"""Abstract GamePlatform — the primitives the game-mode core drives.

The platform owns everything the core does not: who is connected and on
which team, whether a soldier is alive and where it stands, message and
sound delivery, world markers and radar spots, the scoreboard widget, and
the match clock.  The core only decides *what* should happen and *when*.

Player and team identities are plain integers.  Implementations signal a
failed primitive (e.g. deleting a marker the engine already removed) by
raising PlatformError; callers that can self-correct on the next tick catch
it and log, everything else lets it propagate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from vipfiesta.match.hud import HudStatus
    from vipfiesta.match.ranking import ScorePanelEntry

# World-space position, y is up.
Vector = tuple[float, float, float]


class PlatformError(Exception):
    """A platform primitive failed."""


class SpotMode(str, Enum):
    """Where a radar spot is rendered."""

    MINIMAP = "minimap"
    WORLD = "world"
    BOTH = "both"


@dataclass(frozen=True)
class Audience:
    """Who receives a message or sound: one player, one team, or everyone."""

    player_id: int | None = None
    team_id: int | None = None

    @classmethod
    def everyone(cls) -> Audience:
        return cls()

    @classmethod
    def player(cls, player_id: int) -> Audience:
        return cls(player_id=player_id)

    @classmethod
    def team(cls, team_id: int) -> Audience:
        return cls(team_id=team_id)

    @property
    def is_global(self) -> bool:
        return self.player_id is None and self.team_id is None


@dataclass(frozen=True)
class Message:
    """A parameterized message: a string key plus embedded values.

    Arguments may be player ids, numbers, or other Messages; rendering them
    into text is the platform's job.
    """

    key: str
    args: tuple = ()


class GamePlatform(ABC):
    """The external game platform as seen by the core."""

    # --- Identity ---

    @abstractmethod
    def players(self) -> list[int]:
        """All connected player ids."""

    @abstractmethod
    def team_of(self, player_id: int) -> int | None:
        """Team id of a player, or None if the player is unknown."""

    def members(self, team_id: int) -> list[int]:
        """Player ids currently on ``team_id``, in platform order."""
        return [pid for pid in self.players() if self.team_of(pid) == team_id]

    # --- Life / position ---

    @abstractmethod
    def is_alive(self, player_id: int) -> bool:
        """True while the player's soldier is deployed and alive."""

    @abstractmethod
    def position(self, player_id: int) -> Vector | None:
        """World position of the player's soldier, None if not deployed."""

    # --- Messaging ---

    @abstractmethod
    def display_message(self, message: Message, audience: Audience) -> None:
        """Show a notification to one player, one team, or everyone."""

    def play_sound(self, cue: str, audience: Audience, amplitude: float = 1.0) -> None:
        """Play a one-shot sound cue. Platforms without audio ignore it."""

    def show_hud_status(self, player_id: int, status: HudStatus) -> None:
        """Push the VIP status HUD contract for one player."""

    def show_score_panel(self, player_id: int, entries: Sequence[ScorePanelEntry]) -> None:
        """Push the ranked score panel contract for one player."""

    # --- Markers ---

    @abstractmethod
    def spawn_marker(
        self,
        owner_team: int,
        position: Vector,
        icon: str,
        color: tuple[float, float, float],
    ) -> int:
        """Create a persistent world marker visible to ``owner_team``. Returns a handle."""

    @abstractmethod
    def move_marker(self, handle: int, position: Vector) -> None:
        """Reposition an existing marker."""

    @abstractmethod
    def restyle_marker(self, handle: int, icon: str, color: tuple[float, float, float]) -> None:
        """Recolor and retext an existing marker."""

    @abstractmethod
    def destroy_marker(self, handle: int) -> None:
        """Remove a marker."""

    @abstractmethod
    def spot(self, player_id: int, duration: float, mode: SpotMode) -> None:
        """Flash a transient radar spot on a player, visible to everyone."""

    # --- Scoreboard ---

    @abstractmethod
    def set_scoreboard_columns(self, names: Sequence[str], widths: Sequence[int]) -> None:
        """Declare scoreboard column headers and widths (percent)."""

    @abstractmethod
    def set_scoreboard_sorting(self, column: int, ascending: bool) -> None:
        """Sort the scoreboard by a single 0-based column."""

    @abstractmethod
    def set_scoreboard_row(self, player_id: int, values: Sequence[int]) -> None:
        """Push one player's scoreboard values."""

    # --- Timing / round control ---

    @abstractmethod
    def now(self) -> float:
        """Current match time in seconds (monotonic)."""

    @abstractmethod
    def remaining_time(self) -> float:
        """Seconds left before the time limit."""

    @abstractmethod
    def set_time_limit(self, seconds: float) -> None:
        """Set the match time limit."""

    @abstractmethod
    def end_round(self, winner_team_id: int | None) -> None:
        """Terminate the round in favour of a team."""

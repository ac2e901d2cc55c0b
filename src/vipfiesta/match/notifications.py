"""Player-facing notifications and sound cues.

The core only picks a Notice key, its arguments and an audience; message
text and audio assets belong to the platform.  Each Notifier method is
called once per game event, never per tick.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

from vipfiesta.platform.base import Audience, Message, PlatformError

if TYPE_CHECKING:
    from vipfiesta.platform.base import GamePlatform


class Notice(str, Enum):
    GAME_STARTING = "game_starting"
    INTRO = "intro"
    NEW_VIP = "new_vip"                        # args: (vip player id,)
    YOU_ARE_VIP = "you_are_vip"
    HUD_YOU_ARE_VIP = "hud_you_are_vip"
    VIP_DIED = "vip_died"
    SELECTING_NEW_VIP = "selecting_new_vip"
    VIP_KILLED = "vip_killed"                  # args: (team id, team total)
    TEAM_WINS = "team_wins"                    # args: (team id,)


class AudioCue(str, Enum):
    FRIENDLY_VIP_KILLED = "friendly_vip_killed"
    ENEMY_VIP_KILLED = "enemy_vip_killed"
    YOU_ARE_VIP = "you_are_vip"
    NEW_VIP = "new_vip"


class Notifier:
    """Sends notices and cues to the platform."""

    def __init__(self, platform: GamePlatform) -> None:
        self._platform = platform

    def _send(self, notice: Notice, audience: Audience, *args) -> None:
        try:
            self._platform.display_message(Message(notice.value, tuple(args)), audience)
        except PlatformError as e:
            logger.warning(f"Message {notice.value} not delivered: {e}")

    def _sound(self, cue: AudioCue, audience: Audience, amplitude: float = 1.0) -> None:
        try:
            self._platform.play_sound(cue.value, audience, amplitude)
        except PlatformError as e:
            logger.warning(f"Sound {cue.value} not played: {e}")

    def game_starting(self) -> None:
        self._send(Notice.GAME_STARTING, Audience.everyone())

    def intro(self, player_id: int) -> None:
        self._send(Notice.INTRO, Audience.player(player_id))

    def new_vip(self, team_id: int, vip_id: int) -> None:
        self._send(Notice.NEW_VIP, Audience.team(team_id), vip_id)
        self._send(Notice.YOU_ARE_VIP, Audience.player(vip_id))
        self._sound(AudioCue.NEW_VIP, Audience.team(team_id))
        self._sound(AudioCue.YOU_ARE_VIP, Audience.player(vip_id))

    def hud_became_vip(self, player_id: int) -> None:
        self._send(Notice.HUD_YOU_ARE_VIP, Audience.player(player_id))

    def vip_died(self, team_id: int) -> None:
        self._send(Notice.VIP_DIED, Audience.team(team_id))
        self._send(Notice.SELECTING_NEW_VIP, Audience.team(team_id))
        self._sound(AudioCue.FRIENDLY_VIP_KILLED, Audience.team(team_id))

    def vip_killed(self, killer_id: int, killer_team_id: int, team_total: int) -> None:
        self._send(Notice.VIP_KILLED, Audience.everyone(), killer_team_id, team_total)
        self._sound(AudioCue.ENEMY_VIP_KILLED, Audience.player(killer_id))

    def team_wins(self, team_id: int) -> None:
        self._send(Notice.TEAM_WINS, Audience.everyone(), team_id)

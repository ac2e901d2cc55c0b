"""Per-player HUD state: VIP status contract and edge-triggered notices."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from .state import MatchState


@dataclass(frozen=True)
class HudStatus:
    """What the VIP status widget shows for one player."""

    player_id: int
    is_vip: bool
    team_vip_id: int | None

    @property
    def selecting_new_vip(self) -> bool:
        return self.team_vip_id is None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["selecting_new_vip"] = self.selecting_new_vip
        return data


def hud_status(state: MatchState, player_id: int, team_id: int | None) -> HudStatus:
    team_vip = state.vip_of(team_id) if team_id is not None else None
    return HudStatus(player_id=player_id, is_vip=team_vip == player_id, team_vip_id=team_vip)


class VipStatusTracker:
    """Remembers each player's last VIP flag and reports false -> true edges.

    The true -> false edge resets silently.
    """

    def __init__(self) -> None:
        self._last: dict[int, bool] = {}

    def observe(self, player_id: int, is_vip: bool) -> bool:
        became = is_vip and not self._last.get(player_id, False)
        self._last[player_id] = is_vip
        return became

    def last_known(self, player_id: int) -> bool:
        return self._last.get(player_id, False)

    def forget(self, player_id: int) -> None:
        self._last.pop(player_id, None)


class IntroTracker:
    """Players who have already seen the first-deploy intro."""

    def __init__(self) -> None:
        self._shown: set[int] = set()

    def first_deploy(self, player_id: int) -> bool:
        if player_id in self._shown:
            return False
        self._shown.add(player_id)
        return True

    def forget(self, player_id: int) -> None:
        self._shown.discard(player_id)

"""MarkerScheduler — keeps VIP world markers and radar pings in sync.

Two cadences, both driven by the global tick:

  every tick   compute the desired marker set, destroy markers that are no
               longer desired, create missing ones, reposition the rest
  throttled    at most once per ``ping_interval_seconds``, flash a radar
               spot on every live VIP, visible to everyone

Markers are team-scoped and keyed by (viewer team, VIP player id), giving
O(teams x VIPs) markers.  A key is desired iff the VIP is assigned, alive,
and the viewer team may see it: its own team always, other teams only when
enemy icons are enabled.  Teams without members see nothing.  Icon and color
follow the VIP's current team, so a VIP changing teams restyles its
markers.  Markers have no lifecycle beyond that rule.

Platform failures on marker primitives are logged and dropped; the next
tick's diff recreates whatever is missing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from vipfiesta.platform.base import PlatformError

if TYPE_CHECKING:
    from vipfiesta.app.config import MarkerSettings
    from vipfiesta.platform.base import GamePlatform, Vector

    from .state import MatchState

MarkerKey = tuple[int, int]  # (viewer team id, VIP player id)


@dataclass
class MarkerTick:
    """What one marker tick did."""

    created: list[MarkerKey] = field(default_factory=list)
    destroyed: list[MarkerKey] = field(default_factory=list)
    restyled: list[MarkerKey] = field(default_factory=list)
    moved: int = 0
    pinged: list[int] = field(default_factory=list)


class MarkerScheduler:
    """Diffs desired vs existing markers each tick and throttles pings."""

    def __init__(self, state: MatchState, platform: GamePlatform, settings: MarkerSettings) -> None:
        self._state = state
        self._platform = platform
        self._settings = settings
        self._markers: dict[MarkerKey, int] = {}
        self._friendly: dict[MarkerKey, bool] = {}
        self._last_ping_at: float | None = None

    @property
    def keys(self) -> set[MarkerKey]:
        return set(self._markers)

    @property
    def last_ping_at(self) -> float | None:
        return self._last_ping_at

    def handle(self, key: MarkerKey) -> int | None:
        return self._markers.get(key)

    def live_vips(self) -> dict[int, int]:
        """VIP player id -> their team, for assigned VIPs that are alive."""
        return {
            vip_id: team_id
            for team_id, vip_id in self._state.assigned_vips().items()
            if self._platform.is_alive(vip_id)
        }

    def desired_keys(self) -> set[MarkerKey]:
        if not self._settings.enable_3d_icons:
            return set()
        # Only teams with members can see a marker
        populated = {self._platform.team_of(p) for p in self._state.players}
        scopes = [t for t in self._state.team_vips if t in populated]
        desired: set[MarkerKey] = set()
        for vip_id, vip_team in self.live_vips().items():
            for scope in scopes:
                if scope == vip_team or self._settings.enable_enemy_icons:
                    desired.add((scope, vip_id))
        return desired

    def tick(self, now: float) -> MarkerTick:
        result = MarkerTick()
        desired = self.desired_keys()

        for key in [k for k in self._markers if k not in desired]:
            self._destroy(key)
            result.destroyed.append(key)

        vip_teams = self.live_vips()
        for key in sorted(desired):
            scope, vip_id = key
            position = self._platform.position(vip_id)
            if position is None:
                continue
            target = self._offset(position)
            friendly = scope == vip_teams.get(vip_id)
            if key in self._markers and self._friendly[key] != friendly:
                if self._restyle(key, friendly):
                    result.restyled.append(key)
            if key in self._markers:
                if self._move(key, target):
                    result.moved += 1
            elif self._spawn(key, target, friendly):
                result.created.append(key)

        result.pinged = self._maybe_ping(now)
        return result

    def clear(self) -> None:
        """Destroy every marker this scheduler owns."""
        for key in list(self._markers):
            self._destroy(key)

    # -- Internals -----------------------------------------------------------

    def _offset(self, position: Vector) -> Vector:
        x, y, z = position
        return (x, y + self._settings.vertical_offset_meters, z)

    def _style(self, friendly: bool) -> tuple[str, tuple[float, float, float]]:
        s = self._settings
        if friendly:
            return s.friendly_icon, s.friendly_color
        return s.enemy_icon, s.enemy_color

    def _spawn(self, key: MarkerKey, position: Vector, friendly: bool) -> bool:
        icon, color = self._style(friendly)
        try:
            self._markers[key] = self._platform.spawn_marker(key[0], position, icon, color)
        except PlatformError as e:
            logger.warning(f"Marker spawn failed for {key}: {e}")
            return False
        self._friendly[key] = friendly
        logger.debug(f"Marker {key} created")
        return True

    def _move(self, key: MarkerKey, position: Vector) -> bool:
        try:
            self._platform.move_marker(self._markers[key], position)
        except PlatformError as e:
            # Forget it; recreated next tick
            logger.warning(f"Marker move failed for {key}: {e}")
            del self._markers[key]
            self._friendly.pop(key, None)
            return False
        return True

    def _restyle(self, key: MarkerKey, friendly: bool) -> bool:
        """Switch icon and color after the VIP changed teams relative to the viewer."""
        icon, color = self._style(friendly)
        try:
            self._platform.restyle_marker(self._markers[key], icon, color)
        except PlatformError as e:
            # Replace it; respawned with the new style this tick
            logger.warning(f"Marker restyle failed for {key}: {e}")
            self._destroy(key)
            return False
        self._friendly[key] = friendly
        return True

    def _destroy(self, key: MarkerKey) -> None:
        handle = self._markers.pop(key)
        self._friendly.pop(key, None)
        try:
            self._platform.destroy_marker(handle)
        except PlatformError as e:
            logger.warning(f"Marker destroy failed for {key}: {e}")
            return
        logger.debug(f"Marker {key} destroyed")

    def _maybe_ping(self, now: float) -> list[int]:
        s = self._settings
        if not s.enable_minimap_spotting:
            return []
        if self._last_ping_at is not None and now - self._last_ping_at < s.ping_interval_seconds:
            return []
        vips = sorted(self.live_vips())
        if not vips:
            return []
        for vip_id in vips:
            try:
                self._platform.spot(vip_id, s.ping_duration_seconds, s.spot_mode)
            except PlatformError as e:
                logger.warning(f"Spot failed for VIP {vip_id}: {e}")
        self._last_ping_at = now
        return vips

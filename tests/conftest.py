"""Shared fixtures for VIP Fiesta tests."""

from __future__ import annotations

import pytest

from vipfiesta.app.config import VipFiestaSettings
from vipfiesta.comms.event_bus import EventBus
from vipfiesta.match.mode import VipFiestaMode
from vipfiesta.platform.memory import InMemoryPlatform

DEFAULT_TEAMS = {1: [1, 2, 3], 2: [4, 5, 6], 3: [7, 8, 9]}


def make_settings(**overrides) -> VipFiestaSettings:
    """Settings isolated from the environment, with instant initial selection."""
    values = {
        "initial_selection_delay_seconds": 0.0,
        "reassign_delay_seconds": 5.0,
        "random_seed": 7,
    }
    values.update(overrides)
    return VipFiestaSettings(_env_file=None, **values)


def populate(platform: InMemoryPlatform, teams: dict[int, list[int]]) -> None:
    for team_id, members in teams.items():
        for player_id in members:
            platform.add_player(player_id, team_id, alive=True, position=(float(player_id), 0.0, 0.0))


def reassign_after_delay(mode: VipFiestaMode) -> None:
    """Let the reassignment delay elapse and run one global tick."""
    mode.platform.advance(mode.settings.reassign_delay_seconds)
    mode.ongoing_global()


def enemy_of(mode: VipFiestaMode, team_id: int) -> int:
    """Any player not on ``team_id``."""
    return next(p for p in mode.platform.players() if mode.platform.team_of(p) != team_id)


@pytest.fixture
def settings() -> VipFiestaSettings:
    return make_settings()


@pytest.fixture
def platform() -> InMemoryPlatform:
    return InMemoryPlatform()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def make_mode(platform, bus):
    """Factory: a started match with every team's VIP assigned."""

    def _make(teams: dict[int, list[int]] | None = None, **overrides) -> VipFiestaMode:
        populate(platform, DEFAULT_TEAMS if teams is None else teams)
        mode = VipFiestaMode(platform, make_settings(**overrides), event_bus=bus)
        for player_id in platform.players():
            mode.on_player_joined(player_id)
        mode.on_match_start()
        mode.ongoing_global()
        return mode

    return _make

"""MatchSimulator: plays a random headless match on an InMemoryPlatform.

Drives a VipFiestaMode exactly the way embedding glue would: global and
per-player ticks at a fixed rate, deploy / death / switch events in
between.  Deaths are random: each second a few living players kill a
random living enemy (sometimes themselves).  Dead players respawn after
``respawn_seconds``.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from loguru import logger

from vipfiesta.app.config import VipFiestaSettings
from vipfiesta.match.mode import VipFiestaMode
from vipfiesta.platform.memory import InMemoryPlatform

TICK_RATE = 30


@dataclass
class SimulationReport:
    ticks: int = 0
    eliminations: int = 0
    vip_kills: int = 0
    switches: int = 0
    timeline: list[str] = field(default_factory=list)


class MatchSimulator:
    """Random match driver for demos and smoke tests."""

    def __init__(
        self,
        teams: int = 4,
        players_per_team: int = 4,
        settings: VipFiestaSettings | None = None,
        seed: int | None = None,
        kills_per_second: float = 1.5,
        suicide_chance: float = 0.05,
        switch_chance: float = 0.01,
        respawn_seconds: float = 3.0,
    ) -> None:
        self.rng = random.Random(seed)
        self.platform = InMemoryPlatform()
        self.mode = VipFiestaMode(self.platform, settings, rng=random.Random(seed))
        self.teams = list(range(1, teams + 1))
        self.kills_per_second = kills_per_second
        self.suicide_chance = suicide_chance
        self.switch_chance = switch_chance
        self.respawn_seconds = respawn_seconds
        self._respawn_at: dict[int, float] = {}
        self.report = SimulationReport()

        player_id = 1
        for team_id in self.teams:
            for _ in range(players_per_team):
                self.platform.add_player(player_id, team_id, alive=False, position=self._random_position())
                player_id += 1

    def _random_position(self) -> tuple[float, float, float]:
        return (self.rng.uniform(-100, 100), 0.0, self.rng.uniform(-100, 100))

    def run(self, max_seconds: float | None = None) -> SimulationReport:
        mode = self.mode
        platform = self.platform
        for pid in platform.players():
            mode.on_player_joined(pid)
        mode.on_match_start()
        for pid in platform.players():
            platform.set_alive(pid, True)
            mode.on_player_deployed(pid)

        limit = max_seconds if max_seconds is not None else mode.settings.time_limit_seconds
        dt = 1.0 / TICK_RATE
        while not mode.state.ended:
            platform.advance(dt)
            self.report.ticks += 1
            now = platform.now()

            self._respawn(now)
            if self.report.ticks % TICK_RATE == 0:
                self._skirmish()
                self._maybe_switch()

            for pid in platform.players():
                if platform.is_alive(pid):
                    x, y, z = platform.position(pid)
                    platform.move(pid, (x + self.rng.uniform(-0.2, 0.2), y, z + self.rng.uniform(-0.2, 0.2)))
                mode.ongoing_player(pid)
            mode.ongoing_global()

            if now >= limit or platform.remaining_time() <= 0:
                mode.on_time_limit_reached()
                break

        logger.info(
            f"Simulation finished after {self.report.ticks} ticks: "
            f"{self.report.eliminations} eliminations, {self.report.vip_kills} VIP kills"
        )
        return self.report

    def _respawn(self, now: float) -> None:
        for pid, due in list(self._respawn_at.items()):
            if due <= now and self.platform.team_of(pid) is not None:
                del self._respawn_at[pid]
                self.platform.set_alive(pid, True)
                self.platform.move(pid, self._random_position())
                self.mode.on_player_deployed(pid)

    def _skirmish(self) -> None:
        kills = int(self.kills_per_second) + (self.rng.random() < self.kills_per_second % 1)
        for _ in range(kills):
            alive = [p for p in self.platform.players() if self.platform.is_alive(p)]
            if len(alive) < 2:
                return
            killer = self.rng.choice(alive)
            enemies = [p for p in alive if self.platform.team_of(p) != self.platform.team_of(killer)]
            if not enemies:
                return
            if self.rng.random() < self.suicide_chance:
                victim, killer = killer, None
            else:
                victim = self.rng.choice(enemies)
            self.platform.set_alive(victim, False)
            self._respawn_at[victim] = self.platform.now() + self.respawn_seconds
            result = self.mode.on_player_died(victim, killer)
            self.report.eliminations += 1
            if result is not None and result.vip_kill:
                self.report.vip_kills += 1
                self.report.timeline.append(
                    f"{self.platform.now():6.1f}s team {result.killer_team_id} killed "
                    f"team {result.victim_team_id}'s VIP"
                )

    def _maybe_switch(self) -> None:
        if self.rng.random() >= self.switch_chance:
            return
        pid = self.rng.choice(self.platform.players())
        current = self.platform.team_of(pid)
        others = [t for t in self.teams if t != current]
        if not others:
            return
        new_team = self.rng.choice(others)
        self.platform.set_team(pid, new_team)
        self.mode.on_player_switched_team(pid, new_team)
        self.report.switches += 1

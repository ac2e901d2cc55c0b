"""Configuration management using Pydantic settings."""

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from vipfiesta.platform.base import SpotMode

Color = tuple[float, float, float]


class MarkerSettings(BaseModel):
    """World markers and radar pings."""

    enable_3d_icons: bool = True
    enable_minimap_spotting: bool = True
    enable_enemy_icons: bool = True
    vertical_offset_meters: float = 3.0

    # Radar pings are broadcast at most once per interval
    ping_interval_seconds: float = Field(default=1.0, ge=1.0)
    ping_duration_seconds: float = Field(default=1.0, gt=0.0)
    spot_mode: SpotMode = SpotMode.BOTH

    friendly_icon: str = "triangle"
    enemy_icon: str = "skull"
    friendly_color: Color = (0.0, 1.0, 0.0)
    enemy_color: Color = (1.0, 0.0, 0.0)


class ScoreboardSettings(BaseModel):
    """Scoreboard sort-key encoding."""

    # Lower bound for the player-id tie-break base (raised above the largest live id)
    player_tie_base: int = Field(default=100, ge=1)


class VipFiestaSettings(BaseSettings):
    """Game-mode settings loaded once from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VIP_FIESTA_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Win condition
    target_vip_kills: int = Field(default=3, ge=1)
    time_limit_minutes: float = Field(default=3.0, gt=0.0)
    stop_counting_after_win: bool = True
    announce_on_target_reached: bool = True
    announce_winner_on_time_limit: bool = True

    # VIP lifecycle
    reassign_delay_seconds: float = Field(default=5.0, ge=0.0)
    initial_selection_delay_seconds: float = Field(default=5.0, ge=0.0)
    switch_reassign_delayed: bool = False
    vip_selection: Literal["random", "top_players"] = "random"
    top_players_pool_size: int = Field(default=3, ge=1)
    random_seed: Optional[int] = None

    # Player-facing UI
    show_intro_on_deploy: bool = True
    hud_enabled: bool = True

    markers: MarkerSettings = Field(default_factory=MarkerSettings)
    scoreboard: ScoreboardSettings = Field(default_factory=ScoreboardSettings)

    log_level: str = "INFO"

    @property
    def time_limit_seconds(self) -> float:
        return self.time_limit_minutes * 60.0


settings = VipFiestaSettings()

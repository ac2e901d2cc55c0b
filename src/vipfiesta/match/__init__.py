"""VIP game-mode core: roster, VIP lifecycle, scoring, ranking and markers."""
from .hud import HudStatus, IntroTracker, VipStatusTracker, hud_status
from .markers import MarkerKey, MarkerScheduler, MarkerTick
from .mode import VipFiestaMode
from .notifications import AudioCue, Notice, Notifier
from .ranking import (
    ScorePanelEntry,
    SortKeyWeights,
    TeamStanding,
    build_score_panel,
    compute_sort_keys,
    compute_standings,
    compute_team_ranks,
    rank_label,
    teams_to_display,
)
from .roster import sync_roster
from .scheduler import ScheduledTask, TaskScheduler
from .scoreboard import COLUMNS, COLUMN_WIDTHS, SORT_COLUMN, Scoreboard, ScoreboardRow
from .scoring import EliminationProcessor, EliminationResult
from .selection import rank_candidates, select_vip
from .state import MatchState, PlayerCounters
from .vip import VipAssignments

__all__ = [
    "AudioCue",
    "COLUMNS",
    "COLUMN_WIDTHS",
    "EliminationProcessor",
    "EliminationResult",
    "HudStatus",
    "IntroTracker",
    "MarkerKey",
    "MarkerScheduler",
    "MarkerTick",
    "MatchState",
    "Notice",
    "Notifier",
    "PlayerCounters",
    "SORT_COLUMN",
    "ScheduledTask",
    "ScorePanelEntry",
    "Scoreboard",
    "ScoreboardRow",
    "SortKeyWeights",
    "TaskScheduler",
    "TeamStanding",
    "VipAssignments",
    "VipFiestaMode",
    "VipStatusTracker",
    "build_score_panel",
    "compute_sort_keys",
    "compute_standings",
    "compute_team_ranks",
    "hud_status",
    "rank_candidates",
    "rank_label",
    "select_vip",
    "sync_roster",
    "teams_to_display",
]

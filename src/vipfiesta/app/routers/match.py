"""Match API — read-only views of a running VIP match."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

router = APIRouter(prefix="/api/match", tags=["match"])


def _get_mode(request: Request):
    """Retrieve the VipFiestaMode from app state."""
    mode = getattr(request.app.state, "vip_mode", None)
    if mode is None:
        raise HTTPException(503, "Game mode not available")
    return mode


def _require_player(mode, player_id: int) -> None:
    if player_id not in mode.state.players:
        raise HTTPException(404, f"Unknown player: {player_id}")


@router.get("/state")
async def get_match_state(request: Request):
    """Flags, VIP assignments, counters and standings."""
    return _get_mode(request).get_state()


@router.get("/standings")
async def get_standings(request: Request):
    mode = _get_mode(request)
    return [s.to_dict() for s in mode.standings()]


@router.get("/scoreboard")
async def get_scoreboard(request: Request):
    """Scoreboard rows in display order."""
    mode = _get_mode(request)
    return [row.to_dict() for row in mode.scoreboard_rows()]


@router.get("/players/{player_id}/panel")
async def get_score_panel(player_id: int, request: Request):
    """Score panel as shown to one player (top 3, own team kept visible)."""
    mode = _get_mode(request)
    _require_player(mode, player_id)
    return [entry.to_dict() for entry in mode.score_panel(player_id)]


@router.get("/players/{player_id}/hud")
async def get_hud(player_id: int, request: Request):
    mode = _get_mode(request)
    _require_player(mode, player_id)
    return mode.hud_status(player_id).to_dict()

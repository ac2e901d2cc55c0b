"""VIP Fiesta HTTP surface.

Exposes the state of one running match.  ``create_app(mode)`` attaches an
existing mode; without one the app runs headless on an empty
InMemoryPlatform so the endpoints answer before any glue is wired in.
"""

import sys

from fastapi import FastAPI
from loguru import logger

from vipfiesta import __version__
from vipfiesta.app.config import VipFiestaSettings, settings
from vipfiesta.app.routers import match_router
from vipfiesta.match.mode import VipFiestaMode
from vipfiesta.platform.memory import InMemoryPlatform


def configure_logging(level: str) -> None:
    """Route loguru output to a single stderr sink at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def create_app(mode: VipFiestaMode | None = None, config: VipFiestaSettings | None = None) -> FastAPI:
    config = config or settings
    if mode is None:
        mode = VipFiestaMode(InMemoryPlatform(), config)
        logger.info("No game mode supplied, serving a headless in-memory match")

    app = FastAPI(title="VIP Fiesta", version=__version__)
    app.state.vip_mode = mode
    app.include_router(match_router)

    @app.get("/health")
    async def health():
        return {
            "status": "operational",
            "system": "VIP Fiesta",
            "started": mode.state.started,
            "ended": mode.state.ended,
        }

    return app


configure_logging(settings.log_level)
app = create_app()

"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from soft_targeting.api.dependencies import set_engine_manager
from soft_targeting.api.engine_manager import EngineManager
from soft_targeting.api.routes import api_router
from soft_targeting.config import SandboxConfig, TargetingConfig
from soft_targeting.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(
    config: SandboxConfig | None = None,
    targeting_config: TargetingConfig | None = None,
    autostart: bool = True,
) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    With ``autostart=False`` the sandbox is built but its loop thread is not
    started; ``POST /control/step`` then advances it synchronously.
    """
    if config is None:
        config = SandboxConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(_config.log_level)
        manager = EngineManager(_config, targeting_config)
        set_engine_manager(manager)
        if autostart:
            manager.start()
        logger.info("API server started — sandbox %s.", "running" if autostart else "idle")
        yield
        manager.stop()
        set_engine_manager(None)
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Soft Targeting Sandbox",
        description=(
            "Soft-lock target selection — diagnostics API for the reference sandbox.\n\n"
            "## API Groups\n\n"
            "- **State** — Lock state, ranked targets, poses, actors, lock events\n"
            "- **Control** — Sandbox lifecycle and targeting activation\n"
            "- **Config** — Targeting tunables (read and partial update)\n"
            "- **Agent** — Steer the agent and its camera\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live targeting state polled by a debug UI."},
            {"name": "Control", "description": "Start, pause, resume, step and reset the sandbox; activate or deactivate targeting."},
            {"name": "Config", "description": "Targeting tunables. Invalid values are rejected with 422."},
            {"name": "Agent", "description": "Point the agent and camera."},
        ],
    )

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app

"""FastAPI dependencies: the EngineManager singleton and its latest snapshot."""

from __future__ import annotations

from fastapi import Depends, HTTPException

from soft_targeting.api.engine_manager import EngineManager, SandboxSnapshot

_engine_manager: EngineManager | None = None


def set_engine_manager(manager: EngineManager | None) -> None:
    """Install (or with None, remove) the manager served to request handlers."""
    global _engine_manager
    _engine_manager = manager


def get_engine_manager() -> EngineManager:
    if _engine_manager is None:
        raise RuntimeError("EngineManager not initialized; the app lifespan has not run.")
    return _engine_manager


def get_snapshot(manager: EngineManager = Depends(get_engine_manager)) -> SandboxSnapshot:
    """Latest published snapshot, or 503 before the first one exists."""
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")
    return snapshot

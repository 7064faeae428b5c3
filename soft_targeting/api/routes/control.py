"""POST /api/v1/control/{action} — sandbox lifecycle and targeting controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from soft_targeting.api.dependencies import get_engine_manager
from soft_targeting.api.engine_manager import EngineManager
from soft_targeting.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"
    activate = "activate"
    deactivate = "deactivate"


def _step(manager: EngineManager) -> int:
    snapshot = manager.get_snapshot()
    return snapshot.step if snapshot else 0


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    count: int = Query(1, ge=1, le=10_000, description="Steps to run for the step action"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    match action:
        case ControlAction.start:
            if manager.running:
                return ControlResponse(status="noop", message="Already running.", step=_step(manager))
            manager.start()
            return ControlResponse(status="ok", message="Sandbox started.", step=_step(manager))

        case ControlAction.pause:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", step=_step(manager))
            manager.pause()
            return ControlResponse(status="ok", message="Sandbox paused.", step=_step(manager))

        case ControlAction.resume:
            if not manager.running:
                return ControlResponse(status="error", message="Not running.", step=_step(manager))
            manager.resume()
            return ControlResponse(status="ok", message="Sandbox resumed.", step=_step(manager))

        case ControlAction.step:
            for _ in range(count):
                manager.step()
            return ControlResponse(status="ok", message=f"{count} step(s) executed.", step=_step(manager))

        case ControlAction.reset:
            manager.reset()
            return ControlResponse(status="ok", message="Sandbox reset.", step=_step(manager))

        case ControlAction.activate:
            manager.activate_targeting()
            return ControlResponse(status="ok", message="Targeting activated.", step=_step(manager))

        case ControlAction.deactivate:
            manager.deactivate_targeting()
            return ControlResponse(status="ok", message="Targeting deactivated.", step=_step(manager))


@router.post("/speed")
def set_speed(
    sps: float = Query(30.0, ge=1.0, le=240.0, description="Steps per second"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.step_rate = sps
    return ControlResponse(status="ok", message=f"Speed set to {sps:.1f} steps/s.", step=_step(manager))

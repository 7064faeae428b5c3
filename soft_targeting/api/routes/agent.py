"""POST /api/v1/agent/facing — steer the sandbox agent and camera."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from soft_targeting.api.dependencies import get_engine_manager
from soft_targeting.api.engine_manager import EngineManager
from soft_targeting.api.schemas import ControlResponse, FacingRequest

router = APIRouter()


@router.post("/agent/facing", response_model=ControlResponse)
def set_facing(
    request: FacingRequest,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.set_facing(request.yaw, request.pitch)
    snapshot = manager.get_snapshot()
    step = snapshot.step if snapshot else 0
    return ControlResponse(
        status="ok",
        message=f"Facing set to yaw={request.yaw:.1f}, pitch={request.pitch:.1f}.",
        step=step,
    )

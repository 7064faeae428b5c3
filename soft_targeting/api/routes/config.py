"""GET/PATCH /api/v1/config — read and update targeting tunables."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from soft_targeting.api.dependencies import get_engine_manager
from soft_targeting.api.engine_manager import EngineManager
from soft_targeting.api.schemas import TargetingConfigResponse, TargetingConfigUpdate
from soft_targeting.config import TargetingConfig
from soft_targeting.core.errors import ConfigurationError

router = APIRouter()


def _serialize(cfg: TargetingConfig, manager: EngineManager) -> TargetingConfigResponse:
    return TargetingConfigResponse(
        search_radius=cfg.search_radius,
        search_interval=cfg.search_interval,
        max_horizontal_camera_angle=cfg.max_horizontal_camera_angle,
        max_vertical_camera_angle=cfg.max_vertical_camera_angle,
        max_horizontal_player_half_angle=cfg.max_horizontal_player_half_angle,
        camera_direction_weight=cfg.camera_direction_weight,
        distance_weight=cfg.distance_weight,
        player_direction_weight=cfg.player_direction_weight,
        target_tag=cfg.target_tag,
        target_class=cfg.target_class.__name__ if cfg.target_class is not None else None,
        target_trace_channel=cfg.target_trace_channel.name.lower(),
        blocking_trace_channel=cfg.blocking_trace_channel.name.lower(),
        debug=cfg.debug,
        step_rate=manager.step_rate,
    )


@router.get("/config", response_model=TargetingConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> TargetingConfigResponse:
    return _serialize(manager.targeting_config, manager)


@router.patch("/config", response_model=TargetingConfigResponse)
def update_config(
    update: TargetingConfigUpdate,
    manager: EngineManager = Depends(get_engine_manager),
) -> TargetingConfigResponse:
    changes = update.model_dump(exclude_none=True)
    if not changes:
        return _serialize(manager.targeting_config, manager)
    try:
        cfg = manager.configure(**changes)
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _serialize(cfg, manager)

"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Geometry ---

class Vector3Schema(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class PoseSchema(BaseModel):
    position: Vector3Schema
    pitch: float = 0.0
    yaw: float = 0.0


# --- World ---

class ActorSchema(BaseModel):
    handle: int
    name: str = ""
    kind: str
    position: Vector3Schema
    yaw: float = 0.0
    tags: list[str] = Field(default_factory=list)


# --- Targeting ---

class ScoredTargetSchema(BaseModel):
    handle: int
    score: float


class LockStateSchema(BaseModel):
    current_target: int | None = None
    active: bool = False
    paused: bool = False
    phase: str = "inactive"
    evaluations: int = 0


class StateResponse(BaseModel):
    step: int
    time: float
    running: bool
    lock: LockStateSchema
    ranked_targets: list[ScoredTargetSchema] = Field(default_factory=list)
    agent: PoseSchema | None = None
    camera: PoseSchema | None = None
    actors: list[ActorSchema] = Field(default_factory=list)


class EventSchema(BaseModel):
    step: int
    time: float
    kind: str
    handle: int


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    step: int = 0


class FacingRequest(BaseModel):
    yaw: float = Field(..., description="Agent and camera yaw in degrees")
    pitch: float = Field(0.0, ge=-89.0, le=89.0, description="Camera pitch in degrees")


# --- Config ---

class TargetingConfigResponse(BaseModel):
    search_radius: float
    search_interval: float
    max_horizontal_camera_angle: float
    max_vertical_camera_angle: float
    max_horizontal_player_half_angle: float
    camera_direction_weight: float
    distance_weight: float
    player_direction_weight: float
    target_tag: str
    target_class: str | None = None
    target_trace_channel: str
    blocking_trace_channel: str
    debug: bool
    step_rate: float


class TargetingConfigUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    search_radius: float | None = None
    search_interval: float | None = None
    max_horizontal_camera_angle: float | None = None
    max_vertical_camera_angle: float | None = None
    max_horizontal_player_half_angle: float | None = None
    camera_direction_weight: float | None = None
    distance_weight: float | None = None
    player_direction_weight: float | None = None
    target_tag: str | None = None
    debug: bool | None = None

"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(_CamelModel):
    status: str = "ok"
    version: str = "0.1.0"
    flows_registered: int = 0
    llm_configured: bool = False


class FlowInfo(_CamelModel):
    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict)
    output_schema: dict[str, Any] = Field(default_factory=dict)


class FlowStateResponse(_CamelModel):
    status: str = "idle"
    result: dict[str, Any] | None = None
    error: str | None = None
    error_kind: str | None = None


class KeyFrameResponse(_CamelModel):
    id: str
    description: str = ""
    selected: bool = False


class SessionResponse(_CamelModel):
    id: str
    location_context: str = ""
    geospatial_context: str | None = None
    keyframes: list[KeyFrameResponse] = Field(default_factory=list)
    selected_keyframe_id: str | None = None
    flows: dict[str, FlowStateResponse] = Field(default_factory=dict)
    loading: dict[str, bool] = Field(default_factory=dict)
    errors: dict[str, str | None] = Field(default_factory=dict)
    version: int = 0


class DisplayRowResponse(_CamelModel):
    label: str
    value: str


class DisplayPanelResponse(_CamelModel):
    flow: str
    title: str
    status: str
    message: str | None = None
    error: str | None = None
    rows: list[DisplayRowResponse] = Field(default_factory=list)
    items: list[list[DisplayRowResponse]] = Field(default_factory=list)


class DisplayResponse(_CamelModel):
    panels: list[DisplayPanelResponse] = Field(default_factory=list)

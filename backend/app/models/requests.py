"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.flows import DataUri


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContextRequest(_CamelModel):
    location_context: str = Field(..., description="Free-text location, e.g. 'Springfield, IL'")
    geospatial_context: str | None = Field(
        default=None, description="Optional GeoJSON or notes passed to infrastructure detection"
    )


class KeyframeUpload(_CamelModel):
    data_uri: DataUri = Field(..., description="Keyframe image as a base64 data URI")
    description: str = Field(default="", description="Label shown in the keyframe picker")


class AddKeyframesRequest(_CamelModel):
    keyframes: list[KeyframeUpload] = Field(..., min_length=1)

"""Per-flow input/output schemas.

Field names are snake_case in Python and camelCase on the wire
(``photo_data_uri`` <-> ``photoDataUri``). Descriptions end up in the JSON
schema that is shown to the model, so they double as output instructions.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>[A-Za-z0-9+/]+={0,2})$"
)

_DATA_URI_HINT = "Expected format: 'data:<mimetype>;base64,<encoded_data>'."


def parse_data_uri(value: str) -> tuple[str, str]:
    """Split a base64 data URI into (mime type, base64 payload).

    Raises ValueError if the URI is malformed or the payload is not base64.
    """
    match = _DATA_URI_RE.match(value)
    if match is None:
        raise ValueError(f"not a base64 data URI. {_DATA_URI_HINT}")
    payload = match.group("payload")
    try:
        base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError(f"data URI payload is not valid base64: {e}") from e
    return match.group("mime"), payload


def _check_data_uri(value: str) -> str:
    parse_data_uri(value)
    return value


DataUri = Annotated[str, AfterValidator(_check_data_uri)]
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
# Model-reported; range-checked but not assumed calibrated.
Confidence = Annotated[float, Field(ge=0.0, le=1.0)]


class FlowModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Vegetation ────────────────────────────────────────────────────────────


class AnalyzeVegetationInput(FlowModel):
    photo_data_uri: DataUri = Field(
        ...,
        description="A photo of the vegetation, as a data URI that must include a MIME type "
        "and use Base64 encoding. " + _DATA_URI_HINT,
    )
    location: NonEmptyStr = Field(..., description="The location of the vegetation.")


class AnalyzeVegetationOutput(FlowModel):
    vegetation_type: NonEmptyStr = Field(..., description="The type of vegetation present.")
    vegetation_density: NonEmptyStr = Field(
        ..., description="The density of the vegetation (e.g., sparse, medium, dense)."
    )
    health_assessment: NonEmptyStr = Field(
        ..., description="An assessment of the vegetation health."
    )
    confidence: Confidence | None = Field(
        default=None, description="Confidence level of the analysis (0-1)."
    )
    reasoning: str | None = Field(
        default=None, description="Reasoning behind the assessment, including any uncertainties."
    )


# ── Soil ──────────────────────────────────────────────────────────────────


class ClassifySoilInput(FlowModel):
    photo_data_uri: DataUri = Field(
        ...,
        description="A photo of the ground surface, as a data URI that must include a MIME "
        "type and use Base64 encoding. " + _DATA_URI_HINT,
    )
    location_context: NonEmptyStr = Field(
        ..., description="Location and surroundings of the photographed area."
    )


class ClassifySoilOutput(FlowModel):
    soil_type: NonEmptyStr = Field(
        ..., description="The soil classification (e.g., clay, loam, sandy, silt, rocky)."
    )
    moisture_level: NonEmptyStr = Field(
        ..., description="The apparent moisture level of the soil (e.g., dry, moist, saturated)."
    )
    surface_water: bool = Field(..., description="Whether surface water is visible in the image.")
    erosion_risk: str | None = Field(
        default=None, description="An assessment of erosion risk (e.g., low, moderate, high)."
    )
    confidence: Confidence | None = Field(
        default=None, description="Confidence level of the classification (0-1)."
    )
    reasoning: str | None = Field(
        default=None, description="Reasoning behind the classification."
    )


# ── Infrastructure ────────────────────────────────────────────────────────


class DetectInfrastructureInput(FlowModel):
    photo_data_uri: list[DataUri] = Field(
        ...,
        min_length=1,
        description="An array of photos of a keyframe from a video, as data URIs that must "
        "include a MIME type and use Base64 encoding. " + _DATA_URI_HINT,
    )
    geospatial_context: str | None = Field(
        default=None,
        description="Geospatial context for the analysis, potentially including GeoJSON "
        "or other relevant data.",
    )


class InfrastructureDetail(FlowModel):
    type: NonEmptyStr = Field(
        ...,
        description="The type of infrastructure detected (e.g., road, building, power line, railway).",
    )
    location_description: NonEmptyStr = Field(
        ..., description="A description of the location of the infrastructure in the image."
    )
    proximity_to_geo_features: str | None = Field(
        default=None,
        description="The proximity of the infrastructure to other geographical features "
        "such as rivers, mountains, or forests.",
    )


class DetectInfrastructureOutput(FlowModel):
    infrastructure_details: list[InfrastructureDetail] = Field(
        ...,
        description="Detected infrastructure including type, location, and proximity to geo features.",
    )
    confidence: Confidence = Field(
        ..., description="Overall confidence level of the infrastructure detection (0-1)."
    )
    reasoning: str = Field(
        ...,
        description="Overall reasoning behind the detection and confidence level, "
        "including any uncertainties.",
    )


# ── Proximity ─────────────────────────────────────────────────────────────


class AnalyzeProximityInput(FlowModel):
    infrastructure: NonEmptyStr = Field(
        ..., description="Description of the detected infrastructure."
    )
    geographical_features: NonEmptyStr = Field(
        ..., description="Description of the surrounding geographical features."
    )


class AnalyzeProximityOutput(FlowModel):
    proximity_assessment: NonEmptyStr = Field(
        ...,
        description="How the infrastructure is positioned relative to the geographical features.",
    )
    risk_factors: list[str] = Field(
        ...,
        description="Risks arising from the proximity (e.g., flooding near a river crossing).",
    )
    recommendations: str | None = Field(
        default=None, description="Recommended mitigations or further investigation."
    )
    confidence: Confidence | None = Field(
        default=None, description="Confidence level of the analysis (0-1)."
    )
    reasoning: str | None = Field(default=None, description="Reasoning behind the assessment.")

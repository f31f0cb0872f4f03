"""Shared test fixtures."""

from __future__ import annotations

import json

import pytest

# 1x1 PNG
PNG_DATA_URI = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)
JPEG_DATA_URI = "data:image/jpeg;base64,YWJj"
MISSING_MARKER_URI = "data:image/png;iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="

VEGETATION_RESPONSE = {
    "vegetationType": "Mixed deciduous forest with cropland edges",
    "vegetationDensity": "dense",
    "healthAssessment": "Healthy canopy with no visible stress",
    "confidence": 0.82,
    "reasoning": "Uniform green canopy; cropland rows visible at the margins.",
}

SOIL_RESPONSE = {
    "soilType": "silty loam",
    "moistureLevel": "moist",
    "surfaceWater": True,
    "erosionRisk": "moderate",
    "confidence": 0.7,
    "reasoning": "Dark soil tones and a visible drainage channel.",
}

INFRASTRUCTURE_RESPONSE = {
    "infrastructureDetails": [
        {
            "type": "road",
            "locationDescription": "Paved two-lane road crossing the lower third",
            "proximityToGeoFeatures": "Runs along the river bank",
        },
        {"type": "building", "locationDescription": "Farmstead in the upper right"},
    ],
    "confidence": 0.9,
    "reasoning": "Clear linear paved surface and rectangular roofs.",
}

PROXIMITY_RESPONSE = {
    "proximityAssessment": "The road sits within 50 m of surface water on silty loam.",
    "riskFactors": ["seasonal flooding", "embankment erosion"],
    "recommendations": "Survey culverts before the wet season.",
    "confidence": 0.6,
    "reasoning": "Surface water present next to the road corridor.",
}

DEFAULT_RESPONSES = {
    "vegetation": json.dumps(VEGETATION_RESPONSE),
    "soil": json.dumps(SOIL_RESPONSE),
    "infrastructure": json.dumps(INFRASTRUCTURE_RESPONSE),
    "proximity": json.dumps(PROXIMITY_RESPONSE),
}


class FakeInvoker:
    """Stands in for the model client; records every call it receives."""

    def __init__(self, responses: dict[str, str | Exception] | None = None) -> None:
        self.responses: dict[str, str | Exception] = {**DEFAULT_RESPONSES, **(responses or {})}
        self.calls: list[tuple[str, list[dict]]] = []

    async def __call__(self, flow: str, content: list[dict]) -> str:
        self.calls.append((flow, content))
        response = self.responses[flow]
        if isinstance(response, Exception):
            raise response
        return response

    def calls_for(self, flow: str) -> list[list[dict]]:
        return [content for name, content in self.calls if name == flow]


@pytest.fixture
def png_data_uri() -> str:
    return PNG_DATA_URI


@pytest.fixture
def fake_invoker() -> FakeInvoker:
    return FakeInvoker()

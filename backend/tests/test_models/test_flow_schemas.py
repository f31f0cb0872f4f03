"""Tests for per-flow input/output schemas."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.models.flows import (
    AnalyzeVegetationInput,
    AnalyzeVegetationOutput,
    ClassifySoilOutput,
    DetectInfrastructureInput,
    DetectInfrastructureOutput,
    parse_data_uri,
)
from tests.conftest import INFRASTRUCTURE_RESPONSE, JPEG_DATA_URI, MISSING_MARKER_URI, PNG_DATA_URI


class TestDataUri:
    def test_parse_png(self):
        mime, payload = parse_data_uri(PNG_DATA_URI)
        assert mime == "image/png"
        assert payload.startswith("iVBORw0KGgo")

    def test_parse_jpeg(self):
        assert parse_data_uri(JPEG_DATA_URI) == ("image/jpeg", "YWJj")

    def test_missing_base64_marker(self):
        with pytest.raises(ValueError, match="base64 data URI"):
            parse_data_uri(MISSING_MARKER_URI)

    def test_not_a_data_uri(self):
        with pytest.raises(ValueError):
            parse_data_uri("https://example.com/frame.png")

    def test_bad_padding(self):
        with pytest.raises(ValueError, match="not valid base64"):
            parse_data_uri("data:image/png;base64,YWJ")


class TestVegetationSchemas:
    def test_accepts_camel_case(self):
        inp = AnalyzeVegetationInput.model_validate(
            {"photoDataUri": PNG_DATA_URI, "location": "Springfield, IL"}
        )
        assert inp.photo_data_uri == PNG_DATA_URI
        assert inp.location == "Springfield, IL"

    def test_accepts_snake_case(self):
        inp = AnalyzeVegetationInput(photo_data_uri=PNG_DATA_URI, location="Springfield, IL")
        assert inp.model_dump(by_alias=True)["photoDataUri"] == PNG_DATA_URI

    def test_missing_location(self):
        with pytest.raises(ValidationError):
            AnalyzeVegetationInput.model_validate({"photoDataUri": PNG_DATA_URI})

    def test_blank_location(self):
        with pytest.raises(ValidationError):
            AnalyzeVegetationInput.model_validate({"photoDataUri": PNG_DATA_URI, "location": "   "})

    def test_malformed_uri(self):
        with pytest.raises(ValidationError):
            AnalyzeVegetationInput.model_validate({"photoDataUri": MISSING_MARKER_URI, "location": "x"})

    @pytest.mark.parametrize("confidence", [1.5, -0.1])
    def test_confidence_out_of_range(self, confidence):
        with pytest.raises(ValidationError):
            AnalyzeVegetationOutput.model_validate({
                "vegetationType": "grassland",
                "vegetationDensity": "sparse",
                "healthAssessment": "drought stressed",
                "confidence": confidence,
            })

    @pytest.mark.parametrize("confidence", [0.0, 0.5, 1.0])
    def test_confidence_bounds_inclusive(self, confidence):
        out = AnalyzeVegetationOutput.model_validate({
            "vegetationType": "grassland",
            "vegetationDensity": "sparse",
            "healthAssessment": "drought stressed",
            "confidence": confidence,
        })
        assert out.confidence == confidence

    def test_confidence_and_reasoning_optional(self):
        out = AnalyzeVegetationOutput.model_validate({
            "vegetationType": "grassland",
            "vegetationDensity": "sparse",
            "healthAssessment": "drought stressed",
        })
        assert out.confidence is None
        assert out.reasoning is None

    def test_empty_type_rejected(self):
        with pytest.raises(ValidationError):
            AnalyzeVegetationOutput.model_validate({
                "vegetationType": "",
                "vegetationDensity": "sparse",
                "healthAssessment": "ok",
            })


class TestSoilSchemas:
    def test_surface_water_must_be_bool(self):
        with pytest.raises(ValidationError):
            ClassifySoilOutput.model_validate({
                "soilType": "clay",
                "moistureLevel": "dry",
                "surfaceWater": "maybe",
            })


class TestInfrastructureSchemas:
    def test_empty_image_array(self):
        with pytest.raises(ValidationError):
            DetectInfrastructureInput.model_validate({"photoDataUri": []})

    def test_one_bad_image_rejects_all(self):
        with pytest.raises(ValidationError):
            DetectInfrastructureInput.model_validate(
                {"photoDataUri": [PNG_DATA_URI, MISSING_MARKER_URI]}
            )

    def test_geospatial_context_optional(self):
        inp = DetectInfrastructureInput.model_validate({"photoDataUri": [PNG_DATA_URI]})
        assert inp.geospatial_context is None

    def test_output_parses(self):
        out = DetectInfrastructureOutput.model_validate(INFRASTRUCTURE_RESPONSE)
        assert len(out.infrastructure_details) == 2
        assert out.infrastructure_details[1].proximity_to_geo_features is None

    def test_confidence_required(self):
        data = {k: v for k, v in INFRASTRUCTURE_RESPONSE.items() if k != "confidence"}
        with pytest.raises(ValidationError):
            DetectInfrastructureOutput.model_validate(data)

    def test_confidence_out_of_range(self):
        with pytest.raises(ValidationError):
            DetectInfrastructureOutput.model_validate({**INFRASTRUCTURE_RESPONSE, "confidence": 1.5})

    def test_schema_uses_wire_names(self):
        schema = DetectInfrastructureOutput.model_json_schema(by_alias=True)
        assert "infrastructureDetails" in schema["properties"]
        assert schema["properties"]["confidence"]["maximum"] == 1.0

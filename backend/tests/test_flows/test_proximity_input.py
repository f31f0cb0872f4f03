"""Tests for building stage-2 proximity input from typed stage-1 outputs."""

from __future__ import annotations

import pytest

from app.flows.errors import MissingPrerequisiteError
from app.flows.proximity import NO_INFRASTRUCTURE_TEXT, build_proximity_input
from app.models.flows import ClassifySoilOutput, DetectInfrastructureOutput
from tests.conftest import INFRASTRUCTURE_RESPONSE, SOIL_RESPONSE


@pytest.fixture
def infrastructure() -> DetectInfrastructureOutput:
    return DetectInfrastructureOutput.model_validate(INFRASTRUCTURE_RESPONSE)


@pytest.fixture
def soil() -> ClassifySoilOutput:
    return ClassifySoilOutput.model_validate(SOIL_RESPONSE)


def test_combines_both_outputs(infrastructure, soil):
    inp = build_proximity_input(infrastructure, soil, "Springfield, IL")
    assert inp.infrastructure == (
        "road (Paved two-lane road crossing the lower third), building (Farmstead in the upper right)"
    )
    assert inp.geographical_features.startswith("Soil: silty loam. Surface Water: Present.")
    assert "Erosion Risk: moderate." in inp.geographical_features
    assert inp.geographical_features.endswith("Context: Springfield, IL")


def test_no_surface_water(infrastructure):
    soil = ClassifySoilOutput.model_validate({**SOIL_RESPONSE, "surfaceWater": False, "erosionRisk": None})
    inp = build_proximity_input(infrastructure, soil)
    assert inp.geographical_features == "Soil: silty loam. Surface Water: Not present."


def test_nothing_detected(soil):
    empty = DetectInfrastructureOutput(infrastructure_details=[], confidence=0.3, reasoning="bare field")
    inp = build_proximity_input(empty, soil)
    assert inp.infrastructure == NO_INFRASTRUCTURE_TEXT


def test_missing_soil(infrastructure):
    with pytest.raises(MissingPrerequisiteError) as exc:
        build_proximity_input(infrastructure, None)
    assert exc.value.kind == "missing_prerequisite"


def test_missing_infrastructure(soil):
    with pytest.raises(MissingPrerequisiteError):
        build_proximity_input(None, soil)

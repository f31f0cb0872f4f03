"""Tests for result panels and the text report."""

from __future__ import annotations

import datetime as dt

from app.dashboard.display import (
    EMPTY_MESSAGE,
    LOADING_MESSAGE,
    NO_INFRASTRUCTURE_MESSAGE,
    NOT_RUN_MESSAGE,
    humanize_key,
    render_dashboard,
    render_infrastructure,
    render_results,
    render_value,
)
from app.dashboard.report import build_report
from app.dashboard.sessions import DashboardSession
from app.dashboard.state import DashboardState, FlowState, apply
from app.models.flows import ClassifySoilOutput, DetectInfrastructureOutput
from tests.conftest import INFRASTRUCTURE_RESPONSE, PNG_DATA_URI, SOIL_RESPONSE


class TestFormatting:
    def test_humanize_camel(self):
        assert humanize_key("vegetationType") == "Vegetation Type"
        assert humanize_key("proximityToGeoFeatures") == "Proximity To Geo Features"

    def test_humanize_snake(self):
        assert humanize_key("median_income") == "Median Income"

    def test_render_values(self):
        assert render_value(True) == "Yes"
        assert render_value(False) == "No"
        assert render_value(["a", "b"]) == "a, b"
        assert render_value(0.7) == "0.7"
        assert render_value({"k": 1}) == '{\n  "k": 1\n}'


class TestGenericPanel:
    def test_not_run(self):
        panel = render_results("soil", FlowState())
        assert panel.title == "Soil Assessment"
        assert panel.message == NOT_RUN_MESSAGE
        assert panel.rows == []

    def test_loading(self):
        panel = render_results("soil", FlowState().started())
        assert panel.message == LOADING_MESSAGE

    def test_error_hides_previous_result(self):
        soil = ClassifySoilOutput.model_validate(SOIL_RESPONSE)
        panel = render_results("soil", FlowState().succeeded(soil).failed("quota"))
        assert panel.error == "quota"
        assert panel.rows == []

    def test_rows_from_result(self):
        soil = ClassifySoilOutput.model_validate(SOIL_RESPONSE)
        panel = render_results("soil", FlowState().succeeded(soil))
        rows = {r.label: r.value for r in panel.rows}
        assert rows["Soil Type"] == "silty loam"
        assert rows["Surface Water"] == "Yes"
        assert rows["Confidence"] == "0.7"

    def test_none_fields_skipped(self):
        soil = ClassifySoilOutput.model_validate({**SOIL_RESPONSE, "erosionRisk": None})
        panel = render_results("soil", FlowState().succeeded(soil))
        assert "Erosion Risk" not in {r.label for r in panel.rows}

    def test_empty_dict(self):
        panel = render_results("custom", FlowState(), data={}, title="Custom")
        assert panel.message == EMPTY_MESSAGE


class TestInfrastructurePanel:
    def test_items(self):
        infra = DetectInfrastructureOutput.model_validate(INFRASTRUCTURE_RESPONSE)
        panel = render_infrastructure(FlowState().succeeded(infra))
        assert len(panel.items) == 2
        first = {r.label: r.value for r in panel.items[0]}
        assert first == {
            "Type": "road",
            "Location": "Paved two-lane road crossing the lower third",
            "Proximity": "Runs along the river bank",
        }
        assert [r.label for r in panel.items[1]] == ["Type", "Location"]
        assert {r.label for r in panel.rows} == {"Confidence", "Reasoning"}

    def test_nothing_detected(self):
        infra = DetectInfrastructureOutput(infrastructure_details=[], confidence=0.2, reasoning="empty")
        panel = render_infrastructure(FlowState().succeeded(infra))
        assert panel.message == NO_INFRASTRUCTURE_MESSAGE


def test_dashboard_has_four_panels():
    panels = render_dashboard(DashboardState())
    assert [p.flow for p in panels] == ["vegetation", "soil", "infrastructure", "proximity"]


def test_report_compiles_sections():
    session = DashboardSession(id="abc123")
    session.location_context = "Springfield, IL"
    session.add_keyframe(PNG_DATA_URI, "Keyframe 1")
    infra = DetectInfrastructureOutput.model_validate(INFRASTRUCTURE_RESPONSE)
    session.state = apply(session.state, "infrastructure", FlowState().succeeded(infra))
    session.state = apply(session.state, "proximity", FlowState().failed("Cannot run proximity analysis"))

    text = build_report(session, now=dt.datetime(2024, 5, 1, 12, 0, tzinfo=dt.timezone.utc))

    assert text.startswith("GEOVISUAL INSIGHTS REPORT\nGenerated: 2024-05-01T12:00:00+00:00")
    assert "Location Context: Springfield, IL" in text
    assert "Keyframe: Keyframe 1" in text
    assert "=== VEGETATION ANALYSIS ===\n" + NOT_RUN_MESSAGE in text
    assert "Infrastructure Item 1\n  Type: road" in text
    assert "=== PROXIMITY ANALYSIS ===\nError: Cannot run proximity analysis" in text

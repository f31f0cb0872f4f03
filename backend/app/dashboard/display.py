"""Render flow results as labelled rows for the dashboard panels."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from app.dashboard.state import DashboardState, FlowState, FlowStatus

PANEL_TITLES = {
    "vegetation": "Vegetation Analysis",
    "soil": "Soil Assessment",
    "infrastructure": "Infrastructure Detection",
    "proximity": "Proximity Analysis",
}

LOADING_MESSAGE = "Loading analysis..."
EMPTY_MESSAGE = "No data to display."
NOT_RUN_MESSAGE = "Analysis not yet run or no results."
NO_INFRASTRUCTURE_MESSAGE = "No infrastructure details found or analysis not yet run."

_CAMEL_BOUNDARY_RE = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class DisplayRow:
    label: str
    value: str


@dataclass
class DisplayPanel:
    flow: str
    title: str
    status: str
    message: str | None = None
    error: str | None = None
    rows: list[DisplayRow] = field(default_factory=list)
    # Infrastructure panel: one row group per detected item
    items: list[list[DisplayRow]] = field(default_factory=list)


def humanize_key(key: str) -> str:
    """``vegetationType`` → ``Vegetation Type``."""
    words = _CAMEL_BOUNDARY_RE.sub(" ", key).replace("_", " ").split()
    return " ".join(w[:1].upper() + w[1:] for w in words)


def render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, list):
        return ", ".join(render_value(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, indent=2)
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _as_wire_dict(data: BaseModel | dict[str, Any] | None) -> dict[str, Any] | None:
    if data is None:
        return None
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True, exclude_none=True)
    return {k: v for k, v in data.items() if v is not None}


def _panel_shell(flow: str, state: FlowState, title: str | None) -> DisplayPanel:
    panel = DisplayPanel(flow=flow, title=title or PANEL_TITLES.get(flow, humanize_key(flow)), status=state.status.value)
    if state.status is FlowStatus.LOADING:
        panel.message = LOADING_MESSAGE
    elif state.status is FlowStatus.ERROR:
        panel.error = state.error
    return panel


def render_results(
    flow: str,
    state: FlowState,
    data: BaseModel | dict[str, Any] | None = None,
    title: str | None = None,
) -> DisplayPanel:
    """Generic panel: one row per key/value in the result."""
    panel = _panel_shell(flow, state, title)
    if panel.message or panel.error:
        return panel

    wire = _as_wire_dict(data if data is not None else state.result)
    if wire is None:
        panel.message = NOT_RUN_MESSAGE
    elif not wire:
        panel.message = EMPTY_MESSAGE
    else:
        panel.rows = [DisplayRow(label=humanize_key(k), value=render_value(v)) for k, v in wire.items()]
    return panel


def render_infrastructure(
    state: FlowState,
    data: BaseModel | dict[str, Any] | None = None,
    title: str | None = None,
) -> DisplayPanel:
    """Infrastructure panel: one row group per detected item."""
    panel = _panel_shell("infrastructure", state, title)
    if panel.message or panel.error:
        return panel

    wire = _as_wire_dict(data if data is not None else state.result) or {}
    details = wire.get("infrastructureDetails") or []
    if not isinstance(details, list) or not details:
        panel.message = NO_INFRASTRUCTURE_MESSAGE
        return panel

    for item in details:
        rows = [
            DisplayRow(label="Type", value=str(item.get("type", ""))),
            DisplayRow(label="Location", value=str(item.get("locationDescription", ""))),
        ]
        if item.get("proximityToGeoFeatures"):
            rows.append(DisplayRow(label="Proximity", value=str(item["proximityToGeoFeatures"])))
        panel.items.append(rows)

    for key in ("confidence", "reasoning"):
        if key in wire:
            panel.rows.append(DisplayRow(label=humanize_key(key), value=render_value(wire[key])))
    return panel


def render_dashboard(state: DashboardState) -> list[DisplayPanel]:
    panels = []
    for flow in PANEL_TITLES:
        flow_state = state.get(flow)
        if flow == "infrastructure":
            panels.append(render_infrastructure(flow_state))
        else:
            panels.append(render_results(flow, flow_state))
    return panels

"""Session → plain-text analysis report."""

from __future__ import annotations

import datetime as dt

from app.dashboard.display import DisplayPanel, render_dashboard
from app.dashboard.sessions import DashboardSession


def _panel_lines(panel: DisplayPanel) -> list[str]:
    lines = [f"=== {panel.title.upper()} ==="]
    if panel.error:
        lines.append(f"Error: {panel.error}")
    elif panel.message:
        lines.append(panel.message)

    for i, item in enumerate(panel.items, start=1):
        lines.append(f"Infrastructure Item {i}")
        lines.extend(f"  {row.label}: {row.value}" for row in item)

    lines.extend(f"{row.label}: {row.value}" for row in panel.rows)
    return lines


def build_report(session: DashboardSession, now: dt.datetime | None = None) -> str:
    """Compile every panel of the session into one report."""
    now = now or dt.datetime.now(dt.timezone.utc)
    kf = session.selected_keyframe

    lines = [
        "GEOVISUAL INSIGHTS REPORT",
        f"Generated: {now.isoformat(timespec='seconds')}",
        f"Session: {session.id}",
        f"Location Context: {session.location_context or '(none)'}",
        f"Keyframe: {kf.description if kf else '(none selected)'}",
        "",
    ]

    if session.state.any_loading:
        lines.append("NOTE: some analyses are still running; their sections are incomplete.")
        lines.append("")

    for panel in render_dashboard(session.state):
        lines.extend(_panel_lines(panel))
        lines.append("")

    # Model-reported confidence is not calibrated
    lines.append("Confidence values are model-reported estimates, not calibrated probabilities.")
    return "\n".join(lines) + "\n"

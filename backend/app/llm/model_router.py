"""Flow → model id, through the tier table held in settings."""

from __future__ import annotations

from app.config import settings


def get_model_for_flow(flow: str) -> str:
    """Unknown flows and unknown tiers fall back to the cheap model."""
    models = {
        "cheap": settings.model_cheap,
        "mid": settings.model_mid,
        "frontier": settings.model_frontier,
    }
    return models.get(settings.flow_model_tiers.get(flow, "cheap"), settings.model_cheap)

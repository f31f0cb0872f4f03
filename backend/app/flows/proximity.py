"""Proximity analysis: stage 2 of the infrastructure pipeline.

Input is built from typed upstream outputs (infrastructure detection plus
soil classification), never from shared dashboard state.
"""

from __future__ import annotations

from typing import Any

from app.flows.errors import MissingPrerequisiteError
from app.flows.registry import define_flow
from app.llm.client import ModelInvoker
from app.models.flows import (
    AnalyzeProximityInput,
    AnalyzeProximityOutput,
    ClassifySoilOutput,
    DetectInfrastructureOutput,
)

proximity_flow = define_flow(
    name="proximity",
    input_model=AnalyzeProximityInput,
    output_model=AnalyzeProximityOutput,
    description="Reason about infrastructure relative to terrain, soil and water",
)

MISSING_PREREQUISITE_MESSAGE = (
    "Cannot run proximity analysis without infrastructure and soil data."
)
NO_INFRASTRUCTURE_TEXT = "No specific infrastructure detected."


def build_proximity_input(
    infrastructure: DetectInfrastructureOutput | None,
    soil: ClassifySoilOutput | None,
    location_context: str = "",
) -> AnalyzeProximityInput:
    """Combine stage-1 outputs into the proximity flow's input.

    Raises MissingPrerequisiteError when either upstream result is absent.
    """
    if infrastructure is None or soil is None:
        raise MissingPrerequisiteError(MISSING_PREREQUISITE_MESSAGE, flow="proximity")

    infra_desc = ", ".join(
        f"{d.type} ({d.location_description})" for d in infrastructure.infrastructure_details
    ) or NO_INFRASTRUCTURE_TEXT

    features = (
        f"Soil: {soil.soil_type}. "
        f"Surface Water: {'Present' if soil.surface_water else 'Not present'}."
    )
    if soil.erosion_risk:
        features += f" Erosion Risk: {soil.erosion_risk}."
    if location_context.strip():
        features += f" Context: {location_context.strip()}"

    return AnalyzeProximityInput(infrastructure=infra_desc, geographical_features=features)


async def analyze_proximity(
    data: AnalyzeProximityInput | dict[str, Any],
    *,
    invoker: ModelInvoker | None = None,
) -> AnalyzeProximityOutput:
    return await proximity_flow.invoke(data, invoker=invoker)

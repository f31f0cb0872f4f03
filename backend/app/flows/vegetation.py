"""Vegetation analysis: type, density and health from one keyframe and a location."""

from __future__ import annotations

from typing import Any

from app.flows.registry import define_flow
from app.llm.client import ModelInvoker
from app.models.flows import AnalyzeVegetationInput, AnalyzeVegetationOutput

vegetation_flow = define_flow(
    name="vegetation",
    input_model=AnalyzeVegetationInput,
    output_model=AnalyzeVegetationOutput,
    description="Vegetation type, density and health assessment",
)


async def analyze_vegetation(
    data: AnalyzeVegetationInput | dict[str, Any],
    *,
    invoker: ModelInvoker | None = None,
) -> AnalyzeVegetationOutput:
    return await vegetation_flow.invoke(data, invoker=invoker)

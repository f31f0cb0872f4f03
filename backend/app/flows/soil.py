"""Soil classification from one keyframe and its location context."""

from __future__ import annotations

from typing import Any

from app.flows.registry import define_flow
from app.llm.client import ModelInvoker
from app.models.flows import ClassifySoilInput, ClassifySoilOutput

soil_flow = define_flow(
    name="soil",
    input_model=ClassifySoilInput,
    output_model=ClassifySoilOutput,
    description="Soil type, moisture, surface water and erosion risk",
)


async def classify_soil(
    data: ClassifySoilInput | dict[str, Any],
    *,
    invoker: ModelInvoker | None = None,
) -> ClassifySoilOutput:
    return await soil_flow.invoke(data, invoker=invoker)

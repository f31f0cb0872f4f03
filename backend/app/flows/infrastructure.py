"""Infrastructure detection across one or more keyframe images.

High-resolution imagery matters here: small features (power lines, rail)
are the first to drop out of low-resolution frames.
"""

from __future__ import annotations

from typing import Any

from app.flows.registry import define_flow
from app.llm.client import ModelInvoker
from app.models.flows import DetectInfrastructureInput, DetectInfrastructureOutput

infrastructure_flow = define_flow(
    name="infrastructure",
    input_model=DetectInfrastructureInput,
    output_model=DetectInfrastructureOutput,
    description="Detect and classify infrastructure with an overall confidence",
)


async def detect_infrastructure(
    data: DetectInfrastructureInput | dict[str, Any],
    *,
    invoker: ModelInvoker | None = None,
) -> DetectInfrastructureOutput:
    return await infrastructure_flow.invoke(data, invoker=invoker)

"""Flow registry: every flow is a declaration registered by name.

Usage:
    vegetation_flow = define_flow(
        name="vegetation",
        input_model=AnalyzeVegetationInput,
        output_model=AnalyzeVegetationOutput,
    )

Adding a flow = one module with a ``define_flow`` call plus a prompt template
under the same name. Nothing else changes.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from app.flows.base import Flow

logger = logging.getLogger(__name__)


class FlowRegistry:
    """Registry of all declared flows."""

    def __init__(self) -> None:
        self._flows: dict[str, Flow] = {}

    def register(self, flow: Flow) -> None:
        if flow.name in self._flows:
            raise ValueError(f"Duplicate flow name: {flow.name}")
        self._flows[flow.name] = flow
        logger.debug("Registered flow %s", flow.name)

    def get(self, name: str) -> Flow:
        return self._flows[name]

    def __contains__(self, name: object) -> bool:
        return name in self._flows

    def all(self) -> list[Flow]:
        return sorted(self._flows.values(), key=lambda f: f.name)

    def names(self) -> list[str]:
        return sorted(self._flows)

    @property
    def count(self) -> int:
        return len(self._flows)


# Module-level singleton
_registry = FlowRegistry()


def get_registry() -> FlowRegistry:
    return _registry


def define_flow(
    *,
    name: str,
    input_model: type[BaseModel],
    output_model: type[BaseModel],
    description: str = "",
) -> Flow:
    """Declare a flow and register it."""
    declared = Flow(
        name=name,
        input_model=input_model,
        output_model=output_model,
        description=description,
    )
    _registry.register(declared)
    return declared

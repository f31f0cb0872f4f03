"""Dashboard orchestration: which flow runs when, and where its outcome lands.

Every flow failure is stored in that flow's error slot; nothing raises out of
a run except a missing prerequisite detected before any state changes.
Infrastructure detection and proximity analysis form a two-stage pipeline:
stage 2 receives stage 1's typed output plus a soil result passed in
explicitly.
"""

from __future__ import annotations

import asyncio
import logging

from app.dashboard.sessions import DashboardSession, KeyFrame
from app.dashboard.state import DashboardState
from app.flows.base import FlowFailure, FlowResult
from app.flows.errors import FlowError, MissingPrerequisiteError
from app.flows.infrastructure import infrastructure_flow
from app.flows.proximity import build_proximity_input, proximity_flow
from app.flows.soil import soil_flow
from app.flows.vegetation import vegetation_flow
from app.llm.client import ModelInvoker
from app.models.flows import ClassifySoilOutput, DetectInfrastructureOutput

logger = logging.getLogger(__name__)

_NEEDS_KEYFRAME_AND_LOCATION = "Please select a keyframe and provide location context."
_NEEDS_KEYFRAME = "Please select a keyframe."


class DashboardOrchestrator:
    """Runs flows for one session and records their outcomes."""

    def __init__(self, session: DashboardSession, invoker: ModelInvoker | None = None) -> None:
        self.session = session
        self.invoker = invoker

    # ── Prerequisites ──

    def _require_keyframe(self) -> KeyFrame:
        kf = self.session.selected_keyframe
        if kf is None:
            raise MissingPrerequisiteError(_NEEDS_KEYFRAME)
        return kf

    def _require_keyframe_and_location(self) -> KeyFrame:
        kf = self.session.selected_keyframe
        if kf is None or not self.session.location_context.strip():
            raise MissingPrerequisiteError(_NEEDS_KEYFRAME_AND_LOCATION)
        return kf

    def check_ready(self, action: str) -> None:
        """Raise MissingPrerequisiteError if ``action`` cannot start yet."""
        if action == "infrastructure":
            self._require_keyframe()
        elif action in ("vegetation", "soil", "all"):
            self._require_keyframe_and_location()
        else:
            raise ValueError(f"Unknown dashboard action: {action}")

    # ── State transitions ──

    def _start(self, *flows: str) -> None:
        for name in flows:
            self.session.dispatch(name, self.session.state.get(name).started())

    def _record(self, result: FlowResult) -> None:
        current = self.session.state.get(result.flow)
        if isinstance(result, FlowFailure):
            self.session.dispatch(result.flow, current.failed(result.error))
        else:
            self.session.dispatch(result.flow, current.succeeded(result.output))

    def _fail(self, flow: str, error: FlowError) -> None:
        logger.warning("Session %s: %s marked failed: %s", self.session.id, flow, error.message)
        self.session.dispatch(flow, self.session.state.get(flow).failed(error))

    # ── Single flows ──

    async def run_vegetation(self) -> DashboardState:
        kf = self._require_keyframe_and_location()
        self._start("vegetation")
        result = await vegetation_flow.run(
            {"photo_data_uri": kf.data_uri, "location": self.session.location_context},
            invoker=self.invoker,
        )
        self._record(result)
        return self.session.state

    async def run_soil(self) -> DashboardState:
        kf = self._require_keyframe_and_location()
        self._start("soil")
        result = await soil_flow.run(
            {"photo_data_uri": kf.data_uri, "location_context": self.session.location_context},
            invoker=self.invoker,
        )
        self._record(result)
        return self.session.state

    async def run_infrastructure(self) -> DashboardState:
        """Detect infrastructure, then run proximity with the soil result held now."""
        self._require_keyframe()
        soil = self.session.state.result("soil")
        infrastructure = await self._detect_infrastructure()
        if infrastructure is not None:
            await self._analyze_proximity(infrastructure, soil)
        return self.session.state

    async def run_all(self) -> DashboardState:
        """Vegetation, soil and infrastructure concurrently; proximity afterwards."""
        self._require_keyframe_and_location()
        _, _, infrastructure = await asyncio.gather(
            self.run_vegetation(),
            self.run_soil(),
            self._detect_infrastructure(),
        )
        if infrastructure is not None:
            # This run's soil result, or the last successful one if it failed
            await self._analyze_proximity(infrastructure, self.session.state.result("soil"))
        return self.session.state

    # ── Two-stage pipeline ──

    async def _detect_infrastructure(self) -> DetectInfrastructureOutput | None:
        kf = self._require_keyframe()
        self._start("infrastructure", "proximity")
        result = await infrastructure_flow.run(
            {"photo_data_uri": [kf.data_uri], "geospatial_context": self.session.geospatial_context},
            invoker=self.invoker,
        )
        if isinstance(result, FlowFailure):
            # Proximity cannot proceed; it carries the same error
            self._fail("infrastructure", result.error)
            self._fail("proximity", result.error)
            return None
        self._record(result)
        return result.output

    async def _analyze_proximity(
        self,
        infrastructure: DetectInfrastructureOutput,
        soil: ClassifySoilOutput | None,
    ) -> None:
        try:
            proximity_input = build_proximity_input(
                infrastructure, soil, self.session.location_context
            )
        except MissingPrerequisiteError as e:
            self._fail("proximity", e)
            return

        result = await proximity_flow.run(proximity_input, invoker=self.invoker)
        self._record(result)

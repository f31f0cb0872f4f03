"""Per-flow dashboard state and the reducer that updates it.

Each flow moves ``idle → loading → {success, error}`` and back to ``loading``
on every re-run. ``DashboardState`` is immutable: every transition returns a
new aggregate, last write wins per flow key.
"""

from __future__ import annotations

import enum
import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel

from app.flows.errors import FlowError

FLOW_NAMES = ("vegetation", "soil", "infrastructure", "proximity")


class FlowStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class FlowState:
    status: FlowStatus = FlowStatus.IDLE
    # Last successful output; kept through later loading/error states
    result: BaseModel | None = None
    error: str | None = None
    error_kind: str | None = None
    updated_at: float = 0.0

    @property
    def loading(self) -> bool:
        return self.status is FlowStatus.LOADING

    def started(self) -> FlowState:
        return replace(
            self, status=FlowStatus.LOADING, error=None, error_kind=None, updated_at=time.time()
        )

    def succeeded(self, output: BaseModel) -> FlowState:
        return replace(
            self,
            status=FlowStatus.SUCCESS,
            result=output,
            error=None,
            error_kind=None,
            updated_at=time.time(),
        )

    def failed(self, error: FlowError | str) -> FlowState:
        if isinstance(error, FlowError):
            message, kind = error.message, error.kind
        else:
            message, kind = error, "flow_error"
        return replace(
            self, status=FlowStatus.ERROR, error=message, error_kind=kind, updated_at=time.time()
        )


def _frozen(flows: Mapping[str, FlowState]) -> Mapping[str, FlowState]:
    return MappingProxyType(dict(flows))


@dataclass(frozen=True)
class DashboardState:
    flows: Mapping[str, FlowState] = field(
        default_factory=lambda: _frozen({name: FlowState() for name in FLOW_NAMES})
    )
    version: int = 0

    def get(self, flow: str) -> FlowState:
        return self.flows.get(flow, FlowState())

    def result(self, flow: str) -> Any:
        return self.get(flow).result

    @property
    def results(self) -> dict[str, BaseModel | None]:
        return {name: s.result for name, s in self.flows.items()}

    @property
    def loading(self) -> dict[str, bool]:
        return {name: s.loading for name, s in self.flows.items()}

    @property
    def errors(self) -> dict[str, str | None]:
        return {name: s.error for name, s in self.flows.items()}

    @property
    def any_loading(self) -> bool:
        return any(s.loading for s in self.flows.values())


def apply(state: DashboardState, flow: str, new: FlowState) -> DashboardState:
    """Return a new aggregate with ``flow`` replaced by ``new``."""
    flows = dict(state.flows)
    flows[flow] = new
    return DashboardState(flows=_frozen(flows), version=state.version + 1)

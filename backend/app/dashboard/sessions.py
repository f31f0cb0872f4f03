"""In-memory dashboard sessions.

A session holds the uploaded keyframes, the location context and the current
``DashboardState``. Nothing is persisted; sessions disappear with the process.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from app.dashboard.state import DashboardState, FlowState, apply

logger = logging.getLogger(__name__)

StateListener = Callable[[str, FlowState], None]


@dataclass
class KeyFrame:
    id: str
    data_uri: str
    description: str = ""


@dataclass
class DashboardSession:
    id: str
    state: DashboardState = field(default_factory=DashboardState)
    keyframes: list[KeyFrame] = field(default_factory=list)
    selected_keyframe_id: str | None = None
    location_context: str = ""
    geospatial_context: str | None = None
    _listeners: list[StateListener] = field(default_factory=list, repr=False)

    @property
    def selected_keyframe(self) -> KeyFrame | None:
        for kf in self.keyframes:
            if kf.id == self.selected_keyframe_id:
                return kf
        return None

    def add_keyframe(self, data_uri: str, description: str = "") -> KeyFrame:
        kf_id = f"kf-{len(self.keyframes) + 1}"
        kf = KeyFrame(id=kf_id, data_uri=data_uri, description=description or f"Keyframe {len(self.keyframes) + 1}")
        self.keyframes.append(kf)
        if self.selected_keyframe_id is None:
            self.selected_keyframe_id = kf.id
        return kf

    def select_keyframe(self, keyframe_id: str) -> KeyFrame:
        for kf in self.keyframes:
            if kf.id == keyframe_id:
                self.selected_keyframe_id = kf.id
                return kf
        raise KeyError(keyframe_id)

    def dispatch(self, flow: str, new: FlowState) -> DashboardState:
        """Replace one flow's state and notify listeners."""
        self.state = apply(self.state, flow, new)
        for listener in list(self._listeners):
            listener(flow, new)
        return self.state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe


class SessionStore:
    """Process-local session map."""

    def __init__(self) -> None:
        self._sessions: dict[str, DashboardSession] = {}

    def create(self) -> DashboardSession:
        session = DashboardSession(id=uuid.uuid4().hex[:12])
        self._sessions[session.id] = session
        logger.info("Created dashboard session %s", session.id)
        return session

    def get(self, session_id: str) -> DashboardSession:
        return self._sessions[session_id]

    def delete(self, session_id: str) -> None:
        del self._sessions[session_id]
        logger.info("Deleted dashboard session %s", session_id)

    @property
    def count(self) -> int:
        return len(self._sessions)


_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get or create the singleton session store."""
    global _store
    if _store is None:
        _store = SessionStore()
    return _store

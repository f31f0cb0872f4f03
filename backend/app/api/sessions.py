"""Dashboard session endpoints under /api/sessions."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, StreamingResponse

from app.api.errors import flow_http_exception, not_found
from app.dashboard.display import DisplayPanel, render_dashboard
from app.dashboard.orchestrator import DashboardOrchestrator
from app.dashboard.report import build_report
from app.dashboard.sessions import DashboardSession, SessionStore
from app.dashboard.state import FlowState
from app.dependencies import get_invoker, get_sessions
from app.flows.errors import MissingPrerequisiteError
from app.llm.client import ModelInvoker
from app.models.requests import AddKeyframesRequest, ContextRequest
from app.models.responses import (
    DisplayPanelResponse,
    DisplayResponse,
    DisplayRowResponse,
    FlowStateResponse,
    KeyFrameResponse,
    SessionResponse,
)

router = APIRouter(prefix="/sessions")
logger = logging.getLogger(__name__)

_RUN_ACTIONS = ("vegetation", "soil", "infrastructure", "all")

_SENTINEL = object()  # marks end of queue


def _flow_state_response(state: FlowState) -> FlowStateResponse:
    return FlowStateResponse(
        status=state.status.value,
        result=state.result.model_dump(by_alias=True) if state.result is not None else None,
        error=state.error,
        error_kind=state.error_kind,
    )


def _session_response(session: DashboardSession) -> SessionResponse:
    state = session.state
    return SessionResponse(
        id=session.id,
        location_context=session.location_context,
        geospatial_context=session.geospatial_context,
        keyframes=[
            KeyFrameResponse(id=kf.id, description=kf.description, selected=kf.id == session.selected_keyframe_id)
            for kf in session.keyframes
        ],
        selected_keyframe_id=session.selected_keyframe_id,
        flows={name: _flow_state_response(s) for name, s in state.flows.items()},
        loading=state.loading,
        errors=state.errors,
        version=state.version,
    )


def _panel_response(panel: DisplayPanel) -> DisplayPanelResponse:
    return DisplayPanelResponse(
        flow=panel.flow,
        title=panel.title,
        status=panel.status,
        message=panel.message,
        error=panel.error,
        rows=[DisplayRowResponse(label=r.label, value=r.value) for r in panel.rows],
        items=[[DisplayRowResponse(label=r.label, value=r.value) for r in item] for item in panel.items],
    )


def _lookup(store: SessionStore, session_id: str) -> DashboardSession:
    try:
        return store.get(session_id)
    except KeyError:
        raise not_found("session", session_id) from None


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(store: SessionStore = Depends(get_sessions)) -> SessionResponse:
    return _session_response(store.create())


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, store: SessionStore = Depends(get_sessions)) -> SessionResponse:
    return _session_response(_lookup(store, session_id))


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_sessions)) -> None:
    _lookup(store, session_id)
    store.delete(session_id)


@router.put("/{session_id}/context", response_model=SessionResponse)
async def set_context(
    session_id: str,
    req: ContextRequest,
    store: SessionStore = Depends(get_sessions),
) -> SessionResponse:
    session = _lookup(store, session_id)
    session.location_context = req.location_context
    session.geospatial_context = req.geospatial_context
    return _session_response(session)


@router.post("/{session_id}/keyframes", response_model=SessionResponse)
async def add_keyframes(
    session_id: str,
    req: AddKeyframesRequest,
    store: SessionStore = Depends(get_sessions),
) -> SessionResponse:
    session = _lookup(store, session_id)
    for upload in req.keyframes:
        session.add_keyframe(upload.data_uri, upload.description)
    logger.info("Session %s: %d keyframes added", session.id, len(req.keyframes))
    return _session_response(session)


@router.post("/{session_id}/keyframes/{keyframe_id}/select", response_model=SessionResponse)
async def select_keyframe(
    session_id: str,
    keyframe_id: str,
    store: SessionStore = Depends(get_sessions),
) -> SessionResponse:
    session = _lookup(store, session_id)
    try:
        session.select_keyframe(keyframe_id)
    except KeyError:
        raise not_found("keyframe", keyframe_id) from None
    return _session_response(session)


@router.post("/{session_id}/run/{action}", response_model=SessionResponse)
async def run(
    session_id: str,
    action: str,
    store: SessionStore = Depends(get_sessions),
    invoker: ModelInvoker = Depends(get_invoker),
) -> SessionResponse:
    session = _lookup(store, session_id)
    if action not in _RUN_ACTIONS:
        raise not_found("action", action)

    orchestrator = DashboardOrchestrator(session, invoker=invoker)
    try:
        orchestrator.check_ready(action)
        if action == "vegetation":
            await orchestrator.run_vegetation()
        elif action == "soil":
            await orchestrator.run_soil()
        elif action == "infrastructure":
            await orchestrator.run_infrastructure()
        else:
            await orchestrator.run_all()
    except MissingPrerequisiteError as e:
        raise flow_http_exception(e) from None

    return _session_response(session)


async def _stream_run_all(orchestrator: DashboardOrchestrator) -> AsyncGenerator[str, None]:
    """Run every flow, yielding an SSE event for each state transition."""
    queue: asyncio.Queue = asyncio.Queue()

    def _on_change(flow: str, state: FlowState) -> None:
        queue.put_nowait((flow, state))

    def _on_done(finished: asyncio.Task) -> None:
        # Retrieve the outcome even when the client has already gone away
        if not finished.cancelled() and finished.exception() is not None:
            logger.error("Session %s: streamed run failed: %s", orchestrator.session.id, finished.exception())
        queue.put_nowait(_SENTINEL)

    unsubscribe = orchestrator.session.subscribe(_on_change)
    task = asyncio.create_task(orchestrator.run_all())
    task.add_done_callback(_on_done)

    try:
        while True:
            item = await queue.get()
            if item is _SENTINEL:
                break
            flow, state = item
            payload = {"type": "state", "flow": flow, **_flow_state_response(state).model_dump(by_alias=True)}
            yield f"event: state\ndata: {json.dumps(payload)}\n\n"
    finally:
        unsubscribe()
        if not task.done():
            logger.info("Session %s: stream closed early, cancelling run", orchestrator.session.id)
            task.cancel()

    if task.cancelled():
        return
    if task.exception() is not None:
        data = json.dumps({"type": "error", "message": str(task.exception())})
        yield f"event: error\ndata: {data}\n\n"

    yield f"event: done\ndata: {json.dumps({'type': 'done'})}\n\n"


@router.post("/{session_id}/run/all/stream")
async def run_all_stream(
    session_id: str,
    store: SessionStore = Depends(get_sessions),
    invoker: ModelInvoker = Depends(get_invoker),
) -> StreamingResponse:
    session = _lookup(store, session_id)
    orchestrator = DashboardOrchestrator(session, invoker=invoker)
    try:
        orchestrator.check_ready("all")
    except MissingPrerequisiteError as e:
        raise flow_http_exception(e) from None

    return StreamingResponse(
        _stream_run_all(orchestrator),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.get("/{session_id}/display", response_model=DisplayResponse)
async def display(session_id: str, store: SessionStore = Depends(get_sessions)) -> DisplayResponse:
    session = _lookup(store, session_id)
    return DisplayResponse(panels=[_panel_response(p) for p in render_dashboard(session.state)])


@router.get("/{session_id}/report", response_class=PlainTextResponse)
async def report(session_id: str, store: SessionStore = Depends(get_sessions)) -> str:
    return build_report(_lookup(store, session_id))

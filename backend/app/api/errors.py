"""FlowError → HTTPException mapping shared by the routers."""

from __future__ import annotations

from fastapi import HTTPException

from app.flows.errors import FlowError

_STATUS_BY_KIND = {
    "input_validation": 422,
    "missing_prerequisite": 400,
    "model_invocation": 502,
    "output_schema": 502,
}


def flow_http_exception(error: FlowError) -> HTTPException:
    return HTTPException(status_code=_STATUS_BY_KIND.get(error.kind, 500), detail=error.to_dict())


def not_found(what: str, key: str) -> HTTPException:
    return HTTPException(status_code=404, detail={"kind": "not_found", "message": f"Unknown {what}: {key}"})

"""Direct flow invocation: GET /api/flows, POST /api/flows/{name}."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from app.api.errors import flow_http_exception, not_found
from app.dependencies import get_invoker
from app.flows.base import FlowFailure
from app.flows.registry import get_registry
from app.llm.client import ModelInvoker
from app.models.responses import FlowInfo

router = APIRouter(prefix="/flows")


@router.get("", response_model=list[FlowInfo])
async def list_flows() -> list[FlowInfo]:
    return [
        FlowInfo(
            name=f.name,
            description=f.description,
            input_schema=f.input_model.model_json_schema(by_alias=True),
            output_schema=f.output_model.model_json_schema(by_alias=True),
        )
        for f in get_registry().all()
    ]


@router.post("/{name}")
async def run_flow(
    name: str,
    body: dict[str, Any] = Body(...),
    invoker: ModelInvoker = Depends(get_invoker),
) -> dict[str, Any]:
    registry = get_registry()
    if name not in registry:
        raise not_found("flow", name)

    result = await registry.get(name).run(body, invoker=invoker)
    if isinstance(result, FlowFailure):
        raise flow_http_exception(result.error)
    return result.output.model_dump(by_alias=True)

"""LangChain ChatAnthropic wrapper."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from app.config import settings
from app.flows.errors import ModelInvocationError
from app.llm.model_router import get_model_for_flow
from app.llm.rendering import ContentBlock

logger = logging.getLogger(__name__)

# (flow name, rendered content) -> raw model text
ModelInvoker = Callable[[str, list[ContentBlock]], Awaitable[str]]


async def invoke_model(flow: str, content: list[ContentBlock]) -> str:
    """Send rendered prompt content to the model routed for ``flow``."""
    if not settings.anthropic_api_key:
        raise ModelInvocationError(
            "LLM not configured: set ANTHROPIC_API_KEY in .env", flow=flow
        )

    from langchain_anthropic import ChatAnthropic
    from langchain_core.messages import HumanMessage

    model_id = get_model_for_flow(flow)
    llm = ChatAnthropic(
        model=model_id,
        api_key=settings.anthropic_api_key,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
    )

    logger.debug("Invoking %s for flow %s (%d content blocks)", model_id, flow, len(content))
    try:
        response = await llm.ainvoke([HumanMessage(content=content)])
    except Exception as e:
        raise ModelInvocationError(f"Model call failed: {e}", flow=flow) from e

    return _response_text(response.content)


def _response_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


def get_model_invoker() -> ModelInvoker:
    return invoke_model

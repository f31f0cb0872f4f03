"""Generic flow runner: validate input → render prompt → invoke model → validate output.

``Flow.run`` never raises for expected failures; it returns a tagged
``FlowSuccess`` / ``FlowFailure`` so callers can branch on the outcome.
``Flow.invoke`` unwraps the same result and raises the ``FlowError``.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, ClassVar, Generic, TypeVar, Union

from pydantic import BaseModel, ValidationError

from app.flows.errors import FlowError, InputValidationError, ModelInvocationError, OutputSchemaError
from app.llm.client import ModelInvoker, get_model_invoker
from app.llm.parsing import extract_json
from app.llm.prompts import get_prompt_template, output_instructions
from app.llm.rendering import ContentBlock, append_text, count_images, render_prompt

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


# ── Tagged results ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    error: FlowError


@dataclass(frozen=True)
class FlowSuccess(Generic[T]):
    flow: str
    output: T
    elapsed_ms: float = 0.0

    ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.output


@dataclass(frozen=True)
class FlowFailure:
    flow: str
    error: FlowError
    elapsed_ms: float = 0.0

    ok: ClassVar[bool] = False

    @property
    def kind(self) -> str:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message

    def unwrap(self):
        raise self.error


FlowResult = Union[FlowSuccess[Any], FlowFailure]


def format_validation_error(exc: ValidationError) -> str:
    """One line per failing field: ``loc: message``."""
    lines = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "(root)"
        lines.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return "; ".join(lines)


def validate_or_fail(
    schema: type[T],
    data: Any,
    *,
    error_cls: type[FlowError] = InputValidationError,
    flow: str | None = None,
) -> Valid[T] | Invalid:
    """Validate ``data`` against ``schema``; all-or-nothing."""
    try:
        return Valid(schema.model_validate(data))
    except ValidationError as e:
        return Invalid(error_cls(format_validation_error(e), flow=flow))


# ── Flow ──────────────────────────────────────────────────────────────────


@dataclass
class Flow(Generic[T]):
    """A declared flow: schemas plus the prompt template registered under ``name``."""

    name: str
    input_model: type[BaseModel]
    output_model: type[T]
    description: str = ""

    @property
    def template(self) -> str:
        return get_prompt_template(self.name)

    def output_schema_json(self) -> str:
        return json.dumps(self.output_model.model_json_schema(by_alias=True), indent=2)

    def render(self, validated_input: BaseModel) -> list[ContentBlock]:
        content = render_prompt(self.template, validated_input)
        return append_text(content, output_instructions(self.output_schema_json()))

    async def run(self, data: Any, *, invoker: ModelInvoker | None = None) -> FlowResult:
        start = time.perf_counter()

        checked = validate_or_fail(
            self.input_model, data, error_cls=InputValidationError, flow=self.name
        )
        if isinstance(checked, Invalid):
            return self._fail(checked.error, start)

        content = self.render(checked.value)
        logger.debug("Flow %s rendered %d blocks (%d images)", self.name, len(content), count_images(content))
        invoker = invoker or get_model_invoker()

        try:
            raw = await invoker(self.name, content)
        except ModelInvocationError as e:
            return self._fail(e, start)
        except Exception as e:
            return self._fail(ModelInvocationError(f"Model call failed: {e}", flow=self.name), start)

        try:
            payload = extract_json(raw)
        except ValueError as e:
            return self._fail(OutputSchemaError(str(e), flow=self.name), start)

        checked_out = validate_or_fail(
            self.output_model, payload, error_cls=OutputSchemaError, flow=self.name
        )
        if isinstance(checked_out, Invalid):
            return self._fail(checked_out.error, start)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Flow %s completed in %.0fms", self.name, elapsed)
        return FlowSuccess(flow=self.name, output=checked_out.value, elapsed_ms=round(elapsed, 1))

    async def invoke(self, data: Any, *, invoker: ModelInvoker | None = None) -> T:
        result = await self.run(data, invoker=invoker)
        return result.unwrap()

    def _fail(self, error: FlowError, start: float) -> FlowFailure:
        elapsed = (time.perf_counter() - start) * 1000
        logger.warning("Flow %s FAILED (%s): %s", self.name, error.kind, error.message)
        return FlowFailure(flow=self.name, error=error, elapsed_ms=round(elapsed, 1))

"""Flow error kinds.

Every failure a flow can produce is one of these. ``kind`` is the stable
machine-readable tag carried into dashboard state and API error bodies;
``str(err)`` is the human-readable message shown to the user.
"""

from __future__ import annotations


class FlowError(Exception):
    kind = "flow_error"

    def __init__(self, message: str, *, flow: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.flow = flow

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class InputValidationError(FlowError):
    """Input is missing required fields or violates a shape constraint."""

    kind = "input_validation"


class ModelInvocationError(FlowError):
    """The external model call failed (network, quota, auth, timeout)."""

    kind = "model_invocation"


class OutputSchemaError(FlowError):
    """The model response could not be parsed against the output schema."""

    kind = "output_schema"


class MissingPrerequisiteError(FlowError):
    """A dependent flow was requested without the upstream data it needs."""

    kind = "missing_prerequisite"

"""Exceptions raised while compiling, synthesizing and running rule scripts."""

import asyncio

from span_rules.models.report import FailureKind

# Never converted into failure reports when raised from user code
PASSTHROUGH_ERRORS = (KeyboardInterrupt, asyncio.CancelledError)


def describe_error(err: BaseException) -> str:
    """Message of an exception raised by user code, falling back to its type."""
    try:
        return str(err) or type(err).__name__
    except PASSTHROUGH_ERRORS:
        raise
    except BaseException:
        return type(err).__name__


class NotReadyError(Exception):
    """Raised when a source buffer is used before it is registered."""


class SaveNotAllowedError(Exception):
    """Raised when saving without a passing test for the current source."""


class RuleScriptError(Exception):
    """Base for failures caused by the user's script.

    These never reach the UI as exceptions: the pipeline turns them into
    failure reports.
    """

    kind: FailureKind = "evaluation-error"

    def __init__(
        self,
        message: str,
        *,
        description: str | None = None,
        record_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.description = description
        self.record_id = record_id


class SynthesisError(RuleScriptError):
    """Raised when the export cannot be extracted from compiled code."""

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        *,
        description: str | None = None,
    ) -> None:
        super().__init__(message, description=description)
        self.kind = kind


class EvaluationError(RuleScriptError):
    """Raised when the script raises at load time or during invocation."""

    kind: FailureKind = "evaluation-error"


class ContractViolationError(RuleScriptError):
    """Raised when the rule function returns a value of the wrong shape."""

    kind: FailureKind = "contract-violation"

    def __init__(
        self,
        message: str,
        *,
        description: str | None = None,
        record_id: str | None = None,
        actual_type: str,
    ) -> None:
        super().__init__(message, description=description, record_id=record_id)
        self.actual_type = actual_type

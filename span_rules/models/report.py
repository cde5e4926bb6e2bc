"""Models for rule test results."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from span_rules.models.script import CompiledArtifact, Diagnostic
from span_rules.models.trace import Span, Trace

FailureKind = Literal[
    "compile-diagnostics",
    "missing-symbol",
    "not-callable",
    "evaluation-error",
    "contract-violation",
]

RuleFunction = Callable[[Span, Trace], Any]


@dataclass(frozen=True, kw_only=True)
class DomainRecord:
    """A span together with the trace it belongs to."""

    span: Span
    trace: Trace

    @property
    def record_id(self) -> str:
        return f"{self.trace.id}/{self.span.id}"


@dataclass(frozen=True, kw_only=True)
class SampleOutcome:
    """Value returned by the rule function for one record."""

    record: DomainRecord
    value: Any


@dataclass(frozen=True, kw_only=True)
class Failure:
    """Terminal result of a test run that did not pass.

    Contains the message and remediation text exactly as they should be shown
    to the user.
    """

    __test__ = False

    kind: FailureKind
    message: str
    description: str | None = None
    revision: int = 0
    diagnostics: Sequence[Diagnostic] = ()
    record_id: str | None = None
    actual_type: str | None = None


@dataclass(frozen=True, kw_only=True)
class Success:
    """Terminal result of a test run that passed."""

    __test__ = False

    artifact: CompiledArtifact
    function: RuleFunction
    outcomes: Sequence[SampleOutcome]
    samples: Sequence[SampleOutcome] = ()
    revision: int = 0

    @property
    def is_untested(self) -> bool:
        """True when no span was available to exercise the rule."""
        return not self.outcomes


TestReport = Failure | Success

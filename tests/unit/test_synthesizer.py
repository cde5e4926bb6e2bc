"""Tests for extracting rule functions from compiled code."""

import pytest

from span_rules.errors import EvaluationError, SynthesisError
from span_rules.rules import SPAN_GROUPING, SPAN_LABELING
from span_rules.synthesizer import evaluate, synthesize


def test_synthesize_returns_function() -> None:
    """Returns the export named by the rule kind."""
    function = synthesize(
        "def groupBy(span, trace):\n    return ('a', 'b')\n", SPAN_GROUPING
    )

    assert function(None, None) == ("a", "b")


def test_synthesize_missing_symbol() -> None:
    """Missing export is reported with the fixed remediation text."""
    with pytest.raises(SynthesisError) as exc_info:
        synthesize("def group_by(span, trace):\n    return ('a', 'b')\n", SPAN_GROUPING)

    assert exc_info.value.kind == "missing-symbol"
    assert exc_info.value.message == 'Unexpected "groupBy" function'
    assert exc_info.value.description == SPAN_GROUPING.remediation


def test_synthesize_not_callable() -> None:
    """A non-callable binding with the export name is rejected."""
    with pytest.raises(SynthesisError) as exc_info:
        synthesize("groupBy = 42\n", SPAN_GROUPING)

    assert exc_info.value.kind == "not-callable"
    assert exc_info.value.description == SPAN_GROUPING.remediation


def test_synthesize_uses_kind_export_name() -> None:
    """Each rule kind looks up its own export."""
    function = synthesize("def makeLabel(span, trace):\n    return 'x'\n", SPAN_LABELING)

    assert function(None, None) == "x"


def test_evaluate_wraps_top_level_errors() -> None:
    """Errors raised by top-level statements keep their message verbatim."""
    with pytest.raises(EvaluationError) as exc_info:
        evaluate("raise ValueError('broken setup')\n")

    assert exc_info.value.kind == "evaluation-error"
    assert exc_info.value.message == "broken setup"


def test_evaluate_wraps_system_exit() -> None:
    """Calling exit() in a script does not stop the host."""
    with pytest.raises(EvaluationError):
        evaluate("raise SystemExit(3)\n")


def test_evaluate_uses_fresh_namespace() -> None:
    """Bindings from one evaluation are not visible in the next."""
    evaluate("leaked = 1\n")

    with pytest.raises(EvaluationError, match="leaked"):
        evaluate("print(leaked)\n")

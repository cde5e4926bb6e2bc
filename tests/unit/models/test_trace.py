"""Tests for span and trace models."""

import pytest
from pydantic import ValidationError

from span_rules.models.trace import Span, Trace
from span_rules.testing.factories import SpanFactory, build_span, build_trace


def test_span_accepts_field_names_and_aliases() -> None:
    """Spans can be built with snake_case names or camelCase aliases."""
    by_name = Span(
        id="s1", trace_id="t1", operation_name="op", start_time=1, finish_time=5
    )
    by_alias = Span.model_validate(
        {
            "id": "s1",
            "traceId": "t1",
            "operationName": "op",
            "startTime": 1,
            "finishTime": 5,
        }
    )

    assert by_name == by_alias
    assert by_name.duration == 4


def test_span_is_frozen() -> None:
    """Rules cannot modify spans."""
    span = SpanFactory.build()

    with pytest.raises(ValidationError):
        span.operation_name = "changed"  # type: ignore[misc]


def test_trace_bounds() -> None:
    """Trace bounds span the earliest start and the latest finish."""
    first = build_span("t1-0", "t1", start_time=10, finish_time=30)
    second = build_span("t1-1", "t1", start_time=20, finish_time=50)

    trace = Trace(id="t1", spans=[first, second])

    assert trace.start_time == 10
    assert trace.finish_time == 50
    assert trace.duration == 40


def test_build_trace_without_process() -> None:
    """None service names give spans without a process."""
    trace = build_trace("t1", "checkout", None)

    assert trace.spans[0].process is not None
    assert trace.spans[0].process.service_name == "checkout"
    assert trace.spans[1].process is None

"""Tests for the in-memory trace stage."""

from span_rules.stage import Stage
from span_rules.testing.factories import TraceFactory, build_trace


def test_add_trace_keeps_insertion_order(stage: Stage) -> None:
    """Traces are enumerated in the order they were added."""
    stage.add_trace(build_trace("t2", "a"))
    stage.add_trace(build_trace("t1", "b"))

    assert [trace.id for trace in stage.get_all_traces()] == ["t2", "t1"]


def test_add_trace_ignores_duplicates(stage: Stage) -> None:
    """Adding a trace id twice keeps the first trace."""
    first = build_trace("t1", "a")
    stage.add_trace(first)
    stage.add_trace(build_trace("t1", "b", "c"))

    assert stage.get_trace("t1") is first
    assert len(stage.get_all_traces()) == 1


def test_remove_trace(stage: Stage) -> None:
    """Removed traces are no longer enumerated; unknown ids are ignored."""
    trace = TraceFactory.build()
    stage.add_trace(trace)

    stage.remove_trace(trace.id)
    stage.remove_trace("unknown")

    assert stage.get_trace(trace.id) is None
    assert stage.get_all_traces() == []

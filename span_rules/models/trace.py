"""Models for spans and traces loaded into the stage."""

from collections.abc import Mapping, Sequence
from typing import Any, Literal

from pydantic import Field

from span_rules.models.base import Model


class SpanReference(Model):
    """Reference from one span to another."""

    type: Literal["childOf", "followsFrom"] = Field(..., description="Reference type")
    trace_id: str = Field(..., description="Trace of the referenced span")
    span_id: str = Field(..., description="Referenced span")


class SpanLog(Model):
    """Timestamped log entry attached to a span."""

    timestamp: int = Field(..., description="Microseconds since epoch")
    fields: Mapping[str, Any] = Field(default_factory=dict)


class SpanProcess(Model):
    """Jaeger process description."""

    service_name: str | None = Field(default=None, description="Service name")
    tags: Mapping[str, Any] = Field(default_factory=dict)


class Endpoint(Model):
    """Zipkin endpoint description."""

    service_name: str | None = Field(default=None, description="Service name")
    ipv4: str | None = None
    port: int | None = None


class Span(Model):
    """One timed operation within a trace."""

    id: str = Field(..., description="Span identifier")
    trace_id: str = Field(..., description="Identifier of the owning trace")
    operation_name: str = Field(..., description="Operation name")
    start_time: int = Field(..., description="Start, microseconds since epoch")
    finish_time: int = Field(..., description="Finish, microseconds since epoch")
    references: Sequence[SpanReference] = Field(default_factory=list)
    tags: Mapping[str, Any] = Field(default_factory=dict)
    logs: Sequence[SpanLog] = Field(default_factory=list)
    process: SpanProcess | None = Field(default=None, description="Jaeger process")
    local_endpoint: Endpoint | None = Field(
        default=None, description="Zipkin local endpoint"
    )
    remote_endpoint: Endpoint | None = Field(
        default=None, description="Zipkin remote endpoint"
    )

    @property
    def duration(self) -> int:
        """Span duration in microseconds."""
        return self.finish_time - self.start_time


class Trace(Model):
    """Ordered collection of spans for one end-to-end request."""

    id: str = Field(..., description="Trace identifier")
    spans: Sequence[Span] = Field(default_factory=list)

    @property
    def start_time(self) -> int | None:
        """Earliest span start, None for an empty trace."""
        return min((span.start_time for span in self.spans), default=None)

    @property
    def finish_time(self) -> int | None:
        """Latest span finish, None for an empty trace."""
        return max((span.finish_time for span in self.spans), default=None)

    @property
    def duration(self) -> int:
        """Trace duration in microseconds."""
        if self.start_time is None or self.finish_time is None:
            return 0
        return self.finish_time - self.start_time

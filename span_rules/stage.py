"""In-memory collection of the traces currently loaded for inspection."""

import logging
from collections.abc import MutableMapping, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from span_rules.models.trace import Trace

log = logging.getLogger(__name__)


class TraceSource(Protocol):
    """Protocol for anything that can enumerate the loaded traces."""

    def get_all_traces(self) -> Sequence[Trace]:
        """Return loaded traces in display order."""


@dataclass(kw_only=True)
class Stage:
    """Traces added by the user, kept in insertion order."""

    _traces: MutableMapping[str, Trace] = field(default_factory=dict, repr=False)

    def add_trace(self, trace: Trace) -> None:
        if trace.id in self._traces:
            log.debug("Trace %s is already on the stage", trace.id)
            return
        self._traces[trace.id] = trace

    def remove_trace(self, trace_id: str) -> None:
        self._traces.pop(trace_id, None)

    def get_trace(self, trace_id: str) -> Trace | None:
        return self._traces.get(trace_id)

    def get_all_traces(self) -> Sequence[Trace]:
        return list(self._traces.values())

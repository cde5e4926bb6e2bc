"""Load traces from JSON exports."""

import asyncio
import json
import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter

from span_rules.models.trace import Trace

log = logging.getLogger(__name__)

_traces_adapter = TypeAdapter(list[Trace])


def parse_traces(content: str) -> Sequence[Trace]:
    """Parse a JSON array of traces, or a single trace object.

    Raises:
        pydantic.ValidationError: If the content does not describe traces

    """
    data = json.loads(content)
    if isinstance(data, dict):
        data = [data]
    return _traces_adapter.validate_python(data)


async def load_traces(path: Path) -> Sequence[Trace]:
    """Load traces from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the file does not describe traces

    """
    content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    traces = parse_traces(content)
    log.info("Loaded %d trace(s) from %s", len(traces), path)
    return traces

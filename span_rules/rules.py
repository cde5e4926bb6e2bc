"""Rule kinds: the export each script must provide and what it must return."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any


def describe_type(value: Any) -> str:
    """Describe the runtime type of a value for error messages.

    Containers are described with their element types, e.g. ``tuple[str, int]``.
    """
    if isinstance(value, tuple | list):
        inner = ", ".join(type(item).__name__ for item in value)
        return f"{type(value).__name__}[{inner}]"
    return type(value).__name__


def is_string_pair(value: Any) -> bool:
    return (
        isinstance(value, tuple | list)
        and len(value) == 2
        and all(isinstance(item, str) for item in value)
    )


def is_string(value: Any) -> bool:
    return isinstance(value, str)


@dataclass(frozen=True, kw_only=True)
class RuleKind:
    """Contract shared by every rule of one type."""

    key: str
    title: str
    export_name: str
    return_shape: str
    check_return: Callable[[Any], bool]
    template: str

    @property
    def remediation(self) -> str:
        """Fixed text telling the user what the script has to declare."""
        return (
            f'You have to declare a function named "{self.export_name}" and it has '
            f"to return {self.return_shape}."
        )

    def contract_remediation(self, actual_type: str, record_id: str) -> str:
        return (
            f'Return value of "{self.export_name}" function has to be '
            f'{self.return_shape}, but got "{actual_type}" for span "{record_id}". '
            "Check the log output for further details."
        )


SPAN_GROUPING = RuleKind(
    key="span-grouping",
    title="span grouping",
    export_name="groupBy",
    return_shape="a tuple of two strings (group_id, group_name)",
    check_return=is_string_pair,
    template=(
        '# Do something with "span" and "trace"\n'
        "# and return a tuple (group_id, group_name)\n"
        "# where group_id is a unique string to be used for grouping\n"
        "# and group_name is human readable string for displaying\n"
        "def groupBy(span: Span, trace: Trace) -> tuple[str, str]:\n"
        "    # Let's group by service name\n"
        "    service_name = 'unknown'\n"
        "\n"
        "    # Handle jaeger spans\n"
        "    if span.process and span.process.service_name:\n"
        "        service_name = span.process.service_name\n"
        "\n"
        "    # Handle zipkin spans\n"
        "    if span.local_endpoint and span.local_endpoint.service_name:\n"
        "        service_name = span.local_endpoint.service_name\n"
        "\n"
        "    return (service_name, service_name)\n"
    ),
)

SPAN_LABELING = RuleKind(
    key="span-labeling",
    title="span labeling",
    export_name="makeLabel",
    return_shape="a string",
    check_return=is_string,
    template=(
        '# Do something with "span" and "trace"\n'
        "# and return a string to be displayed as the span label\n"
        "def makeLabel(span: Span, trace: Trace) -> str:\n"
        "    return span.operation_name\n"
    ),
)

SPAN_COLORING = RuleKind(
    key="span-coloring",
    title="span coloring",
    export_name="colorBy",
    return_shape="a color string (e.g. '#ff0000')",
    check_return=is_string,
    template=(
        '# Do something with "span" and "trace"\n'
        "# and return a color string for the span bar\n"
        "def colorBy(span: Span, trace: Trace) -> str:\n"
        "    if span.tags.get('error'):\n"
        "        return '#f5222d'\n"
        "    return '#1890ff'\n"
    ),
)

RULE_KINDS: Mapping[str, RuleKind] = {
    kind.key: kind for kind in (SPAN_GROUPING, SPAN_LABELING, SPAN_COLORING)
}


class RuleKindNotFoundError(Exception):
    """Raised when a rule kind is not found."""


def get_rule_kind(key: str) -> RuleKind:
    """Look up a rule kind by key.

    Raises:
        RuleKindNotFoundError: If no rule kind with the given key exists

    """
    try:
        return RULE_KINDS[key]
    except KeyError:
        raise RuleKindNotFoundError(
            f"Rule kind '{key}' not found. Available rule kinds: {list(RULE_KINDS)}"
        ) from None

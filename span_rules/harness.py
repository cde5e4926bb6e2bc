"""Run a rule function over every span of the loaded traces."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from span_rules.errors import (
    PASSTHROUGH_ERRORS,
    ContractViolationError,
    EvaluationError,
    describe_error,
)
from span_rules.models.report import DomainRecord, RuleFunction, SampleOutcome
from span_rules.rules import RuleKind, describe_type
from span_rules.stage import TraceSource

log = logging.getLogger(__name__)


def snapshot_records(source: TraceSource) -> Sequence[DomainRecord]:
    """Enumerate (span, trace) records once, in trace order then span order."""
    return [
        DomainRecord(span=span, trace=trace)
        for trace in source.get_all_traces()
        for span in trace.spans
    ]


@dataclass(frozen=True, kw_only=True)
class ExecutionHarness:
    """Invokes a rule function once per record and checks every return value."""

    kind: RuleKind
    source: TraceSource

    def run(self, function: RuleFunction) -> Sequence[SampleOutcome]:
        """Run the function over a snapshot of all loaded records.

        Records are processed sequentially; the first failing record stops the
        run and later records are never invoked.

        Args:
            function: Rule function taking (span, trace)

        Returns:
            One outcome per record, in enumeration order

        Raises:
            ContractViolationError: If a return value has the wrong shape
            EvaluationError: If the function raises for a record

        """
        records = snapshot_records(self.source)
        log.info(
            "Testing %s on %d span(s)", self.kind.export_name, len(records)
        )

        outcomes: list[SampleOutcome] = []
        for record in records:
            value, actual_type = self._invoke(function, record)
            if actual_type is not None:
                log.error(
                    'Return value of "%s" must be %s, but received "%s" for span %r',
                    self.kind.export_name,
                    self.kind.return_shape,
                    actual_type,
                    record.span,
                )
                raise ContractViolationError(
                    f'"{self.kind.export_name}" returned an unexpected value',
                    description=self.kind.contract_remediation(
                        actual_type, record.record_id
                    ),
                    record_id=record.record_id,
                    actual_type=actual_type,
                )
            outcomes.append(SampleOutcome(record=record, value=value))

        return outcomes

    def _invoke(
        self, function: RuleFunction, record: DomainRecord
    ) -> tuple[Any, str | None]:
        """Call the function for one record and check the returned shape.

        The shape check runs user code too (e.g. ``__len__`` of a returned
        sequence), so it is guarded the same way as the call itself.

        Returns:
            The value and, if it has the wrong shape, its described type

        """
        try:
            value = function(record.span, record.trace)
            if self.kind.check_return(value):
                return value, None
            return value, describe_type(value)
        except PASSTHROUGH_ERRORS:
            raise
        except BaseException as err:
            message = describe_error(err)
            log.info(
                "%s raised %s for span %s: %s",
                self.kind.export_name,
                type(err).__name__,
                record.record_id,
                message,
            )
            raise EvaluationError(
                message,
                description=(
                    f'"{self.kind.export_name}" function raised '
                    f'{type(err).__name__} for span "{record.record_id}".'
                ),
                record_id=record.record_id,
            ) from err

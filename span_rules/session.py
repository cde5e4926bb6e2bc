"""Editing session for one rule: test, invalidate and save."""

import asyncio
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from span_rules.compiler import ScriptCompiler
from span_rules.errors import NotReadyError, SaveNotAllowedError
from span_rules.models.report import Success, TestReport
from span_rules.models.rule import RawRuleOptions, SavedRule
from span_rules.persistence import build_saved_rule
from span_rules.pipeline import RulePipeline, SessionState
from span_rules.throttle import Throttle

log = logging.getLogger(__name__)

_session_ids = itertools.count(1)


@dataclass(kw_only=True)
class RuleEditorSession:
    """State machine around the rule pipeline for one editing surface.

    Any edit returns the session to ``IDLE``, cancels the run in flight and
    makes the last report unusable for saving. Reports computed for an older
    revision are discarded.
    """

    pipeline: RulePipeline
    on_invalidate: Callable[[], None] | None = None

    state: SessionState = field(default=SessionState.IDLE, init=False)
    report: TestReport | None = field(default=None, init=False)
    raw_options: RawRuleOptions | None = field(default=None, init=False)
    _uri: str | None = field(default=None, init=False)
    _task: asyncio.Task[TestReport] | None = field(default=None, init=False, repr=False)
    _request: int = field(default=0, init=False)
    _notify_invalidated: Throttle = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._notify_invalidated = Throttle(
            func=self._fire_invalidate, interval=self.pipeline.config.throttle_interval
        )

    @property
    def compiler(self) -> ScriptCompiler:
        return self.pipeline.compiler

    @property
    def uri(self) -> str:
        if self._uri is None:
            raise NotReadyError("Editing session is not open")
        return self._uri

    @property
    def text(self) -> str:
        return self.compiler.get_source(self.uri).text

    @property
    def is_testing(self) -> bool:
        return self._task is not None and not self._task.done()

    def open(self, raw_options: RawRuleOptions | None = None) -> None:
        """Register the source, seeded with saved code or the default template."""
        if self._uri is not None:
            self.close()

        self.raw_options = raw_options
        self._uri = f"inmemory://rule/{next(_session_ids)}"
        text = raw_options.raw_code if raw_options else self.pipeline.kind.template
        self.compiler.register(self._uri, text)
        self.state = SessionState.IDLE
        self.report = None
        log.debug("Opened editing session %s", self._uri)

    def close(self) -> None:
        self.invalidate()
        self._notify_invalidated.cancel()
        if self._uri is not None:
            self.compiler.unregister(self._uri)
        self._uri = None

    def edit(self, text: str) -> None:
        """Replace the source text; invalidates any report immediately."""
        self.compiler.update(self.uri, text)
        self.invalidate()
        self._notify_invalidated()

    def invalidate(self) -> None:
        self._cancel_run()
        self._request += 1
        self.report = None
        self.state = SessionState.IDLE

    async def run_test(self) -> TestReport | None:
        """Run the pipeline on the current source.

        Returns:
            The report, or None if an edit or a newer request superseded
            this run

        Raises:
            NotReadyError: If the session is not open

        """
        uri = self.uri
        self._cancel_run()
        self._request += 1
        request = self._request

        def on_state(state: SessionState) -> None:
            if request == self._request:
                self.state = state

        self.report = None
        task = asyncio.ensure_future(self.pipeline.run_test(uri, on_state=on_state))
        self._task = task

        try:
            report = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            log.debug("Test run %d of %s was cancelled", request, uri)
            return None
        finally:
            if self._task is task:
                self._task = None

        if request != self._request or report.revision != self._revision():
            log.debug("Discarding stale report for %s", uri)
            return None

        self.report = report
        return report

    @property
    def can_save(self) -> bool:
        return (
            self.state is SessionState.TESTED
            and isinstance(self.report, Success)
            and self.report.revision == self._revision()
        )

    def save(self, name: str | None = None) -> SavedRule:
        """Build the descriptors for the persistence caller.

        Raises:
            SaveNotAllowedError: If the current source has no passing test
            pydantic.ValidationError: If no usable name is available

        """
        if not self.can_save or not isinstance(self.report, Success):
            raise SaveNotAllowedError(
                "Rule can only be saved after a successful test of the current code"
            )
        saved = build_saved_rule(self.report, name=name, previous=self.raw_options)
        self.raw_options = saved.raw_options
        return saved

    def _revision(self) -> int:
        return self.compiler.get_source(self.uri).revision

    def _cancel_run(self) -> None:
        if self._task is not None and not self._task.done():
            log.debug("Cancelling test run in flight")
            self._task.cancel()
        self._task = None

    def _fire_invalidate(self) -> None:
        if self.on_invalidate is not None:
            self.on_invalidate()

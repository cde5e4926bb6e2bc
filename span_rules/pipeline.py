"""Compile, synthesize and execute a rule script and classify the outcome."""

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from span_rules.compiler import ScriptCompiler
from span_rules.config import PipelineConfig
from span_rules.errors import RuleScriptError
from span_rules.harness import ExecutionHarness
from span_rules.models.report import (
    Failure,
    SampleOutcome,
    Success,
    TestReport,
)
from span_rules.models.script import CompiledArtifact
from span_rules.rules import RuleKind
from span_rules.stage import TraceSource
from span_rules.synthesizer import synthesize

log = logging.getLogger(__name__)


class SessionState(StrEnum):
    """States of a rule editing session."""

    IDLE = "idle"
    COMPILING = "compiling"
    COMPILE_FAILED = "compile-failed"
    SYNTHESIZING = "synthesizing"
    SYNTHESIS_FAILED = "synthesis-failed"
    EXECUTING = "executing"
    EXECUTION_FAILED = "execution-failed"
    TESTED = "tested"


StateListener = Callable[[SessionState], None]


def select_samples(
    outcomes: Sequence[SampleOutcome], size: int, rng: random.Random
) -> Sequence[SampleOutcome]:
    """Pick at most ``size`` random outcomes for display."""
    return tuple(rng.sample(list(outcomes), min(size, len(outcomes))))


def compile_failure(artifact: CompiledArtifact) -> Failure:
    details = "\n".join(str(diagnostic) for diagnostic in artifact.diagnostics)
    return Failure(
        kind="compile-diagnostics",
        message="Compilation failed",
        description=details,
        revision=artifact.revision,
        diagnostics=artifact.diagnostics,
    )


def script_failure(err: RuleScriptError, revision: int) -> Failure:
    return Failure(
        kind=err.kind,
        message=err.message,
        description=err.description,
        revision=revision,
        record_id=err.record_id,
        actual_type=getattr(err, "actual_type", None),
    )


@dataclass(kw_only=True)
class RulePipeline:
    """Runs one rule test from source buffer to report.

    Failures caused by the script are returned as reports; only an unknown
    source buffer raises.
    """

    compiler: ScriptCompiler
    source: TraceSource
    kind: RuleKind
    config: PipelineConfig = field(default_factory=PipelineConfig)
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self) -> None:
        if self.config.seed is not None:
            self.rng.seed(self.config.seed)

    async def run_test(
        self, uri: str, on_state: StateListener | None = None
    ) -> TestReport:
        """Test the current text of a registered buffer.

        Args:
            uri: Identifier of the buffer registered with the compiler
            on_state: Called on every state transition of the run

        Returns:
            Failure or Success report for the compiled revision

        Raises:
            NotReadyError: If the buffer is not registered

        """
        notify = on_state or (lambda state: None)

        notify(SessionState.COMPILING)
        artifact = await self.compiler.compile(uri)
        if not artifact.ok:
            notify(SessionState.COMPILE_FAILED)
            return compile_failure(artifact)

        notify(SessionState.SYNTHESIZING)
        try:
            function = synthesize(artifact.code, self.kind)
        except RuleScriptError as err:
            log.info("Synthesis of %s failed: %s", uri, err.message)
            notify(SessionState.SYNTHESIS_FAILED)
            return script_failure(err, artifact.revision)

        notify(SessionState.EXECUTING)
        harness = ExecutionHarness(kind=self.kind, source=self.source)
        try:
            outcomes = harness.run(function)
        except RuleScriptError as err:
            log.info("Execution of %s failed: %s", uri, err.message)
            notify(SessionState.EXECUTION_FAILED)
            return script_failure(err, artifact.revision)

        log.info("Test of %s passed on %d span(s)", uri, len(outcomes))
        notify(SessionState.TESTED)
        return Success(
            artifact=artifact,
            function=function,
            outcomes=tuple(outcomes),
            samples=select_samples(outcomes, self.config.sample_size, self.rng),
            revision=artifact.revision,
        )

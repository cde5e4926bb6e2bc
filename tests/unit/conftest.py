"""Shared fixtures for unit tests."""

import pytest

from span_rules.compiler import ScriptCompiler
from span_rules.config import PipelineConfig
from span_rules.pipeline import RulePipeline
from span_rules.rules import SPAN_GROUPING
from span_rules.stage import Stage


@pytest.fixture
def compiler() -> ScriptCompiler:
    """Create an empty compiler."""
    return ScriptCompiler()


@pytest.fixture
def stage() -> Stage:
    """Create an empty stage."""
    return Stage()


@pytest.fixture
def pipeline(compiler: ScriptCompiler, stage: Stage) -> RulePipeline:
    """Create a span grouping pipeline over the stage."""
    return RulePipeline(
        compiler=compiler,
        source=stage,
        kind=SPAN_GROUPING,
        config=PipelineConfig(seed=7, throttle_interval=0.05),
    )

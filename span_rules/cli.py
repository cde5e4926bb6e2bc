"""CLI entry point for testing span rule scripts against trace files."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from span_rules.compiler import ScriptCompiler
from span_rules.config import PipelineConfig
from span_rules.models.report import Failure, TestReport
from span_rules.pipeline import RulePipeline
from span_rules.rules import RULE_KINDS, SPAN_GROUPING, get_rule_kind
from span_rules.stage import Stage
from span_rules.trace_loader import load_traces

STATUS_SYMBOLS = {
    "success": "✓",
    "untested": "⚠",
    "failure": "✗",
}


def report_status(report: TestReport) -> str:
    if isinstance(report, Failure):
        return "failure"
    return "untested" if report.is_untested else "success"


def log_report_summary(log: logging.Logger, report: TestReport) -> None:
    """Log a formatted summary of a test report."""
    status = report_status(report)
    log.info("=" * 80)
    log.info("Test Report Summary:")
    log.info("=" * 80)

    if isinstance(report, Failure):
        log.info("%s %s: %s", STATUS_SYMBOLS[status], report.kind, report.message)
        if report.description:
            log.info("  Details: %s", report.description)
        return

    if report.is_untested:
        log.info(
            "%s Rule compiled but no spans were available to test it",
            STATUS_SYMBOLS[status],
        )
        return

    log.info(
        "%s Test successful on %d span(s)", STATUS_SYMBOLS[status], len(report.outcomes)
    )
    for sample in report.samples:
        log.info(
            "  %s => %s", sample.record.span.operation_name, json.dumps(sample.value)
        )


def format_output(kind_key: str, report: TestReport) -> dict[str, Any]:
    """Format a test report for JSON output."""
    output: dict[str, Any] = {"status": report_status(report), "kind": kind_key}

    if isinstance(report, Failure):
        output.update(
            {
                "failure": report.kind,
                "message": report.message,
                "description": report.description,
                "diagnostics": [
                    {"message": d.message, "line": d.line, "column": d.column}
                    for d in report.diagnostics
                ],
                "record": report.record_id,
                "actual_type": report.actual_type,
            }
        )
        return output

    output.update(
        {
            "tested": len(report.outcomes),
            "samples": [
                {
                    "span": sample.record.record_id,
                    "operation": sample.record.span.operation_name,
                    "value": sample.value,
                }
                for sample in report.samples
            ],
        }
    )
    return output


async def run(
    kind_key: str,
    script_path: Path,
    traces_path: Path | None,
    config_json: str = "{}",
) -> int:
    """Test a rule script and return exit code."""
    log = logging.getLogger("span_rules")

    kind = get_rule_kind(kind_key)
    config = PipelineConfig(**json.loads(config_json))

    stage = Stage()
    if traces_path is not None:
        for trace in await load_traces(traces_path):
            stage.add_trace(trace)

    compiler = ScriptCompiler()
    uri = script_path.resolve().as_uri()
    compiler.register(uri, await asyncio.to_thread(script_path.read_text, "utf-8"))

    log.info("Testing %s rule %s", kind.title, script_path)
    pipeline = RulePipeline(compiler=compiler, source=stage, kind=kind, config=config)
    report = await pipeline.run_test(uri)

    log_report_summary(log, report)
    print(json.dumps(format_output(kind.key, report), indent=2))

    return 1 if isinstance(report, Failure) else 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Test a span rule script against loaded traces"
    )
    parser.add_argument(
        "--script",
        type=Path,
        required=True,
        help="Path to the rule script",
    )
    parser.add_argument(
        "--traces",
        type=Path,
        default=None,
        help="Path to a JSON file with traces to test on",
    )
    parser.add_argument(
        "--kind",
        default=SPAN_GROUPING.key,
        choices=sorted(RULE_KINDS),
        help="Rule kind",
    )
    parser.add_argument(
        "--config",
        default="{}",
        help="JSON configuration for the pipeline",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(
        run(
            kind_key=args.kind,
            script_path=args.script,
            traces_path=args.traces,
            config_json=args.config,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()

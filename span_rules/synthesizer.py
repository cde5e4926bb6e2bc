"""Extract the rule function from compiled code."""

import builtins
import logging
from typing import Any

from span_rules.errors import (
    PASSTHROUGH_ERRORS,
    EvaluationError,
    SynthesisError,
    describe_error,
)
from span_rules.models.report import RuleFunction
from span_rules.rules import RuleKind

log = logging.getLogger(__name__)

RULE_MODULE_NAME = "span_rule"


def evaluate(code: str, filename: str = f"<{RULE_MODULE_NAME}>") -> dict[str, Any]:
    """Execute compiled code in a fresh namespace and return the namespace.

    Raises:
        EvaluationError: If executing the code raises

    """
    namespace: dict[str, Any] = {
        "__name__": RULE_MODULE_NAME,
        "__builtins__": builtins,
    }
    try:
        exec(compile(code, filename, "exec", dont_inherit=True), namespace)
    except PASSTHROUGH_ERRORS:
        raise
    except BaseException as err:
        message = describe_error(err)
        log.info("Evaluating rule code failed: %s: %s", type(err).__name__, message)
        raise EvaluationError(
            message,
            description=(
                f"Top-level code of the script raised {type(err).__name__}. "
                "Check the statements outside of functions."
            ),
        ) from err
    return namespace


def synthesize(code: str, kind: RuleKind) -> RuleFunction:
    """Return the function the rule kind requires from compiled code.

    Raises:
        SynthesisError: If the export is missing or not callable
        EvaluationError: If executing the code raises

    """
    namespace = evaluate(code)

    if kind.export_name not in namespace:
        raise SynthesisError(
            "missing-symbol",
            f'Unexpected "{kind.export_name}" function',
            description=kind.remediation,
        )

    function = namespace[kind.export_name]
    if not callable(function):
        raise SynthesisError(
            "not-callable",
            f'Unexpected "{kind.export_name}" function',
            description=kind.remediation,
        )

    log.debug("Synthesized %s from compiled code", kind.export_name)
    rule_function: RuleFunction = function
    return rule_function

"""Descriptors handed to the caller that stores accepted rules."""

import logging
import secrets

from span_rules.models.report import Success
from span_rules.models.rule import RawRuleOptions, RuleOptions, SavedRule
from span_rules.rules import RuleKind
from span_rules.synthesizer import synthesize

log = logging.getLogger(__name__)


def generate_key() -> str:
    return secrets.token_urlsafe(8)


def build_saved_rule(
    report: Success,
    name: str | None = None,
    previous: RawRuleOptions | None = None,
) -> SavedRule:
    """Build the accepted and raw descriptors of a tested rule.

    The key of an existing rule is kept so the caller updates it in place.

    Raises:
        pydantic.ValidationError: If no usable name is given or inherited

    """
    key = previous.key if previous else generate_key()
    rule_name = name or (previous.name if previous else "")

    raw_options = RawRuleOptions(
        key=key,
        name=rule_name,
        raw_code=report.artifact.source,
        compiled_code=report.artifact.code,
    )
    options = RuleOptions(key=key, name=raw_options.name, function=report.function)

    log.info("Saving rule %s (%s)", raw_options.name, key)
    return SavedRule(options=options, raw_options=raw_options, is_new=previous is None)


def restore_rule(raw_options: RawRuleOptions, kind: RuleKind) -> RuleOptions:
    """Rebuild a saved rule from its compiled code, without recompiling.

    Raises:
        SynthesisError: If the compiled code lacks a usable export
        EvaluationError: If executing the compiled code raises

    """
    function = synthesize(raw_options.compiled_code, kind)
    return RuleOptions(key=raw_options.key, name=raw_options.name, function=function)

"""Models for accepted rules handed to the persistence caller."""

from dataclasses import dataclass

from pydantic import Field

from span_rules.models.base import Model
from span_rules.models.report import RuleFunction


class RawRuleOptions(Model):
    """Serializable form of a rule, enough to restore it without recompiling."""

    key: str = Field(..., min_length=1, description="Stable rule key")
    name: str = Field(
        ..., min_length=1, pattern=r"\S", description="Human-readable rule name"
    )
    raw_code: str = Field(..., description="Source text as written by the user")
    compiled_code: str = Field(..., description="Lowered executable text")


@dataclass(frozen=True, kw_only=True)
class RuleOptions:
    """Rule ready to be applied to spans."""

    key: str
    name: str
    function: RuleFunction


@dataclass(frozen=True, kw_only=True)
class SavedRule:
    """Everything the persistence caller receives on save."""

    options: RuleOptions
    raw_options: RawRuleOptions
    is_new: bool

"""Rule matching and label rewriting.

This module provides the declarative routing rules: metric name selectors,
typed label/value pattern classification, regex-based label rewriters, and
first-match rule sets loaded from YAML.
"""

from promrouter.rules.fields import (
    FieldPattern,
    IdentityMarker,
    IndexedGroup,
    LiteralText,
    NamedGroup,
    classify_name,
    classify_value,
)
from promrouter.rules.loader import build_rule_set, compile_rule_set, load_rule_set
from promrouter.rules.models import Rule, RuleSet
from promrouter.rules.rewriter import LabelRewriter
from promrouter.rules.selectors import MetricNameSelector

__all__ = [
    "FieldPattern",
    "IdentityMarker",
    "IndexedGroup",
    "LabelRewriter",
    "LiteralText",
    "MetricNameSelector",
    "NamedGroup",
    "Rule",
    "RuleSet",
    "build_rule_set",
    "classify_name",
    "classify_value",
    "compile_rule_set",
    "load_rule_set",
]

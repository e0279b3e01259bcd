"""Rule set loading and compilation."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from promrouter.exceptions import ConfigValidationError
from promrouter.logging_config import get_logger
from promrouter.rules.fields import FieldPattern
from promrouter.rules.models import Rule, RuleSet
from promrouter.rules.rewriter import LabelRewriter
from promrouter.rules.schemas import RuleConfig, RuleSetConfig
from promrouter.rules.selectors import MetricNameSelector

logger = get_logger(__name__)


def _compile_rule(index: int, config: RuleConfig) -> Rule:
    try:
        selectors = [
            MetricNameSelector(selector.method, selector.value)
            for selector in config.selectors
        ]
        rewriters = [
            LabelRewriter(
                name=rewriter.name,
                regex=rewriter.regex,
                overwrite=rewriter.overwrite,
                labels=[FieldPattern(label.name, label.value) for label in rewriter.labels],
            )
            for rewriter in config.label_rewriter
        ]
    except ConfigValidationError as e:
        raise ConfigValidationError(
            f"Rule {index} (topic={config.topic}) init failed: {e.message}",
            rule=index,
            topic=config.topic,
            **e.context,
        ) from e

    return Rule(
        topic=config.topic,
        token=config.token,
        selectors=selectors,
        label_rewriters=rewriters,
        org=config.org,
        delete_labels=config.delete_labels,
    )


def compile_rule_set(config: RuleSetConfig) -> RuleSet:
    """Compile a validated rule set configuration into runtime rules.

    Args:
        config: Validated rule set schema

    Returns:
        RuleSet: Rules with compiled selectors and rewriters

    Raises:
        ConfigValidationError: If a selector or rewriter regex is invalid
    """
    rules = [_compile_rule(index, rule) for index, rule in enumerate(config.rules)]
    return RuleSet(rules, default_org=config.default_org)


def build_rule_set(data: dict[str, Any]) -> RuleSet:
    """Validate and compile a rule set from plain data.

    Args:
        data: Parsed configuration mapping (camelCase keys)

    Returns:
        RuleSet: Compiled rule set

    Raises:
        ConfigValidationError: If required fields are missing or values are invalid
    """
    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"Rule set must be a mapping, got {type(data).__name__}"
        )

    try:
        config = RuleSetConfig.model_validate(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
        raise ConfigValidationError(
            f"Invalid rule set configuration: {'; '.join(errors)}",
            errors=errors,
        ) from e

    return compile_rule_set(config)


def load_rule_set(path: Path) -> RuleSet:
    """Load a rule set from a YAML file.

    Args:
        path: Rule set file path

    Returns:
        RuleSet: Compiled rule set

    Raises:
        ConfigValidationError: If the file cannot be read or is invalid
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigValidationError(
            f"Failed to read rule set from {path}: {e}", path=str(path)
        ) from e

    rule_set = build_rule_set(data)
    logger.info(
        "rule_set_loaded",
        path=str(path),
        rules=len(rule_set),
        default_org=rule_set.default_org,
    )
    return rule_set

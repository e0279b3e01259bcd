"""Rule set CLI commands."""

from pathlib import Path

import typer

from promrouter.cli.main import handle_error
from promrouter.cli.output import print_dict, print_success, print_table, print_warning
from promrouter.exceptions import PromRouterError
from promrouter.logging_config import get_logger
from promrouter.rules import load_rule_set

app = typer.Typer(help="Inspect and validate rule sets")
logger = get_logger(__name__)

RulesFile = typer.Argument(
    ...,
    help="Path to the rule set YAML file",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)


@app.command("validate")
def validate(rules_file: Path = RulesFile) -> None:
    """
    Validate a rule set file and list its rules.

    Examples:
        promrouter rules validate rules.yaml
    """
    try:
        rule_set = load_rule_set(rules_file)
    except PromRouterError as e:
        handle_error(e)

    rows = [
        {
            "#": idx,
            "topic": rule.topic,
            "org": rule_set.resolve_org(rule),
            "selectors": ", ".join(f"{s.method}:{s.value}" for s in rule.selectors),
            "rewriters": ", ".join(rule.rewriters) or "-",
            "delete": ", ".join(sorted(rule.delete_labels)) or "-",
        }
        for idx, rule in enumerate(rule_set.rules)
    ]
    print_table(rows, title="Rules")
    print_success(
        f"Rule set valid: {len(rule_set)} rules, default org {rule_set.default_org}"
    )


@app.command("match")
def match(
    rules_file: Path = RulesFile,
    metric_name: str = typer.Argument(..., help="Metric name to select a rule for"),
) -> None:
    """
    Show which rule a metric name selects.

    Exits with code 1 when no rule matches.

    Examples:
        promrouter rules match rules.yaml node_cpu_seconds_total
    """
    try:
        rule_set = load_rule_set(rules_file)
    except PromRouterError as e:
        handle_error(e)

    rule = rule_set.select(metric_name)
    if rule is not None:
        print_dict(
            {
                "rule": rule_set.rules.index(rule),
                "topic": rule.topic,
                "org": rule_set.resolve_org(rule),
                "rewriters": ", ".join(rule.rewriters) or "-",
            },
            title=f"Match: {metric_name}",
        )
        return

    print_warning(f"No rule matches {metric_name}")
    raise typer.Exit(1)

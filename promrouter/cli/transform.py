"""Batch transform command.

Runs a JSON batch file through the configured pipeline, which is useful to
check rules, templates and schemas against captured samples.
"""

import json
from pathlib import Path
from typing import Any, Optional

import typer

from promrouter.cli.main import handle_error, state
from promrouter.cli.output import console, print_dict, print_info, print_table, print_warning
from promrouter.config import get_settings
from promrouter.exceptions import PromRouterError
from promrouter.logging_config import get_logger
from promrouter.pipeline import PIPELINES, build_context, series_from_dicts

logger = get_logger(__name__)


def _render_payload(payload: bytes) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError:
        return payload.hex()


def transform(
    batch_file: Path = typer.Argument(
        ...,
        help="JSON file with a list of time series",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    pipeline: Optional[str] = typer.Option(
        None,
        "--pipeline",
        "-p",
        help="Pipeline: routed or templated (default: from config)",
    ),
    rules_path: Optional[Path] = typer.Option(
        None,
        "--rules",
        "-r",
        help="Rule set YAML file (default: from config)",
    ),
    serialization_format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Serialization format: json, avro-json, avro-binary",
    ),
    schema_path: Optional[Path] = typer.Option(
        None,
        "--schema",
        help="Avro schema file (default: from config)",
    ),
    topic_template: Optional[str] = typer.Option(
        None,
        "--topic-template",
        "-t",
        help="Topic template for the templated pipeline",
    ),
    match: Optional[list[str]] = typer.Option(
        None,
        "--match",
        "-m",
        help="Series selector filter for the templated pipeline (repeatable)",
    ),
    show_payloads: bool = typer.Option(
        False,
        "--show-payloads",
        help="Print every payload",
    ),
) -> None:
    """
    Transform a batch of time series into topic-keyed payloads.

    The batch file holds a JSON list of series, each with ``labels`` and
    ``samples`` (``[timestamp_ms, value]`` pairs).

    Examples:
        promrouter transform batch.json --rules rules.yaml

        promrouter transform batch.json -p templated -t "metrics.{{ job }}" \\
            --match 'up{job="node"}' --show-payloads
    """
    settings = state.settings or get_settings()

    overrides: dict[str, Any] = {
        "pipeline": pipeline,
        "rules_path": rules_path.resolve() if rules_path else None,
        "serialization_format": serialization_format,
        "avro_schema_path": schema_path.resolve() if schema_path else None,
        "topic_template": topic_template,
        "match": match or None,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}

    try:
        settings = settings.model_validate({**settings.model_dump(), **overrides})
    except ValueError as e:
        handle_error(e)

    try:
        with open(batch_file) as f:
            series = series_from_dicts(json.load(f))
    except (OSError, ValueError, TypeError) as e:
        handle_error(e)

    print_info(f"Transforming {len(series)} series with the {settings.pipeline} pipeline")

    try:
        with build_context(settings) as context:
            result = PIPELINES[settings.pipeline](context, series)
            counters = context.metrics.snapshot()
    except PromRouterError as e:
        handle_error(e)

    if not result:
        print_warning("No payloads produced")
    else:
        print_table(
            [{"topic": topic, "payloads": len(payloads)} for topic, payloads in result.items()],
            title="Topics",
        )

    print_dict(counters, title="Counters")

    if show_payloads:
        for topic, payloads in result.items():
            console.print(f"[bold cyan]{topic}[/bold cyan]")
            for payload in payloads:
                console.print(
                    _render_payload(payload),
                    markup=False,
                    emoji=False,
                    highlight=False,
                    soft_wrap=True,
                )

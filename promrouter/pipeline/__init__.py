"""Transform pipelines for promrouter.

This module turns decoded remote-write batches into topic-keyed payload
batches, either routed by the rule set or by a topic template.
"""

from typing import Callable, Iterable

from promrouter.pipeline.batch import TopicBatch
from promrouter.pipeline.context import TransformContext, build_context
from promrouter.pipeline.filters import MatchFilter, parse_series_selector
from promrouter.pipeline.metrics import PrometheusCounters, TransformMetrics
from promrouter.pipeline.routed import transform_rule_routed
from promrouter.pipeline.series import (
    Sample,
    TimeSeries,
    series_from_dicts,
    series_from_write_request,
)
from promrouter.pipeline.template import TopicTemplate
from promrouter.pipeline.templated import (
    format_timestamp,
    format_value,
    transform_template_routed,
)

PIPELINES: dict[str, Callable[[TransformContext, Iterable[TimeSeries]], TopicBatch]] = {
    "routed": transform_rule_routed,
    "templated": transform_template_routed,
}

__all__ = [
    "MatchFilter",
    "PIPELINES",
    "PrometheusCounters",
    "Sample",
    "TimeSeries",
    "TopicBatch",
    "TopicTemplate",
    "TransformContext",
    "TransformMetrics",
    "build_context",
    "format_timestamp",
    "format_value",
    "parse_series_selector",
    "series_from_dicts",
    "series_from_write_request",
    "transform_rule_routed",
    "transform_template_routed",
]

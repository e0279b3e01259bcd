"""Template-routed transform pipeline.

The topic of every series is rendered from a template over its labels, the
series is checked against a static match filter, and every point becomes
an envelope::

    {
        "timestamp": "2023-10-31T12:00:00Z",
        "value": "42.5",
        "name": <metric name>,
        "labels": <labels>,
    }

A series whose topic cannot be rendered is dropped and counted as a render
failure instead of being routed to an empty topic.
"""

import math
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from promrouter.exceptions import SerializationError, TemplateRenderError
from promrouter.logging_config import get_logger, log_error
from promrouter.pipeline.batch import TopicBatch, append_payload, marshal_envelope
from promrouter.pipeline.context import TransformContext
from promrouter.pipeline.series import TimeSeries

logger = get_logger(__name__)


def format_timestamp(timestamp_ms: int) -> str:
    """Format a millisecond epoch as RFC 3339 UTC, truncated to seconds.

    Raises:
        SerializationError: If the timestamp is out of the representable range
    """
    seconds = abs(timestamp_ms) // 1000
    if timestamp_ms < 0:
        seconds = -seconds
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise SerializationError(f"timestamp {timestamp_ms} out of range: {e}") from e
    return moment.isoformat().replace("+00:00", "Z")


def format_value(value: float) -> str:
    """Format a float as its shortest decimal string without exponent."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"

    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def transform_template_routed(
    context: TransformContext, batch: Iterable[TimeSeries]
) -> TopicBatch:
    """Transform a batch of series into template-routed payloads.

    Args:
        context: Transform context with topic template and match filter
        batch: Decoded time series

    Returns:
        dict: Rendered topic to ordered payloads
    """
    context.count("batches")
    result: TopicBatch = {}

    for ts in batch:
        labels = ts.label_map()
        name = ts.metric_name

        try:
            topic = context.topic_template.render(labels)
        except TemplateRenderError as e:
            context.count("render_failed", len(ts.samples))
            log_error(logger, e, "render_topic", metric=name, samples=len(ts.samples))
            continue

        if not context.match_filter.matches(name, labels):
            context.count("filtered", len(ts.samples))
            continue

        for sample in ts.samples:
            payload = marshal_envelope(
                context,
                lambda: {
                    "timestamp": format_timestamp(sample.timestamp),
                    "value": format_value(sample.value),
                    "name": name,
                    "labels": labels,
                },
                metric=name,
            )
            append_payload(result, topic, payload)

    logger.debug(
        "template_routed_batch_transformed",
        topics=len(result),
        payloads=sum(len(payloads) for payloads in result.values()),
    )
    return result

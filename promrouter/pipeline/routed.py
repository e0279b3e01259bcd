"""Rule-routed transform pipeline.

Each series is matched against the rule set by metric name. Matched series
have their labels rewritten and every point becomes an envelope::

    {
        "source": {"key": <rule token>, "org": <resolved org>},
        "dims": <labels>,
        "vals": {<metric name>: <value>},
        "time": <timestamp ms>,
    }

Unmatched points are dropped and counted as filtered.
"""

from typing import Iterable

from promrouter.exceptions import ConfigValidationError
from promrouter.logging_config import get_logger
from promrouter.pipeline.batch import TopicBatch, append_payload, marshal_envelope
from promrouter.pipeline.context import TransformContext
from promrouter.pipeline.series import TimeSeries

logger = get_logger(__name__)


def transform_rule_routed(
    context: TransformContext, batch: Iterable[TimeSeries]
) -> TopicBatch:
    """Transform a batch of series into rule-routed payloads.

    Args:
        context: Transform context with a rule set
        batch: Decoded time series

    Returns:
        dict: Topic to ordered payloads

    Raises:
        ConfigValidationError: If the context has no rule set
    """
    rule_set = context.rule_set
    if rule_set is None:
        raise ConfigValidationError("Rule-routed transform requires a rule set")

    context.count("batches")
    result: TopicBatch = {}

    for ts in batch:
        labels = ts.label_map()
        name = ts.metric_name

        rule = rule_set.select(name)
        if rule is None:
            context.count("filtered", len(ts.samples))
            continue

        rule.rewrite_labels(labels)
        org = rule_set.resolve_org(rule)

        for sample in ts.samples:
            payload = marshal_envelope(
                context,
                lambda: {
                    "source": {"key": rule.token, "org": org},
                    "dims": labels,
                    "vals": {name: sample.value},
                    "time": sample.timestamp,
                },
                metric=name,
            )
            append_payload(result, rule.topic, payload)

    logger.debug(
        "rule_routed_batch_transformed",
        topics=len(result),
        payloads=sum(len(payloads) for payloads in result.values()),
    )
    return result

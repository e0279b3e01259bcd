"""Transform context: compiled configuration plus counters.

A ``TransformContext`` is built once at startup and passed into every
pipeline call. Everything on it except the counters is read-only after
construction, so one context may serve concurrent transforms.
"""

from typing import Optional

from prometheus_client import CollectorRegistry

from promrouter.config import Settings
from promrouter.exceptions import ConfigValidationError
from promrouter.logging_config import get_logger
from promrouter.pipeline.filters import MatchFilter
from promrouter.pipeline.metrics import PrometheusCounters, TransformMetrics
from promrouter.pipeline.template import TopicTemplate
from promrouter.rules.loader import load_rule_set
from promrouter.rules.models import RuleSet
from promrouter.serialization import (
    ENVELOPE_SCHEMA,
    METRIC_SCHEMA,
    Serializer,
    create_serializer,
)

logger = get_logger(__name__)

# Bundled schema for each pipeline envelope, used when none is configured.
DEFAULT_SCHEMAS = {"routed": ENVELOPE_SCHEMA, "templated": METRIC_SCHEMA}


class TransformContext:
    """Shared state for the transform pipelines."""

    def __init__(
        self,
        serializer: Serializer,
        rule_set: Optional[RuleSet] = None,
        topic_template: Optional[TopicTemplate] = None,
        match_filter: Optional[MatchFilter] = None,
        registry: Optional[CollectorRegistry] = None,
    ):
        """Initialize context.

        Args:
            serializer: Payload serializer
            rule_set: Rules for the rule-routed pipeline
            topic_template: Topic template for the template-routed pipeline
            match_filter: Series filter for the template-routed pipeline
            registry: Optional prometheus_client registry to mirror counters into
        """
        self.serializer = serializer
        self.rule_set = rule_set
        self.topic_template = topic_template or TopicTemplate("metrics")
        self.match_filter = match_filter or MatchFilter()
        self.metrics = TransformMetrics()
        self.prometheus: Optional[PrometheusCounters] = (
            PrometheusCounters(registry) if registry is not None else None
        )

    def count(self, name: str, amount: int = 1) -> None:
        """Increment a counter and its Prometheus mirror."""
        self.metrics.increment(name, amount)
        if self.prometheus is not None:
            self.prometheus.increment(name, amount)

    def close(self) -> None:
        """Release the Prometheus mirror."""
        if self.prometheus is not None:
            self.prometheus.unregister()
            self.prometheus = None

    def __enter__(self) -> "TransformContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def build_context(
    settings: Settings,
    registry: Optional[CollectorRegistry] = None,
) -> TransformContext:
    """Build a transform context from settings.

    Avro formats without ``avro_schema_path`` use the bundled schema of
    the selected pipeline.

    Args:
        settings: Application settings
        registry: Optional prometheus_client registry

    Returns:
        TransformContext: Ready-to-use context

    Raises:
        ConfigValidationError: If the routed pipeline has no rules file or a
            setting is invalid
        SchemaLoadError: If the Avro schema cannot be loaded
    """
    schema_path = None
    if settings.uses_avro:
        schema_path = settings.avro_schema_path or DEFAULT_SCHEMAS[settings.pipeline]

    serializer = create_serializer(settings.serialization_format, schema_path)

    rule_set = None
    if settings.pipeline == "routed":
        if settings.rules_path is None:
            raise ConfigValidationError("The routed pipeline requires rules_path")
        rule_set = load_rule_set(settings.rules_path)

    context = TransformContext(
        serializer=serializer,
        rule_set=rule_set,
        topic_template=TopicTemplate(settings.topic_template),
        match_filter=MatchFilter(settings.match),
        registry=registry,
    )

    logger.info(
        "transform_context_built",
        pipeline=settings.pipeline,
        serialization_format=settings.serialization_format,
        rules=len(rule_set) if rule_set is not None else 0,
        match_selectors=len(context.match_filter),
    )
    return context

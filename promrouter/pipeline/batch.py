"""Shared helpers for building topic-keyed payload batches."""

from typing import Any, Callable, Optional

from promrouter.exceptions import SerializationError
from promrouter.logging_config import get_logger, log_error
from promrouter.pipeline.context import TransformContext

logger = get_logger(__name__)

TopicBatch = dict[str, list[bytes]]


def marshal_envelope(
    context: TransformContext,
    build_envelope: Callable[[], dict[str, Any]],
    metric: str,
) -> Optional[bytes]:
    """Build and serialize one envelope.

    Failures are logged and counted; the caller drops the sample and keeps
    processing the batch.

    Returns:
        Optional[bytes]: Payload, or None if serialization failed
    """
    context.count("serialize_total")
    try:
        return context.serializer.marshal(build_envelope())
    except SerializationError as e:
        context.count("serialize_failed")
        log_error(
            logger,
            e,
            "marshal_timeseries",
            metric=metric,
            serializer=context.serializer.format_name,
        )
        return None


def append_payload(result: TopicBatch, topic: str, payload: Optional[bytes]) -> None:
    if payload is not None:
        result.setdefault(topic, []).append(payload)

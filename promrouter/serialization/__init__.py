"""Payload serialization for promrouter.

This module provides the closed set of wire formats envelopes are encoded
into: plain JSON, Avro JSON and Avro binary.
"""

from promrouter.serialization.avro import (
    ENVELOPE_SCHEMA,
    METRIC_SCHEMA,
    AvroSerializer,
    load_schema,
)
from promrouter.serialization.base import Serializer
from promrouter.serialization.factory import SUPPORTED_FORMATS, create_serializer
from promrouter.serialization.json_serializer import JSONSerializer

__all__ = [
    "AvroSerializer",
    "ENVELOPE_SCHEMA",
    "JSONSerializer",
    "METRIC_SCHEMA",
    "SUPPORTED_FORMATS",
    "Serializer",
    "create_serializer",
    "load_schema",
]

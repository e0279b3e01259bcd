"""Factory for creating format-specific serializers."""

from pathlib import Path
from typing import Optional

from promrouter.exceptions import ConfigValidationError
from promrouter.serialization.avro import AvroSerializer
from promrouter.serialization.base import Serializer
from promrouter.serialization.json_serializer import JSONSerializer

SUPPORTED_FORMATS = ("json", "avro-json", "avro-binary")


def create_serializer(
    format_name: str,
    schema_path: Optional[Path] = None,
) -> Serializer:
    """Create a serializer for a wire format.

    Args:
        format_name: One of ``json``, ``avro-json``, ``avro-binary``
        schema_path: Avro schema file, required for the avro formats

    Returns:
        Serializer: Configured serializer

    Raises:
        ConfigValidationError: If the format is unknown or the schema path is missing
        SchemaLoadError: If the Avro schema cannot be loaded
    """
    if format_name == "json":
        return JSONSerializer()

    if format_name not in SUPPORTED_FORMATS:
        raise ConfigValidationError(
            f"Unsupported serialization format: {format_name}. "
            f"Supported: {list(SUPPORTED_FORMATS)}",
            format_name=format_name,
        )

    if schema_path is None:
        raise ConfigValidationError(
            f"Serialization format {format_name} requires an avro schema path",
            format_name=format_name,
        )

    return AvroSerializer(schema_path, textual=format_name == "avro-json")

"""Avro schema-bound serializers.

The schema is read and parsed once at construction. Every record is
validated against it before encoding, either as Avro JSON (``textual=True``)
or as a schemaless Avro binary datum.
"""

import io
import json
from pathlib import Path
from typing import Any

import fastavro
from fastavro.json_write import json_writer
from fastavro.validation import ValidationError, validate

from promrouter.exceptions import SchemaLoadError, SerializationError
from promrouter.logging_config import get_logger
from promrouter.serialization.base import Serializer

logger = get_logger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"
ENVELOPE_SCHEMA = SCHEMA_DIR / "envelope.avsc"
METRIC_SCHEMA = SCHEMA_DIR / "metric.avsc"


def load_schema(schema_path: Path) -> Any:
    """Read and parse an Avro schema file.

    Args:
        schema_path: Path to an ``.avsc`` JSON schema

    Returns:
        Parsed fastavro schema

    Raises:
        SchemaLoadError: If the file is unreadable or not a valid schema
    """
    try:
        raw = Path(schema_path).read_text(encoding="utf-8")
    except OSError as e:
        logger.error("avro_schema_read_failed", path=str(schema_path), error=str(e))
        raise SchemaLoadError(str(schema_path), f"couldn't read avro schema: {e}") from e

    try:
        return fastavro.parse_schema(json.loads(raw))
    except Exception as e:
        logger.error("avro_codec_create_failed", path=str(schema_path), error=str(e))
        raise SchemaLoadError(str(schema_path), f"couldn't create avro codec: {e}") from e


class AvroSerializer(Serializer):
    """Serializer validating records against an Avro schema."""

    def __init__(self, schema_path: Path, textual: bool = True):
        """Initialize serializer.

        Args:
            schema_path: Path to the Avro schema file
            textual: Encode as Avro JSON when True, Avro binary otherwise

        Raises:
            SchemaLoadError: If the schema cannot be loaded
        """
        self.schema_path = Path(schema_path)
        self.textual = textual
        self.schema = load_schema(self.schema_path)
        self.format_name = "avro-json" if textual else "avro-binary"

    def marshal(self, record: dict[str, Any]) -> bytes:
        try:
            validate(record, self.schema, raise_errors=True)
        except ValidationError as e:
            raise SerializationError(str(e), serializer=self.format_name) from e

        try:
            if self.textual:
                buffer = io.StringIO()
                json_writer(buffer, self.schema, [record])
                return buffer.getvalue().rstrip("\n").encode("utf-8")

            output = io.BytesIO()
            fastavro.schemaless_writer(output, self.schema, record)
            return output.getvalue()
        except (TypeError, ValueError, KeyError) as e:
            raise SerializationError(str(e), serializer=self.format_name) from e

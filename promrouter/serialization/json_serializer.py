"""Plain JSON serializer."""

import json
from typing import Any

from promrouter.exceptions import SerializationError
from promrouter.serialization.base import Serializer


class JSONSerializer(Serializer):
    """Serializer writing compact JSON with sorted keys.

    Non-finite floats are rejected, so NaN or infinite sample values fail
    to marshal instead of producing invalid JSON.
    """

    format_name = "json"

    def marshal(self, record: dict[str, Any]) -> bytes:
        try:
            return json.dumps(
                record,
                sort_keys=True,
                separators=(",", ":"),
                allow_nan=False,
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(str(e), serializer=self.format_name) from e

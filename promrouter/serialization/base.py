"""Base serializer for envelope records."""

from abc import ABC, abstractmethod
from typing import Any


class Serializer(ABC):
    """Abstract base class for payload serializers."""

    format_name: str = ""

    @abstractmethod
    def marshal(self, record: dict[str, Any]) -> bytes:
        """Encode a record into a payload.

        Args:
            record: Envelope built from one sample.

        Returns:
            Encoded payload bytes.

        Raises:
            SerializationError: If the record is malformed or does not
                conform to the serializer's schema.
        """
        pass

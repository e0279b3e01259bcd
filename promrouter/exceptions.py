"""Custom exceptions for promrouter."""

from typing import Any


class PromRouterError(Exception):
    """Base exception for all promrouter errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(PromRouterError):
    """Configuration-related errors."""

    pass


class ConfigValidationError(ConfigurationError):
    """Missing required field or invalid value in rule or settings configuration."""

    pass


class SchemaLoadError(ConfigurationError):
    """Serialization schema file is unreadable or invalid."""

    def __init__(self, path: str, details: str) -> None:
        super().__init__(f"Failed to load schema from {path}: {details}", path=path, details=details)


class TransformError(PromRouterError):
    """Per-sample transform errors, recovered inside the pipelines."""

    pass


class SerializationError(TransformError):
    """A record could not be marshalled."""

    def __init__(self, details: str, serializer: str | None = None) -> None:
        super().__init__(f"Serialization failed: {details}", serializer=serializer, details=details)


class TemplateRenderError(TransformError):
    """Topic template expansion failed."""

    def __init__(self, details: str, template: str | None = None) -> None:
        super().__init__(f"Topic template render failed: {details}", template=template, details=details)

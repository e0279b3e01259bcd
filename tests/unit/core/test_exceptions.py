"""Tests for the exception hierarchy."""

from promrouter.exceptions import (
    ConfigValidationError,
    ConfigurationError,
    PromRouterError,
    SchemaLoadError,
    SerializationError,
    TemplateRenderError,
    TransformError,
)


def test_context_serialization():
    """Test to_dict for API and log output."""
    error = ConfigValidationError("bad rule", rule=3)

    assert isinstance(error, ConfigurationError)
    assert error.to_dict() == {
        "error_type": "ConfigValidationError",
        "message": "bad rule",
        "context": {"rule": 3},
    }


def test_schema_load_error_message():
    """Test the schema load error message and context."""
    error = SchemaLoadError("/tmp/x.avsc", "couldn't read avro schema")

    assert isinstance(error, PromRouterError)
    assert str(error) == "Failed to load schema from /tmp/x.avsc: couldn't read avro schema"
    assert error.context["path"] == "/tmp/x.avsc"


def test_transform_errors():
    """Test the transform error family."""
    serialization = SerializationError("NaN not allowed", serializer="json")
    render = TemplateRenderError("'job' is undefined", template="m.{{ job }}")

    assert isinstance(serialization, TransformError)
    assert isinstance(render, TransformError)
    assert serialization.context["serializer"] == "json"
    assert "NaN not allowed" in str(serialization)

"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Any, Literal, Tuple, Type

import yaml
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


def load_yaml_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load configuration from YAML file.

    Priority:
    1. Explicitly provided config_path
    2. ~/.promrouter/config.yaml (default location)
    3. Empty dict if no file exists

    Args:
        config_path: Optional path to config file

    Returns:
        Dictionary of configuration values (flattened from nested YAML)
    """
    if config_path is None:
        config_path = Path.home() / ".promrouter" / "config.yaml"

    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            yaml_data = yaml.safe_load(f) or {}

        flattened = {}

        if "serialization" in yaml_data:
            serialization = yaml_data["serialization"]
            if "format" in serialization:
                flattened["serialization_format"] = serialization["format"]
            if "avro_schema_path" in serialization:
                flattened["avro_schema_path"] = serialization["avro_schema_path"]

        if "routing" in yaml_data:
            routing = yaml_data["routing"]
            if "pipeline" in routing:
                flattened["pipeline"] = routing["pipeline"]
            if "rules_path" in routing:
                flattened["rules_path"] = routing["rules_path"]
            if "topic_template" in routing:
                flattened["topic_template"] = routing["topic_template"]
            if "match" in routing:
                flattened["match"] = routing["match"]

        if "logging" in yaml_data:
            logging = yaml_data["logging"]
            if "level" in logging:
                flattened["log_level"] = logging["level"]
            if "format" in logging:
                flattened["log_format"] = logging["format"]

        return flattened

    except Exception as e:
        import warnings

        warnings.warn(f"Failed to load config from {config_path}: {e}")
        return {}


_config_path: Path | None = None


class YamlSettingsSource(PydanticBaseSettingsSource):
    """
    Custom settings source that loads configuration from YAML file.

    This allows YAML config to be loaded with proper priority in the settings chain.
    """

    def get_field_value(self, field: Any, field_name: str) -> Tuple[Any, str, bool]:
        """Not used since we override __call__."""
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        return load_yaml_config(_config_path)


class Settings(BaseSettings):
    """
    promrouter configuration settings.

    Configuration priority (highest to lowest):
    1. Environment variables (e.g., PROMROUTER_PIPELINE=templated)
    2. YAML configuration file (~/.promrouter/config.yaml)
    3. Default values defined in this class
    """

    model_config = SettingsConfigDict(
        env_prefix="PROMROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    serialization_format: Literal["json", "avro-json", "avro-binary"] = Field(
        default="json",
        description="Wire format for serialized payloads",
    )
    avro_schema_path: Path | None = Field(
        default=None,
        description="Avro schema file (defaults to the bundled schema of the pipeline)",
    )

    pipeline: Literal["routed", "templated"] = Field(
        default="routed",
        description="Transform pipeline: rule-routed or template-routed",
    )
    rules_path: Path | None = Field(
        default=None,
        description="Rule set YAML file (required for the routed pipeline)",
    )
    topic_template: str = Field(
        default="metrics",
        description="Jinja2 topic template for the templated pipeline",
    )
    match: list[str] = Field(
        default_factory=list,
        description="Series selectors filtering the templated pipeline",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json", description="Log format"
    )

    @field_validator("avro_schema_path", "rules_path")
    @classmethod
    def validate_paths(cls, v: Path | None) -> Path | None:
        """Ensure paths are absolute."""
        if v is not None and not v.is_absolute():
            v = v.expanduser().resolve()
        return v

    @property
    def uses_avro(self) -> bool:
        """Check if an Avro schema-bound format is selected."""
        return self.serialization_format.startswith("avro")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """
        Customize settings sources priority.

        Priority order (highest to lowest):
        1. Explicit kwargs (init_settings) - for testing and programmatic config
        2. Environment variables
        3. YAML configuration file
        4. .env file
        5. Field defaults
        """
        return (
            init_settings,
            env_settings,
            YamlSettingsSource(settings_cls),
            dotenv_settings,
        )


_settings: Settings | None = None


def get_settings(config_path: Path | None = None, reload: bool = False) -> Settings:
    """
    Get global settings instance.

    Args:
        config_path: Optional path to YAML config file (defaults to ~/.promrouter/config.yaml)
        reload: If True, force reload settings (useful for testing)

    Returns:
        Settings instance with merged configuration
    """
    global _settings, _config_path
    if _settings is None or reload:
        _config_path = config_path

        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings, _config_path
    _settings = None
    _config_path = None

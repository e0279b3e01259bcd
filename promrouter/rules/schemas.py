"""Pydantic schemas for rule set configuration files."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldPatternConfig(BaseModel):
    """Schema for a rewriter output label."""

    name: str = Field(..., min_length=1, description="Label name pattern")
    value: str = Field(..., min_length=1, description="Label value pattern")

    model_config = ConfigDict(extra="forbid")


class LabelRewriterConfig(BaseModel):
    """Schema for a label rewriter."""

    name: str = Field(..., min_length=1, description="Trigger label name")
    regex: str = Field(..., min_length=1, description="Regex applied to the trigger value")
    overwrite: bool = Field(default=False, description="Drop the trigger label on rewrite")
    labels: list[FieldPatternConfig] = Field(..., description="Output label patterns")

    model_config = ConfigDict(extra="forbid")


class SelectorConfig(BaseModel):
    """Schema for a metric name selector."""

    method: Literal["eq", "start_with", "regex"] = Field(..., description="Match method")
    value: str = Field(..., min_length=1, description="Match value")

    model_config = ConfigDict(extra="forbid")


class RuleConfig(BaseModel):
    """Schema for a routing rule."""

    topic: str = Field(..., min_length=1, description="Destination topic")
    token: str = Field(..., min_length=1, description="Credential token")
    selectors: list[SelectorConfig] = Field(..., min_length=1, description="Selectors, OR-ed")
    label_rewriter: list[LabelRewriterConfig] = Field(
        default_factory=list, alias="labelRewriter", description="Label rewriters"
    )
    org: int = Field(default=0, description="Organization id, 0 uses the default")
    delete_labels: list[str] = Field(
        default_factory=list, alias="deleteLabels", description="Labels removed after rewrite"
    )

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("label_rewriter", "delete_labels", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        """Treat an explicit null as an empty list."""
        return [] if v is None else v

    @field_validator("delete_labels", mode="before")
    @classmethod
    def mapping_as_list(cls, v: Any) -> Any:
        """Accept ``{label: bool}`` mappings; every key present is deleted."""
        if isinstance(v, dict):
            return list(v)
        return v


class RuleSetConfig(BaseModel):
    """Schema for a complete rule set file."""

    default_org: int = Field(..., alias="defaultOrg", description="Default organization id")
    rules: list[RuleConfig] = Field(default_factory=list, description="Rules in match order")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("rules", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        """Treat an explicit null as an empty list."""
        return [] if v is None else v

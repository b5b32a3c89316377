# =============================================================================
# Parameter Mapping Models Module
# =============================================================================
# Defines models for the parameter_mappings collection:
# - TransformType: Known transform identifiers
# - Transform: Optional value transform applied by the mapping
# - ParameterMapping: Mapping document
# =============================================================================

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import DocumentId, TimestampsMixin

__all__ = ["TransformType", "Transform", "ParameterMapping"]


class TransformType(str, Enum):
    """
    Transform identifiers understood by the mapping application.

    The stored ``transform.type`` is free-form; this enum lists the values
    the application ships with.
    """

    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    MAP_VALUE = "map_value"
    CONCAT = "concat"


class Transform(BaseModel):
    """Value transform: a type tag plus opaque configuration."""

    type: Optional[str] = Field(None, description="Transform identifier, e.g. 'uppercase'")
    config: Optional[dict[str, Any]] = Field(None, description="Transform configuration")


class ParameterMapping(TimestampsMixin):
    """
    Parameter mapping document model.

    Maps an input parameter name to the name a specific vendor expects.
    (vendor_id, source_parameter) is unique (uniq_vendor_source_param).

    Attributes:
        vendor_id: ObjectId of the owning vendor
        source_parameter: Input parameter name
        target_parameter: Vendor-specific parameter name
        transform: Optional value transform
        is_active: Whether the mapping is active
        tags: Free-form labels (deduplicated, order preserved)
        created_at: Creation timestamp
        updated_at: Last modification timestamp
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    vendor_id: DocumentId = Field(..., description="Owning vendor ObjectId")
    source_parameter: str = Field(..., min_length=1, description="Input parameter name")
    target_parameter: str = Field(..., min_length=1, description="Vendor-specific parameter name")
    transform: Optional[Transform] = Field(None, description="Optional value transform")
    is_active: bool = Field(True, description="Whether the mapping is active")
    tags: list[str] = Field(default_factory=list, description="Mapping labels")

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """
        Clean and deduplicate tags.

        - Removes empty/whitespace-only tags
        - Trims whitespace
        - Removes duplicates (preserves order)
        """
        cleaned = [tag.strip() for tag in v if tag and tag.strip()]
        return list(dict.fromkeys(cleaned))

# =============================================================================
# Base Models and Mixins
# =============================================================================
# Shared field types and mixins for stored documents.
# =============================================================================

"""Base types and mixins shared by vendor, mapping and history documents."""

from datetime import datetime, timezone
from typing import Annotated, Any

from bson import ObjectId
from pydantic import BaseModel, BeforeValidator, Field

__all__ = ["DocumentId", "TimestampsMixin", "utc_now"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def validate_object_id(value: Any) -> ObjectId:
    """
    Coerce a value into a BSON ObjectId.

    Accepts ObjectId instances and 24-character hex strings.

    Raises:
        ValueError: If the value is not a valid ObjectId representation
    """
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    raise ValueError(f"Invalid ObjectId: {value!r}")


DocumentId = Annotated[
    ObjectId,
    BeforeValidator(validate_object_id),
]


class TimestampsMixin(BaseModel):
    """
    Creation and modification timestamps.

    Both default to the current UTC time so a freshly built document always
    satisfies the validators' required date fields.
    """

    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utc_now, description="Last modification timestamp")

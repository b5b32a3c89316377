# =============================================================================
# Mapping History Models Module
# =============================================================================
# Defines the append-only audit record for parameter mapping changes.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import DocumentId, utc_now

__all__ = ["ChangeType", "ChangedBy", "MappingHistory"]


class ChangeType(str, Enum):
    """Kind of change recorded in mapping_histories."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ChangedBy(BaseModel):
    """Actor responsible for a change."""

    user_id: Optional[str] = None
    name: Optional[str] = None


class MappingHistory(BaseModel):
    """
    Mapping history document model.

    Insert-only: history records are never updated or deleted. vendor_id is
    denormalized from the mapping so a vendor's history can be read without
    a join.

    Attributes:
        mapping_id: ObjectId of the changed parameter mapping
        vendor_id: ObjectId of the mapping's vendor
        change_type: create, update or delete
        before: Snapshot before the change (None for create)
        after: Snapshot after the change (None for delete)
        changed_by: Optional actor
        created_at: When the change was recorded
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    mapping_id: DocumentId = Field(..., description="Parameter mapping ObjectId")
    vendor_id: DocumentId = Field(..., description="Vendor ObjectId (denormalized)")
    change_type: ChangeType = Field(..., description="Type of change")
    before: Optional[dict[str, Any]] = Field(None, description="Snapshot before the change")
    after: Optional[dict[str, Any]] = Field(None, description="Snapshot after the change")
    changed_by: Optional[ChangedBy] = Field(None, description="Actor responsible for the change")
    created_at: datetime = Field(default_factory=utc_now, description="Record timestamp")

    def to_document(self) -> dict[str, Any]:
        """Serialize for insertion, storing change_type as its string value."""
        return self.model_dump(mode="python") | {"change_type": self.change_type.value}

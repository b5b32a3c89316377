# =============================================================================
# Vendor Models Module
# =============================================================================
# Defines models for the vendors collection:
# - VendorContact: Optional contact details
# - Vendor: Vendor document
# =============================================================================

from typing import Any, Optional

from pydantic import BaseModel, Field

from .base import TimestampsMixin

__all__ = ["VendorContact", "Vendor"]


class VendorContact(BaseModel):
    """Contact details for a vendor. Every field may be null."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class Vendor(TimestampsMixin):
    """
    Vendor document model.

    A vendor owns a set of parameter mappings. Both ``name`` and ``code``
    are unique across the collection (uniq_vendor_name, uniq_vendor_code).

    Attributes:
        name: Vendor display name
        code: Unique short code identifying the vendor
        is_active: Whether the vendor is active
        contact: Optional contact details
        metadata: Opaque vendor metadata
        created_at: Creation timestamp
        updated_at: Last modification timestamp
    """

    name: str = Field(..., min_length=1, description="Vendor display name")
    code: str = Field(..., min_length=1, description="Unique short code for vendor")
    is_active: bool = Field(True, description="Whether the vendor is active")
    contact: Optional[VendorContact] = Field(None, description="Vendor contact details")
    metadata: Optional[dict[str, Any]] = Field(None, description="Opaque vendor metadata")

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Acme Telemetry",
                "code": "ACME",
                "is_active": True,
                "contact": {"name": "Jane Doe", "email": "jane@acme.example", "phone": None},
                "metadata": {"region": "eu-west"},
            }
        }
    }

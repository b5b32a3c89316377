# =============================================================================
# Data Models Library
# =============================================================================
# Pydantic models for the parameter mapping schema.
# =============================================================================

"""
Data models for schema provisioning.

This library provides:
- Desired state: CollectionSpec, IndexSpec, SeedSpec, DesiredState
- Reports: ProvisionReport and per-collection outcomes
- Stored documents: Vendor, ParameterMapping, MappingHistory
- Configuration models
"""

# Shared types
from .base import (
    DocumentId,
    TimestampsMixin,
    utc_now,
)

# Desired state
from .desired_state import (
    IndexDirection,
    ValidationLevel,
    ValidationAction,
    CollectionSpec,
    IndexSpec,
    SeedSpec,
    DesiredState,
)

# Reports
from .report import (
    CollectionOutcome,
    IndexOutcome,
    SeedOutcome,
    CollectionReport,
    ProvisionReport,
)

# Stored documents
from .vendor import (
    VendorContact,
    Vendor,
)
from .mapping import (
    TransformType,
    Transform,
    ParameterMapping,
)
from .history import (
    ChangeType,
    ChangedBy,
    MappingHistory,
)

# Configuration models
from .config import MongoSettings

__all__ = [
    # Shared types
    "DocumentId",
    "TimestampsMixin",
    "utc_now",
    # Desired state
    "IndexDirection",
    "ValidationLevel",
    "ValidationAction",
    "CollectionSpec",
    "IndexSpec",
    "SeedSpec",
    "DesiredState",
    # Reports
    "CollectionOutcome",
    "IndexOutcome",
    "SeedOutcome",
    "CollectionReport",
    "ProvisionReport",
    # Stored documents
    "VendorContact",
    "Vendor",
    "TransformType",
    "Transform",
    "ParameterMapping",
    "ChangeType",
    "ChangedBy",
    "MappingHistory",
    # Configuration models
    "MongoSettings",
]

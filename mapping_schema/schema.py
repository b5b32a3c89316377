"""
Parameter mapping schema: vendors, parameter_mappings, mapping_histories.

Validator documents are intentionally permissive (additionalProperties
allowed, validationLevel moderate) so the schema can evolve without locking
out existing documents. Index names are part of the persisted contract;
tooling and the provisioner identify indexes by name.

Schema constants are FROZEN - do not modify in place. Changing a key pattern
under an existing index name is reported as a conflict by the provisioner.
"""

from datetime import datetime
from typing import Optional

from .models import (
    CollectionSpec,
    DesiredState,
    IndexDirection,
    IndexSpec,
    SeedSpec,
    ValidationLevel,
    Vendor,
    utc_now,
)

ASC = IndexDirection.ASCENDING
DESC = IndexDirection.DESCENDING

VENDORS = "vendors"
PARAMETER_MAPPINGS = "parameter_mappings"
MAPPING_HISTORIES = "mapping_histories"

DEFAULT_VENDOR_NAME = "Default Vendor"
DEFAULT_VENDOR_CODE = "DEFAULT"

# =============================================================================
# FROZEN VALIDATOR DOCUMENTS
# =============================================================================

VENDORS_VALIDATOR = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["name", "code", "is_active", "created_at", "updated_at"],
        "properties": {
            "name": {"bsonType": "string", "description": "Vendor display name"},
            "code": {"bsonType": "string", "description": "Unique short code for vendor"},
            "is_active": {"bsonType": "bool"},
            "contact": {
                "bsonType": ["object", "null"],
                "properties": {
                    "name": {"bsonType": ["string", "null"]},
                    "email": {"bsonType": ["string", "null"]},
                    "phone": {"bsonType": ["string", "null"]},
                },
            },
            "metadata": {"bsonType": ["object", "null"]},
            "created_at": {"bsonType": "date"},
            "updated_at": {"bsonType": "date"},
        },
        "additionalProperties": True,
    }
}

PARAMETER_MAPPINGS_VALIDATOR = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": [
            "vendor_id",
            "source_parameter",
            "target_parameter",
            "is_active",
            "created_at",
            "updated_at",
        ],
        "properties": {
            "vendor_id": {"bsonType": "objectId"},
            "source_parameter": {"bsonType": "string"},
            "target_parameter": {"bsonType": "string"},
            "transform": {
                "bsonType": ["object", "null"],
                "properties": {
                    "type": {"bsonType": ["string", "null"]},
                    "config": {"bsonType": ["object", "null"]},
                },
                "additionalProperties": True,
            },
            "is_active": {"bsonType": "bool"},
            "tags": {"bsonType": ["array"], "items": {"bsonType": "string"}},
            "created_at": {"bsonType": "date"},
            "updated_at": {"bsonType": "date"},
        },
        "additionalProperties": True,
    }
}

MAPPING_HISTORIES_VALIDATOR = {
    "$jsonSchema": {
        "bsonType": "object",
        "required": ["mapping_id", "vendor_id", "change_type", "created_at"],
        "properties": {
            "mapping_id": {"bsonType": "objectId"},
            "vendor_id": {"bsonType": "objectId"},
            "change_type": {
                "enum": ["create", "update", "delete"],
                "description": "Type of change",
            },
            "before": {"bsonType": ["object", "null"]},
            "after": {"bsonType": ["object", "null"]},
            "changed_by": {
                "bsonType": ["object", "null"],
                "properties": {
                    "user_id": {"bsonType": ["string", "null"]},
                    "name": {"bsonType": ["string", "null"]},
                },
            },
            "created_at": {"bsonType": "date"},
        },
        "additionalProperties": True,
    }
}

# =============================================================================
# COLLECTIONS AND INDEXES
# =============================================================================

COLLECTIONS = [
    CollectionSpec(name=VENDORS, validator=VENDORS_VALIDATOR, validation_level=ValidationLevel.MODERATE),
    CollectionSpec(
        name=PARAMETER_MAPPINGS,
        validator=PARAMETER_MAPPINGS_VALIDATOR,
        validation_level=ValidationLevel.MODERATE,
    ),
    CollectionSpec(
        name=MAPPING_HISTORIES,
        validator=MAPPING_HISTORIES_VALIDATOR,
        validation_level=ValidationLevel.MODERATE,
    ),
]

INDEXES = [
    # vendors
    IndexSpec(collection=VENDORS, name="uniq_vendor_name", keys=[("name", ASC)], unique=True),
    IndexSpec(collection=VENDORS, name="uniq_vendor_code", keys=[("code", ASC)], unique=True),
    IndexSpec(collection=VENDORS, name="idx_vendor_active", keys=[("is_active", ASC)]),
    IndexSpec(collection=VENDORS, name="idx_vendor_created_at_desc", keys=[("created_at", DESC)]),
    # parameter_mappings
    IndexSpec(
        collection=PARAMETER_MAPPINGS,
        name="uniq_vendor_source_param",
        keys=[("vendor_id", ASC), ("source_parameter", ASC)],
        unique=True,
    ),
    IndexSpec(
        collection=PARAMETER_MAPPINGS,
        name="idx_vendor_target_param",
        keys=[("vendor_id", ASC), ("target_parameter", ASC)],
    ),
    IndexSpec(collection=PARAMETER_MAPPINGS, name="idx_mapping_active", keys=[("is_active", ASC)]),
    IndexSpec(collection=PARAMETER_MAPPINGS, name="idx_mapping_tags", keys=[("tags", ASC)]),
    IndexSpec(collection=PARAMETER_MAPPINGS, name="idx_mapping_created_at_desc", keys=[("created_at", DESC)]),
    # mapping_histories
    IndexSpec(
        collection=MAPPING_HISTORIES,
        name="idx_history_mapping_created_desc",
        keys=[("mapping_id", ASC), ("created_at", DESC)],
    ),
    IndexSpec(
        collection=MAPPING_HISTORIES,
        name="idx_history_vendor_created_desc",
        keys=[("vendor_id", ASC), ("created_at", DESC)],
    ),
    IndexSpec(collection=MAPPING_HISTORIES, name="idx_history_change_type", keys=[("change_type", ASC)]),
]


# =============================================================================
# SEED DATA
# =============================================================================

def default_vendor(now: Optional[datetime] = None) -> Vendor:
    """The vendor seeded into an empty vendors collection."""
    now = now or utc_now()
    return Vendor(
        name=DEFAULT_VENDOR_NAME,
        code=DEFAULT_VENDOR_CODE,
        is_active=True,
        contact=None,
        metadata=None,
        created_at=now,
        updated_at=now,
    )


def build_desired_state(now: Optional[datetime] = None) -> DesiredState:
    """
    Build the desired state for the parameter mapping schema.

    Args:
        now: Timestamp for seed documents (defaults to the current UTC time)

    Returns:
        DesiredState with the three collections, their indexes and the
        Default Vendor seed (guarded on an empty vendors collection)
    """
    return DesiredState(
        collections=COLLECTIONS,
        indexes=INDEXES,
        seeds=[
            SeedSpec(
                collection=VENDORS,
                documents=[default_vendor(now).model_dump()],
                description=DEFAULT_VENDOR_NAME,
            )
        ],
    )

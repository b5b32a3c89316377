# =============================================================================
# Desired State Models Module
# =============================================================================
# Declarative description of the schema the provisioner reconciles:
# - IndexDirection, ValidationLevel, ValidationAction: Option enums
# - CollectionSpec: Collection plus its validator
# - IndexSpec: Named secondary index
# - SeedSpec: Guarded one-time seed insertion
# - DesiredState: Consistency-checked set of the above
# =============================================================================

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

__all__ = [
    "IndexDirection",
    "ValidationLevel",
    "ValidationAction",
    "CollectionSpec",
    "IndexSpec",
    "SeedSpec",
    "DesiredState",
]

RESERVED_INDEX_NAME = "_id_"


class IndexDirection(int, Enum):
    """Sort direction of an index key (matches pymongo.ASCENDING/DESCENDING)."""

    ASCENDING = 1
    DESCENDING = -1


class ValidationLevel(str, Enum):
    """
    MongoDB validationLevel.

    MODERATE only checks inserts and updates to documents that already
    conform, so tightening a validator never locks out legacy documents.
    """

    STRICT = "strict"
    MODERATE = "moderate"
    OFF = "off"


class ValidationAction(str, Enum):
    """MongoDB validationAction."""

    ERROR = "error"
    WARN = "warn"


class CollectionSpec(BaseModel):
    """
    Desired collection.

    Attributes:
        name: Collection name (unique within a DesiredState)
        validator: Validator document, e.g. {"$jsonSchema": {...}}
        validation_level: How strictly existing documents are checked
        validation_action: Reject (error) or only log (warn) invalid writes
    """

    name: str = Field(..., min_length=1, description="Collection name")
    validator: Optional[dict[str, Any]] = Field(None, description="Validator document")
    validation_level: ValidationLevel = Field(ValidationLevel.MODERATE, description="validationLevel")
    validation_action: ValidationAction = Field(ValidationAction.ERROR, description="validationAction")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if "$" in v or "\x00" in v:
            raise ValueError(f"Invalid collection name: {v!r}")
        if v.startswith("system."):
            raise ValueError(f"Collection name cannot use the reserved 'system.' prefix: {v!r}")
        return v


class IndexSpec(BaseModel):
    """
    Desired secondary index.

    The name is the idempotency key: the same name with the same keys and
    options is a no-op, the same name with anything else is a conflict.

    Attributes:
        collection: Owning collection name
        name: Stable index name
        keys: Ordered (field, direction) pairs
        unique: Whether the index enforces uniqueness
    """

    collection: str = Field(..., min_length=1, description="Owning collection name")
    name: str = Field(..., min_length=1, description="Stable index name")
    keys: list[tuple[str, IndexDirection]] = Field(..., min_length=1, description="Key pattern")
    unique: bool = Field(False, description="Enforce uniqueness")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if v == RESERVED_INDEX_NAME:
            raise ValueError(f"Index name '{RESERVED_INDEX_NAME}' is reserved for the primary key")
        return v

    @field_validator("keys")
    @classmethod
    def validate_keys(cls, v: list[tuple[str, IndexDirection]]) -> list[tuple[str, IndexDirection]]:
        fields = [field for field, _ in v]
        if any(not field for field in fields):
            raise ValueError("Index key fields cannot be empty")
        if len(set(fields)) != len(fields):
            raise ValueError(f"Index key fields must be unique, got {fields}")
        return v

    def key_list(self) -> list[tuple[str, int]]:
        """Key pattern in the form accepted by Collection.create_index."""
        return [(field, int(direction.value)) for field, direction in self.keys]

    def definition(self) -> dict[str, Any]:
        """Comparable definition: key pattern plus options."""
        return {"keys": self.key_list(), "unique": self.unique}


class SeedSpec(BaseModel):
    """
    One-time seed insertion.

    The documents are inserted only while count_documents(guard_filter)
    equals guard_count. The default guard is "collection is empty".

    Attributes:
        collection: Owning collection name
        documents: Documents to insert
        guard_filter: Filter the guard counts against
        guard_count: Count at which the guard holds
        description: Human-readable label for progress output
    """

    collection: str = Field(..., min_length=1, description="Owning collection name")
    documents: list[dict[str, Any]] = Field(..., min_length=1, description="Documents to insert")
    guard_filter: dict[str, Any] = Field(default_factory=dict, description="Guard filter")
    guard_count: int = Field(0, ge=0, description="Guard count")
    description: str = Field("", description="Label for progress output")


class DesiredState(BaseModel):
    """
    Complete desired schema.

    Validated on construction so that a malformed declaration fails before
    any call reaches the database.
    """

    collections: list[CollectionSpec] = Field(..., min_length=1)
    indexes: list[IndexSpec] = Field(default_factory=list)
    seeds: list[SeedSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_references(self) -> "DesiredState":
        names = [spec.name for spec in self.collections]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate collection declarations: {duplicates}")

        declared = set(names)
        seen_indexes: set[tuple[str, str]] = set()
        for index in self.indexes:
            if index.collection not in declared:
                raise ValueError(
                    f"Index '{index.name}' references undeclared collection '{index.collection}'"
                )
            key = (index.collection, index.name)
            if key in seen_indexes:
                raise ValueError(
                    f"Duplicate index name '{index.name}' on collection '{index.collection}'"
                )
            seen_indexes.add(key)

        seeded: set[str] = set()
        for seed in self.seeds:
            if seed.collection not in declared:
                raise ValueError(f"Seed references undeclared collection '{seed.collection}'")
            if seed.collection in seeded:
                raise ValueError(f"Multiple seeds declared for collection '{seed.collection}'")
            seeded.add(seed.collection)

        return self

    @property
    def collection_names(self) -> list[str]:
        return [spec.name for spec in self.collections]

    def indexes_for(self, collection: str) -> list[IndexSpec]:
        return [index for index in self.indexes if index.collection == collection]

    def seeds_for(self, collection: str) -> list[SeedSpec]:
        return [seed for seed in self.seeds if seed.collection == collection]

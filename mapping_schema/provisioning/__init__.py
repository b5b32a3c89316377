"""Idempotent schema provisioning for MongoDB."""

from .errors import (
    IndexConflictError,
    ProvisioningError,
    SeedRejectedError,
    StepFailedError,
    StoreUnavailableError,
    ValidatorRejectedError,
)
from .provisioner import (
    ensure_collection,
    ensure_index,
    ensure_seed,
    ensure_validator,
    plan,
    provision,
)

__all__ = [
    "ensure_collection",
    "ensure_index",
    "ensure_validator",
    "ensure_seed",
    "provision",
    "plan",
    "ProvisioningError",
    "StoreUnavailableError",
    "IndexConflictError",
    "ValidatorRejectedError",
    "SeedRejectedError",
    "StepFailedError",
]

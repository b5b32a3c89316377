# =============================================================================
# Provisioning Errors
# =============================================================================
# Error taxonomy raised by the schema provisioner:
# - StoreUnavailableError: Cannot reach MongoDB
# - IndexConflictError: Existing index incompatible with its declaration
# - ValidatorRejectedError: collMod rejected the validator document
# - SeedRejectedError: Seed documents could not be inserted
# - StepFailedError: Any other store error during a step
# =============================================================================

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from ..models import ProvisionReport

__all__ = [
    "ProvisioningError",
    "StoreUnavailableError",
    "IndexConflictError",
    "ValidatorRejectedError",
    "SeedRejectedError",
    "StepFailedError",
]


class ProvisioningError(Exception):
    """
    Base class for provisioning failures.

    Attributes:
        collection: Collection being provisioned when the failure occurred
        operation: Step that failed (ensure_collection, ensure_index, ...)
        cause: Underlying store exception, if any
        report: Partial report of the steps completed before the failure
    """

    def __init__(
        self,
        message: str,
        *,
        collection: Optional[str] = None,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.collection = collection
        self.operation = operation
        self.cause = cause
        self.report: Optional["ProvisionReport"] = None

    def __str__(self) -> str:
        context = " ".join(
            part
            for part in (
                self.operation,
                f"on '{self.collection}'" if self.collection else None,
            )
            if part
        )
        return f"{context} failed: {self.message}" if context else self.message


class StoreUnavailableError(ProvisioningError):
    """MongoDB could not be reached; provisioning aborts immediately."""


class IndexConflictError(ProvisioningError):
    """
    An index with the declared name exists with different keys or options,
    or the declared key pattern already exists under another name.

    The existing index is never dropped or altered.
    """

    def __init__(
        self,
        collection: str,
        index_name: str,
        existing: dict[str, Any],
        desired: dict[str, Any],
        *,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            f"index '{index_name}' conflicts with existing definition: "
            f"existing={existing} desired={desired}",
            collection=collection,
            operation="ensure_index",
            cause=cause,
        )
        self.index_name = index_name
        self.existing = existing
        self.desired = desired


class ValidatorRejectedError(ProvisioningError):
    """The store rejected the validator document; message is the store's errmsg."""


class SeedRejectedError(ProvisioningError):
    """Seed documents were rejected (validation failure or non-race write error)."""


class StepFailedError(ProvisioningError):
    """A provisioning step failed with an unclassified store error."""

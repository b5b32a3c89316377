"""
Schema provisioner - reconciles a live MongoDB database with a DesiredState.

Every step is idempotent: running provision() any number of times against a
database it previously provisioned yields the same collections, indexes and
validators, and at most one seed insertion. Conflicting declarations raise
instead of altering existing state.

Order: collections, then per collection its indexes then its validator;
seeds run last so seed documents face the same validators as application
writes.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional

from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import (
    BulkWriteError,
    CollectionInvalid,
    ConnectionFailure,
    OperationFailure,
    PyMongoError,
    WriteError,
)

from ..models import (
    CollectionOutcome,
    CollectionSpec,
    DesiredState,
    IndexOutcome,
    IndexSpec,
    ProvisionReport,
    SeedOutcome,
    SeedSpec,
)
from .errors import (
    IndexConflictError,
    ProvisioningError,
    SeedRejectedError,
    StepFailedError,
    StoreUnavailableError,
    ValidatorRejectedError,
)

__all__ = [
    "ensure_collection",
    "ensure_index",
    "ensure_validator",
    "ensure_seed",
    "provision",
    "plan",
]

logger = logging.getLogger(__name__)

# MongoDB server error codes
NAMESPACE_EXISTS = 48
INDEX_OPTIONS_CONFLICT = 85
INDEX_KEY_SPECS_CONFLICT = 86
DUPLICATE_KEY = 11000
DOCUMENT_VALIDATION_FAILURE = 121

# index_information() fields that describe the index build, not its definition
_BUILD_FIELDS = frozenset({"v", "key", "ns", "background"})


# =============================================================================
# Helpers
# =============================================================================


def _normalize_definition(info: Mapping[str, Any]) -> dict[str, Any]:
    """
    Reduce an index_information() entry to the shape of IndexSpec.definition().

    Every other option the server reports (sparse, partialFilterExpression,
    expireAfterSeconds, collation, hidden) is kept, so an index carrying
    options the declaration lacks never compares equal to it. A False
    boolean is the server default and is dropped.
    """
    keys = [
        (field, direction if isinstance(direction, str) else int(direction))
        for field, direction in info["key"]
    ]
    options = {
        option: value
        for option, value in info.items()
        if option not in _BUILD_FIELDS and value is not False
    }
    options.update(keys=keys, unique=bool(info.get("unique", False)))
    return options


def _existing_index(collection: Collection, name: str) -> Optional[dict[str, Any]]:
    info = collection.index_information().get(name)
    return _normalize_definition(info) if info is not None else None


def _index_with_keys(collection: Collection, keys: list[tuple[str, int]]) -> Optional[tuple[str, dict[str, Any]]]:
    for name, info in collection.index_information().items():
        definition = _normalize_definition(info)
        if definition["keys"] == keys:
            return name, definition
    return None


def _guard_holds(collection: Collection, seed: SeedSpec) -> bool:
    return collection.count_documents(seed.guard_filter) == seed.guard_count


def _write_error_codes(exc: PyMongoError) -> set[Optional[int]]:
    if isinstance(exc, BulkWriteError):
        codes = {error.get("code") for error in (exc.details or {}).get("writeErrors", [])}
        return codes or {exc.code}
    return {getattr(exc, "code", None)}


def _errmsg(exc: PyMongoError) -> str:
    details = getattr(exc, "details", None)
    if isinstance(details, Mapping) and details.get("errmsg"):
        return str(details["errmsg"])
    return str(exc)


@contextmanager
def _step(report: ProvisionReport, collection: str, operation: str) -> Iterator[None]:
    """
    Run one provisioning step, converting store errors into ProvisioningError.

    The partial report is attached to the raised error and a diagnostic is
    logged before the error propagates.
    """
    try:
        yield
    except ProvisioningError as exc:
        exc.collection = exc.collection or collection
        exc.operation = exc.operation or operation
        exc.report = report
        logger.error("✗ %s", exc)
        raise
    except ConnectionFailure as exc:
        error = StoreUnavailableError(str(exc), collection=collection, operation=operation, cause=exc)
        error.report = report
        logger.error("✗ %s", error)
        raise error from exc
    except PyMongoError as exc:
        error = StepFailedError(_errmsg(exc), collection=collection, operation=operation, cause=exc)
        error.report = report
        logger.error("✗ %s", error)
        raise error from exc


# =============================================================================
# Steps
# =============================================================================


def ensure_collection(db: Database, name: str) -> CollectionOutcome:
    """
    Create a collection if it does not exist.

    Returns:
        CREATED on first run, EXISTED afterwards (including when a concurrent
        provisioner created it between the listing and the create call)
    """
    if name in db.list_collection_names():
        logger.info("• Collection exists: %s", name)
        return CollectionOutcome.EXISTED

    try:
        db.create_collection(name)
    except CollectionInvalid:
        logger.info("• Collection exists: %s", name)
        return CollectionOutcome.EXISTED
    except OperationFailure as exc:
        if exc.code != NAMESPACE_EXISTS:
            raise
        logger.info("• Collection exists: %s", name)
        return CollectionOutcome.EXISTED

    logger.info("✓ Created collection: %s", name)
    return CollectionOutcome.CREATED


def ensure_index(db: Database, spec: IndexSpec) -> IndexOutcome:
    """
    Create a named index unless an identical one already exists.

    Raises:
        IndexConflictError: The name exists with different keys/options, or
            the key pattern exists under a different name
    """
    collection = db[spec.collection]
    desired = spec.definition()

    existing = _existing_index(collection, spec.name)
    if existing is not None:
        if existing != desired:
            raise IndexConflictError(spec.collection, spec.name, existing, desired)
        logger.info("• Index exists: %s.%s", spec.collection, spec.name)
        return IndexOutcome.MATCHED

    options: dict[str, Any] = {"name": spec.name}
    if spec.unique:
        options["unique"] = True

    try:
        collection.create_index(spec.key_list(), **options)
    except OperationFailure as exc:
        # A concurrent provisioner may have created the same index first
        existing = _existing_index(collection, spec.name)
        if existing == desired:
            logger.warning(
                "Index %s.%s was created concurrently (%s); treating as present",
                spec.collection,
                spec.name,
                _errmsg(exc),
            )
            return IndexOutcome.MATCHED
        if existing is not None:
            raise IndexConflictError(spec.collection, spec.name, existing, desired, cause=exc) from exc
        if exc.code in (INDEX_OPTIONS_CONFLICT, INDEX_KEY_SPECS_CONFLICT):
            other = _index_with_keys(collection, desired["keys"])
            if other is not None:
                other_name, other_definition = other
                raise IndexConflictError(
                    spec.collection,
                    spec.name,
                    {"name": other_name, **other_definition},
                    desired,
                    cause=exc,
                ) from exc
        raise

    logger.info("✓ Created index: %s.%s", spec.collection, spec.name)
    return IndexOutcome.CREATED


def ensure_validator(db: Database, spec: CollectionSpec) -> bool:
    """
    Attach the collection's validator with collMod (last write wins).

    Returns:
        True when a validator was applied, False when none is declared

    Raises:
        ValidatorRejectedError: The store rejected the validator document
    """
    if spec.validator is None:
        logger.debug("No validator declared for %s", spec.name)
        return False

    try:
        db.command(
            "collMod",
            spec.name,
            validator=spec.validator,
            validationLevel=spec.validation_level.value,
            validationAction=spec.validation_action.value,
        )
    except OperationFailure as exc:
        raise ValidatorRejectedError(
            _errmsg(exc),
            collection=spec.name,
            operation="ensure_validator",
            cause=exc,
        ) from exc

    logger.info(
        "✓ Applied validator: %s (validationLevel=%s)",
        spec.name,
        spec.validation_level.value,
    )
    return True


def ensure_seed(db: Database, seed: SeedSpec) -> SeedOutcome:
    """
    Insert seed documents when the guard holds.

    Not retried: a second run observes the seeded collection and skips. A
    duplicate-key failure after which the guard no longer holds means a
    concurrent provisioner seeded first, which is reported as SKIPPED.

    Raises:
        SeedRejectedError: Validation failure or any other write error
    """
    collection = db[seed.collection]
    label = seed.description or f"{len(seed.documents)} document(s)"

    if not _guard_holds(collection, seed):
        logger.info("• Seed skipped: %s already populated", seed.collection)
        return SeedOutcome.SKIPPED

    try:
        # insert_many mutates its input with generated _ids
        collection.insert_many([dict(document) for document in seed.documents])
    except (BulkWriteError, WriteError) as exc:
        codes = _write_error_codes(exc)
        if codes == {DUPLICATE_KEY} and not _guard_holds(collection, seed):
            logger.warning("Seed for %s was inserted concurrently; skipping", seed.collection)
            return SeedOutcome.SKIPPED
        reason = "document validation failed" if DOCUMENT_VALIDATION_FAILURE in codes else "write failed"
        raise SeedRejectedError(
            f"{reason}: {_errmsg(exc)}",
            collection=seed.collection,
            operation="ensure_seed",
            cause=exc,
        ) from exc

    logger.info("✓ Seeded %s with %s", seed.collection, label)
    return SeedOutcome.INSERTED


# =============================================================================
# Reconciliation
# =============================================================================


def provision(db: Database, desired_state: DesiredState) -> ProvisionReport:
    """
    Reconcile the database with the desired state.

    Fail-fast: the first failing step raises a ProvisioningError carrying the
    partial report. Completed steps are not rolled back; re-running is safe.

    Args:
        db: Open database handle with administrative privileges
        desired_state: Collections, indexes, validators and seeds to ensure

    Returns:
        ProvisionReport describing what was created or already present
    """
    report = ProvisionReport()
    logger.info("Initializing schema in database: %s", db.name)

    for spec in desired_state.collections:
        entry = report.collection(spec.name)

        with _step(report, spec.name, "ensure_collection"):
            entry.outcome = ensure_collection(db, spec.name)

        for index in desired_state.indexes_for(spec.name):
            with _step(report, spec.name, "ensure_index"):
                entry.indexes[index.name] = ensure_index(db, index)

        with _step(report, spec.name, "ensure_validator"):
            entry.validator_applied = ensure_validator(db, spec)

    for seed in desired_state.seeds:
        with _step(report, seed.collection, "ensure_seed"):
            report.collection(seed.collection).seed = ensure_seed(db, seed)

    logger.info("✓ Schema initialized (collections, indexes, validators)")
    return report


def plan(db: Database, desired_state: DesiredState) -> ProvisionReport:
    """
    Compute what provision() would do without modifying the database.

    Missing collections and indexes are reported as MISSING, mismatched
    indexes as CONFLICT (not raised). Validators are always reported as
    applied because ensure_validator overwrites unconditionally.
    """
    report = ProvisionReport(dry_run=True)

    with _step(report, "", "plan"):
        existing_collections = set(db.list_collection_names())

    for spec in desired_state.collections:
        entry = report.collection(spec.name)
        exists = spec.name in existing_collections
        entry.outcome = CollectionOutcome.EXISTED if exists else CollectionOutcome.MISSING

        for index in desired_state.indexes_for(spec.name):
            if not exists:
                entry.indexes[index.name] = IndexOutcome.MISSING
                continue
            with _step(report, spec.name, "plan"):
                current = _existing_index(db[spec.name], index.name)
            if current is None:
                entry.indexes[index.name] = IndexOutcome.MISSING
            elif current != index.definition():
                logger.warning(
                    "Index %s.%s conflicts: existing=%s desired=%s",
                    spec.name,
                    index.name,
                    current,
                    index.definition(),
                )
                entry.indexes[index.name] = IndexOutcome.CONFLICT
            else:
                entry.indexes[index.name] = IndexOutcome.MATCHED

        entry.validator_applied = spec.validator is not None

        for seed in desired_state.seeds_for(spec.name):
            if not exists:
                holds = seed.guard_count == 0
            else:
                with _step(report, spec.name, "plan"):
                    holds = _guard_holds(db[spec.name], seed)
            entry.seed = SeedOutcome.INSERTED if holds else SeedOutcome.SKIPPED

    for line in report.summary_lines():
        logger.info("  %s", line)
    return report

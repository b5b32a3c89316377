# =============================================================================
# Provisioning Report Models
# =============================================================================
# Outcome of a provision() or plan() run, per collection.
# =============================================================================

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

__all__ = [
    "CollectionOutcome",
    "IndexOutcome",
    "SeedOutcome",
    "CollectionReport",
    "ProvisionReport",
]


class CollectionOutcome(str, Enum):
    CREATED = "created"
    EXISTED = "existed"
    MISSING = "missing"  # plan() only


class IndexOutcome(str, Enum):
    CREATED = "created"
    MATCHED = "matched"
    CONFLICT = "conflict"  # plan() only; provision() raises instead
    MISSING = "missing"  # plan() only


class SeedOutcome(str, Enum):
    INSERTED = "inserted"
    SKIPPED = "skipped"


class CollectionReport(BaseModel):
    """
    What happened to one collection.

    Attributes:
        name: Collection name
        outcome: Collection creation outcome (None if never reached)
        indexes: Index name → outcome, in declaration order
        validator_applied: Whether a validator was (or would be) applied
        seed: Seed outcome, None when no seed is declared or it was not reached
    """

    name: str
    outcome: Optional[CollectionOutcome] = None
    indexes: dict[str, IndexOutcome] = Field(default_factory=dict)
    validator_applied: bool = False
    seed: Optional[SeedOutcome] = None


class ProvisionReport(BaseModel):
    """Per-collection results of a provisioning run."""

    dry_run: bool = False
    collections: dict[str, CollectionReport] = Field(default_factory=dict)

    def collection(self, name: str) -> CollectionReport:
        """Return the entry for a collection, creating it on first access."""
        if name not in self.collections:
            self.collections[name] = CollectionReport(name=name)
        return self.collections[name]

    @property
    def seeded(self) -> bool:
        return any(entry.seed == SeedOutcome.INSERTED for entry in self.collections.values())

    @property
    def conflicts(self) -> list[tuple[str, str]]:
        return [
            (entry.name, index_name)
            for entry in self.collections.values()
            for index_name, outcome in entry.indexes.items()
            if outcome == IndexOutcome.CONFLICT
        ]

    def summary_lines(self) -> list[str]:
        """Human-readable, one line per collection."""
        lines = []
        for entry in self.collections.values():
            counts: dict[str, int] = {}
            for outcome in entry.indexes.values():
                counts[outcome.value] = counts.get(outcome.value, 0) + 1
            index_summary = ", ".join(f"{count} {label}" for label, count in counts.items()) or "none"
            outcome = entry.outcome.value if entry.outcome else "not reached"
            line = (
                f"{entry.name}: collection {outcome}; indexes {index_summary}; "
                f"validator {'applied' if entry.validator_applied else 'not applied'}"
            )
            if entry.seed is not None:
                line += f"; seed {entry.seed.value}"
            lines.append(line)
        return lines

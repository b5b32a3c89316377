"""
Shared pytest fixtures.

Provides an in-memory MongoDB (mongomock) with collMod support and reusable
document fixtures for the three mapping collections.
"""

from datetime import datetime, timezone

import mongomock
import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure

from mapping_schema.schema import build_desired_state


FIXED_NOW = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# collMod support for mongomock
# =============================================================================


class CollModRecorder:
    """
    Stand-in for Database.command that records collMod calls.

    mongomock does not implement collMod. The recorder keeps the last
    validator applied to each collection and, like the server, rejects
    collMod against a collection that does not exist.
    """

    def __init__(self, database):
        self.database = database
        self.calls = []
        self.validators = {}

    def __call__(self, command, value=1, **kwargs):
        if command != "collMod":
            raise NotImplementedError(f"Unsupported command in tests: {command}")
        if value not in self.database.list_collection_names():
            raise OperationFailure(f"ns does not exist: {value}", code=26, details={"errmsg": "ns does not exist"})
        self.calls.append((value, kwargs))
        self.validators[value] = kwargs
        return {"ok": 1.0}


@pytest.fixture
def mongomock_client():
    """In-memory MongoDB client for tests."""
    return mongomock.MongoClient()


@pytest.fixture
def mongo_database(mongomock_client):
    """Empty database on the in-memory client."""
    return mongomock_client["mapping_test"]


@pytest.fixture
def make_collmod(monkeypatch):
    """Factory patching a database's command method with a CollModRecorder."""

    def _patch(database):
        recorder = CollModRecorder(database)
        monkeypatch.setattr(database, "command", recorder)
        return recorder

    return _patch


@pytest.fixture
def collmod(make_collmod, mongo_database):
    """Record collMod calls made against mongo_database."""
    return make_collmod(mongo_database)


# =============================================================================
# Desired State Fixtures
# =============================================================================


@pytest.fixture
def desired_state():
    """Parameter mapping desired state with a fixed seed timestamp."""
    return build_desired_state(now=FIXED_NOW)


# =============================================================================
# Document Fixtures
# =============================================================================


@pytest.fixture
def valid_vendor_dict():
    """Complete vendor document."""
    return {
        "name": "Acme Telemetry",
        "code": "ACME",
        "is_active": True,
        "contact": {"name": "Jane Doe", "email": "jane@acme.example", "phone": None},
        "metadata": {"region": "eu-west"},
        "created_at": FIXED_NOW,
        "updated_at": FIXED_NOW,
    }


@pytest.fixture
def vendor_id():
    return ObjectId("507f1f77bcf86cd799439011")


@pytest.fixture
def valid_mapping_dict(vendor_id):
    """Complete parameter mapping document."""
    return {
        "vendor_id": vendor_id,
        "source_parameter": "temperature",
        "target_parameter": "TEMP_C",
        "transform": {"type": "uppercase", "config": None},
        "is_active": True,
        "tags": ["climate", "sensor"],
        "created_at": FIXED_NOW,
        "updated_at": FIXED_NOW,
    }


@pytest.fixture
def valid_history_dict(vendor_id):
    """Complete mapping history document."""
    return {
        "mapping_id": ObjectId("507f191e810c19729de860ea"),
        "vendor_id": vendor_id,
        "change_type": "create",
        "before": None,
        "after": {"source_parameter": "temperature", "target_parameter": "TEMP_C"},
        "changed_by": {"user_id": "u-42", "name": "Jane Doe"},
        "created_at": FIXED_NOW,
    }

"""Integration test fixtures - live MongoDB wiring only.

Each test gets a throwaway database that is dropped afterwards, so the
suite never touches the configured application database.
"""

from __future__ import annotations

import uuid
from typing import Generator

import pytest
from pymongo import MongoClient
from pymongo.database import Database

from mapping_schema.models import MongoSettings
from mapping_schema.provisioning import provision
from mapping_schema.schema import build_desired_state


@pytest.fixture(scope="session")
def mongo_settings() -> MongoSettings:
    """Load MongoDB settings from environment."""
    return MongoSettings()


@pytest.fixture(scope="session")
def mongo_client(mongo_settings: MongoSettings) -> Generator[MongoClient, None, None]:
    """Create MongoDB client."""
    client = MongoClient(
        mongo_settings.connection_string,
        serverSelectionTimeoutMS=5000,
    )
    yield client
    client.close()


@pytest.fixture
def mongo_database(mongo_client: MongoClient) -> Generator[Database, None, None]:
    """Empty, uniquely named database; dropped after the test."""
    name = f"mapping_it_{uuid.uuid4().hex[:12]}"
    yield mongo_client[name]
    mongo_client.drop_database(name)


@pytest.fixture
def provisioned_database(mongo_database: Database) -> Database:
    """Database with the parameter mapping schema provisioned once."""
    provision(mongo_database, build_desired_state())
    return mongo_database

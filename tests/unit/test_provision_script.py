"""
Unit tests for the provisioning entry point.

Patches MongoClient with mongomock so main() runs end to end without a
live service.
"""
import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

# Add repository root to path so the scripts directory is importable
scripts_dir = Path(__file__).parent.parent.parent / "scripts"
sys.path.insert(0, str(scripts_dir.parent))

from scripts import provision_db  # noqa: E402


@pytest.fixture(autouse=True)
def mongo_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MONGO_URI", raising=False)
    monkeypatch.setenv("MONGO_HOST", "localhost")
    monkeypatch.setenv("MONGO_DATABASE", "mapping_script_test")


@pytest.fixture
def patched_client(monkeypatch, mongomock_client, make_collmod):
    """Route MongoClient to the in-memory client, with collMod support."""
    database = mongomock_client["mapping_script_test"]
    recorder = make_collmod(database)

    client = MagicMock()
    client.__getitem__.return_value = database
    client.admin.command.return_value = {"ok": 1.0}
    monkeypatch.setattr(provision_db, "MongoClient", lambda *args, **kwargs: client)
    return client, database, recorder


def test_main_provisions_and_exits_zero(patched_client):
    client, database, recorder = patched_client

    assert provision_db.main([]) == 0

    assert {"vendors", "parameter_mappings", "mapping_histories"} <= set(database.list_collection_names())
    assert database["vendors"].count_documents({"code": "DEFAULT"}) == 1
    client.admin.command.assert_called_once_with("ping")
    client.close.assert_called_once()


def test_main_is_rerunnable(patched_client):
    _, database, _ = patched_client

    assert provision_db.main([]) == 0
    assert provision_db.main([]) == 0

    assert database["vendors"].count_documents({}) == 1


def test_main_database_override(patched_client):
    client, _, _ = patched_client

    assert provision_db.main(["--database", "other"]) == 0

    client.__getitem__.assert_called_with("other")


def test_dry_run_makes_no_changes(patched_client):
    _, database, recorder = patched_client

    assert provision_db.main(["--dry-run"]) == 0

    assert database.list_collection_names() == []
    assert recorder.calls == []


def test_dry_run_fails_on_conflict(patched_client):
    _, database, _ = patched_client
    database.create_collection("vendors")
    database["vendors"].create_index([("name", 1)], name="uniq_vendor_code")

    assert provision_db.main(["--dry-run"]) == 1


def test_main_returns_one_on_conflict(patched_client):
    client, database, _ = patched_client
    database.create_collection("vendors")
    database["vendors"].create_index([("name", 1)], name="uniq_vendor_code")

    assert provision_db.main([]) == 1
    client.close.assert_called_once()


def test_main_returns_one_when_unreachable(monkeypatch):
    client = MagicMock()
    client.admin.command.side_effect = ServerSelectionTimeoutError("localhost:27017: connection refused")
    monkeypatch.setattr(provision_db, "MongoClient", lambda *args, **kwargs: client)

    assert provision_db.main([]) == 1
    client.__getitem__.assert_not_called()
    client.close.assert_called_once()


def test_unknown_log_level_falls_back_to_info(monkeypatch, caplog, patched_client):
    configured = {}
    monkeypatch.setenv("PROVISION_LOG_LEVEL", "verbose")
    monkeypatch.setattr(provision_db.logging, "basicConfig", lambda **kwargs: configured.update(kwargs))

    with caplog.at_level(logging.WARNING, logger="provision_db"):
        assert provision_db.main([]) == 0

    assert configured["level"] == logging.INFO
    assert "Unknown PROVISION_LOG_LEVEL 'VERBOSE'" in caplog.text


def test_verbose_flag_enables_debug(monkeypatch, patched_client):
    configured = {}
    monkeypatch.setattr(provision_db.logging, "basicConfig", lambda **kwargs: configured.update(kwargs))

    assert provision_db.main(["--verbose"]) == 0

    assert configured["level"] == logging.DEBUG

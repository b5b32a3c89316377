# =============================================================================
# MongoDB Schema Provisioner
# =============================================================================
# Provisions the parameter mapping schema (collections, indexes, validators,
# Default Vendor seed) in an idempotent manner. Intended to run once at
# container startup, before any application traffic; safe to re-run.
# =============================================================================

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from pymongo import MongoClient
from pymongo.errors import ConnectionFailure

from mapping_schema.models import MongoSettings
from mapping_schema.provisioning import ProvisioningError, StoreUnavailableError, plan, provision
from mapping_schema.schema import build_desired_state

logger = logging.getLogger("provision_db")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Provision the parameter mapping MongoDB schema")
    parser.add_argument(
        "--database",
        help="Database to provision (defaults to MONGO_DATABASE)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without modifying the database",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    name = "DEBUG" if verbose else os.getenv("PROVISION_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    known = isinstance(level, int)
    logging.basicConfig(level=level if known else logging.INFO, format="%(message)s", stream=sys.stdout)
    if not known:
        logger.warning("Unknown PROVISION_LOG_LEVEL %r; using INFO", name)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Provisioner entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = MongoSettings()
        database_name = args.database or settings.database

        client = MongoClient(
            settings.connection_string,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        )

        try:
            # Surface connectivity problems before any schema step runs
            try:
                client.admin.command("ping")
            except ConnectionFailure as e:
                raise StoreUnavailableError(str(e), operation="ping", cause=e) from e

            db = client[database_name]
            desired_state = build_desired_state()

            if args.dry_run:
                report = plan(db, desired_state)
                if report.conflicts:
                    logger.error("Conflicting indexes: %s", report.conflicts)
                    return 1
                logger.info("Dry run complete; no changes made")
                return 0

            report = provision(db, desired_state)
            for line in report.summary_lines():
                logger.info("  %s", line)
            logger.info("Provisioning completed successfully")
            return 0

        finally:
            client.close()

    except ProvisioningError as e:
        logger.error("Error during schema initialization: %s", e)
        return 1
    except Exception as e:
        logger.exception("Error during schema initialization: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())

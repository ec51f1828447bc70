"""
Copy JSON collections into the database.

Reads each collection document from the configured document storage and
inserts every record whose id is not in the database yet. Run with
DATABASE_URL set; the target tables are created if missing.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cms.config import get_settings
from cms.db import PostgresDbClient
from cms.dependencies import COLLECTIONS, get_repositories
from cms.migration import migrate_documents_to_database

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Migrate JSON collections into the database")
    parser.add_argument(
        "--collection",
        action="append",
        choices=sorted(COLLECTIONS),
        help="Collection to migrate (repeatable). Defaults to all with a table.",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL. Defaults to DATABASE_URL.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    database_url = args.database_url or get_settings().database_url
    if not database_url:
        logger.error("DATABASE_URL is not set")
        return 1

    db = PostgresDbClient(database_url)
    results = migrate_documents_to_database(get_repositories(), db, args.collection)
    for collection, counts in results.items():
        logger.info(
            "%s: %d migrated, %d skipped, %d failed",
            collection,
            counts["migrated"],
            counts["skipped"],
            len(counts["errors"]),
        )
    return 1 if any(counts["errors"] for counts in results.values()) else 0


if __name__ == "__main__":
    raise SystemExit(main())

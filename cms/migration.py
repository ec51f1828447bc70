"""
One-off data moves: JSON collections into the database, and documents
between storage backends.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from cms.db import DbClient
from cms.documents import DocumentStore
from cms.errors import ConflictError
from cms.repository import ContentRepository
from cms.storage import StorageClient

logger = logging.getLogger(__name__)


def migrate_documents_to_database(
    repositories: Dict[str, ContentRepository],
    db: DbClient,
    kinds: Optional[Iterable[str]] = None,
) -> Dict[str, dict]:
    """
    Copy each JSON collection into its table. Records whose id is already
    in the database are left alone and counted as skipped.
    """
    results: Dict[str, dict] = {}
    for kind in kinds or repositories.keys():
        repository = repositories[kind]
        if not db.supports(repository.kind):
            logger.info("Skipping %s: no database table", kind)
            continue
        migrated = skipped = 0
        errors = []
        for record_id, record in repository.document_records().items():
            if db.get_record(repository.kind, record_id):
                skipped += 1
                continue
            try:
                db.insert_record(repository.kind, record)
            except ConflictError as exc:
                logger.warning("Could not migrate %s/%s: %s", kind, record_id, exc.message)
                errors.append(f"{record_id}: {exc.message}")
                continue
            migrated += 1
        logger.info("Migrated %s: %d new, %d skipped", kind, migrated, skipped)
        results[kind] = {"migrated": migrated, "skipped": skipped, "errors": errors}
    return results


def copy_documents(
    source: StorageClient,
    target: StorageClient,
    names: Iterable[str],
    overwrite: bool = False,
) -> Dict[str, str]:
    """Copy named JSON documents from one backend to another."""
    results: Dict[str, str] = {}
    for name in names:
        path = DocumentStore.path_for(name)
        if not overwrite and target.exists(path):
            results[name] = "skipped"
            continue
        try:
            data = source.get_bytes(path)
        except FileNotFoundError:
            results[name] = "missing"
            continue
        target.put_bytes(path, data, "application/json")
        logger.info("Copied %s from %s to %s", path, source.name, target.name)
        results[name] = "copied"
    return results

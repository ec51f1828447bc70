"""
One collection of records, stored either in the database or in a JSON document.

The database is used when enabled and the kind has a table. Reads that fail
against the database are served from the document instead; writes are not.
"""

from __future__ import annotations

import copy
import logging
from typing import Callable, Dict, Iterable, Optional

from cms.db import DbClient
from cms.documents import DocumentStore
from cms.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

Seed = Callable[[], Dict[str, dict]]


class ContentRepository:
    def __init__(
        self,
        kind: str,
        documents: DocumentStore,
        db: Optional[DbClient] = None,
        use_database: bool = False,
        seed: Optional[Seed] = None,
        environment: str = "development",
        document_name: Optional[str] = None,
    ):
        self.kind = kind
        self._document_name = document_name or f"{kind}-data"
        self.documents = documents
        self.db = db
        self.use_database = use_database
        self.seed = seed or dict
        self.environment = environment

    @property
    def document_name(self) -> str:
        return self._document_name

    @property
    def database_active(self) -> bool:
        return bool(self.use_database and self.db and self.db.supports(self.kind))

    @property
    def backend(self) -> str:
        return "database" if self.database_active else self.documents.backend

    def storage_info(self) -> dict:
        return {
            "useDatabase": self.database_active,
            "isDatabaseAvailable": bool(self.db and self.db.supports(self.kind)),
            "currentStorage": self.backend,
            "environment": self.environment,
        }

    # Document mode

    def document_records(self) -> Dict[str, dict]:
        data = self.documents.load(self.document_name, self.seed())
        if not isinstance(data, dict):
            logger.warning("%s is not an object, ignoring its contents", self.document_name)
            return {}
        return data

    def _save_document(self, records: Dict[str, dict]) -> None:
        self.documents.save(self.document_name, records)

    # Reads

    def all(self) -> Dict[str, dict]:
        if self.database_active:
            try:
                return {r["id"]: r for r in self.db.list_records(self.kind)}
            except Exception as exc:
                logger.warning(
                    "Database read of %s failed, falling back to %s: %s",
                    self.kind,
                    self.documents.backend,
                    exc,
                )
        return self.document_records()

    def get(self, record_id: str) -> Optional[dict]:
        if self.database_active:
            try:
                return self.db.get_record(self.kind, record_id)
            except Exception as exc:
                logger.warning(
                    "Database read of %s/%s failed, falling back to %s: %s",
                    self.kind,
                    record_id,
                    self.documents.backend,
                    exc,
                )
        return self.document_records().get(record_id)

    # Writes

    def create(self, record: dict) -> dict:
        if self.database_active:
            return self.db.insert_record(self.kind, record)
        records = self.document_records()
        if record["id"] in records:
            raise ConflictError(f"Record {record['id']} already exists")
        records[record["id"]] = copy.deepcopy(record)
        self._save_document(records)
        return copy.deepcopy(record)

    def update(self, record_id: str, changes: dict) -> dict:
        if self.database_active:
            return self.db.update_record(self.kind, record_id, changes)
        records = self.document_records()
        if record_id not in records:
            raise NotFoundError(f"Record {record_id} not found")
        merged = {**records[record_id], **copy.deepcopy(changes), "id": record_id}
        records[record_id] = merged
        self._save_document(records)
        return copy.deepcopy(merged)

    def delete(self, record_id: str) -> None:
        if self.database_active:
            self.db.delete_record(self.kind, record_id)
            return
        records = self.document_records()
        if record_id not in records:
            raise NotFoundError(f"Record {record_id} not found")
        del records[record_id]
        self._save_document(records)

    def replace_all(self, records: Iterable[dict]) -> None:
        records = list(records)
        if self.database_active:
            self.db.replace_all(self.kind, records)
            return
        self._save_document({r["id"]: copy.deepcopy(r) for r in records})

    def save_many(self, records: Dict[str, dict]) -> None:
        """Write several existing records back. Used for cross-record flags."""
        if self.database_active:
            for record_id, record in records.items():
                self.db.update_record(self.kind, record_id, record)
            return
        current = self.document_records()
        current.update(copy.deepcopy(records))
        self._save_document(current)

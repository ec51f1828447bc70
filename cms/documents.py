"""
Named JSON documents on top of a StorageClient.

Each content collection and each singleton settings object is one document
(``<name>.json``) that is read and written whole.
"""

from __future__ import annotations

import copy
import json
import logging
from typing import Any

from cms.errors import StorageError
from cms.storage import StorageClient

logger = logging.getLogger(__name__)


class DocumentStore:
    def __init__(self, storage: StorageClient):
        self.storage = storage

    @property
    def backend(self) -> str:
        return self.storage.name

    @staticmethod
    def path_for(name: str) -> str:
        return f"{name}.json"

    def exists(self, name: str) -> bool:
        return self.storage.exists(self.path_for(name))

    def load(self, name: str, default: Any) -> Any:
        """
        Return the parsed document. A missing document is seeded with a copy
        of ``default``; a backend or parse failure returns the default
        without writing anything.
        """
        try:
            raw = self.storage.get_bytes(self.path_for(name))
        except FileNotFoundError:
            logger.info("Document %s not found in %s, seeding defaults", name, self.backend)
            seeded = copy.deepcopy(default)
            self.save(name, seeded)
            return seeded
        except StorageError as exc:
            logger.warning("Reading %s from %s failed, using defaults: %s", name, self.backend, exc)
            return copy.deepcopy(default)

        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.warning("Document %s in %s is not valid JSON, using defaults", name, self.backend)
            return copy.deepcopy(default)

    def save(self, name: str, payload: Any) -> None:
        body = json.dumps(payload, indent=2, ensure_ascii=False).encode("utf-8")
        try:
            self.storage.put_bytes(self.path_for(name), body, "application/json")
        except StorageError:
            raise
        except Exception as exc:
            logger.exception("Saving %s to %s failed", name, self.backend)
            raise StorageError(f"Failed to save {name} data: {exc}") from exc

import json
import unittest
from unittest.mock import MagicMock

from cms.documents import DocumentStore
from cms.errors import StorageError
from cms.storage import InMemoryStorageClient


class DocumentStoreTests(unittest.TestCase):
    def setUp(self):
        self.storage = InMemoryStorageClient()
        self.documents = DocumentStore(self.storage)

    def test_missing_document_is_seeded(self):
        default = {"metis": {"id": "metis"}}
        loaded = self.documents.load("clubs-data", default)
        self.assertEqual(loaded, default)
        self.assertIsNot(loaded, default)
        self.assertIn("clubs-data.json", self.storage.stored_objects)
        self.assertEqual(self.storage.content_types["clubs-data.json"], "application/json")

    def test_save_then_load(self):
        self.documents.save("team-data", {"ada": {"id": "ada", "name": "Ada Lövelace"}})
        raw = self.storage.get_bytes("team-data.json").decode("utf-8")
        self.assertIn("Ada Lövelace", raw)
        self.assertEqual(self.documents.load("team-data", {}), json.loads(raw))

    def test_invalid_json_returns_default_without_writing(self):
        self.storage.put_bytes("events-data.json", b"{not json")
        self.assertEqual(self.documents.load("events-data", {}), {})
        self.assertEqual(self.storage.get_bytes("events-data.json"), b"{not json")

    def test_backend_failure_on_read_returns_default(self):
        storage = MagicMock()
        storage.name = "blob"
        storage.get_bytes.side_effect = StorageError("down")
        documents = DocumentStore(storage)
        self.assertEqual(documents.load("team-data", {"a": 1}), {"a": 1})
        storage.put_bytes.assert_not_called()

    def test_unexpected_write_failure_becomes_storage_error(self):
        storage = MagicMock()
        storage.name = "blob"
        storage.put_bytes.side_effect = RuntimeError("boom")
        with self.assertRaises(StorageError) as ctx:
            DocumentStore(storage).save("team-data", {})
        self.assertIn("Failed to save team-data data", ctx.exception.message)

    def test_exists(self):
        self.assertFalse(self.documents.exists("site-settings"))
        self.documents.save("site-settings", {})
        self.assertTrue(self.documents.exists("site-settings"))


if __name__ == "__main__":
    unittest.main()

import unittest
from unittest.mock import MagicMock

from cms.db import InMemoryDbClient
from cms.documents import DocumentStore
from cms.errors import ConflictError, NotFoundError
from cms.repository import ContentRepository
from cms.storage import InMemoryStorageClient


def _club(club_id: str, **extra) -> dict:
    return {"id": club_id, "name": club_id.title(), **extra}


class DocumentModeTests(unittest.TestCase):
    def setUp(self):
        self.storage = InMemoryStorageClient()
        self.repo = ContentRepository(
            "clubs",
            DocumentStore(self.storage),
            seed=lambda: {"metis": _club("metis")},
        )

    def test_first_read_seeds_document(self):
        self.assertEqual(list(self.repo.all()), ["metis"])
        self.assertTrue(self.storage.exists("clubs-data.json"))
        self.assertEqual(self.repo.backend, "memory")

    def test_create_update_delete(self):
        self.repo.create(_club("grasp"))
        with self.assertRaises(ConflictError):
            self.repo.create(_club("grasp"))

        updated = self.repo.update("grasp", {"name": "GRASP", "id": "ignored"})
        self.assertEqual(updated, {"id": "grasp", "name": "GRASP"})
        self.assertEqual(self.repo.get("grasp")["name"], "GRASP")

        self.repo.delete("grasp")
        self.assertIsNone(self.repo.get("grasp"))
        with self.assertRaises(NotFoundError):
            self.repo.delete("grasp")
        with self.assertRaises(NotFoundError):
            self.repo.update("grasp", {})

    def test_replace_all_and_save_many(self):
        self.repo.replace_all([_club("a", flag=True), _club("b", flag=True)])
        self.assertEqual(sorted(self.repo.all()), ["a", "b"])
        self.repo.save_many({"a": _club("a", flag=False)})
        self.assertFalse(self.repo.get("a")["flag"])
        self.assertTrue(self.repo.get("b")["flag"])

    def test_non_object_document_reads_as_empty(self):
        self.repo.documents.save("clubs-data", ["not", "a", "map"])
        self.assertEqual(self.repo.all(), {})

    def test_custom_document_name(self):
        repo = ContentRepository(
            "achievements",
            DocumentStore(self.storage),
            document_name="inter-iit-achievements-data",
        )
        repo.create({"id": "x"})
        self.assertTrue(self.storage.exists("inter-iit-achievements-data.json"))


class DatabaseModeTests(unittest.TestCase):
    def setUp(self):
        self.storage = InMemoryStorageClient()
        self.documents = DocumentStore(self.storage)
        self.db = InMemoryDbClient()
        self.repo = ContentRepository(
            "clubs",
            self.documents,
            db=self.db,
            use_database=True,
            seed=lambda: {"metis": _club("metis")},
            environment="production",
        )

    def test_writes_go_to_database(self):
        self.repo.create(_club("grasp"))
        self.assertIn("grasp", self.db.tables["clubs"])
        self.assertFalse(self.storage.exists("clubs-data.json"))
        self.assertEqual(self.repo.backend, "database")

    def test_storage_info(self):
        self.assertEqual(
            self.repo.storage_info(),
            {
                "useDatabase": True,
                "isDatabaseAvailable": True,
                "currentStorage": "database",
                "environment": "production",
            },
        )

    def test_kind_without_table_uses_document(self):
        repo = ContentRepository("hackathons", self.documents, db=self.db, use_database=True)
        self.assertFalse(repo.database_active)
        repo.create({"id": "h1"})
        self.assertTrue(self.storage.exists("hackathons-data.json"))
        self.assertEqual(repo.storage_info()["isDatabaseAvailable"], False)

    def test_failed_read_falls_back_to_document(self):
        db = MagicMock()
        db.supports.return_value = True
        db.list_records.side_effect = RuntimeError("connection refused")
        db.get_record.side_effect = RuntimeError("connection refused")
        repo = ContentRepository(
            "clubs",
            self.documents,
            db=db,
            use_database=True,
            seed=lambda: {"metis": _club("metis")},
        )
        with self.assertLogs("cms.repository", level="WARNING"):
            self.assertEqual(list(repo.all()), ["metis"])
        with self.assertLogs("cms.repository", level="WARNING"):
            self.assertEqual(repo.get("metis")["id"], "metis")

    def test_failed_write_is_not_retried_against_document(self):
        db = MagicMock()
        db.supports.return_value = True
        db.insert_record.side_effect = RuntimeError("connection refused")
        repo = ContentRepository("clubs", self.documents, db=db, use_database=True)
        with self.assertRaises(RuntimeError):
            repo.create(_club("grasp"))
        self.assertFalse(self.storage.exists("clubs-data.json"))


if __name__ == "__main__":
    unittest.main()

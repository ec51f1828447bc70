import unittest

from cms.db import InMemoryDbClient, PostgresDbClient
from cms.errors import ConflictError, NotFoundError, ValidationFailed


def _member(member_id: str, email: str, created_at: str = "2024-01-01T00:00:00.000Z") -> dict:
    return {
        "id": member_id,
        "name": member_id.replace("-", " ").title(),
        "position": "Coordinator",
        "email": email,
        "initials": "XY",
        "gradientFrom": "#000000",
        "gradientTo": "#ffffff",
        "category": "leadership",
        "isSecretary": False,
        "isCoordinator": True,
        "createdAt": created_at,
        "updatedAt": created_at,
    }


def _achievement(achievement_id: str) -> dict:
    return {
        "id": achievement_id,
        "achievementType": "gold-medal",
        "competitionName": "Robotics Challenge",
        "interIITEdition": "12th Inter IIT Tech Meet",
        "year": "2023",
        "hostIIT": "IIT Madras",
        "location": "Chennai",
        "achievementDescription": "First place",
        "significance": "National",
        "competitionCategory": "Robotics",
        "achievementDate": "2023-12-20",
        "status": "verified",
        "ranking": 1,
        "teamMembers": [{"name": "A", "rollNumber": "21110001"}],
        "supportingDocuments": [],
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }


class PostgresDbClientTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the Postgres client logic.
    """

    def setUp(self):
        self.db = PostgresDbClient("sqlite+pysqlite:///:memory:")

    def test_insert_and_get_team_member(self):
        self.db.insert_record("team", _member("ada-lovelace", "ada@iitgn.ac.in"))
        fetched = self.db.get_record("team", "ada-lovelace")
        self.assertIsNotNone(fetched)
        self.assertEqual(fetched["email"], "ada@iitgn.ac.in")
        self.assertEqual(fetched["gradientFrom"], "#000000")
        self.assertTrue(fetched["isCoordinator"])
        self.assertIsNone(fetched["photoPath"])

    def test_missing_record_is_none(self):
        self.assertIsNone(self.db.get_record("team", "nobody"))

    def test_list_is_ordered_by_creation(self):
        self.db.insert_record("team", _member("second", "b@iitgn.ac.in", "2024-02-01T00:00:00.000Z"))
        self.db.insert_record("team", _member("first", "a@iitgn.ac.in", "2024-01-01T00:00:00.000Z"))
        ids = [r["id"] for r in self.db.list_records("team")]
        self.assertEqual(ids, ["first", "second"])

    def test_duplicate_email_conflicts(self):
        self.db.insert_record("team", _member("one", "same@iitgn.ac.in"))
        with self.assertRaises(ConflictError):
            self.db.insert_record("team", _member("two", "same@iitgn.ac.in"))
        # The failed insert leaves the table usable.
        self.assertEqual(len(self.db.list_records("team")), 1)

    def test_update_merges_and_keeps_id(self):
        self.db.insert_record("team", _member("ada", "ada@iitgn.ac.in"))
        updated = self.db.update_record("team", "ada", {"id": "other", "position": "Secretary"})
        self.assertEqual(updated["id"], "ada")
        self.assertEqual(updated["position"], "Secretary")
        self.assertEqual(updated["email"], "ada@iitgn.ac.in")

    def test_update_and_delete_missing_raise(self):
        with self.assertRaises(NotFoundError):
            self.db.update_record("team", "ghost", {"position": "x"})
        with self.assertRaises(NotFoundError):
            self.db.delete_record("team", "ghost")

    def test_delete(self):
        self.db.insert_record("team", _member("ada", "ada@iitgn.ac.in"))
        self.db.delete_record("team", "ada")
        self.assertEqual(self.db.list_records("team"), [])

    def test_achievement_keeps_irregular_keys_and_json_columns(self):
        self.db.insert_record("achievements", _achievement("robotics-2023"))
        fetched = self.db.get_record("achievements", "robotics-2023")
        self.assertEqual(fetched["hostIIT"], "IIT Madras")
        self.assertEqual(fetched["interIITEdition"], "12th Inter IIT Tech Meet")
        self.assertEqual(fetched["teamMembers"][0]["rollNumber"], "21110001")

    def test_replace_all(self):
        self.db.insert_record("team", _member("old", "old@iitgn.ac.in"))
        self.db.replace_all("team", [_member("new", "new@iitgn.ac.in")])
        self.assertEqual([r["id"] for r in self.db.list_records("team")], ["new"])

    def test_replace_all_with_missing_column_keeps_old_rows(self):
        self.db.insert_record("team", _member("old", "old@iitgn.ac.in"))
        broken = _member("new", "new@iitgn.ac.in")
        del broken["name"]
        with self.assertRaises(ValidationFailed):
            self.db.replace_all("team", [broken])
        self.assertEqual([r["id"] for r in self.db.list_records("team")], ["old"])

    def test_supports_only_table_kinds(self):
        self.assertTrue(self.db.supports("clubs"))
        self.assertFalse(self.db.supports("hackathons"))
        with self.assertRaises(ValueError):
            self.db.list_records("hackathons")


class InMemoryDbClientTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()

    def test_insert_conflicts(self):
        self.db.insert_record("team", _member("ada", "ada@iitgn.ac.in"))
        with self.assertRaises(ConflictError):
            self.db.insert_record("team", _member("ada", "other@iitgn.ac.in"))
        with self.assertRaises(ConflictError):
            self.db.insert_record("team", _member("bob", "ada@iitgn.ac.in"))

    def test_update_checks_unique_fields_against_others(self):
        self.db.insert_record("team", _member("ada", "ada@iitgn.ac.in"))
        self.db.insert_record("team", _member("bob", "bob@iitgn.ac.in"))
        # Keeping your own email is fine.
        self.db.update_record("team", "ada", {"email": "ada@iitgn.ac.in"})
        with self.assertRaises(ConflictError):
            self.db.update_record("team", "bob", {"email": "ada@iitgn.ac.in"})

    def test_returned_records_are_copies(self):
        self.db.insert_record("team", _member("ada", "ada@iitgn.ac.in"))
        fetched = self.db.get_record("team", "ada")
        fetched["name"] = "Changed"
        self.assertNotEqual(self.db.get_record("team", "ada")["name"], "Changed")

    def test_reset(self):
        self.db.insert_record("clubs", {"id": "metis"})
        self.db.reset()
        self.assertEqual(self.db.list_records("clubs"), [])


if __name__ == "__main__":
    unittest.main()

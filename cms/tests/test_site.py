import unittest

from cms.documents import DocumentStore
from cms.errors import ConflictError, NotFoundError, ValidationFailed
from cms.site import (
    AdminEmailStore,
    ContactInfoStore,
    SiteSettingsStore,
    ThemeSettingsStore,
)
from cms.storage import InMemoryStorageClient

FIXED_NOW = "2024-05-01T10:00:00.000Z"


def _documents():
    return DocumentStore(InMemoryStorageClient())


class SiteSettingsStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = SiteSettingsStore(_documents(), clock=lambda: FIXED_NOW)

    def test_defaults_show_hackathons(self):
        settings = self.store.get()
        self.assertTrue(settings["hackathonsVisible"])
        self.assertEqual(settings["modifiedBy"], "system")

    def test_toggle_records_who_changed_it(self):
        settings = self.store.toggle_hackathons("ada@iitgn.ac.in")
        self.assertFalse(settings["hackathonsVisible"])
        self.assertEqual(settings["modifiedBy"], "ada@iitgn.ac.in")
        self.assertFalse(self.store.hackathons_visible())
        self.store.toggle_hackathons("ada@iitgn.ac.in")
        self.assertTrue(self.store.hackathons_visible())

    def test_only_known_boolean_settings(self):
        with self.assertRaises(ValidationFailed):
            self.store.update_setting("maintenanceMode", True, "x")
        with self.assertRaises(ValidationFailed):
            self.store.update_setting("hackathonsVisible", "yes", "x")

    def test_restore_requires_boolean(self):
        with self.assertRaises(ValidationFailed):
            self.store.restore({"hackathonsVisible": "no"}, "x")
        restored = self.store.restore({"hackathonsVisible": False}, "backup")
        self.assertFalse(restored["hackathonsVisible"])


class ContactInfoStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = ContactInfoStore(_documents(), clock=lambda: FIXED_NOW)

    def test_nested_field_update_keeps_siblings(self):
        updated = self.store.update_field("address.city", "Ahmedabad", "ada")
        self.assertEqual(updated["address"]["city"], "Ahmedabad")
        self.assertEqual(updated["address"]["country"], "India")
        self.assertEqual(updated["modifiedBy"], "ada")
        self.assertEqual(self.store.get()["address"]["city"], "Ahmedabad")

    def test_top_level_field_update(self):
        updated = self.store.update_field("phone", "+91-00", "ada")
        self.assertEqual(updated["phone"], "+91-00")

    def test_invalid_paths(self):
        with self.assertRaises(ValidationFailed):
            self.store.update_field("address", "somewhere", "ada")
        with self.assertRaises(ValidationFailed):
            self.store.update_field("phone.mobile", "1", "ada")
        with self.assertRaises(ValidationFailed):
            self.store.update_field("address.city.name", "1", "ada")

    def test_save_merges_sections(self):
        saved = self.store.save({"socialMedia": {"instagram": "https://instagram.com/x"}})
        self.assertEqual(saved["socialMedia"]["instagram"], "https://instagram.com/x")
        self.assertIn("youtube", saved["socialMedia"])

    def test_save_rejects_wrong_types(self):
        with self.assertRaises(ValidationFailed):
            self.store.save({"phone": 12345})


class AdminEmailStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = AdminEmailStore(
            _documents(), fallback_emails=["Root@IITGN.ac.in"], clock=lambda: FIXED_NOW
        )

    def test_fallback_list_seeds_document(self):
        self.assertEqual(self.store.emails(), ["root@iitgn.ac.in"])
        self.assertTrue(self.store.is_admin(" ROOT@iitgn.ac.in "))
        self.assertFalse(self.store.is_admin(None))

    def test_add_and_remove(self):
        data = self.store.add("  New@IITGN.ac.in", "root")
        self.assertEqual(data["emails"], ["root@iitgn.ac.in", "new@iitgn.ac.in"])
        self.assertEqual(data["modifiedBy"], "root")
        with self.assertRaises(ConflictError):
            self.store.add("new@iitgn.ac.in", "root")

        data = self.store.remove("new@iitgn.ac.in", "root")
        self.assertEqual(data["emails"], ["root@iitgn.ac.in"])
        with self.assertRaises(NotFoundError):
            self.store.remove("new@iitgn.ac.in", "root")

    def test_last_email_cannot_be_removed(self):
        with self.assertRaises(ValidationFailed):
            self.store.remove("root@iitgn.ac.in", "root")

    def test_add_rejects_invalid(self):
        with self.assertRaises(ValidationFailed):
            self.store.add("not-an-email", "root")

    def test_replace_dedupes(self):
        data = self.store.replace(["A@x.com", "a@x.com", " ", "b@x.com"], "root")
        self.assertEqual(data["emails"], ["a@x.com", "b@x.com"])
        with self.assertRaises(ValidationFailed):
            self.store.replace([" "], "root")

    def test_malformed_document_uses_fallback(self):
        self.store.documents.save("admin-emails", {"emails": "root@iitgn.ac.in"})
        self.assertEqual(self.store.emails(), ["root@iitgn.ac.in"])

    def test_document_without_emails_uses_fallback(self):
        self.store.documents.save("admin-emails", {})
        self.assertEqual(self.store.emails(), ["root@iitgn.ac.in"])
        self.assertTrue(self.store.is_admin("Root@iitgn.ac.in"))
        self.assertFalse(self.store.is_admin("a@x.com"))

    def test_prepare_replace_does_not_write(self):
        prepared = self.store.prepare_replace(["b@x.com"], "root")
        self.assertEqual(prepared["emails"], ["b@x.com"])
        self.assertEqual(self.store.emails(), ["root@iitgn.ac.in"])
        with self.assertRaises(ValidationFailed):
            self.store.prepare_replace("b@x.com", "root")


class ThemeSettingsStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = ThemeSettingsStore(_documents(), clock=lambda: FIXED_NOW)

    def test_update_and_reset(self):
        self.assertEqual(self.store.get()["color"], "#06b6d4")
        self.assertEqual(self.store.update("#FF0000")["color"], "#FF0000")
        self.assertEqual(self.store.get()["color"], "#FF0000")
        self.assertEqual(self.store.reset()["color"], "#06b6d4")

    def test_rejects_bad_colors(self):
        for color in ("red", "#fff", "#12345g", "06b6d4"):
            with self.assertRaises(ValidationFailed):
                self.store.update(color)


if __name__ == "__main__":
    unittest.main()

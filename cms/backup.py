"""
Whole-site export and restore.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Type

from dacite import DaciteError

from cms.errors import ValidationFailed
from cms.repository import ContentRepository
from cms.services import now_iso
from cms.site import AdminEmailStore, ContactInfoStore, SiteSettingsStore, ThemeSettingsStore
from content.json_utils import from_record, to_record

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ("adminEmails", "siteSettings", "contactInfo", "blobSettings")


def backup_filename(timestamp: str) -> str:
    safe = timestamp.replace(":", "-").replace(".", "-")
    return f"tech-website-backup-{safe}.json"


class BackupService:
    def __init__(
        self,
        site_settings: SiteSettingsStore,
        contact_info: ContactInfoStore,
        admin_emails: AdminEmailStore,
        theme: ThemeSettingsStore,
        collections: Dict[str, ContentRepository],
        clock: Callable[[], str] = now_iso,
        entities: Optional[Dict[str, Type]] = None,
    ):
        self.site_settings = site_settings
        self.contact_info = contact_info
        self.admin_emails = admin_emails
        self.theme = theme
        self.collections = collections
        self.clock = clock
        self.entities = entities or {}

    def export_backup(self, exported_by: str) -> dict:
        backup = {
            "adminEmails": self.admin_emails.get(),
            "siteSettings": self.site_settings.get(),
            "contactInfo": self.contact_info.get(),
            "blobSettings": self.theme.get(),
        }
        for name, repository in self.collections.items():
            backup[name] = repository.all()
        backup["exportedAt"] = self.clock()
        backup["exportedBy"] = exported_by
        logger.info("Backup exported by %s", exported_by)
        return backup

    def _checked_records(self, name: str, records: List[dict]) -> List[dict]:
        """Check every record of a collection and fill in entity defaults."""
        entity = self.entities.get(name)
        checked = []
        for record in records:
            if not isinstance(record, dict) or not record.get("id"):
                raise ValidationFailed(f"Every record in {name} needs an id")
            if entity is None:
                checked.append(record)
                continue
            try:
                checked.append(to_record(from_record(entity, record)))
            except (DaciteError, ValueError, TypeError) as exc:
                raise ValidationFailed(
                    f"Invalid record {record['id']} in {name}: {exc}"
                ) from exc
        return checked

    def restore_backup(self, payload: dict, modified_by: str) -> dict:
        """
        Replace the settings documents and collections with a backup.

        Every section is built and checked before the first write, so a bad
        backup leaves the site as it was.
        """
        if not isinstance(payload, dict) or not payload:
            raise ValidationFailed("Backup data is required")
        missing = [section for section in REQUIRED_SECTIONS if not payload.get(section)]
        if missing:
            raise ValidationFailed(f"Missing required fields: {', '.join(missing)}")

        restorable = {}
        for name in self.collections:
            records = payload.get(name)
            if records is None:
                continue
            if isinstance(records, dict):
                records = list(records.values())
            if not isinstance(records, list):
                raise ValidationFailed(f"{name} must be a list or an object of records")
            restorable[name] = self._checked_records(name, records)

        admin_emails = payload["adminEmails"]
        emails = admin_emails.get("emails", []) if isinstance(admin_emails, dict) else admin_emails
        admin_document = self.admin_emails.prepare_replace(emails, modified_by)
        settings_document = self.site_settings.prepare_restore(
            payload["siteSettings"], modified_by
        )
        contact_document = self.contact_info.prepare(payload["contactInfo"], modified_by)
        theme_document = self.theme.prepare_restore(payload["blobSettings"])

        # Collections first: the database may still refuse a record.
        summary: Dict[str, object] = {}
        for name, records in restorable.items():
            self.collections[name].replace_all(records)
            summary[name] = len(records)
        self.admin_emails.write(admin_document)
        summary["adminEmails"] = len(admin_document["emails"])
        self.site_settings.write(settings_document)
        summary["siteSettings"] = "restored"
        self.contact_info.write(contact_document)
        summary["contactInfo"] = "restored"
        self.theme.write(theme_document)
        summary["blobSettings"] = "restored"

        logger.info("Backup restored by %s: %s", modified_by, summary)
        return summary

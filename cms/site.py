"""
Singleton settings documents: site toggles, contact details, the admin
allow-list and the theme colour.
"""

from __future__ import annotations

import copy
import logging
import re
from typing import Callable, Iterable, List, Optional, Type

from dacite import DaciteError

from cms.documents import DocumentStore
from cms.errors import CmsError, ConflictError, NotFoundError, ValidationFailed
from cms.services import now_iso
from content.defaults import (
    DEFAULT_ADMIN_EMAILS,
    DEFAULT_THEME_COLOR,
    default_admin_emails,
    default_contact_info,
    default_site_settings,
    default_theme_settings,
)
from content.json_utils import from_record
from content.types import AdminEmails, ContactInfo, SiteSettings, ThemeSettings

logger = logging.getLogger(__name__)

SITE_SETTINGS_DOCUMENT = "site-settings"
CONTACT_INFO_DOCUMENT = "contact-info"
ADMIN_EMAILS_DOCUMENT = "admin-emails"
THEME_SETTINGS_DOCUMENT = "blob-settings"

EDITABLE_SITE_SETTINGS = ("hackathonsVisible",)
NESTED_CONTACT_SECTIONS = ("address", "socialMedia")
HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _check(data_class: Type, document: dict, label: str) -> None:
    try:
        from_record(data_class, document)
    except (DaciteError, TypeError) as exc:
        raise ValidationFailed(f"Invalid {label}: {exc}") from exc


def _as_document(value, label: str) -> dict:
    if not isinstance(value, dict):
        raise ValidationFailed(f"Invalid {label}: expected an object")
    return value


class SiteSettingsStore:
    def __init__(self, documents: DocumentStore, clock: Callable[[], str] = now_iso):
        self.documents = documents
        self.clock = clock

    def get(self) -> dict:
        defaults = default_site_settings(self.clock())
        stored = self.documents.load(SITE_SETTINGS_DOCUMENT, defaults)
        return {**defaults, **stored}

    def hackathons_visible(self) -> bool:
        return bool(self.get().get("hackathonsVisible", True))

    def update_setting(self, key: str, value, modified_by: str) -> dict:
        if key not in EDITABLE_SITE_SETTINGS:
            raise ValidationFailed(f"Invalid setting key: {key}")
        if not isinstance(value, bool):
            raise ValidationFailed(f"{key} must be a boolean")
        settings = self.get()
        now = self.clock()
        settings.update(
            {key: value, "lastModified": now, "updatedAt": now, "modifiedBy": modified_by}
        )
        self.documents.save(SITE_SETTINGS_DOCUMENT, settings)
        logger.info("Site setting %s set to %s by %s", key, value, modified_by)
        return settings

    def set_hackathons_visibility(self, visible: bool, modified_by: str) -> dict:
        return self.update_setting("hackathonsVisible", visible, modified_by)

    def toggle_hackathons(self, modified_by: str) -> dict:
        return self.set_hackathons_visibility(not self.hackathons_visible(), modified_by)

    def prepare_restore(self, settings: dict, modified_by: str) -> dict:
        """Build and check a full settings document without writing it."""
        restored = {**self.get(), **_as_document(settings, "site settings")}
        _check(SiteSettings, restored, "site settings")
        now = self.clock()
        restored.update({"lastModified": now, "updatedAt": now, "modifiedBy": modified_by})
        return restored

    def write(self, settings: dict) -> dict:
        self.documents.save(SITE_SETTINGS_DOCUMENT, settings)
        return settings

    def restore(self, settings: dict, modified_by: str) -> dict:
        return self.write(self.prepare_restore(settings, modified_by))


class ContactInfoStore:
    def __init__(self, documents: DocumentStore, clock: Callable[[], str] = now_iso):
        self.documents = documents
        self.clock = clock

    @staticmethod
    def _merge(base: dict, overrides: dict) -> dict:
        merged = {**base, **overrides}
        for section in NESTED_CONTACT_SECTIONS:
            override = overrides.get(section) or {}
            if isinstance(override, dict):
                merged[section] = {**base.get(section, {}), **override}
        return merged

    def get(self) -> dict:
        defaults = default_contact_info(self.clock())
        return self._merge(defaults, self.documents.load(CONTACT_INFO_DOCUMENT, defaults))

    def prepare(self, info: dict, modified_by: str = "admin") -> dict:
        merged = self._merge(self.get(), _as_document(info, "contact info"))
        merged["lastModified"] = self.clock()
        merged["modifiedBy"] = modified_by
        _check(ContactInfo, merged, "contact info")
        return merged

    def write(self, info: dict) -> dict:
        self.documents.save(CONTACT_INFO_DOCUMENT, info)
        return info

    def save(self, info: dict, modified_by: str = "admin") -> dict:
        return self.write(self.prepare(info, modified_by))

    def update_field(self, field_path: str, value, modified_by: str = "admin") -> dict:
        """Set one field. ``address.city`` style paths reach one level down."""
        parts = field_path.split(".")
        if len(parts) == 1:
            if parts[0] in NESTED_CONTACT_SECTIONS:
                raise ValidationFailed(f"{parts[0]} must be updated field by field")
            return self.save({parts[0]: value}, modified_by)
        if len(parts) == 2 and parts[0] in NESTED_CONTACT_SECTIONS:
            return self.save({parts[0]: {parts[1]: value}}, modified_by)
        raise ValidationFailed(f"Invalid contact field: {field_path}")


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class AdminEmailStore:
    def __init__(
        self,
        documents: DocumentStore,
        fallback_emails: Optional[Iterable[str]] = None,
        clock: Callable[[], str] = now_iso,
    ):
        self.documents = documents
        self.fallback_emails = [
            normalize_email(e) for e in (fallback_emails or DEFAULT_ADMIN_EMAILS)
        ]
        self.clock = clock

    def _defaults(self) -> dict:
        data = default_admin_emails(self.clock())
        data["emails"] = list(self.fallback_emails)
        return data

    def get(self) -> dict:
        data = self.documents.load(ADMIN_EMAILS_DOCUMENT, self._defaults())
        try:
            merged = {**self._defaults(), **data}
            _check(AdminEmails, merged, "admin emails")
        except (ValidationFailed, TypeError) as exc:
            logger.warning("Admin email document is malformed, using fallback list: %s", exc)
            return self._defaults()
        return merged

    def emails(self) -> List[str]:
        return list(self.get()["emails"])

    def _updated(self, data: dict, emails: List[str], modified_by: str) -> dict:
        now = self.clock()
        return {
            **data,
            "emails": emails,
            "lastModified": now,
            "updatedAt": now,
            "modifiedBy": modified_by,
        }

    def write(self, data: dict) -> dict:
        self.documents.save(ADMIN_EMAILS_DOCUMENT, data)
        return data

    def _write(self, data: dict, emails: List[str], modified_by: str) -> dict:
        return self.write(self._updated(data, emails, modified_by))

    def add(self, email: str, modified_by: str) -> dict:
        email = normalize_email(email)
        if not email or "@" not in email:
            raise ValidationFailed("A valid email address is required")
        data = self.get()
        if email in data["emails"]:
            raise ConflictError("Email already exists in admin list")
        logger.info("Adding admin email %s (by %s)", email, modified_by)
        return self._write(data, data["emails"] + [email], modified_by)

    def remove(self, email: str, modified_by: str) -> dict:
        email = normalize_email(email)
        data = self.get()
        if email not in data["emails"]:
            raise NotFoundError("Email not found in admin list")
        if len(data["emails"]) <= 1:
            raise ValidationFailed("Cannot remove the last admin email")
        logger.info("Removing admin email %s (by %s)", email, modified_by)
        return self._write(data, [e for e in data["emails"] if e != email], modified_by)

    def prepare_replace(self, emails: Iterable[str], modified_by: str) -> dict:
        """Build the document ``replace`` would write, without writing it."""
        if isinstance(emails, str) or not isinstance(emails, (list, tuple)):
            raise ValidationFailed("Invalid admin emails: expected a list")
        cleaned: List[str] = []
        for email in emails:
            if not isinstance(email, str):
                raise ValidationFailed("Invalid admin emails: every entry must be a string")
            email = normalize_email(email)
            if email and email not in cleaned:
                cleaned.append(email)
        if not cleaned:
            raise ValidationFailed("At least one admin email is required")
        return self._updated(self.get(), cleaned, modified_by)

    def replace(self, emails: Iterable[str], modified_by: str) -> dict:
        return self.write(self.prepare_replace(emails, modified_by))

    def is_admin(self, email: Optional[str]) -> bool:
        if not email:
            return False
        try:
            return normalize_email(email) in self.emails()
        except CmsError as exc:
            logger.warning("Could not read admin emails: %s", exc)
            return False


class ThemeSettingsStore:
    def __init__(self, documents: DocumentStore, clock: Callable[[], str] = now_iso):
        self.documents = documents
        self.clock = clock

    def get(self) -> dict:
        defaults = default_theme_settings(self.clock())
        return {**defaults, **self.documents.load(THEME_SETTINGS_DOCUMENT, defaults)}

    def update(self, color: str) -> dict:
        if not isinstance(color, str) or not HEX_COLOR.match(color):
            raise ValidationFailed("Invalid color format. Use hex format like #06b6d4")
        settings = {"color": color, "lastUpdated": self.clock()}
        return self.write(settings)

    def reset(self) -> dict:
        return self.update(DEFAULT_THEME_COLOR)

    def prepare_restore(self, settings: dict) -> dict:
        merged = copy.deepcopy({**self.get(), **_as_document(settings, "theme settings")})
        _check(ThemeSettings, merged, "theme settings")
        if not HEX_COLOR.match(merged["color"]):
            raise ValidationFailed("Invalid color format. Use hex format like #06b6d4")
        return merged

    def write(self, settings: dict) -> dict:
        self.documents.save(THEME_SETTINGS_DOCUMENT, settings)
        return settings

    def restore(self, settings: dict) -> dict:
        return self.write(self.prepare_restore(settings))

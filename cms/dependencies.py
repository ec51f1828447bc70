"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import copy
import logging
from typing import Dict, Optional

from fastapi import Cookie, Depends, Header

from cms.auth import (
    SESSION_COOKIE,
    AdminUser,
    FirebaseTokenVerifier,
    InMemoryTokenVerifier,
    SessionManager,
    TokenVerifier,
    token_from_request,
)
from cms.backup import BackupService
from cms.config import get_settings
from cms.db import DbClient, InMemoryDbClient, PostgresDbClient
from cms.documents import DocumentStore
from cms.mailer import ContactMailer
from cms.repository import ContentRepository
from cms.services import (
    AchievementService,
    ClubService,
    ContentService,
    EventService,
    HackathonService,
    MagazineService,
    TeamService,
)
from cms.site import AdminEmailStore, ContactInfoStore, SiteSettingsStore, ThemeSettingsStore
from cms.storage import StorageClient, build_storage_client, resolve_backend
from cms.uploads import UploadService
from content.defaults import DEFAULT_CLUBS, DEFAULT_MAGAZINES

logger = logging.getLogger(__name__)

# Collection name (as used in URLs and backups) -> (record kind, document name, seed)
COLLECTIONS = {
    "team": ("team", "team-data", dict),
    "events": ("events", "events-data", dict),
    "clubs": ("clubs", "clubs-data", lambda: copy.deepcopy(DEFAULT_CLUBS)),
    "torque": ("torque", "torque-data", lambda: copy.deepcopy(DEFAULT_MAGAZINES)),
    "inter-iit-achievements": (
        "achievements",
        "inter-iit-achievements-data",
        dict,
    ),
    "hackathons": ("hackathons", "hackathons-data", dict),
}

SERVICE_TYPES = {
    "team": TeamService,
    "events": EventService,
    "clubs": ClubService,
    "torque": MagazineService,
    "inter-iit-achievements": AchievementService,
    "hackathons": HackathonService,
}

_document_store: DocumentStore | None = None
_asset_storage: StorageClient | None = None
_db_client: DbClient | None = None
_db_resolved = False
_repositories: Dict[str, ContentRepository] = {}
_services: Dict[str, ContentService] = {}
_site_settings: SiteSettingsStore | None = None
_contact_info: ContactInfoStore | None = None
_admin_emails: AdminEmailStore | None = None
_theme: ThemeSettingsStore | None = None
_uploads: UploadService | None = None
_token_verifier: TokenVerifier | None = None
_session_manager: SessionManager | None = None
_mailer: ContactMailer | None = None


def get_document_store() -> DocumentStore:
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    backend = resolve_backend(settings.document_backend, settings, prefer_firebase=False)
    logger.info("Using %s storage for documents", backend)
    _document_store = DocumentStore(build_storage_client(backend, settings))
    return _document_store


def get_asset_storage() -> StorageClient:
    global _asset_storage
    if _asset_storage:
        return _asset_storage

    settings = get_settings()
    backend = resolve_backend(settings.asset_backend, settings, prefer_firebase=True)
    logger.info("Using %s storage for uploads", backend)
    _asset_storage = build_storage_client(backend, settings)
    return _asset_storage


def get_db_client() -> Optional[DbClient]:
    """
    Return a singleton DB client, or None when no database is configured.
    """
    global _db_client, _db_resolved
    if _db_resolved:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _db_client = InMemoryDbClient()
    elif settings.database_url:
        _db_client = PostgresDbClient(settings.database_url)
    _db_resolved = True
    return _db_client


def get_repository(collection: str) -> ContentRepository:
    if collection in _repositories:
        return _repositories[collection]

    settings = get_settings()
    kind, document_name, seed = COLLECTIONS[collection]
    _repositories[collection] = ContentRepository(
        kind,
        get_document_store(),
        db=get_db_client(),
        use_database=settings.database_enabled,
        seed=seed,
        environment=settings.environment,
        document_name=document_name,
    )
    return _repositories[collection]


def get_repositories() -> Dict[str, ContentRepository]:
    return {name: get_repository(name) for name in COLLECTIONS}


def get_service(collection: str) -> ContentService:
    if collection in _services:
        return _services[collection]

    service_type = SERVICE_TYPES[collection]
    if service_type is MagazineService:
        service = MagazineService(get_repository(collection), uploads=get_upload_service())
    else:
        service = service_type(get_repository(collection))
    _services[collection] = service
    return service


def get_team_service() -> TeamService:
    return get_service("team")


def get_event_service() -> EventService:
    return get_service("events")


def get_club_service() -> ClubService:
    return get_service("clubs")


def get_magazine_service() -> MagazineService:
    return get_service("torque")


def get_achievement_service() -> AchievementService:
    return get_service("inter-iit-achievements")


def get_hackathon_service() -> HackathonService:
    return get_service("hackathons")


def get_site_settings_store() -> SiteSettingsStore:
    global _site_settings
    if not _site_settings:
        _site_settings = SiteSettingsStore(get_document_store())
    return _site_settings


def get_contact_info_store() -> ContactInfoStore:
    global _contact_info
    if not _contact_info:
        _contact_info = ContactInfoStore(get_document_store())
    return _contact_info


def get_admin_email_store() -> AdminEmailStore:
    global _admin_emails
    if not _admin_emails:
        _admin_emails = AdminEmailStore(
            get_document_store(), get_settings().fallback_admin_emails
        )
    return _admin_emails


def get_theme_store() -> ThemeSettingsStore:
    global _theme
    if not _theme:
        _theme = ThemeSettingsStore(get_document_store())
    return _theme


def get_upload_service() -> UploadService:
    global _uploads
    if not _uploads:
        _uploads = UploadService(get_asset_storage())
    return _uploads


def get_token_verifier() -> TokenVerifier:
    global _token_verifier
    if _token_verifier:
        return _token_verifier

    settings = get_settings()
    key = settings.firebase_service_account_key
    if settings.use_in_memory_backends or not key or "placeholder" in key:
        if not settings.use_in_memory_backends:
            logger.warning("Firebase is not configured; admin sign-in is disabled")
        _token_verifier = InMemoryTokenVerifier()
    else:
        _token_verifier = FirebaseTokenVerifier(key, settings.firebase_storage_bucket)
    return _token_verifier


def get_session_manager() -> SessionManager:
    global _session_manager
    if _session_manager:
        return _session_manager

    settings = get_settings()
    _session_manager = SessionManager(
        get_token_verifier(),
        get_admin_email_store(),
        secret=settings.session_secret,
        ttl_minutes=settings.session_ttl_minutes,
        fallback_emails=settings.fallback_admin_emails,
    )
    return _session_manager


def get_mailer() -> ContactMailer:
    global _mailer
    if not _mailer:
        settings = get_settings()
        _mailer = ContactMailer(
            api_key=settings.resend_api_key,
            sender=settings.contact_sender,
            recipient=settings.contact_recipient,
        )
    return _mailer


def get_backup_service() -> BackupService:
    return BackupService(
        get_site_settings_store(),
        get_contact_info_store(),
        get_admin_email_store(),
        get_theme_store(),
        get_repositories(),
        entities={name: SERVICE_TYPES[name].entity for name in COLLECTIONS},
    )


def require_admin(
    authorization: Optional[str] = Header(default=None),
    cms_session: Optional[str] = Cookie(default=None, alias=SESSION_COOKIE),
    sessions: SessionManager = Depends(get_session_manager),
) -> AdminUser:
    """Admin routes: accept a bearer session token or the session cookie."""
    return sessions.admin_from_token(token_from_request(authorization, cms_session))


def reset_dependencies() -> None:
    """Drop every singleton so the next request rebuilds them (tests)."""
    global _document_store, _asset_storage, _db_client, _db_resolved
    global _site_settings, _contact_info, _admin_emails, _theme
    global _uploads, _token_verifier, _session_manager, _mailer
    _document_store = _asset_storage = _db_client = None
    _db_resolved = False
    _repositories.clear()
    _services.clear()
    _site_settings = _contact_info = _admin_emails = _theme = None
    _uploads = _token_verifier = _session_manager = _mailer = None
    get_settings.cache_clear()

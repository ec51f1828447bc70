"""
Admin dashboard routes. Every route requires an admin session.
"""

import logging
from typing import Callable, Optional, Type

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse

from cms.auth import AdminUser
from cms.backup import BackupService, backup_filename
from cms.config import get_settings
from cms.db import DbClient
from cms.dependencies import (
    get_admin_email_store,
    get_backup_service,
    get_club_service,
    get_contact_info_store,
    get_db_client,
    get_document_store,
    get_magazine_service,
    get_repositories,
    get_service,
    get_site_settings_store,
    get_theme_store,
    get_upload_service,
    require_admin,
)
from cms.documents import DocumentStore
from cms.errors import CmsError, ValidationFailed
from cms.migration import migrate_documents_to_database
from cms.schemas import (
    AchievementCreate,
    AchievementUpdate,
    AdminEmailRequest,
    AdminEmailsReplace,
    CamelModel,
    ClubCreate,
    ClubUpdate,
    EventCreate,
    EventUpdate,
    HackathonCreate,
    HackathonUpdate,
    MagazineCreate,
    MagazineUpdate,
    MigrateRequest,
    SettingUpdate,
    TeamMemberCreate,
    TeamMemberUpdate,
    ThemeUpdate,
)
from cms.services import ClubService, ContentService, MagazineService, now_iso
from cms.site import AdminEmailStore, ContactInfoStore, SiteSettingsStore, ThemeSettingsStore
from cms.uploads import (
    CLUB_LOGOS,
    EVENT_GALLERY,
    MAGAZINE_COVERS,
    TEAM_PHOTOS,
    ImageOptions,
    UploadService,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


def _modified_by(user: AdminUser) -> str:
    return user.email or user.name or "Unknown Admin"


# Uploads. Registered before the collection routes so the literal paths win.


def _upload_result(result) -> dict:
    return {
        "success": True,
        "url": result.url,
        "path": result.path,
        "filename": result.filename,
        "size": result.size,
    }


async def _store_image(
    file: UploadFile, uploads: UploadService, folder: str, options: ImageOptions
) -> dict:
    data = await file.read()
    if not data:
        raise ValidationFailed("No file provided")
    result = uploads.upload_image(data, file.filename or "image", folder, options)
    return _upload_result(result)


@router.post("/team/upload-photo")
async def upload_team_photo(
    file: UploadFile = File(...), uploads: UploadService = Depends(get_upload_service)
):
    return await _store_image(
        file, uploads, TEAM_PHOTOS, ImageOptions(max_width=400, max_height=400)
    )


@router.post("/clubs/upload-logo")
async def upload_club_logo(
    file: UploadFile = File(...),
    club_id: Optional[str] = Form(default=None, alias="clubId"),
    uploads: UploadService = Depends(get_upload_service),
    clubs: ClubService = Depends(get_club_service),
):
    # Form ids sometimes arrive with a ":<n>" suffix.
    club_id = club_id.split(":")[0] if club_id else None
    if club_id:
        clubs.get(club_id)
    result = await _store_image(
        file, uploads, CLUB_LOGOS, ImageOptions(max_width=400, max_height=400, format="png")
    )
    if club_id:
        try:
            clubs.update(club_id, {"logoPath": result["url"]})
        except CmsError:
            uploads.delete(result["path"])
            raise
    return result


@router.post("/events/upload-image")
async def upload_event_image(
    file: UploadFile = File(...), uploads: UploadService = Depends(get_upload_service)
):
    return await _store_image(file, uploads, EVENT_GALLERY, ImageOptions())


@router.post("/torque/upload-cover")
async def upload_magazine_cover(
    file: UploadFile = File(...), uploads: UploadService = Depends(get_upload_service)
):
    return await _store_image(
        file, uploads, MAGAZINE_COVERS, ImageOptions(max_width=800, max_height=1100)
    )


@router.post("/torque/upload")
async def upload_magazine_pdf(
    file: UploadFile = File(...), uploads: UploadService = Depends(get_upload_service)
):
    data = await file.read()
    if not data:
        raise ValidationFailed("No file provided")
    result = uploads.upload_pdf(data, file.filename or "magazine.pdf")
    return {
        **_upload_result(result),
        "filePath": result.url,
        "fileName": result.filename,
        "fileSize": result.size,
        "pages": result.pages,
    }


@router.post("/torque/{magazine_id}/set-latest")
def set_latest_magazine(
    magazine_id: str, service: MagazineService = Depends(get_magazine_service)
):
    return service.set_latest(magazine_id)


@router.delete("/uploads")
def delete_upload(
    file_path: str = Query(..., alias="filePath", min_length=1),
    uploads: UploadService = Depends(get_upload_service),
):
    if not uploads.resolve_path(file_path):
        raise ValidationFailed("File is not stored in the current upload backend")
    return {"success": uploads.delete(file_path)}


# Collections


def _register_collection(
    collection: str, create_model: Type[CamelModel], update_model: Type[CamelModel]
) -> None:
    service_dependency: Callable[[], ContentService] = lambda: get_service(collection)

    @router.get(f"/{collection}", name=f"list_{collection}")
    def list_records(service: ContentService = Depends(service_dependency)):
        return service.list_all()

    @router.post(f"/{collection}", status_code=201, name=f"create_{collection}")
    def create_record(
        payload: create_model, service: ContentService = Depends(service_dependency)
    ):
        return service.create(payload.to_record())

    @router.get(f"/{collection}/{{record_id}}", name=f"get_{collection}")
    def get_record(record_id: str, service: ContentService = Depends(service_dependency)):
        return service.get(record_id)

    @router.put(f"/{collection}/{{record_id}}", name=f"update_{collection}")
    def update_record(
        record_id: str,
        payload: update_model,
        service: ContentService = Depends(service_dependency),
    ):
        return service.update(record_id, payload.to_changes())

    @router.delete(f"/{collection}/{{record_id}}", name=f"delete_{collection}")
    def delete_record(record_id: str, service: ContentService = Depends(service_dependency)):
        service.delete(record_id)
        return {"success": True, "id": record_id}


_register_collection("events", EventCreate, EventUpdate)
_register_collection("clubs", ClubCreate, ClubUpdate)
_register_collection("team", TeamMemberCreate, TeamMemberUpdate)
_register_collection("torque", MagazineCreate, MagazineUpdate)
_register_collection("inter-iit-achievements", AchievementCreate, AchievementUpdate)
_register_collection("hackathons", HackathonCreate, HackathonUpdate)


# Site settings


@router.get("/settings")
def get_settings_document(store: SiteSettingsStore = Depends(get_site_settings_store)):
    return store.get()


@router.put("/settings")
def update_setting(
    payload: SettingUpdate,
    user: AdminUser = Depends(require_admin),
    store: SiteSettingsStore = Depends(get_site_settings_store),
):
    return store.update_setting(payload.setting, payload.value, _modified_by(user))


@router.get("/contact-info")
def get_contact_info(store: ContactInfoStore = Depends(get_contact_info_store)):
    return store.get()


@router.put("/contact-info")
def update_contact_info(
    payload: dict = Body(...),
    user: AdminUser = Depends(require_admin),
    store: ContactInfoStore = Depends(get_contact_info_store),
):
    if "field" in payload:
        if not isinstance(payload["field"], str) or "value" not in payload:
            raise ValidationFailed("field and value are required")
        return store.update_field(payload["field"], payload["value"], _modified_by(user))
    return store.save(payload, _modified_by(user))


@router.get("/admin-emails")
def get_admin_emails(store: AdminEmailStore = Depends(get_admin_email_store)):
    return store.get()


@router.post("/admin-emails", status_code=201)
def add_admin_email(
    payload: AdminEmailRequest,
    user: AdminUser = Depends(require_admin),
    store: AdminEmailStore = Depends(get_admin_email_store),
):
    return store.add(payload.email, _modified_by(user))


@router.delete("/admin-emails")
def remove_admin_email(
    email: str = Query(..., min_length=1),
    user: AdminUser = Depends(require_admin),
    store: AdminEmailStore = Depends(get_admin_email_store),
):
    return store.remove(email, _modified_by(user))


@router.put("/admin-emails")
def replace_admin_emails(
    payload: AdminEmailsReplace,
    user: AdminUser = Depends(require_admin),
    store: AdminEmailStore = Depends(get_admin_email_store),
):
    return store.replace(payload.emails, _modified_by(user))


@router.get("/blob-settings")
def get_theme(store: ThemeSettingsStore = Depends(get_theme_store)):
    return store.get()


@router.put("/blob-settings")
def update_theme(payload: ThemeUpdate, store: ThemeSettingsStore = Depends(get_theme_store)):
    return store.update(payload.color)


@router.delete("/blob-settings")
def reset_theme(store: ThemeSettingsStore = Depends(get_theme_store)):
    return store.reset()


# Backup, restore and migration


@router.get("/backup")
def export_backup(
    user: AdminUser = Depends(require_admin),
    backups: BackupService = Depends(get_backup_service),
):
    backup = backups.export_backup(_modified_by(user))
    return JSONResponse(
        backup,
        headers={
            "Content-Disposition": f'attachment; filename="{backup_filename(now_iso())}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )


@router.post("/restore")
def restore_backup(
    payload: dict = Body(...),
    user: AdminUser = Depends(require_admin),
    backups: BackupService = Depends(get_backup_service),
):
    summary = backups.restore_backup(payload, _modified_by(user))
    return {"success": True, "restored": summary}


@router.post("/migrate-data")
def migrate_data(
    payload: Optional[MigrateRequest] = Body(default=None),
    db: Optional[DbClient] = Depends(get_db_client),
):
    if db is None:
        raise ValidationFailed("No database is configured (set DATABASE_URL)")
    repositories = get_repositories()
    kinds = payload.kinds if payload and payload.kinds else None
    unknown = [k for k in kinds or [] if k not in repositories]
    if unknown:
        raise ValidationFailed(f"Unknown collections: {', '.join(unknown)}")
    logger.info("Migrating %s to the database", ", ".join(kinds) if kinds else "all collections")
    return {"success": True, "results": migrate_documents_to_database(repositories, db, kinds)}


@router.get("/status")
def storage_status(documents: DocumentStore = Depends(get_document_store)):
    settings = get_settings()
    uploads = get_upload_service()
    return {
        "environment": settings.environment,
        "documentStorage": documents.backend,
        "assetStorage": uploads.storage.name,
        "databaseEnabled": settings.database_enabled,
        "collections": {
            name: repository.storage_info() for name, repository in get_repositories().items()
        },
        "checkedAt": now_iso(),
    }


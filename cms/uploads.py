"""
Uploads of images and PDFs to the asset storage backend.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote, urlparse

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from cms import images
from cms.errors import ValidationFailed
from cms.storage import StorageClient

logger = logging.getLogger(__name__)

TEAM_PHOTOS = "team-photos"
CLUB_LOGOS = "club-logos"
EVENT_GALLERY = "event-gallery"
MAGAZINE_FILES = "torque/magazines"
MAGAZINE_COVERS = "torque/covers"
GENERIC_UPLOADS = "uploads"

FIREBASE_DOWNLOAD_PATH = re.compile(r"/v0/b/[^/]+/o/(.+)")


@dataclass
class ImageOptions:
    max_width: int = 1200
    max_height: int = 1200
    quality: int = 85
    format: str = "jpeg"


@dataclass
class UploadResult:
    url: str
    filename: str
    size: int
    path: str


@dataclass
class PdfUploadResult(UploadResult):
    pages: int = 0


class UploadService:
    def __init__(self, storage: StorageClient):
        self.storage = storage

    def upload_image(
        self,
        data: bytes,
        filename: str,
        folder: str = GENERIC_UPLOADS,
        options: Optional[ImageOptions] = None,
        prefix: Optional[str] = None,
    ) -> UploadResult:
        options = options or ImageOptions()
        images.validate_image_bytes(data)
        converted, _ = images.convert_to_supported_format(data)
        optimized = images.optimize_image(
            converted,
            max_width=options.max_width,
            max_height=options.max_height,
            quality=options.quality,
            format=options.format,
        )
        extension = "jpg" if options.format == "jpeg" else options.format
        stem = filename.rsplit(".", 1)[0] if "." in filename else filename
        file_name = images.generate_file_name(f"{stem or 'image'}.{extension}", prefix)
        path = f"{folder}/{file_name}"
        stored = self.storage.put_bytes(
            path, optimized, images.mime_type_for(options.format)
        )
        logger.info("Uploaded image %s (%d bytes)", path, stored.size)
        return UploadResult(url=stored.url, filename=file_name, size=stored.size, path=path)

    def upload_pdf(
        self, data: bytes, filename: str, folder: str = MAGAZINE_FILES
    ) -> PdfUploadResult:
        if not data.startswith(b"%PDF"):
            raise ValidationFailed("Only PDF files are allowed")
        if len(data) > images.MAX_UPLOAD_BYTES:
            raise ValidationFailed("File size must be less than 50MB")
        try:
            pages = len(PdfReader(io.BytesIO(data)).pages)
        except (PdfReadError, ValueError) as exc:
            raise ValidationFailed("Invalid PDF file") from exc

        file_name = images.generate_file_name(filename if "." in filename else f"{filename}.pdf")
        path = f"{folder}/{file_name}"
        stored = self.storage.put_bytes(path, data, "application/pdf")
        logger.info("Uploaded PDF %s (%d pages)", path, pages)
        return PdfUploadResult(
            url=stored.url, filename=file_name, size=stored.size, path=path, pages=pages
        )

    def path_from_url(self, url: str) -> Optional[str]:
        """Storage path for a public URL served by this backend, else None."""
        if not url:
            return None
        parsed = urlparse(url)
        if self.storage.name == "blob":
            if parsed.hostname and parsed.hostname.endswith(".blob.vercel-storage.com"):
                return unquote(parsed.path.lstrip("/")) or None
            return None
        if self.storage.name == "firebase" and parsed.hostname == "firebasestorage.googleapis.com":
            match = FIREBASE_DOWNLOAD_PATH.match(parsed.path)
            return unquote(match.group(1)) if match else None
        prefix = self.storage.public_url("")
        if prefix and url.startswith(prefix) and len(url) > len(prefix):
            return unquote(url[len(prefix):])
        return None

    def resolve_path(self, path_or_url: str) -> Optional[str]:
        if path_or_url.startswith(("http://", "https://", "/")):
            return self.path_from_url(path_or_url)
        return path_or_url

    def delete(self, path_or_url: str) -> bool:
        """Remove an uploaded file. Backend failures are logged, not raised."""
        path = self.resolve_path(path_or_url)
        if not path:
            logger.info("Not deleting %s: not stored in %s", path_or_url, self.storage.name)
            return False
        try:
            self.storage.delete(path)
        except Exception:
            logger.exception("Failed to delete %s from %s", path, self.storage.name)
            return False
        logger.info("Deleted %s from %s", path, self.storage.name)
        return True

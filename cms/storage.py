"""
Object storage abstraction for local files, Vercel Blob, Firebase Storage and
in-memory testing.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote

import requests
from firebase_admin import storage as firebase_storage

from cms.config import Settings
from cms.errors import StorageError
from cms.firebase import get_firebase_app

logger = logging.getLogger(__name__)

BLOB_API_VERSION = "7"
PUBLIC_CACHE_CONTROL = "public, max-age=31536000"


@dataclass
class StoredObject:
    path: str
    url: str
    size: int


class StorageClient(Protocol):
    """Defines the operations the CMS needs from object storage."""

    name: str

    def put_bytes(
        self, path: str, data: bytes, content_type: str = "application/octet-stream"
    ) -> StoredObject:
        ...

    def get_bytes(self, path: str) -> bytes:
        ...

    def exists(self, path: str) -> bool:
        ...

    def delete(self, path: str) -> None:
        ...

    def public_url(self, path: str) -> str:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage"
    stored_objects: dict = field(default_factory=dict)
    content_types: dict = field(default_factory=dict)
    name: str = "memory"

    def put_bytes(
        self, path: str, data: bytes, content_type: str = "application/octet-stream"
    ) -> StoredObject:
        self.stored_objects[path] = bytes(data)
        self.content_types[path] = content_type
        return StoredObject(path=path, url=self.public_url(path), size=len(data))

    def get_bytes(self, path: str) -> bytes:
        stored = self.stored_objects.get(path)
        if stored is None:
            raise FileNotFoundError(path)
        return stored

    def exists(self, path: str) -> bool:
        return path in self.stored_objects

    def delete(self, path: str) -> None:
        self.stored_objects.pop(path, None)
        self.content_types.pop(path, None)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{path}"


@dataclass
class LocalStorageClient:
    """
    Stores objects as files under ``root``. Writes go to a temporary file
    which is then renamed over the target so readers never see partial data.
    """

    root: str
    url_prefix: str = "/data"
    name: str = "file"

    def _resolve(self, path: str) -> Path:
        base = Path(self.root).resolve()
        target = (base / path).resolve()
        if base != target and base not in target.parents:
            raise StorageError(f"Path escapes storage root: {path}")
        return target

    def put_bytes(
        self, path: str, data: bytes, content_type: str = "application/octet-stream"
    ) -> StoredObject:
        target = self._resolve(path)
        temp_path = target.with_name(target.name + ".tmp")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "wb") as f:
                f.write(data)
            os.replace(temp_path, target)
        except OSError as exc:
            logger.exception("Failed to write %s", target)
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(f"File storage failed: {exc}") from exc
        return StoredObject(path=path, url=self.public_url(path), size=len(data))

    def get_bytes(self, path: str) -> bytes:
        target = self._resolve(path)
        try:
            return target.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            raise FileNotFoundError(path) from None
        except OSError as exc:
            raise StorageError(f"File storage failed: {exc}") from exc

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except OSError as exc:
            raise StorageError(f"File storage failed: {exc}") from exc

    def delete(self, path: str) -> None:
        try:
            self._resolve(path).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"File storage failed: {exc}") from exc

    def public_url(self, path: str) -> str:
        return f"{self.url_prefix.rstrip('/')}/{path}"


@dataclass
class VercelBlobStorageClient:
    """
    Vercel Blob over its REST API. Pathnames are written without a random
    suffix and with overwrite allowed, so saving a document twice replaces it.
    """

    token: str
    api_url: str = "https://blob.vercel-storage.com"
    timeout: float = 30.0
    name: str = "blob"

    def __post_init__(self):
        self._session = requests.Session()
        self._url_cache: dict[str, str] = {}

    def _headers(self, **extra: str) -> dict:
        headers = {
            "authorization": f"Bearer {self.token}",
            "x-api-version": BLOB_API_VERSION,
        }
        headers.update(extra)
        return headers

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self._session.request(
                method, url, timeout=self.timeout, **kwargs
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise StorageError(f"Blob storage failed: {exc}") from exc
        return response

    def _find_url(self, path: str) -> Optional[str]:
        if path in self._url_cache:
            return self._url_cache[path]
        response = self._request(
            "GET",
            self.api_url,
            headers=self._headers(),
            params={"prefix": path, "limit": 100},
        )
        for blob in response.json().get("blobs", []):
            if blob.get("pathname") == path:
                self._url_cache[path] = blob["url"]
                return blob["url"]
        return None

    def put_bytes(
        self, path: str, data: bytes, content_type: str = "application/octet-stream"
    ) -> StoredObject:
        response = self._request(
            "PUT",
            f"{self.api_url}/{quote(path)}",
            data=data,
            headers=self._headers(
                **{
                    "x-content-type": content_type,
                    "x-add-random-suffix": "0",
                    "x-allow-overwrite": "1",
                    "x-cache-control-max-age": "0",
                }
            ),
        )
        url = response.json()["url"]
        self._url_cache[path] = url
        logger.info("Saved %s to blob storage", path)
        return StoredObject(path=path, url=url, size=len(data))

    def get_bytes(self, path: str) -> bytes:
        url = self._find_url(path)
        if url is None:
            raise FileNotFoundError(path)
        # Overwritten pathnames keep their URL; bust the CDN cache on reads.
        return self._request("GET", url, params={"v": os.urandom(4).hex()}).content

    def exists(self, path: str) -> bool:
        return self._find_url(path) is not None

    def delete(self, path: str) -> None:
        url = path if path.startswith("https://") else self._find_url(path)
        if url is None:
            return
        self._request(
            "POST",
            f"{self.api_url}/delete",
            headers=self._headers(**{"content-type": "application/json"}),
            data=json.dumps({"urls": [url]}),
        )
        self._url_cache = {k: v for k, v in self._url_cache.items() if v != url}

    def _store_id(self) -> str:
        # Read-write tokens look like vercel_blob_rw_<storeId>_<secret>.
        parts = self.token.split("_")
        if len(parts) < 5 or parts[:3] != ["vercel", "blob", "rw"]:
            raise StorageError("Cannot derive the blob store URL from BLOB_READ_WRITE_TOKEN")
        return parts[3].lower()

    def public_url(self, path: str) -> str:
        if path in self._url_cache:
            return self._url_cache[path]
        return f"https://{self._store_id()}.public.blob.vercel-storage.com/{quote(path)}"


@dataclass
class FirebaseStorageClient:
    """Firebase Storage through the Admin SDK bucket handle."""

    bucket_name: str
    service_account_key: str
    name: str = "firebase"

    def __post_init__(self):
        app = get_firebase_app(self.service_account_key, self.bucket_name)
        self._bucket = firebase_storage.bucket(self.bucket_name, app=app)

    def put_bytes(
        self, path: str, data: bytes, content_type: str = "application/octet-stream"
    ) -> StoredObject:
        blob = self._bucket.blob(path)
        blob.cache_control = PUBLIC_CACHE_CONTROL
        try:
            blob.upload_from_string(data, content_type=content_type)
            blob.make_public()
        except Exception as exc:
            logger.exception("Firebase upload failed for %s", path)
            raise StorageError(f"Firebase storage failed: {exc}") from exc
        return StoredObject(path=path, url=self.public_url(path), size=len(data))

    def get_bytes(self, path: str) -> bytes:
        if not self.exists(path):
            raise FileNotFoundError(path)
        try:
            return self._bucket.blob(path).download_as_bytes()
        except Exception as exc:
            raise StorageError(f"Firebase storage failed: {exc}") from exc

    def exists(self, path: str) -> bool:
        try:
            return self._bucket.blob(path).exists()
        except Exception as exc:
            raise StorageError(f"Firebase storage failed: {exc}") from exc

    def delete(self, path: str) -> None:
        if not self.exists(path):
            return
        try:
            self._bucket.blob(path).delete()
        except Exception as exc:
            logger.exception("Firebase delete failed for %s", path)
            raise StorageError(f"Firebase storage failed: {exc}") from exc

    def public_url(self, path: str) -> str:
        return f"https://storage.googleapis.com/{self._bucket.name}/{path}"


def resolve_backend(requested: str, settings: Settings, *, prefer_firebase: bool) -> str:
    """Turn ``auto`` into a concrete backend name for this environment."""
    if settings.use_in_memory_backends:
        return "memory"
    if requested != "auto":
        return requested
    if settings.is_development:
        return "file"
    candidates = ["firebase", "blob"] if prefer_firebase else ["blob", "firebase"]
    for candidate in candidates:
        if candidate == "blob" and settings.blob_read_write_token:
            return "blob"
        if candidate == "firebase" and settings.firebase_configured:
            return "firebase"
    logger.warning(
        "No remote storage configured in %s; using local files",
        settings.environment,
    )
    return "file"


def build_storage_client(backend: str, settings: Settings) -> StorageClient:
    if backend == "memory":
        return InMemoryStorageClient()
    if backend == "file":
        return LocalStorageClient(root=settings.data_dir)
    if backend == "blob":
        if not settings.blob_read_write_token:
            raise StorageError("BLOB_READ_WRITE_TOKEN not found")
        return VercelBlobStorageClient(
            token=settings.blob_read_write_token, api_url=settings.blob_api_url
        )
    if backend == "firebase":
        if not settings.firebase_configured:
            raise StorageError(
                "Firebase Storage is not configured. Please set up Firebase credentials."
            )
        return FirebaseStorageClient(
            bucket_name=settings.firebase_storage_bucket,
            service_account_key=settings.firebase_service_account_key,
        )
    raise ValueError(f"Unknown storage backend: {backend}")

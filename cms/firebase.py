"""
Firebase Admin initialisation shared by storage and token verification.
"""

from __future__ import annotations

import json
import logging
import os
import threading

import firebase_admin
from firebase_admin import credentials

logger = logging.getLogger(__name__)

_lock = threading.Lock()


def _load_credentials(service_account_key: str) -> credentials.Certificate:
    # The key may be a path to the JSON file or the raw JSON itself.
    if os.path.exists(service_account_key):
        logger.info("Loading Firebase credentials from file")
        return credentials.Certificate(service_account_key)
    try:
        payload = json.loads(service_account_key)
    except json.JSONDecodeError as exc:
        raise ValueError("Invalid FIREBASE_SERVICE_ACCOUNT_KEY format") from exc
    return credentials.Certificate(payload)


def get_firebase_app(
    service_account_key: str, storage_bucket: str | None = None
) -> firebase_admin.App:
    """Return the default Firebase app, initialising it on first use."""
    with _lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            pass
        options = {"storageBucket": storage_bucket} if storage_bucket else None
        app = firebase_admin.initialize_app(
            _load_credentials(service_account_key), options
        )
        logger.info("Firebase Admin initialised for project %s", app.project_id)
        return app

"""
Exceptions raised by the storage and service layers.

Routes do not catch these; the handlers registered in ``cms.app`` turn them
into ``{"error": ...}`` responses with the status code below.
"""

from __future__ import annotations


class CmsError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CmsError):
    status_code = 404


class ConflictError(CmsError):
    status_code = 409


class ValidationFailed(CmsError):
    status_code = 400


class ImageValidationError(ValidationFailed):
    pass


class AuthenticationError(CmsError):
    status_code = 401


class StorageError(CmsError):
    status_code = 500


class DeliveryError(CmsError):
    status_code = 502

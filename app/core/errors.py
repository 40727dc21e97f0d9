# app/core/errors.py
"""Failures the file service reports to callers.

Every exception names the collaborator that failed and the step it failed at.
Adapters in app/storage raise their own lower-level errors; the registry and
the link resolver translate those into the classes below.
"""


class FileServiceError(Exception):
    code = "file_service_error"
    status_code = 500
    default_message = "File service error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(FileServiceError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Authentication required"


class Forbidden(FileServiceError):
    code = "forbidden"
    status_code = 403
    default_message = "Not allowed"


class NotFound(FileServiceError):
    code = "not_found"
    status_code = 404
    default_message = "File not found"


class InvalidUpload(FileServiceError):
    code = "invalid_upload"
    status_code = 400
    default_message = "Invalid upload"


class StorageWriteFailed(FileServiceError):
    code = "storage_write_failed"
    status_code = 502
    default_message = "Could not write file to content storage"


class StorageReadFailed(FileServiceError):
    code = "storage_read_failed"
    status_code = 502
    default_message = "Could not read file from content storage"


class StorageDeleteFailed(FileServiceError):
    code = "storage_delete_failed"
    status_code = 502
    default_message = "Could not delete file from content storage"


class MetadataWriteFailed(FileServiceError):
    code = "metadata_write_failed"
    status_code = 503
    default_message = "Could not save file metadata"


class MetadataReadFailed(FileServiceError):
    code = "metadata_read_failed"
    status_code = 503
    default_message = "Could not read file metadata"


class MetadataDeleteFailed(FileServiceError):
    code = "metadata_delete_failed"
    status_code = 503
    default_message = "Could not delete file metadata"

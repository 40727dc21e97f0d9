# app/services/file_registry.py
"""Upload, list and delete for owned files.

A file lives in two places that cannot share a transaction: the blob in the
content store and its row in the metadata store. Writes always go blob
first, row second, and deletes go blob first, row second as well. The only
inconsistencies that can be left behind are:

- an orphaned blob, when the row insert fails after the blob was written
  (we try once to remove it again);
- an orphaned row, when the row delete fails after the blob was removed.
  The link resolver treats such a row as not found.

Both are logged as ``integrity_fault`` events for reconciliation.
"""
import unicodedata
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath

import structlog

from app.core.errors import (
    InvalidUpload,
    MetadataDeleteFailed,
    MetadataReadFailed,
    MetadataWriteFailed,
    NotFound,
    StorageDeleteFailed,
    StorageWriteFailed,
    Unauthenticated,
)
from app.models.file import FileRecord
from app.storage.content_store import ContentStore, ContentStoreError
from app.storage.metadata_store import MetadataStore, MetadataStoreError, RecordNotFound

logger = structlog.get_logger()

DEFAULT_CONTENT_TYPE = "application/octet-stream"
_FALLBACK_NAME = "file"
_MAX_NAME_LENGTH = 255


@dataclass(frozen=True)
class UploadResult:
    public_id: str
    display_name: str
    size_bytes: int
    content_type: str
    link: str


def new_public_id() -> str:
    return str(uuid.uuid4())


def safe_filename(display_name: str) -> str:
    """Reduce a client filename to a single storage path segment.

    Example: '../../etc/passwd' -> 'passwd', 'C:\\docs\\a.txt' -> 'a.txt'
    """
    name = display_name.replace("\\", "/")
    name = PurePosixPath(name).name
    name = "".join(ch for ch in name if unicodedata.category(ch)[0] != "C")
    name = name.strip().lstrip(".")
    return name[:_MAX_NAME_LENGTH] or _FALLBACK_NAME


def build_storage_path(owner_id: str, public_id: str, display_name: str) -> str:
    return f"{owner_id}/{public_id}/{safe_filename(display_name)}"


def build_public_link(base_url: str, public_id: str) -> str:
    return f"{base_url.rstrip('/')}/d/{public_id}"


class FileRegistry:
    def __init__(self, content_store: ContentStore, metadata_store: MetadataStore, base_url: str):
        self.content_store = content_store
        self.metadata_store = metadata_store
        self.base_url = base_url

    def link_for(self, record: FileRecord) -> str:
        return build_public_link(self.base_url, record.public_id)

    def upload(
        self,
        owner_id: str | None,
        data: bytes,
        filename: str | None,
        content_type: str | None,
    ) -> UploadResult:
        if not owner_id:
            raise Unauthenticated()
        if not filename or not filename.strip():
            raise InvalidUpload("A filename is required")

        content_type = content_type or DEFAULT_CONTENT_TYPE
        public_id = new_public_id()
        storage_path = build_storage_path(owner_id, public_id, filename)
        log = logger.bind(owner_id=owner_id, public_id=public_id, storage_path=storage_path)

        # Step 1: blob first. Nothing to clean up if this fails.
        try:
            self.content_store.put(storage_path, data, content_type)
        except ContentStoreError as exc:
            log.error("storage_put_failed", error=str(exc))
            raise StorageWriteFailed() from exc

        # Step 2: metadata row
        record = FileRecord(
            owner_id=owner_id,
            public_id=public_id,
            display_name=filename,
            size_bytes=len(data),
            content_type=content_type,
            storage_path=storage_path,
            download_count=0,
        )
        try:
            record = self.metadata_store.insert(record)
        except MetadataStoreError as exc:
            log.error("integrity_fault", kind="orphaned_blob", error=str(exc))
            self._remove_orphaned_blob(storage_path, log)
            raise MetadataWriteFailed() from exc

        log.info("file_uploaded", record_id=record.id, size_bytes=record.size_bytes)
        return UploadResult(
            public_id=public_id,
            display_name=filename,
            size_bytes=record.size_bytes,
            content_type=content_type,
            link=build_public_link(self.base_url, public_id),
        )

    def _remove_orphaned_blob(self, storage_path: str, log) -> None:
        """Best-effort compensation; a failure leaves the orphan logged above."""
        try:
            self.content_store.delete(storage_path)
        except ContentStoreError:
            log.exception("orphaned_blob_cleanup_failed")
        else:
            log.info("orphaned_blob_removed")

    def list_files(self, owner_id: str | None) -> list[FileRecord]:
        if not owner_id:
            raise Unauthenticated()
        try:
            return self.metadata_store.list_by_owner(owner_id)
        except MetadataStoreError as exc:
            logger.error("metadata_list_failed", owner_id=owner_id, error=str(exc))
            raise MetadataReadFailed() from exc

    def delete(self, owner_id: str | None, record_id: int) -> None:
        if not owner_id:
            raise Unauthenticated()
        log = logger.bind(owner_id=owner_id, record_id=record_id)

        try:
            record = self.metadata_store.get_by_id(record_id)
        except RecordNotFound as exc:
            log.info("delete_rejected", reason="missing")
            raise NotFound() from exc
        except MetadataStoreError as exc:
            log.error("metadata_lookup_failed", error=str(exc))
            raise MetadataReadFailed() from exc

        # Same answer as a missing record so non-owners learn nothing
        if record.owner_id != owner_id:
            log.warning("delete_rejected", reason="owner_mismatch")
            raise NotFound()

        storage_path = record.storage_path
        log = log.bind(public_id=record.public_id, storage_path=storage_path)

        # Step 1: blob first. On failure the record stays fully live.
        try:
            self.content_store.delete(storage_path)
        except ContentStoreError as exc:
            log.error("storage_delete_failed", error=str(exc))
            raise StorageDeleteFailed() from exc

        # Step 2: row. On failure the row is left without a blob.
        try:
            self.metadata_store.delete_by_id(record_id)
        except MetadataStoreError as exc:
            log.error("integrity_fault", kind="orphaned_metadata", error=str(exc))
            raise MetadataDeleteFailed() from exc

        log.info("file_deleted")

# app/services/link_resolver.py
from dataclasses import dataclass

import structlog

from app.core.errors import MetadataReadFailed, MetadataWriteFailed, NotFound, StorageReadFailed
from app.storage.content_store import BlobNotFound, ContentStore, ContentStoreError
from app.storage.metadata_store import MetadataStore, MetadataStoreError, RecordNotFound

logger = structlog.get_logger()


@dataclass(frozen=True)
class DownloadResult:
    content: bytes
    display_name: str
    content_type: str
    size_bytes: int


class LinkResolver:
    """Turns a public id into file bytes. No identity is needed: the id is the capability."""

    def __init__(self, content_store: ContentStore, metadata_store: MetadataStore):
        self.content_store = content_store
        self.metadata_store = metadata_store

    def fetch_for_download(self, public_id: str) -> DownloadResult:
        log = logger.bind(public_id=public_id)

        try:
            record = self.metadata_store.get_by_public_id(public_id)
        except RecordNotFound as exc:
            raise NotFound() from exc
        except MetadataStoreError as exc:
            log.error("metadata_lookup_failed", error=str(exc))
            raise MetadataReadFailed() from exc

        # Copy what we need before the increment commits and expires the row
        record_id = record.id
        display_name = record.display_name
        content_type = record.content_type
        storage_path = record.storage_path
        log = log.bind(record_id=record_id, storage_path=storage_path)

        try:
            content = self.content_store.get(storage_path)
        except BlobNotFound as exc:
            # Live row without a blob: a failed delete, or a delete racing us
            log.error("integrity_fault", kind="orphaned_metadata")
            raise NotFound() from exc
        except ContentStoreError as exc:
            log.error("storage_get_failed", error=str(exc))
            raise StorageReadFailed() from exc

        try:
            counted = self.metadata_store.increment_download_count(record_id)
        except MetadataStoreError as exc:
            log.error("download_count_increment_failed", error=str(exc))
            raise MetadataWriteFailed("Could not record the download") from exc
        else:
            if not counted:
                log.info("download_count_row_gone")

        log.info("file_downloaded", size_bytes=len(content))
        return DownloadResult(
            content=content,
            display_name=display_name,
            content_type=content_type,
            size_bytes=len(content),
        )

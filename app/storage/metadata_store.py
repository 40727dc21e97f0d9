# app/storage/metadata_store.py
"""File records in the SQL database.

Each call commits on its own; nothing spans two calls. Database failures
surface as MetadataStoreError, missing rows as RecordNotFound.
"""
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.file import FileRecord


class MetadataStoreError(Exception):
    """The metadata database could not complete a call."""


class RecordNotFound(MetadataStoreError):
    """No file record matches the lookup."""


class MetadataStore:
    def __init__(self, db: Session):
        self.db = db

    def insert(self, record: FileRecord) -> FileRecord:
        try:
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise MetadataStoreError(f"insert failed: {exc}") from exc
        return record

    def get_by_id(self, record_id: int) -> FileRecord:
        return self._one(select(FileRecord).where(FileRecord.id == record_id), record_id)

    def get_by_public_id(self, public_id: str) -> FileRecord:
        return self._one(select(FileRecord).where(FileRecord.public_id == public_id), public_id)

    def list_by_owner(self, owner_id: str) -> list[FileRecord]:
        query = (
            select(FileRecord)
            .where(FileRecord.owner_id == owner_id)
            .order_by(FileRecord.created_at.desc(), FileRecord.id.desc())
        )
        try:
            return list(self.db.scalars(query).all())
        except SQLAlchemyError as exc:
            raise MetadataStoreError(f"list for owner {owner_id!r} failed: {exc}") from exc

    def increment_download_count(self, record_id: int) -> bool:
        """Add one to the counter in a single UPDATE.

        Returns False when the row no longer exists.
        """
        stmt = (
            update(FileRecord)
            .where(FileRecord.id == record_id)
            .values(download_count=FileRecord.download_count + 1)
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise MetadataStoreError(f"increment for {record_id} failed: {exc}") from exc
        return result.rowcount > 0

    def delete_by_id(self, record_id: int) -> None:
        stmt = (
            delete(FileRecord)
            .where(FileRecord.id == record_id)
            .execution_options(synchronize_session=False)
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise MetadataStoreError(f"delete for {record_id} failed: {exc}") from exc

    def _one(self, query, key) -> FileRecord:
        try:
            record = self.db.scalars(query).first()
        except OverflowError as exc:
            # Key wider than the column type: no row can match
            self.db.rollback()
            raise RecordNotFound(str(key)) from exc
        except SQLAlchemyError as exc:
            raise MetadataStoreError(f"lookup {key!r} failed: {exc}") from exc
        if record is None:
            raise RecordNotFound(str(key))
        return record

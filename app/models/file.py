# app/models/file.py
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, Integer, String

from app.models.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FileRecord(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(64), nullable=False, index=True)        # From the identity gateway
    public_id = Column(String(36), nullable=False, unique=True, index=True)  # Only id shown in links
    display_name = Column(String(255), nullable=False)               # Name user uploaded
    size_bytes = Column(BigInteger, nullable=False)
    content_type = Column(String(255), nullable=False)
    storage_path = Column(String(1024), nullable=False, unique=True)  # Content store key, never exposed
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    download_count = Column(Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<FileRecord id={self.id} public_id={self.public_id} owner={self.owner_id}>"

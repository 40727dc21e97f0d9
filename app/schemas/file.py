"""File request/response schemas."""
from datetime import datetime

from pydantic import BaseModel


class UploadResponse(BaseModel):
    public_id: str
    display_name: str
    size_bytes: int
    content_type: str
    link: str


class FileItem(BaseModel):
    id: int
    public_id: str
    display_name: str
    size_bytes: int
    content_type: str
    created_at: datetime
    download_count: int
    link: str


class ErrorResponse(BaseModel):
    detail: str
    code: str

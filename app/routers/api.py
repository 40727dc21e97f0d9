"""JSON API for owners: upload, list, delete."""
from fastapi import APIRouter, Depends, Path, Response, UploadFile, File as FastAPIFile

from app.core.identity import authenticate
from app.core.dependencies import get_file_registry
from app.schemas.file import ErrorResponse, FileItem, UploadResponse
from app.services.file_registry import FileRegistry

# Largest id a 64-bit INTEGER primary key can hold
MAX_RECORD_ID = 2**63 - 1

router = APIRouter(
    prefix="/api/files",
    tags=["files"],
    responses={401: {"model": ErrorResponse}},
)


@router.post("", response_model=UploadResponse, status_code=201)
def upload_file(
    upload: UploadFile = FastAPIFile(...),
    owner_id: str = Depends(authenticate),
    registry: FileRegistry = Depends(get_file_registry),
):
    """Store the file and return its public link."""
    content = upload.file.read()
    result = registry.upload(owner_id, content, upload.filename, upload.content_type)
    return UploadResponse(
        public_id=result.public_id,
        display_name=result.display_name,
        size_bytes=result.size_bytes,
        content_type=result.content_type,
        link=result.link,
    )


@router.get("", response_model=list[FileItem])
def list_files(
    owner_id: str = Depends(authenticate),
    registry: FileRegistry = Depends(get_file_registry),
):
    """The caller's files, newest first."""
    return [
        FileItem(
            id=record.id,
            public_id=record.public_id,
            display_name=record.display_name,
            size_bytes=record.size_bytes,
            content_type=record.content_type,
            created_at=record.created_at,
            download_count=record.download_count,
            link=registry.link_for(record),
        )
        for record in registry.list_files(owner_id)
    ]


@router.delete("/{file_id}", status_code=204, responses={404: {"model": ErrorResponse}})
def delete_file(
    file_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    owner_id: str = Depends(authenticate),
    registry: FileRegistry = Depends(get_file_registry),
):
    """Remove the blob, then the record."""
    registry.delete(owner_id, file_id)
    return Response(status_code=204)

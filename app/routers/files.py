from urllib.parse import quote

from fastapi import APIRouter, Request, Depends, Path, UploadFile, File as FastAPIFile
from fastapi.responses import HTMLResponse, RedirectResponse

from app.core.errors import FileServiceError, Unauthenticated
from app.core.identity import get_current_user_id
from app.core.templating import templates
from app.core.dependencies import get_file_registry
from app.routers.api import MAX_RECORD_ID
from app.services.file_registry import FileRegistry, build_public_link

router = APIRouter()


def _back_to_files(error: str | None = None, uploaded: str | None = None) -> RedirectResponse:
    url = "/files"
    if error:
        url = f"/files?error={quote(error)}"
    elif uploaded:
        url = f"/files?uploaded={quote(uploaded)}"
    return RedirectResponse(url=url, status_code=303)


# --- show user's files (dashboard) ---
@router.get("/files", response_class=HTMLResponse)
def list_files(
    request: Request,
    registry: FileRegistry = Depends(get_file_registry),
    error: str | None = None,
    uploaded: str | None = None,
):
    user_id = get_current_user_id(request)
    if not user_id:
        return RedirectResponse(url="/login", status_code=303)

    try:
        files = registry.list_files(user_id)
    except FileServiceError as exc:
        files = []
        error = exc.message

    # Success panel after an upload: the one record whose link we just handed out
    uploaded_file = None
    if uploaded:
        uploaded_file = next((f for f in files if f.public_id == uploaded), None)

    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "files": files,
            "links": {f.id: registry.link_for(f) for f in files},
            "uploaded_file": uploaded_file,
            "uploaded_link": build_public_link(registry.base_url, uploaded) if uploaded_file else None,
            "error": error,
        },
    )


# --- upload a new file ---
@router.post("/upload")
def upload_file(
    request: Request,
    upload: UploadFile = FastAPIFile(...),
    registry: FileRegistry = Depends(get_file_registry),
):
    user_id = get_current_user_id(request)
    if not user_id:
        return RedirectResponse(url="/login", status_code=303)

    content = upload.file.read()
    try:
        result = registry.upload(user_id, content, upload.filename, upload.content_type)
    except FileServiceError as exc:
        return _back_to_files(error=exc.message)

    return _back_to_files(uploaded=result.public_id)


# --- delete a file ---
@router.post("/delete/{file_id}")
def delete_file(
    request: Request,
    file_id: int = Path(..., ge=1, le=MAX_RECORD_ID),
    registry: FileRegistry = Depends(get_file_registry),
):
    try:
        registry.delete(get_current_user_id(request), file_id)
    except Unauthenticated:
        return RedirectResponse(url="/login", status_code=303)
    except FileServiceError as exc:
        return _back_to_files(error=exc.message)

    return _back_to_files()

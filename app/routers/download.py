import io
from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from app.core.dependencies import get_link_resolver
from app.services.link_resolver import LinkResolver

router = APIRouter()


def content_disposition(filename: str) -> str:
    """Attachment header that survives non-ASCII names (RFC 6266 / 5987)."""
    ascii_name = "".join(ch for ch in filename if 32 <= ord(ch) < 127 and ch not in '"\\') or "download"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


# --- public download: the link itself is the permission ---
@router.get("/d/{public_id}")
def download_file(public_id: str, resolver: LinkResolver = Depends(get_link_resolver)):
    result = resolver.fetch_for_download(public_id)

    return StreamingResponse(
        io.BytesIO(result.content),
        media_type=result.content_type,
        headers={
            "Content-Disposition": content_disposition(result.display_name),
            "Content-Length": str(result.size_bytes),
        },
    )

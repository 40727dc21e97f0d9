# app/core/dependencies.py
from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.models.database import get_db
from app.services.file_registry import FileRegistry
from app.services.link_resolver import LinkResolver
from app.storage.content_store import ContentStore, build_content_store
from app.storage.metadata_store import MetadataStore


@lru_cache
def get_content_store() -> ContentStore:
    return build_content_store(get_settings())


def get_metadata_store(db: Session = Depends(get_db)) -> MetadataStore:
    return MetadataStore(db)


def get_base_url(request: Request) -> str:
    return get_settings().public_base_url or str(request.base_url)


def get_file_registry(
    request: Request,
    content_store: ContentStore = Depends(get_content_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
) -> FileRegistry:
    return FileRegistry(content_store, metadata_store, get_base_url(request))


def get_link_resolver(
    content_store: ContentStore = Depends(get_content_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
) -> LinkResolver:
    return LinkResolver(content_store, metadata_store)

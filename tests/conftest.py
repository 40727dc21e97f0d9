"""Shared fixtures: moto S3, SQLite metadata, a registry and a test client."""

import os

# Settings are cached on first import, so the environment goes first
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "s3"
os.environ["AWS_S3_BUCKET_NAME"] = "filedrop-test"
os.environ["PUBLIC_BASE_URL"] = "https://files.example.com"
os.environ["AUTH_SECRET"] = "test-secret"
os.environ["LOG_JSON"] = "false"

import boto3  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from moto import mock_aws  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.identity import issue_token  # noqa: E402
from app.models import file, user  # noqa: E402,F401
from app.models.database import Base  # noqa: E402
from app.services.file_registry import FileRegistry  # noqa: E402
from app.services.link_resolver import LinkResolver  # noqa: E402
from app.storage.content_store import S3ContentStore  # noqa: E402
from app.storage.metadata_store import MetadataStore  # noqa: E402

BUCKET = "filedrop-test"
BASE_URL = "https://files.example.com"


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def s3_client():
    """Mock S3 with the test bucket created."""
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def content_store(s3_client):
    return S3ContentStore(s3_client, BUCKET)


@pytest.fixture
def metadata_store(db_session):
    return MetadataStore(db_session)


@pytest.fixture
def registry(content_store, metadata_store):
    return FileRegistry(content_store, metadata_store, BASE_URL)


@pytest.fixture
def resolver(content_store, metadata_store):
    return LinkResolver(content_store, metadata_store)


@pytest.fixture
def client(session_factory, content_store):
    """TestClient wired to the test database and mock bucket."""
    from app.core.dependencies import get_content_store
    from app.main import app
    from app.models.database import get_db

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_content_store] = lambda: content_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def bearer(owner_id: str) -> dict:
    return {"Authorization": f"Bearer {issue_token(owner_id)}"}


@pytest.fixture
def alice_headers():
    return bearer("1")


@pytest.fixture
def bob_headers():
    return bearer("2")

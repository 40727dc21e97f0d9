"""Tests for settings and logging setup."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from app.core.config import Settings
from app.core.logging import configure_logging


def test_auth_secret_is_required(monkeypatch):
    monkeypatch.delenv("AUTH_SECRET", raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_auth_secret_read_from_environment(monkeypatch):
    monkeypatch.setenv("AUTH_SECRET", "from-env")

    assert Settings(_env_file=None).auth_secret == "from-env"


@pytest.fixture
def restore_structlog():
    saved = structlog.get_config()
    yield
    structlog.configure(**saved)


def test_logging_goes_through_stdlib(restore_structlog, caplog):
    configure_logging(Settings(_env_file=None, log_level="INFO", log_json=True))

    assert isinstance(structlog.get_config()["logger_factory"], structlog.stdlib.LoggerFactory)

    with caplog.at_level(logging.INFO):
        structlog.get_logger("filedrop.test").info("file_uploaded", size_bytes=3)

    [record] = [r for r in caplog.records if r.name == "filedrop.test"]
    assert '"event": "file_uploaded"' in record.getMessage()
    assert '"size_bytes": 3' in record.getMessage()

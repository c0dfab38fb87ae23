from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path

import pytest
import structlog
from sqlalchemy.orm import sessionmaker

os.environ.setdefault("JWT_SIGNING_KEY", "test-signing-key")

from src.uploader.config import (  # noqa: E402
    ALLOWED_MIME_TYPES,
    DEFAULT_IMAGE_SIZES,
    DEFAULT_ROUTE_SLUG,
    AppConfig,
    MediaPaths,
    UploadLimits,
    build_engine,
)
from src.uploader.db.db_init import init_db  # noqa: E402
from src.uploader.logging import DebugLog  # noqa: E402
from src.uploader.media.media_store import MediaStore  # noqa: E402
from src.uploader.repositories.attachment_repository import AttachmentRepository  # noqa: E402

TEST_SIGNING_KEY = "test-signing-key"


@pytest.fixture(autouse=True)
def _isolate_structlog(monkeypatch):
    """Keep structlog config from leaking between tests.

    ``configure_logging`` enables ``cache_logger_on_first_use``, which would
    permanently bind module-level loggers and hide them from ``capture_logs``.
    """
    real_configure = structlog.configure

    def configure_uncached(*args, **kwargs):
        kwargs["cache_logger_on_first_use"] = False
        real_configure(*args, **kwargs)

    monkeypatch.setattr(structlog, "configure", configure_uncached)
    yield
    structlog.reset_defaults()


def build_config(tmp_path: Path, **overrides) -> AppConfig:
    root = tmp_path / "media"
    media_paths = MediaPaths(root=root, uploads=root / "uploads", temp=root / "tmp")
    for directory in (media_paths.root, media_paths.uploads, media_paths.temp):
        directory.mkdir(parents=True, exist_ok=True)

    database_url = f"sqlite:///{tmp_path / 'catalog.db'}"
    engine = build_engine(database_url)
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    init_db(engine)

    config = AppConfig(
        media_paths=media_paths,
        upload_limits=UploadLimits(
            allowed_mime_types=ALLOWED_MIME_TYPES,
            max_upload_bytes=5 * 1024 * 1024,
            download_timeout_seconds=5.0,
            download_connect_timeout_seconds=1.0,
            chunk_size_bytes=1024,
        ),
        route_slug=DEFAULT_ROUTE_SLUG,
        route_slug_configured=False,
        uploads_url="/media/uploads",
        uploads_url_path="/media/uploads",
        image_sizes=DEFAULT_IMAGE_SIZES,
        database_url=database_url,
        engine=engine,
        session_factory=session_factory,
        jwt_signing_key=TEST_SIGNING_KEY,
        debug_log=True,
    )
    return replace(config, **overrides) if overrides else config


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return build_config(tmp_path)


@pytest.fixture
def media_store(app_config: AppConfig) -> MediaStore:
    return MediaStore(paths=app_config.media_paths, uploads_url=app_config.uploads_url)


@pytest.fixture
def attachment_repo(app_config: AppConfig) -> AttachmentRepository:
    return AttachmentRepository(app_config.session_factory)


@pytest.fixture
def debug_log() -> DebugLog:
    return DebugLog(enabled=True)


def temp_files(config: AppConfig) -> list[Path]:
    return sorted(config.media_paths.temp.iterdir())

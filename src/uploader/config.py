"""Application configuration builder."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .db.db_init import init_db

DEFAULT_ROUTE_SLUG = "cmv_api"
ALLOWED_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "video/mp4",
    "audio/mp3",
)


@dataclass(frozen=True, slots=True)
class ImageSize:
    name: str
    width: int
    height: int
    crop: bool = False


DEFAULT_IMAGE_SIZES = (
    ImageSize("thumbnail", 150, 150, crop=True),
    ImageSize("medium", 300, 300),
    ImageSize("large", 1024, 1024),
)


@dataclass(frozen=True, slots=True)
class UploadLimits:
    allowed_mime_types: Sequence[str]
    max_upload_bytes: int
    download_timeout_seconds: float
    download_connect_timeout_seconds: float
    chunk_size_bytes: int


@dataclass(frozen=True, slots=True)
class MediaPaths:
    root: Path
    uploads: Path
    temp: Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    media_paths: MediaPaths
    upload_limits: UploadLimits
    route_slug: str
    route_slug_configured: bool
    uploads_url: str
    uploads_url_path: str
    image_sizes: Sequence[ImageSize]
    database_url: str
    engine: Engine
    session_factory: sessionmaker[Session]
    jwt_signing_key: str
    debug_log: bool


def _ensure_media_paths(paths: MediaPaths) -> None:
    paths.root.mkdir(parents=True, exist_ok=True)
    paths.uploads.mkdir(parents=True, exist_ok=True)
    paths.temp.mkdir(parents=True, exist_ok=True)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def build_engine(database_url: str) -> Engine:
    """Create the catalog engine; SQLite connections are shared with worker threads."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, future=True, connect_args=connect_args)


def build_uploads_url(public_base_url: str, uploads_url_path: str) -> str:
    """Join the public origin with the URL path the uploads are served from."""
    path = "/" + uploads_url_path.strip("/")
    return public_base_url.rstrip("/") + path


def load_config() -> AppConfig:
    """Load configuration from environment once per process (SQLite by default)."""
    root = Path(os.getenv("MEDIA_ROOT", "media"))
    media_paths = MediaPaths(
        root=root,
        uploads=root / "uploads",
        temp=Path(os.getenv("UPLOAD_TEMP_DIR", str(root / "tmp"))),
    )
    _ensure_media_paths(media_paths)

    upload_limits = UploadLimits(
        allowed_mime_types=ALLOWED_MIME_TYPES,
        max_upload_bytes=int(os.getenv("UPLOAD_MAX_BYTES", 64 * 1024 * 1024)),
        download_timeout_seconds=float(os.getenv("DOWNLOAD_TIMEOUT_SECONDS", 300)),
        download_connect_timeout_seconds=float(
            os.getenv("DOWNLOAD_CONNECT_TIMEOUT_SECONDS", 10)
        ),
        chunk_size_bytes=int(os.getenv("DOWNLOAD_CHUNK_SIZE_BYTES", 1 * 1024 * 1024)),
    )

    configured_slug = os.getenv("MEDIA_API_SLUG", "").strip().strip("/")
    uploads_url_path = "/" + os.getenv("UPLOADS_URL_PATH", "/media/uploads").strip("/")
    uploads_url = build_uploads_url(os.getenv("PUBLIC_BASE_URL", ""), uploads_url_path)

    database_url = os.getenv("DATABASE_URL", "sqlite:///uploader.db")
    engine = build_engine(database_url)
    session_factory: sessionmaker[Session] = sessionmaker(bind=engine, expire_on_commit=False)

    signing_key = os.getenv("JWT_SIGNING_KEY", "")
    if not signing_key:
        raise RuntimeError("JWT_SIGNING_KEY is not configured")

    init_db(engine)

    return AppConfig(
        media_paths=media_paths,
        upload_limits=upload_limits,
        route_slug=configured_slug or DEFAULT_ROUTE_SLUG,
        route_slug_configured=bool(configured_slug),
        uploads_url=uploads_url,
        uploads_url_path=uploads_url_path,
        image_sizes=DEFAULT_IMAGE_SIZES,
        database_url=database_url,
        engine=engine,
        session_factory=session_factory,
        jwt_signing_key=signing_key,
        debug_log=_env_flag("DEBUG_LOG"),
    )

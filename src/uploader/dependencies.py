"""Dependency wiring helpers."""

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .api.errors import ApiError, api_error_handler
from .auth.auth_service import AuthService
from .config import AppConfig
from .logging import DebugLog
from .media.media_store import MediaStore
from .repositories.attachment_repository import AttachmentRepository
from .upload.cleanup import CleanupGuard
from .upload.fetcher import RemoteFetcher
from .upload.registrar import CatalogRegistrar
from .upload.sideload import SideloadIngestor
from .upload.upload_api import build_upload_router
from .upload.upload_service import UploadService
from .upload.validation import UrlValidator


def build_upload_service(config: AppConfig, *, fetcher: RemoteFetcher | None = None) -> UploadService:
    """Assemble the upload pipeline from configuration."""
    debug_log = DebugLog(config.debug_log)
    store = MediaStore(paths=config.media_paths, uploads_url=config.uploads_url)
    attachment_repo = AttachmentRepository(config.session_factory)
    return UploadService(
        validator=UrlValidator(config.upload_limits),
        fetcher=fetcher or RemoteFetcher(config.upload_limits),
        sideload=SideloadIngestor(limits=config.upload_limits, store=store),
        registrar=CatalogRegistrar(
            repo=attachment_repo,
            image_sizes=config.image_sizes,
            debug_log=debug_log,
        ),
        cleanup=CleanupGuard(temp_dir=config.media_paths.temp, debug_log=debug_log),
        debug_log=debug_log,
    )


def include_routers(app: FastAPI, config: AppConfig, upload_service: UploadService) -> None:
    """Mount module routers and attach services."""
    app.state.config = config
    app.state.upload_service = upload_service
    app.state.auth_service = AuthService(signing_key=config.jwt_signing_key)

    app.add_exception_handler(ApiError, api_error_handler)
    app.include_router(build_upload_router(config.route_slug))
    app.mount(
        config.uploads_url_path,
        StaticFiles(directory=config.media_paths.uploads),
        name="uploads",
    )

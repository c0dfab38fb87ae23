"""FastAPI application entry point.

Run with ``uvicorn src.uploader.main:create_app --factory`` or the
``remote-media-uploader`` console script.
"""

import os

import uvicorn
from fastapi import FastAPI

from .config import AppConfig, load_config
from .dependencies import build_upload_service, include_routers
from .lifecycle import report_route_slug
from .logging import configure_logging
from .upload.fetcher import RemoteFetcher


def create_app(config: AppConfig | None = None, *, fetcher: RemoteFetcher | None = None) -> FastAPI:
    """Build FastAPI instance with configured dependencies."""
    cfg = config or load_config()
    configure_logging(debug=cfg.debug_log)
    report_route_slug(cfg)
    app = FastAPI(title="Remote Media Uploader")
    include_routers(app, cfg, build_upload_service(cfg, fetcher=fetcher))
    return app


def run() -> None:
    uvicorn.run(
        "src.uploader.main:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", 8000)),
    )

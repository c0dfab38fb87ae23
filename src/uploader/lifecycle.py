"""Startup diagnostics for the upload service."""

from __future__ import annotations

import structlog

from .config import AppConfig

logger = structlog.get_logger(__name__)

SLUG_HINT = (
    "Set MEDIA_API_SLUG to a unique, hard to guess value; the endpoint is "
    "currently reachable under the public fallback slug."
)


def example_curl(route_slug: str) -> str:
    return (
        f"curl --location 'https://your-host/api/v2/{route_slug}' "
        "--header 'Content-Type: application/json' "
        "--header 'Authorization: Bearer <token>' "
        "--data '{\"file_url\": \"http://example.com/image.jpg\"}'"
    )


def report_route_slug(config: AppConfig, log: structlog.stdlib.BoundLogger = logger) -> bool:
    """Warn when the route slug falls back to the default; return whether it did."""
    if config.route_slug_configured:
        log.info("startup.route_slug.configured", route_slug=config.route_slug)
        return False

    log.warning(
        "startup.route_slug.default",
        route_slug=config.route_slug,
        hint=SLUG_HINT,
        example=example_curl("replace_your_unique_value_here"),
    )
    return True


__all__ = ["example_curl", "report_route_slug"]

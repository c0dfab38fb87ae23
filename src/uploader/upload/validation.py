"""Pre-fetch URL validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import SplitResult, urlsplit

import httpx
import structlog

from ..config import UploadLimits
from ..media.file_types import basename_from_url_path, check_filetype
from .upload_errors import InvalidUrlError, UnsupportedFileTypeError

logger = structlog.get_logger(__name__)

ALLOWED_SCHEMES = frozenset({"http", "https"})


def parse_absolute_url(file_url: object) -> SplitResult:
    """Parse ``file_url`` or raise :class:`InvalidUrlError`."""
    if not isinstance(file_url, str) or not file_url:
        raise InvalidUrlError("Invalid URL provided.")
    if any(char.isspace() or ord(char) < 0x20 for char in file_url):
        raise InvalidUrlError("Invalid URL provided.")

    try:
        parsed = urlsplit(file_url)
        port = parsed.port
    except ValueError as exc:
        raise InvalidUrlError("Invalid URL provided.") from exc

    if parsed.scheme.lower() not in ALLOWED_SCHEMES or not parsed.hostname or port == 0:
        raise InvalidUrlError("Invalid URL provided.")

    # the host must also survive IDNA encoding and decoding by the HTTP client
    try:
        host = httpx.URL(file_url).host
    except (httpx.InvalidURL, ValueError) as exc:
        raise InvalidUrlError("Invalid URL provided.") from exc
    if not host:
        raise InvalidUrlError("Invalid URL provided.")
    return parsed


@dataclass(slots=True)
class UrlValidator:
    """Reject malformed URLs and extensions outside the allow-list.

    The MIME type found here is only declared by the URL; the sideload step
    re-checks the downloaded content.
    """

    limits: UploadLimits
    log: structlog.stdlib.BoundLogger = field(default_factory=lambda: logger)

    def validate(self, file_url: object) -> str:
        parsed = parse_absolute_url(file_url)
        filename = basename_from_url_path(parsed.path)
        declared_mime = check_filetype(filename)
        if declared_mime not in self.limits.allowed_mime_types:
            self.log.info(
                "upload.url.unsupported_type",
                filename=filename,
                declared_mime=declared_mime,
            )
            raise UnsupportedFileTypeError("Unsupported file type.")
        return declared_mime

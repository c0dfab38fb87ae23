"""Download remote resources into scratch files."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlsplit

import httpx
import structlog

from ..config import UploadLimits
from ..media.file_types import basename_from_url_path
from .upload_errors import DownloadFailedError
from .upload_models import TemporaryArtifact

logger = structlog.get_logger(__name__)

USER_AGENT = "RemoteMediaUploader/1.0"


@dataclass(slots=True)
class RemoteFetcher:
    """Stream ``url`` to disk under a bounded deadline."""

    limits: UploadLimits
    transport: httpx.AsyncBaseTransport | None = None
    max_redirects: int = 5
    log: structlog.stdlib.BoundLogger = field(default_factory=lambda: logger)

    async def fetch(self, url: str, destination: Path, *, declared_mime: str) -> TemporaryArtifact:
        filename = basename_from_url_path(urlsplit(url).path) or "download"
        deadline = self.limits.download_timeout_seconds
        try:
            size = await asyncio.wait_for(self._download(url, destination), timeout=deadline)
        except asyncio.TimeoutError as exc:
            self.log.warning("upload.fetch.timeout", url=url, timeout_seconds=deadline)
            raise DownloadFailedError(f"Download timed out after {deadline:g} seconds") from exc
        except (httpx.InvalidURL, UnicodeError) as exc:
            self.log.warning("upload.fetch.invalid_url", url=url, error=repr(exc))
            raise DownloadFailedError(f"Invalid URL: {exc}") from exc
        except httpx.HTTPError as exc:
            self.log.warning("upload.fetch.http_error", url=url, error=repr(exc))
            raise DownloadFailedError(f"{type(exc).__name__}: {exc}") from exc
        except OSError as exc:
            self.log.error("upload.fetch.write_failed", url=url, path=str(destination), error=str(exc))
            raise DownloadFailedError(f"Could not write temporary file: {exc}") from exc

        if size == 0:
            self.log.warning("upload.fetch.empty", url=url)
            raise DownloadFailedError("Downloaded file is empty")

        self.log.info("upload.fetch.done", url=url, size_bytes=size, path=str(destination))
        return TemporaryArtifact(
            local_path=destination,
            size_bytes=size,
            declared_mime=declared_mime,
            filename=filename,
        )

    async def _download(self, url: str, destination: Path) -> int:
        timeout = httpx.Timeout(
            self.limits.download_timeout_seconds,
            connect=self.limits.download_connect_timeout_seconds,
        )
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            max_redirects=self.max_redirects,
            transport=self.transport,
            headers={"User-Agent": USER_AGENT},
        ) as client:
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    self.log.warning(
                        "upload.fetch.bad_status", url=url, status_code=response.status_code
                    )
                    raise DownloadFailedError(
                        f"HTTP {response.status_code} {response.reason_phrase}".strip()
                    )
                size = 0
                with destination.open("wb") as sink:
                    async for chunk in response.aiter_bytes(self.limits.chunk_size_bytes):
                        sink.write(chunk)
                        size += len(chunk)
        return size

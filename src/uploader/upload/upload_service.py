"""Domain service for upload-by-URL operations."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from urllib.parse import urlsplit

import structlog

from ..logging import DebugLog
from ..media.file_types import basename_from_url_path
from .cleanup import CleanupGuard
from .fetcher import RemoteFetcher
from .registrar import CatalogRegistrar
from .sideload import SideloadIngestor
from .upload_errors import UploadPipelineError
from .upload_models import ErrorKind, PipelineState, UploadOutcome
from .validation import UrlValidator

logger = structlog.get_logger(__name__)

FAILURE_PREFIXES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_URL: "Invalid URL",
    ErrorKind.UNSUPPORTED_TYPE: "Unsupported file type",
    ErrorKind.DOWNLOAD_FAILED: "Error downloading file",
    ErrorKind.UPLOAD_ERROR: "Upload error",
    ErrorKind.ATTACHMENT_ERROR: "Error inserting attachment",
}


@dataclass(slots=True)
class UploadService:
    """Run validate, fetch, sideload and register as one linear pass.

    Each call is independent: the same URL submitted twice yields two
    attachments. Any pipeline error ends the pass; the scratch file is removed
    before the outcome is returned. Copying, resizing and catalog writes run
    in worker threads so the event loop keeps serving other requests.
    """

    validator: UrlValidator
    fetcher: RemoteFetcher
    sideload: SideloadIngestor
    registrar: CatalogRegistrar
    cleanup: CleanupGuard
    debug_log: DebugLog
    log: structlog.stdlib.BoundLogger = field(default_factory=lambda: logger)

    async def upload(self, file_url: object) -> UploadOutcome:
        state = PipelineState.START
        try:
            declared_mime = self.validator.validate(file_url)
            state = self._advance(PipelineState.URL_VALIDATED, file_url)
            url = str(file_url)
            filename = basename_from_url_path(urlsplit(url).path)

            with self.cleanup.scratch_file(filename) as scratch_path:
                artifact = await self.fetcher.fetch(url, scratch_path, declared_mime=declared_mime)
                state = self._advance(PipelineState.FETCHED, url)
                stored = await asyncio.to_thread(self.sideload.ingest, artifact)
                state = self._advance(PipelineState.INGESTED, url)
                record = await asyncio.to_thread(self.registrar.register, stored)
                state = self._advance(PipelineState.REGISTERED, url)
                if record.metadata is not None:
                    state = self._advance(PipelineState.METADATA_DERIVED, url)
        except UploadPipelineError as exc:
            self._log_failure(state, exc)
            return UploadOutcome.failed(exc.kind, exc.message)

        self.log.info(
            "upload.completed",
            attachment_id=record.id,
            url=stored.public_url,
            mime_type=record.mime_type,
            last_state=state.value,
        )
        return UploadOutcome.succeeded(record, stored.public_url)

    def _advance(self, state: PipelineState, url: object) -> PipelineState:
        self.log.debug("upload.state", state=state.value, file_url=url)
        return state

    def _log_failure(self, state: PipelineState, exc: UploadPipelineError) -> None:
        self.log.warning(
            "upload.failed",
            kind=exc.kind.value,
            failed_after=state.value,
            error=exc.message,
        )
        self.debug_log.failure(
            f"upload.{exc.kind.value}",
            f"{FAILURE_PREFIXES[exc.kind]}: {exc.message}",
        )

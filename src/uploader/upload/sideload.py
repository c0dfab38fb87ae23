"""Move downloaded files into the permanent upload store."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog
from PIL import Image

from ..config import UploadLimits
from ..media.file_types import check_filetype, extension_for, sniff_mime
from ..media.media_store import MediaStore, sanitize_filename
from .upload_errors import SideloadError
from .upload_models import StoredArtifact, TemporaryArtifact

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class SideloadIngestor:
    """Re-check a downloaded file against upload policy and store it.

    The content, not the URL, decides the MIME type. The temporary file is
    left in place; its removal belongs to the cleanup guard.
    """

    limits: UploadLimits
    store: MediaStore
    log: structlog.stdlib.BoundLogger = field(default_factory=lambda: logger)

    def ingest(self, artifact: TemporaryArtifact) -> StoredArtifact:
        self._test_size(artifact)
        confirmed_mime = self._test_type(artifact)
        filename = self._target_filename(artifact.filename, confirmed_mime)

        try:
            stored_path = self.store.store_file(artifact.local_path, filename)
        except OSError as exc:
            self.log.error(
                "upload.sideload.store_failed",
                source=str(artifact.local_path),
                error=str(exc),
            )
            raise SideloadError(
                f"The uploaded file could not be moved to {self.store.paths.uploads}."
            ) from exc

        relative_path = self.store.relative_path(stored_path)
        self.log.info(
            "upload.sideload.stored",
            path=str(stored_path),
            mime_type=confirmed_mime,
            size_bytes=artifact.size_bytes,
        )
        return StoredArtifact(
            stored_path=stored_path,
            relative_path=relative_path,
            public_url=self.store.url_for(relative_path),
            confirmed_mime=confirmed_mime,
        )

    def _test_size(self, artifact: TemporaryArtifact) -> None:
        try:
            size = artifact.local_path.stat().st_size
        except OSError as exc:
            raise SideloadError("Specified file failed upload test.") from exc
        if size == 0:
            raise SideloadError("File is empty. Please upload something more substantial.")
        if size > self.limits.max_upload_bytes:
            self.log.warning(
                "upload.sideload.too_large",
                size_bytes=size,
                limit_bytes=self.limits.max_upload_bytes,
            )
            raise SideloadError(
                "The uploaded file exceeds the maximum upload size of "
                f"{self.limits.max_upload_bytes} bytes."
            )

    def _test_type(self, artifact: TemporaryArtifact) -> str:
        try:
            sniffed = sniff_mime(artifact.local_path)
        except Image.DecompressionBombError as exc:
            self.log.warning("upload.sideload.too_many_pixels", error=str(exc))
            raise SideloadError(
                "The uploaded image exceeds the maximum allowed pixel dimensions."
            ) from exc
        except OSError as exc:
            raise SideloadError("Specified file failed upload test.") from exc

        if sniffed is None or sniffed not in self.limits.allowed_mime_types:
            self.log.warning(
                "upload.sideload.type_rejected",
                declared_mime=artifact.declared_mime,
                sniffed_mime=sniffed,
            )
            raise SideloadError("Sorry, this file type is not permitted for security reasons.")

        if sniffed != artifact.declared_mime:
            self.log.info(
                "upload.sideload.type_corrected",
                declared_mime=artifact.declared_mime,
                sniffed_mime=sniffed,
            )
        return sniffed

    @staticmethod
    def _target_filename(filename: str, mime_type: str) -> str:
        name = sanitize_filename(filename)
        if check_filetype(name) == mime_type:
            return name
        extension = extension_for(mime_type) or "bin"
        return f"{Path(name).stem}.{extension}"

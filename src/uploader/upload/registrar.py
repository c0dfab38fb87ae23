"""Catalog registration for stored uploads."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Sequence

import structlog

from ..config import ImageSize
from ..exceptions import RepositoryError
from ..logging import DebugLog
from ..media.image_metadata import generate_image_metadata
from ..media.media_models import AttachmentRecord
from ..repositories.attachment_repository import AttachmentRepository
from .upload_errors import AttachmentInsertError
from .upload_models import StoredArtifact

logger = structlog.get_logger(__name__)

_TRAILING_EXTENSION = re.compile(r"\.[^.]+$")


def title_from_filename(filename: str) -> str:
    return _TRAILING_EXTENSION.sub("", filename)


@dataclass(slots=True)
class CatalogRegistrar:
    """Insert attachment records and derive image metadata."""

    repo: AttachmentRepository
    image_sizes: Sequence[ImageSize]
    debug_log: DebugLog
    log: structlog.stdlib.BoundLogger = field(default_factory=lambda: logger)

    def register(self, stored: StoredArtifact) -> AttachmentRecord:
        filename = stored.stored_path.name
        try:
            record = self.repo.insert_attachment(
                guid=stored.public_url,
                mime_type=stored.confirmed_mime,
                title=title_from_filename(filename),
                file_path=stored.relative_path,
                content="",
                status="inherit",
            )
        except RepositoryError as exc:
            self.log.error(
                "upload.catalog.insert_failed",
                file_path=stored.relative_path,
                error=str(exc),
            )
            raise AttachmentInsertError("Error inserting attachment.") from exc

        self.log.info(
            "upload.catalog.inserted",
            attachment_id=record.id,
            mime_type=record.mime_type,
        )
        if record.is_image:
            return self.derive_metadata(record, stored)
        return record

    def derive_metadata(self, record: AttachmentRecord, stored: StoredArtifact) -> AttachmentRecord:
        """Attach dimensions and resized variants; failures keep the bare record."""
        try:
            metadata = generate_image_metadata(
                stored.stored_path,
                relative_path=stored.relative_path,
                sizes=self.image_sizes,
            )
            updated = self.repo.update_metadata(record.id, metadata)
        except Exception as exc:  # noqa: BLE001 - metadata is optional
            self.log.warning(
                "upload.catalog.metadata_failed",
                attachment_id=record.id,
                error=repr(exc),
            )
            self.debug_log.failure(
                "upload.catalog.metadata_failed",
                f"Error generating metadata for attachment {record.id}: {exc}",
            )
            return record

        self.log.info(
            "upload.catalog.metadata_saved",
            attachment_id=record.id,
            sizes=sorted(metadata["sizes"]),
        )
        return updated

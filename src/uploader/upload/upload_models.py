"""Data structures for the upload-by-URL pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from ..media.media_models import AttachmentRecord


class ErrorKind(StrEnum):
    """Closed set of terminal failures."""

    INVALID_URL = "invalid_url"
    UNSUPPORTED_TYPE = "unsupported_type"
    DOWNLOAD_FAILED = "download_failed"
    UPLOAD_ERROR = "upload_error"
    ATTACHMENT_ERROR = "attachment_error"


class PipelineState(StrEnum):
    START = "start"
    URL_VALIDATED = "url_validated"
    FETCHED = "fetched"
    INGESTED = "ingested"
    REGISTERED = "registered"
    METADATA_DERIVED = "metadata_derived"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class TemporaryArtifact:
    """Downloaded bytes waiting to be sideloaded."""

    local_path: Path
    size_bytes: int
    declared_mime: str
    filename: str


@dataclass(slots=True)
class StoredArtifact:
    """File owned by the permanent store."""

    stored_path: Path
    relative_path: str
    public_url: str
    confirmed_mime: str


@dataclass(slots=True)
class UploadFailure:
    kind: ErrorKind
    message: str


@dataclass(slots=True)
class UploadOutcome:
    """Either a registered attachment or a failure, never both."""

    state: PipelineState
    record: AttachmentRecord | None = None
    url: str | None = None
    failure: UploadFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def succeeded(cls, record: AttachmentRecord, url: str) -> "UploadOutcome":
        return cls(state=PipelineState.DONE, record=record, url=url)

    @classmethod
    def failed(cls, kind: ErrorKind, message: str) -> "UploadOutcome":
        return cls(state=PipelineState.FAILED, failure=UploadFailure(kind=kind, message=message))

"""Domain-specific exceptions for the upload pipeline."""

from .upload_models import ErrorKind


class UploadPipelineError(Exception):
    """Base class for terminal pipeline failures."""

    kind: ErrorKind = ErrorKind.UPLOAD_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidUrlError(UploadPipelineError):
    """Raised when ``file_url`` is not an absolute http(s) URL."""

    kind = ErrorKind.INVALID_URL


class UnsupportedFileTypeError(UploadPipelineError):
    """Raised when the URL extension maps outside the allow-list."""

    kind = ErrorKind.UNSUPPORTED_TYPE


class DownloadFailedError(UploadPipelineError):
    """Raised when the remote resource cannot be fetched."""

    kind = ErrorKind.DOWNLOAD_FAILED


class SideloadError(UploadPipelineError):
    """Raised when the fetched file violates store policy or cannot be stored."""

    kind = ErrorKind.UPLOAD_ERROR


class AttachmentInsertError(UploadPipelineError):
    """Raised when the catalog record cannot be written."""

    kind = ErrorKind.ATTACHMENT_ERROR

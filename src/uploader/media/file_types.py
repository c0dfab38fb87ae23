"""Extension to MIME mapping and content sniffing for stored media."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote

from PIL import Image, UnidentifiedImageError

FILE_TYPES: dict[str, str] = {
    # images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "jpe": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
    "tif": "image/tiff",
    "tiff": "image/tiff",
    "ico": "image/x-icon",
    "heic": "image/heic",
    "svg": "image/svg+xml",
    # video
    "mp4": "video/mp4",
    "m4v": "video/mp4",
    "mov": "video/quicktime",
    "qt": "video/quicktime",
    "avi": "video/avi",
    "mkv": "video/x-matroska",
    "webm": "video/webm",
    "wmv": "video/x-ms-wmv",
    "mpeg": "video/mpeg",
    "mpg": "video/mpeg",
    "3gp": "video/3gpp",
    # audio
    "mp3": "audio/mp3",
    "m4a": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "oga": "audio/ogg",
    "flac": "audio/flac",
    "aac": "audio/aac",
    # documents and archives
    "pdf": "application/pdf",
    "txt": "text/plain",
    "csv": "text/csv",
    "json": "application/json",
    "zip": "application/zip",
    "gz": "application/x-gzip",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

PREFERRED_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "video/mp4": "mp4",
    "audio/mp3": "mp3",
}

# Pillow formats whose files are served and stored as another MIME type
FORMAT_MIME_OVERRIDES: dict[str, str] = {
    "MPO": "image/jpeg",
}

_QUICKTIME_BRANDS = {b"qt  "}
_AUDIO_MP4_BRANDS = {b"M4A ", b"M4B ", b"M4P "}


def basename_from_url_path(path: str) -> str:
    """Return the decoded last segment of a URL path."""
    return Path(unquote(path)).name


def check_filetype(filename: str) -> str | None:
    """Resolve the MIME type implied by the filename extension."""
    suffix = Path(filename).suffix.lower().lstrip(".")
    if not suffix:
        return None
    return FILE_TYPES.get(suffix)


def sniff_mime(path: Path) -> str | None:
    """Detect the MIME type from file content, ``None`` when unknown."""
    image_mime = _sniff_image(path)
    if image_mime:
        return image_mime

    with path.open("rb") as source:
        head = source.read(16)

    if len(head) >= 12 and head[4:8] == b"ftyp":
        brand = head[8:12]
        if brand in _QUICKTIME_BRANDS:
            return "video/quicktime"
        if brand in _AUDIO_MP4_BRANDS:
            return "audio/mpeg"
        return "video/mp4"

    if head.startswith(b"ID3"):
        return "audio/mp3"
    # MPEG audio frame sync: 11 set bits
    if len(head) >= 2 and head[0] == 0xFF and (head[1] & 0xE0) == 0xE0:
        return "audio/mp3"
    return None


def _sniff_image(path: Path) -> str | None:
    try:
        with Image.open(path) as image:
            image_format = image.format
    except (UnidentifiedImageError, OSError):
        return None
    return mime_for_format(image_format)


def mime_for_format(image_format: str | None) -> str | None:
    """MIME type for a Pillow format name; multi-picture JPEGs count as JPEG."""
    if not image_format:
        return None
    return FORMAT_MIME_OVERRIDES.get(image_format) or Image.MIME.get(image_format)


def extension_for(mime_type: str) -> str | None:
    return PREFERRED_EXTENSIONS.get(mime_type)


__all__ = [
    "FILE_TYPES",
    "basename_from_url_path",
    "check_filetype",
    "extension_for",
    "mime_for_format",
    "sniff_mime",
]

"""Derivative metadata (dimensions, resized variants) for stored images."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

from PIL import Image, ImageOps

from ..config import ImageSize
from .file_types import mime_for_format

# derivatives of multi-picture files keep only the primary frame
_SAVE_FORMATS = {"MPO": "JPEG"}


def _derivative_name(source: Path, width: int, height: int) -> str:
    return f"{source.stem}-{width}x{height}{source.suffix}"


def _resize(image: Image.Image, size: ImageSize) -> Image.Image | None:
    width, height = image.size
    if width <= size.width and height <= size.height:
        return None
    if size.crop:
        target = (min(size.width, width), min(size.height, height))
        return ImageOps.fit(image, target, method=Image.Resampling.LANCZOS)
    resized = image.copy()
    resized.thumbnail((size.width, size.height), Image.Resampling.LANCZOS)
    return resized


def generate_image_metadata(
    path: Path,
    *,
    relative_path: str,
    sizes: Sequence[ImageSize],
) -> dict[str, Any]:
    """Write resized copies next to ``path`` and describe them.

    The result mirrors what media libraries usually keep for an image
    attachment: original dimensions, the file path relative to the uploads
    root, the byte size and one entry per generated size. Sizes that would not
    be smaller than the original are skipped.
    """
    with Image.open(path) as opened:
        image_format = opened.format
        mime_type = mime_for_format(image_format) or "application/octet-stream"
        save_format = _SAVE_FORMATS.get(image_format or "", image_format)
        image = ImageOps.exif_transpose(opened)
        width, height = image.size

        generated: dict[str, dict[str, Any]] = {}
        for size in sizes:
            resized = _resize(image, size)
            if resized is None:
                continue
            target = path.with_name(_derivative_name(path, *resized.size))
            resized.save(target, format=save_format)
            generated[size.name] = {
                "file": target.name,
                "width": resized.size[0],
                "height": resized.size[1],
                "mime-type": mime_type,
                "filesize": target.stat().st_size,
            }

    return {
        "width": width,
        "height": height,
        "file": relative_path,
        "filesize": path.stat().st_size,
        "sizes": generated,
    }


__all__ = ["generate_image_metadata"]

from __future__ import annotations

import pytest
from PIL import Image

from src.uploader.media.file_types import (
    basename_from_url_path,
    check_filetype,
    extension_for,
    mime_for_format,
    sniff_mime,
)
from tests.helpers.media_files import (
    MP3_BYTES,
    MP4_BYTES,
    TEXT_BYTES,
    make_image,
    make_mpo,
    make_oversized_png,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("img.jpg", "image/jpeg"),
        ("IMG.JPG", "image/jpeg"),
        ("a.jpeg", "image/jpeg"),
        ("a.png", "image/png"),
        ("a.gif", "image/gif"),
        ("a.mp4", "video/mp4"),
        ("a.mp3", "audio/mp3"),
        ("a.mkv", "video/x-matroska"),
        ("a.webp", "image/webp"),
        ("a.unknown", None),
        ("noext", None),
        ("", None),
    ],
)
def test_check_filetype(filename, expected):
    assert check_filetype(filename) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/a/b/img.jpg", "img.jpg"),
        ("/my%20photo.jpg", "my photo.jpg"),
        ("/", ""),
        ("", ""),
    ],
)
def test_basename_from_url_path(path, expected):
    assert basename_from_url_path(path) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("content", "expected"),
    [
        (make_image("JPEG"), "image/jpeg"),
        (make_image("PNG"), "image/png"),
        (make_image("GIF"), "image/gif"),
        (make_image("BMP"), "image/bmp"),
        (MP4_BYTES, "video/mp4"),
        (MP3_BYTES, "audio/mp3"),
        (b"\xff\xfb\x90\x00" + b"\x00" * 32, "audio/mp3"),
        (TEXT_BYTES, None),
    ],
)
def test_sniff_mime_reads_content(tmp_path, content, expected):
    path = tmp_path / "sample.bin"
    path.write_bytes(content)

    assert sniff_mime(path) == expected


@pytest.mark.unit
def test_sniff_mime_distinguishes_quicktime(tmp_path):
    path = tmp_path / "movie.bin"
    path.write_bytes(b"\x00\x00\x00\x14ftypqt  \x00\x00\x02\x00" + b"\x00" * 32)

    assert sniff_mime(path) == "video/quicktime"


@pytest.mark.unit
def test_extension_for_allowed_types():
    assert extension_for("image/jpeg") == "jpg"
    assert extension_for("audio/mp3") == "mp3"
    assert extension_for("application/pdf") is None


@pytest.mark.unit
def test_multi_picture_jpeg_sniffs_as_jpeg(tmp_path):
    path = tmp_path / "camera.jpg"
    path.write_bytes(make_mpo())

    assert path.read_bytes()[:2] == b"\xff\xd8"
    assert sniff_mime(path) == "image/jpeg"


@pytest.mark.unit
def test_mime_for_format():
    assert mime_for_format("MPO") == "image/jpeg"
    assert mime_for_format("PNG") == "image/png"
    assert mime_for_format(None) is None
    assert mime_for_format("NOT-A-FORMAT") is None


@pytest.mark.unit
def test_oversized_image_header_is_not_swallowed(tmp_path):
    path = tmp_path / "big.png"
    path.write_bytes(make_oversized_png())

    with pytest.raises(Image.DecompressionBombError):
        sniff_mime(path)

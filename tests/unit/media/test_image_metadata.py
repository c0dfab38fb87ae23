from __future__ import annotations

import pytest
from PIL import Image

from src.uploader.config import DEFAULT_IMAGE_SIZES, ImageSize
from src.uploader.media.image_metadata import generate_image_metadata
from tests.helpers.media_files import make_image, make_mpo


def _write(tmp_path, fmt, size, name):
    path = tmp_path / name
    path.write_bytes(make_image(fmt, size))
    return path


@pytest.mark.unit
def test_large_image_gets_every_size(tmp_path):
    path = _write(tmp_path, "JPEG", (2048, 1536), "big.jpg")

    metadata = generate_image_metadata(path, relative_path="2026/10/big.jpg", sizes=DEFAULT_IMAGE_SIZES)

    assert (metadata["width"], metadata["height"]) == (2048, 1536)
    assert metadata["file"] == "2026/10/big.jpg"
    assert metadata["filesize"] == path.stat().st_size
    sizes = metadata["sizes"]
    assert sizes["thumbnail"]["file"] == "big-150x150.jpg"
    assert (sizes["thumbnail"]["width"], sizes["thumbnail"]["height"]) == (150, 150)
    assert (sizes["medium"]["width"], sizes["medium"]["height"]) == (300, 225)
    assert (sizes["large"]["width"], sizes["large"]["height"]) == (1024, 768)
    assert sizes["large"]["mime-type"] == "image/jpeg"
    for entry in sizes.values():
        derivative = tmp_path / entry["file"]
        assert derivative.exists()
        assert entry["filesize"] == derivative.stat().st_size
        with Image.open(derivative) as opened:
            assert opened.size == (entry["width"], entry["height"])


@pytest.mark.unit
def test_sizes_larger_than_original_are_skipped(tmp_path):
    path = _write(tmp_path, "PNG", (200, 100), "small.png")

    metadata = generate_image_metadata(path, relative_path="small.png", sizes=DEFAULT_IMAGE_SIZES)

    assert set(metadata["sizes"]) == {"thumbnail"}
    assert metadata["sizes"]["thumbnail"]["file"] == "small-150x100.png"
    assert metadata["sizes"]["thumbnail"]["mime-type"] == "image/png"


@pytest.mark.unit
def test_tiny_image_has_no_derivatives(tmp_path):
    path = _write(tmp_path, "GIF", (32, 32), "icon.gif")

    metadata = generate_image_metadata(path, relative_path="icon.gif", sizes=DEFAULT_IMAGE_SIZES)

    assert metadata["sizes"] == {}
    assert (metadata["width"], metadata["height"]) == (32, 32)


@pytest.mark.unit
def test_corrupt_image_raises(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"not an image at all")

    with pytest.raises(Exception):
        generate_image_metadata(path, relative_path="broken.jpg", sizes=(ImageSize("medium", 300, 300),))


@pytest.mark.unit
def test_multi_picture_jpeg_derivatives_are_plain_jpeg(tmp_path):
    path = tmp_path / "camera.jpg"
    path.write_bytes(make_mpo((800, 600)))

    metadata = generate_image_metadata(path, relative_path="camera.jpg", sizes=DEFAULT_IMAGE_SIZES)

    medium = metadata["sizes"]["medium"]
    assert medium["mime-type"] == "image/jpeg"
    with Image.open(tmp_path / medium["file"]) as opened:
        assert opened.format == "JPEG"

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.uploader.media.media_store import MediaStore, sanitize_filename


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("img.jpg", "img.jpg"),
        ("my photo.jpg", "my-photo.jpg"),
        ("café  au   lait.png", "cafe-au-lait.png"),
        ("../../etc/passwd", "etcpasswd"),
        ("--weird__name.gif", "weird__name.gif"),
        ("a&b=c?.mp4", "abc.mp4"),
        ("ツ", "unnamed-file"),
        ("", "unnamed-file"),
    ],
)
def test_sanitize_filename(raw, expected):
    assert sanitize_filename(raw) == expected


@pytest.mark.unit
def test_subdir_uses_year_and_month(media_store):
    assert media_store.subdir_for(datetime(2026, 3, 9)) == "2026/03"


@pytest.mark.unit
def test_store_file_copies_into_dated_directory(media_store, app_config, tmp_path):
    source = tmp_path / "source.bin"
    source.write_bytes(b"payload")

    stored = media_store.store_file(source, "img.jpg", moment=datetime(2026, 10, 18))

    assert stored == app_config.media_paths.uploads / "2026" / "10" / "img.jpg"
    assert stored.read_bytes() == b"payload"
    assert source.exists()


@pytest.mark.unit
def test_reserve_unique_path_counts_up(media_store):
    names = [media_store.reserve_unique_path("2026/10", "img.jpg").name for _ in range(3)]

    assert names == ["img.jpg", "img-1.jpg", "img-2.jpg"]


@pytest.mark.unit
def test_failed_copy_releases_reserved_name(media_store, tmp_path):
    with pytest.raises(OSError):
        media_store.store_file(tmp_path / "missing.bin", "img.jpg", moment=datetime(2026, 10, 18))

    assert not (media_store.paths.uploads / "2026" / "10" / "img.jpg").exists()


@pytest.mark.unit
def test_relative_path_and_url(media_store, app_config):
    path = app_config.media_paths.uploads / "2026" / "10" / "img.jpg"

    relative = media_store.relative_path(path)

    assert relative == "2026/10/img.jpg"
    assert media_store.absolute_path(relative) == path
    assert media_store.url_for(relative) == "/media/uploads/2026/10/img.jpg"


@pytest.mark.unit
def test_url_for_uses_public_origin(app_config):
    store = MediaStore(paths=app_config.media_paths, uploads_url="https://cdn.example.com/media/uploads")

    assert store.url_for("2026/10/img.jpg") == "https://cdn.example.com/media/uploads/2026/10/img.jpg"


@pytest.mark.unit
def test_default_subdir_follows_utc_clock(media_store):
    now = datetime.now(timezone.utc)

    assert media_store.subdir_for() == f"{now:%Y}/{now:%m}"

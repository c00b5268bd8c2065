import asyncio
import io

from fastapi import UploadFile

from blogadmin.services.upload_service import discard_avatar, save_avatar, stored_filename


def test_stored_filename_prefixes_timestamp_and_strips_directories():
    assert stored_filename("me.png", now_ms=1700000000000) == "1700000000000-me.png"
    assert stored_filename("../../etc/passwd", now_ms=1) == "1-passwd"
    assert stored_filename("C:\\Users\\me\\pic.jpg", now_ms=1) == "1-pic.jpg"


def test_save_avatar_writes_file(tmp_path):
    up = UploadFile(file=io.BytesIO(b"PNGDATA"), filename="me.png")
    public = asyncio.run(save_avatar(up, tmp_path / "uploads"))
    assert public is not None
    assert public.startswith("/uploads/")
    assert public.endswith("-me.png")
    assert str(tmp_path) not in public
    assert (tmp_path / "uploads" / public.rsplit("/", 1)[1]).read_bytes() == b"PNGDATA"


def test_discard_avatar_removes_stored_file(tmp_path):
    up = UploadFile(file=io.BytesIO(b"PNGDATA"), filename="me.png")
    public = asyncio.run(save_avatar(up, tmp_path))
    discard_avatar(public, tmp_path)
    assert list(tmp_path.iterdir()) == []
    # Nothing stored, or already gone: no error.
    discard_avatar(None, tmp_path)
    discard_avatar(public, tmp_path)


def test_no_upload_returns_none(tmp_path):
    assert asyncio.run(save_avatar(None, tmp_path)) is None
    empty = UploadFile(file=io.BytesIO(b""), filename="")
    assert asyncio.run(save_avatar(empty, tmp_path)) is None

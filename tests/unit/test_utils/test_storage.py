import asyncio
import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from familyhub.config import settings
from familyhub.core.exception import BadRequestException
from familyhub.utils.storage import build_filename, discard_image, save_image, validate_image


def make_upload(name: str, content: bytes, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=name,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.unit
class TestBuildFilename:
    def test_whitespace_collapsed_and_extension_kept(self):
        name = build_filename("my  holiday pic.JPG")

        stamp, token, rest = name.split("_", 2)
        assert stamp.isdigit()
        assert len(token) == 12
        assert rest == "my_holiday_pic.jpg"

    def test_directories_are_stripped(self):
        assert build_filename("../../etc/passwd.png").endswith("_passwd.png")

    def test_names_are_unique(self):
        assert build_filename("a.png") != build_filename("a.png")


@pytest.mark.unit
class TestValidateImage:
    def test_accepts_png(self):
        validate_image(make_upload("a.png", b"x", "image/png"), size=1)

    def test_rejects_other_types(self):
        with pytest.raises(BadRequestException):
            validate_image(make_upload("a.pdf", b"x", "application/pdf"), size=1)

    def test_rejects_oversized(self):
        with pytest.raises(BadRequestException) as exc:
            validate_image(
                make_upload("a.png", b"x", "image/png"),
                size=settings.MAX_UPLOAD_SIZE + 1,
            )
        assert "5MB" in exc.value.detail


@pytest.mark.unit
def test_save_image_writes_file():
    url = asyncio.run(save_image(make_upload("dog.png", b"woof", "image/png")))

    assert url.startswith("/uploads/")
    stored = Path(settings.UPLOAD_DIR) / url.rsplit("/", 1)[1]
    assert stored.read_bytes() == b"woof"


@pytest.mark.unit
def test_discard_image_removes_file():
    url = asyncio.run(save_image(make_upload("tmp.png", b"x", "image/png")))
    stored = Path(settings.UPLOAD_DIR) / url.rsplit("/", 1)[1]

    asyncio.run(discard_image(url))

    assert not stored.exists()
    # already gone is fine
    asyncio.run(discard_image(url))

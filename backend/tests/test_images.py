"""
Tests for damage photo validation and encoding.
"""
import base64
import io

import pytest
from PIL import Image

from claimassist.models.claim import UploadedImage
from claimassist.services.exceptions import ImageValidationError, VisionServiceError
from claimassist.services.images import (
    encode_for_vision,
    prepare_for_vision,
    relabel,
    validate_upload,
)
from conftest import make_png


class TestValidateUpload:
    def test_accepts_image(self, png_bytes):
        image = validate_upload("front.png", "image/png", png_bytes, existing_count=2)
        assert image.filename == "front.png"
        assert image.label == "Damage photo 3"
        assert image.size_bytes == len(png_bytes)

    def test_rejects_non_image(self):
        with pytest.raises(ImageValidationError, match="not an image"):
            validate_upload("notes.pdf", "application/pdf", b"%PDF-1.4")

    def test_rejects_missing_content_type(self, png_bytes):
        with pytest.raises(ImageValidationError):
            validate_upload("front.png", None, png_bytes)

    def test_rejects_empty_file(self):
        with pytest.raises(ImageValidationError, match="empty"):
            validate_upload("front.png", "image/png", b"")

    def test_rejects_oversize(self):
        with pytest.raises(ImageValidationError, match="exceeds 1 MB"):
            validate_upload("big.png", "image/png", b"x" * (1024 * 1024 + 1), max_size_mb=1)

    def test_rejects_too_many(self, png_bytes):
        with pytest.raises(ImageValidationError, match="at most 2"):
            validate_upload("front.png", "image/png", png_bytes, existing_count=2, max_images=2)

    def test_missing_filename(self, png_bytes):
        assert validate_upload(None, "image/png", png_bytes).filename == "photo-1"


class TestEncoding:
    """Test base64 encoding and format conversion."""

    def test_supported_type_passed_through(self, png_bytes):
        image = UploadedImage("front.png", "image/png", png_bytes, "Damage photo 1")
        encoded = encode_for_vision(image)
        assert encoded.media_type == "image/png"
        assert base64.b64decode(encoded.data) == png_bytes

    def test_unsupported_type_converted_to_jpeg(self):
        bmp = make_png(color="blue", fmt="BMP")
        image = UploadedImage("side.bmp", "image/bmp", bmp, "Damage photo 1")
        encoded = encode_for_vision(image)
        assert encoded.media_type == "image/jpeg"
        with Image.open(io.BytesIO(base64.b64decode(encoded.data))) as converted:
            assert converted.format == "JPEG"

    def test_unreadable_image(self):
        image = UploadedImage("side.heic", "image/heic", b"not really an image", "Damage photo 1")
        with pytest.raises(VisionServiceError):
            encode_for_vision(image)

    def test_prepare_keeps_order(self, png_bytes):
        images = [
            UploadedImage("a.png", "image/png", png_bytes, "Damage photo 1"),
            UploadedImage("b.jpg", "image/jpeg", make_png(fmt="JPEG"), "Damage photo 2"),
        ]
        encoded = prepare_for_vision(images)
        assert [e.media_type for e in encoded] == ["image/png", "image/jpeg"]


def test_relabel(png_bytes):
    images = [
        UploadedImage("b.png", "image/png", png_bytes, "Damage photo 2"),
        UploadedImage("c.png", "image/png", png_bytes, "Damage photo 3"),
    ]
    relabel(images)
    assert [i.label for i in images] == ["Damage photo 1", "Damage photo 2"]

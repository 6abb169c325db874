"""
Damage photo handling: upload validation and vision encoding.
"""
import base64
import io
from dataclasses import dataclass
from typing import List, Optional, Sequence

from PIL import Image, UnidentifiedImageError

from claimassist.core.config import settings
from claimassist.core.logging import get_logger
from claimassist.models.claim import UploadedImage
from claimassist.services.exceptions import ImageValidationError, VisionServiceError

logger = get_logger("images")

# Media types the vision providers accept as-is
SUPPORTED_MEDIA_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
JPEG_QUALITY = 92


@dataclass(frozen=True)
class EncodedImage:
    media_type: str
    data: str  # base64


def image_label(position: int) -> str:
    """Label for the photo at 1-based position."""
    return f"Damage photo {position}"


def validate_upload(
    filename: Optional[str],
    content_type: Optional[str],
    data: bytes,
    existing_count: int = 0,
    max_size_mb: Optional[int] = None,
    max_images: Optional[int] = None,
) -> UploadedImage:
    """
    Check an uploaded file and wrap it as an UploadedImage.

    Raises:
        ImageValidationError: If the file is not an image, is empty, too
            large, or the claim already holds the maximum number of photos
    """
    max_size_mb = max_size_mb if max_size_mb is not None else settings.MAX_UPLOAD_SIZE_MB
    max_images = max_images if max_images is not None else settings.MAX_IMAGES_PER_CLAIM

    if not content_type or not content_type.startswith("image/"):
        raise ImageValidationError(f"{filename or 'file'} is not an image")
    if not data:
        raise ImageValidationError(f"{filename or 'file'} is empty")
    if len(data) > max_size_mb * 1024 * 1024:
        raise ImageValidationError(f"{filename or 'file'} exceeds {max_size_mb} MB")
    if existing_count >= max_images:
        raise ImageValidationError(f"A claim can hold at most {max_images} photos")

    return UploadedImage(
        filename=filename or f"photo-{existing_count + 1}",
        media_type=content_type,
        data=data,
        label=image_label(existing_count + 1),
    )


def relabel(images: List[UploadedImage]) -> None:
    """Renumber labels after a removal so they stay sequential."""
    for position, image in enumerate(images, start=1):
        image.label = image_label(position)


def _convert_to_jpeg(data: bytes) -> bytes:
    try:
        with Image.open(io.BytesIO(data)) as img:
            buffer = io.BytesIO()
            img.convert("RGB").save(buffer, format="JPEG", quality=JPEG_QUALITY)
            return buffer.getvalue()
    except (UnidentifiedImageError, OSError) as exc:
        raise VisionServiceError("Could not convert image to JPEG", exc)


def encode_for_vision(image: UploadedImage) -> EncodedImage:
    """Base64-encode a photo, converting unsupported formats (e.g. HEIC, BMP) to JPEG."""
    media_type = image.media_type.lower()
    data = image.data
    if media_type not in SUPPORTED_MEDIA_TYPES:
        logger.info(f"Converting {image.filename} from {media_type} to JPEG")
        data = _convert_to_jpeg(data)
        media_type = "image/jpeg"
    return EncodedImage(
        media_type=media_type,
        data=base64.b64encode(data).decode("utf-8"),
    )


def prepare_for_vision(images: Sequence[UploadedImage]) -> List[EncodedImage]:
    return [encode_for_vision(image) for image in images]

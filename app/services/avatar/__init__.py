"""Avatar image processing: validate the upload and normalise it to a square PNG."""
import io
import logging
import os

from PIL import Image, UnidentifiedImageError

from app.utils.base import ValidationError


logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 1_000_000
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png"}
AVATAR_SIZE = (250, 250)


def validate_upload(filename: str | None, data: bytes) -> None:
    ext = os.path.splitext(filename or "")[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError.single("avatar", "Please upload an image!")
    if len(data) > MAX_FILE_SIZE:
        raise ValidationError.single("avatar", "File too large")
    if not data:
        raise ValidationError.single("avatar", "File is empty")


def to_avatar_png(data: bytes) -> bytes:
    """Resize any decodable image to 250x250 and re-encode it as PNG."""
    try:
        img: Image.Image = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Rejected avatar that could not be decoded: %s", e)
        raise ValidationError.single("avatar", "Invalid image format or corrupted file")

    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA")
    output = io.BytesIO()
    img.resize(AVATAR_SIZE).save(output, format="PNG")
    return output.getvalue()


def process_upload(filename: str | None, data: bytes) -> bytes:
    validate_upload(filename, data)
    return to_avatar_png(data)

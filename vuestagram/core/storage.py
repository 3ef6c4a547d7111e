import logging
import os
import shutil
import uuid
from typing import Optional

from fastapi import UploadFile

from vuestagram.core import config

IMAGE_SUBDIR = "img"

# leading bytes of each accepted format, mapped to the stored extension
IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", ".png"),
    (b"\xff\xd8\xff", ".jpg"),
    (b"GIF87a", ".gif"),
    (b"GIF89a", ".gif"),
)
SNIFF_BYTES = 12

logger = logging.getLogger(__name__)


def is_image(file: UploadFile) -> bool:
    return str(file.content_type).startswith("image/")


def detect_image_type(file: UploadFile) -> Optional[str]:
    """Extension for the image format found in the file's leading bytes, or None.

    The declared content type and filename are ignored; the stream position is restored.
    """
    position = file.file.tell()
    head = file.file.read(SNIFF_BYTES)
    file.file.seek(position)

    for signature, ext in IMAGE_SIGNATURES:
        if head.startswith(signature):
            return ext
    if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
        return ".webp"
    return None


def save_image(file: UploadFile, ext: str) -> str:
    """Persist an uploaded image and return its path relative to UPLOAD_DIR."""
    filename = f"{uuid.uuid4().hex}{ext}"
    target_dir = os.path.join(config.UPLOAD_DIR, IMAGE_SUBDIR)
    os.makedirs(target_dir, exist_ok=True)

    with open(os.path.join(target_dir, filename), "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)

    path = f"{IMAGE_SUBDIR}/{filename}"
    logger.info(f"Stored image '{file.filename}' as {path}")
    return path


def delete_image(path: str) -> None:
    full_path = os.path.join(config.UPLOAD_DIR, path)
    if os.path.exists(full_path):
        os.remove(full_path)
        logger.info(f"Removed image {path}")

"""
File input boundary — decides what an uploaded file can be used for.

Plain text is read and sent through the text pipeline. Images go to the
infographic pipeline. Everything else, PDFs included, is rejected with a
message naming what is supported; nothing is silently dropped.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .errors import UnsupportedInputError

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

TEXT_CONTENT_TYPES = {"text/plain"}
TEXT_EXTENSIONS = {".txt"}

# Pillow format name → MIME type we forward upstream
IMAGE_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
}

SUPPORTED_DESCRIPTION = "plain text (.txt) or images (.jpg, .jpeg, .png, .gif)"


class UploadKind(Enum):
    TEXT = "text"
    IMAGE = "image"


@dataclass(frozen=True)
class BinaryContent:
    data: bytes
    content_type: str
    file_name: str
    kind: UploadKind

    def as_text(self) -> str:
        if self.kind is not UploadKind.TEXT:
            raise UnsupportedInputError(
                f"'{self.file_name}' is an image; images are only supported by the "
                "infographic generator. Please upload a .txt file or paste text."
            )
        return decode_text(self.data)


def decode_text(data: bytes) -> str:
    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise UnsupportedInputError(
            "Text file is not valid UTF-8. Please re-save it as UTF-8 and upload again."
        ) from e
    text = text.strip()
    if not text:
        raise UnsupportedInputError("Text file contains no text. Please upload a file with content.")
    return text


def _sniff_image(data: bytes) -> Optional[str]:
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None
    return IMAGE_FORMATS.get(fmt or "")


def classify_upload(filename: Optional[str], content_type: Optional[str], data: bytes) -> BinaryContent:
    name = filename or "upload"
    ctype = (content_type or "").split(";")[0].strip().lower()
    suffix = Path(name).suffix.lower()

    if not data:
        raise UnsupportedInputError(f"'{name}' is empty.")
    if len(data) > MAX_UPLOAD_BYTES:
        raise UnsupportedInputError(
            f"'{name}' is too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)}MB."
        )

    if ctype in TEXT_CONTENT_TYPES or suffix in TEXT_EXTENSIONS:
        return BinaryContent(data=data, content_type="text/plain", file_name=name, kind=UploadKind.TEXT)

    image_type = _sniff_image(data)
    if image_type is not None:
        return BinaryContent(data=data, content_type=image_type, file_name=name, kind=UploadKind.IMAGE)

    logger.info(f"Rejected upload '{name}' ({ctype or 'unknown type'})")
    raise UnsupportedInputError(
        f"File type not supported: '{name}' ({ctype or 'unknown type'}). "
        f"Please upload {SUPPORTED_DESCRIPTION}, or paste the text directly."
    )

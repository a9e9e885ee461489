"""Request payload builder."""
from __future__ import annotations

import base64
import logging
import os
from pathlib import Path
from typing import List, Optional, Tuple

from .models import InlineDataPart, Part, RequestPayload, TextPart

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME = "image/jpeg"

IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}

_PATH_QUOTES = "\"'"


def guess_image_mime(path: str | os.PathLike[str]) -> str:
    """MIME type from the file extension; unknown extensions are sent as JPEG."""
    return IMAGE_MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_IMAGE_MIME)


def clean_image_path(raw: Optional[str]) -> Optional[Path]:
    """Normalise a pasted image path; quotes added by drag-and-drop are dropped."""
    if raw is None:
        return None
    cleaned = "".join(ch for ch in raw if ch not in _PATH_QUOTES).strip()
    if not cleaned:
        return None
    return Path(cleaned).expanduser()


def build_payload(
    system_instruction: str,
    prompt_text: str,
    image_path: Optional[str | os.PathLike[str]] = None,
) -> Tuple[RequestPayload, List[str]]:
    """Build a fresh request payload.

    Returns the payload and any soft warnings. A missing image is a warning,
    the request is then sent as text only.
    """
    warnings: List[str] = []
    parts: List[Part] = [TextPart(text=prompt_text)]

    if image_path is not None:
        path = Path(image_path)
        if path.is_file():
            data = base64.b64encode(path.read_bytes()).decode("ascii")
            mime_type = guess_image_mime(path)
            parts.append(InlineDataPart(mime_type=mime_type, data=data))
            logger.debug("附加图片 %s (%s, base64 %d 字符)", path, mime_type, len(data))
        else:
            message = f"Image not found, sending text only: {path}"
            logger.info("图片不存在，仅发送文本: %s", path)
            warnings.append(message)

    return RequestPayload(system_instruction=system_instruction, user_parts=tuple(parts)), warnings


__all__ = [
    "DEFAULT_IMAGE_MIME",
    "IMAGE_MIME_TYPES",
    "build_payload",
    "clean_image_path",
    "guess_image_mime",
]

"""响应文本提取、结果文件写入与查看器启动。"""
from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Optional

from .config import OUTPUT_ENCODING
from .models import ApiResult

logger = logging.getLogger(__name__)


def extract_text(result: ApiResult) -> Optional[str]:
    """All text parts joined by newlines, or None when the response has no text."""
    texts = result.texts
    if not texts:
        return None
    return "\n".join(texts)


class ResultWriter:
    """Writes response text to a fixed file, replacing previous contents."""

    def __init__(self, path: str | os.PathLike[str], encoding: str = OUTPUT_ENCODING):
        self.path = Path(path)
        self.encoding = encoding

    def write(self, result: ApiResult) -> Optional[Path]:
        """Write the response text; returns the path, or None if nothing was written."""
        text = extract_text(result)
        if text is None:
            logger.info("响应中没有文本内容，未写入 %s", self.path)
            return None

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding=self.encoding) as fh:
            fh.write(text)
        logger.info("已写入 %d 字符到 %s", len(text), self.path)
        return self.path


def open_in_viewer(path: str | os.PathLike[str]) -> bool:
    """Open a file with the platform's default application. Best effort."""
    target = str(path)
    try:
        if sys.platform.startswith("win"):
            os.startfile(target)  # type: ignore[attr-defined]
        elif sys.platform == "darwin":
            subprocess.Popen(["open", target])
        else:
            subprocess.Popen(["xdg-open", target], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as exc:
        logger.warning("无法打开查看器 %s: %s", target, exc)
        return False
    return True


__all__ = ["ResultWriter", "extract_text", "open_in_viewer"]

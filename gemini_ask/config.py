"""运行配置：.env 加载、环境变量设置与系统指令读取。"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import AskConfigError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_INSTRUCTION_FILE = Path(__file__).resolve().parent / "system_instruction.txt"
DEFAULT_OUTPUT_FILE = "gemini_response.md"
OUTPUT_ENCODING = "utf-8"


def load_env_file(path: str | os.PathLike[str] = ".env") -> None:
    """读取 .env 中的 GEMINI_* 设置；已存在的环境变量优先。"""
    env_path = Path(path)
    if not env_path.exists():
        logger.debug("未找到 .env 文件 %s，跳过加载", env_path)
        return
    load_dotenv(dotenv_path=env_path, override=False)


def load_system_instruction(path: str | os.PathLike[str]) -> str:
    """Read the system instruction file, failing fast when it is missing."""
    instruction_path = Path(path)
    if not instruction_path.is_file():
        raise AskConfigError(f"System instruction file not found: {instruction_path}")
    text = instruction_path.read_text(encoding="utf-8")
    logger.debug("已读取系统指令 %s (%d 字符)", instruction_path, len(text))
    return text


@dataclass(slots=True)
class AppSettings:
    """Settings resolved from the environment, overridable from the command line."""

    api_base: str = DEFAULT_API_BASE
    instruction_file: Path = DEFAULT_INSTRUCTION_FILE
    output_file: Path = Path(DEFAULT_OUTPUT_FILE)
    catalog_file: Optional[Path] = None
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls) -> "AppSettings":
        def optional(key: str) -> Optional[str]:
            value = os.environ.get(key)
            if value is None or not value.strip():
                return None
            return value.strip()

        timeout_raw = optional("GEMINI_TIMEOUT")
        timeout: Optional[float] = None
        if timeout_raw is not None:
            try:
                timeout = float(timeout_raw)
            except ValueError as exc:
                raise AskConfigError("GEMINI_TIMEOUT must be a number") from exc
            if timeout <= 0:
                raise AskConfigError("GEMINI_TIMEOUT must be positive")

        catalog_raw = optional("GEMINI_MODEL_CATALOG")

        return cls(
            api_base=(optional("GEMINI_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
            instruction_file=Path(optional("GEMINI_SYSTEM_INSTRUCTION") or DEFAULT_INSTRUCTION_FILE),
            output_file=Path(optional("GEMINI_OUTPUT_FILE") or DEFAULT_OUTPUT_FILE),
            catalog_file=Path(catalog_raw) if catalog_raw else None,
            timeout=timeout,
        )


__all__ = [
    "AppSettings",
    "DEFAULT_API_BASE",
    "DEFAULT_INSTRUCTION_FILE",
    "OUTPUT_ENCODING",
    "load_env_file",
    "load_system_instruction",
]

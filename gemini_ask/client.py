"""Gemini REST client."""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from .builder import build_payload
from .config import DEFAULT_API_BASE, AppSettings
from .models import ApiResult, RequestPayload

logger = logging.getLogger(__name__)


class GeminiClient:
    """Gemini REST 客户端：每次 send() 只发出一次 generateContent 请求，失败以 ApiResult 返回而不抛异常。"""

    def __init__(self, api_base: str = DEFAULT_API_BASE, timeout: Optional[float] = None):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "GeminiClient":
        return cls(api_base=settings.api_base, timeout=settings.timeout)

    def __enter__(self) -> "GeminiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def endpoint(self, model: str) -> str:
        return f"{self.api_base}/models/{quote(model, safe='.-_')}:generateContent"

    @staticmethod
    def _get_headers(api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": api_key,
        }

    def send(
        self,
        model: str,
        system_instruction: str,
        prompt_text: str,
        image_path: Optional[str | os.PathLike[str]],
        api_key: str,
    ) -> ApiResult:
        """构建新的请求体并只发送一次。"""
        payload, warnings = build_payload(system_instruction, prompt_text, image_path)
        return self.send_payload(model, payload, api_key, warnings=tuple(warnings))

    def send_payload(
        self,
        model: str,
        payload: RequestPayload,
        api_key: str,
        *,
        warnings: tuple[str, ...] = (),
    ) -> ApiResult:
        url = self.endpoint(model)
        start = time.time()
        logger.info("发送请求 model=%s", model)

        kwargs: Dict[str, Any] = {"headers": self._get_headers(api_key), "json": payload.to_payload()}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout

        try:
            with self._session.post(url, **kwargs) as response:
                status = response.status_code
                raw_body = response.text
                if not 200 <= status < 300:
                    logger.info("请求失败 model=%s status=%s", model, status)
                    return ApiResult.http_error(status, raw_body, warnings)
                try:
                    data = response.json()
                except ValueError:
                    logger.info("响应不是合法 JSON model=%s status=%s", model, status)
                    return ApiResult.http_error(status, raw_body, warnings, error="response is not valid JSON")
        except requests.RequestException as exc:
            logger.info("传输错误 model=%s: %s", model, exc)
            return ApiResult.transport_error(str(exc) or exc.__class__.__name__, warnings)

        logger.info("完成 model=%s status=%s 耗时=%.2fs", model, status, time.time() - start)
        return ApiResult.success(status, data, warnings)


__all__ = ["GeminiClient"]

"""Request and response data models."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import AskValidationError


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Everything captured from the operator for one run."""

    system_instruction: str
    api_key: str = field(repr=False)
    model: str
    prompt_text: str
    image_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise AskValidationError("API key must not be empty")
        if not self.model or not self.model.strip():
            raise AskValidationError("Model must not be empty")


@dataclass(frozen=True, slots=True)
class TextPart:
    text: str

    def to_payload(self) -> Dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True, slots=True)
class InlineDataPart:
    """Binary part, already base64 encoded."""

    mime_type: str
    data: str

    def to_payload(self) -> Dict[str, Any]:
        return {"inlineData": {"mimeType": self.mime_type, "data": self.data}}


Part = Union[TextPart, InlineDataPart]


@dataclass(frozen=True, slots=True)
class RequestPayload:
    """generateContent request body: one system instruction and one user turn."""

    system_instruction: str
    user_parts: Tuple[Part, ...]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
            "contents": [
                {
                    "role": "user",
                    "parts": [part.to_payload() for part in self.user_parts],
                }
            ],
        }

    def preview(self, max_data_chars: int = 48) -> Dict[str, Any]:
        """Payload copy with inline data abbreviated, for display."""
        payload = self.to_payload()
        for part in payload["contents"][0]["parts"]:
            inline = part.get("inlineData")
            if inline and len(inline["data"]) > max_data_chars:
                inline["data"] = f"{inline['data'][:max_data_chars]}... ({len(inline['data'])} chars)"
        return payload


@dataclass(frozen=True, slots=True)
class ApiResult:
    """Outcome of one HTTP attempt: success with parsed JSON, or failure with detail."""

    ok: bool
    status_code: Optional[int] = None
    body: Any = None
    error: Optional[str] = None
    warnings: Tuple[str, ...] = ()

    @classmethod
    def success(cls, status_code: int, body: Any, warnings: Tuple[str, ...] = ()) -> "ApiResult":
        return cls(ok=True, status_code=status_code, body=body, warnings=warnings)

    @classmethod
    def http_error(
        cls,
        status_code: int,
        body: str,
        warnings: Tuple[str, ...] = (),
        *,
        error: Optional[str] = None,
    ) -> "ApiResult":
        return cls(ok=False, status_code=status_code, body=body, error=error, warnings=warnings)

    @classmethod
    def transport_error(cls, message: str, warnings: Tuple[str, ...] = ()) -> "ApiResult":
        return cls(ok=False, error=message, warnings=warnings)

    @property
    def texts(self) -> List[str]:
        """Text parts of every candidate, in response order."""
        if not self.ok or not isinstance(self.body, dict):
            return []
        texts: List[str] = []
        for candidate in self.body.get("candidates") or []:
            if not isinstance(candidate, dict):
                continue
            content = candidate.get("content") or {}
            for part in content.get("parts") or []:
                if isinstance(part, dict) and isinstance(part.get("text"), str):
                    texts.append(part["text"])
        return texts

    def describe_failure(self) -> str:
        if self.ok:
            return ""
        if self.status_code is None:
            return f"transport error: {self.error}"
        if self.error:
            return f"HTTP {self.status_code} ({self.error}): {self.body}"
        return f"HTTP {self.status_code}: {self.body}"

    def dump_body(self) -> str:
        if isinstance(self.body, (dict, list)):
            return json.dumps(self.body, indent=2, ensure_ascii=False)
        return str(self.body)


__all__ = [
    "ApiResult",
    "InlineDataPart",
    "Part",
    "RequestPayload",
    "RunConfig",
    "TextPart",
]

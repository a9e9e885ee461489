"""Shared test doubles."""
from unittest.mock import MagicMock

from gemini_ask.models import ApiResult


def make_response(status: int, *, json_body=None, text: str = "") -> MagicMock:
    """Fake requests.Response usable as a context manager."""
    response = MagicMock()
    response.status_code = status
    if json_body is not None:
        response.json.return_value = json_body
        response.text = text or "json"
    else:
        response.json.side_effect = ValueError("not json")
        response.text = text
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


def text_response(*texts: str) -> dict:
    return {
        "candidates": [
            {"content": {"role": "model", "parts": [{"text": t} for t in texts]}},
        ]
    }


def ok_result(*texts: str) -> ApiResult:
    return ApiResult.success(200, text_response(*texts))


def failed_result(status: int = 404, body: str = '{"error": "not found"}') -> ApiResult:
    return ApiResult.http_error(status, body)

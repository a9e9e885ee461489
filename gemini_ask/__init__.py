"""Ask Gemini one question over the REST API and save the answer to a file."""
import logging

from .builder import build_payload, clean_image_path, guess_image_mime
from .catalog import ModelCatalog, ModelSelection, load_catalog, select_model
from .client import GeminiClient
from .config import AppSettings, load_env_file, load_system_instruction
from .exceptions import AskConfigError, AskValidationError
from .models import ApiResult, InlineDataPart, RequestPayload, RunConfig, TextPart
from .retry import RetryController, RetryOutcome, RetryState, is_affirmative
from .writer import ResultWriter, extract_text, open_in_viewer

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    "GeminiClient",
    "AppSettings",
    "load_env_file",
    "load_system_instruction",
    "AskConfigError",
    "AskValidationError",
    "ModelCatalog",
    "ModelSelection",
    "load_catalog",
    "select_model",
    "RunConfig",
    "RequestPayload",
    "TextPart",
    "InlineDataPart",
    "ApiResult",
    "build_payload",
    "clean_image_path",
    "guess_image_mime",
    "RetryController",
    "RetryOutcome",
    "RetryState",
    "is_affirmative",
    "ResultWriter",
    "extract_text",
    "open_in_viewer",
]

__version__ = "0.1.0"

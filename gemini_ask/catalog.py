"""Model catalog loading and operator model selection."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Tuple

from .exceptions import AskConfigError

try:
    import yaml
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError("PyYAML is required: pip install pyyaml") from exc

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_FILE = Path(__file__).resolve().parent / "models.yaml"

_INDEX_PATTERN = re.compile(r"[0-9]+")


@dataclass(frozen=True, slots=True)
class ModelCatalog:
    """Ordered known model names plus the designated default."""

    models: Tuple[str, ...]
    default: str
    deny_markers: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.models:
            raise AskConfigError("Model catalog is empty")
        if self.default not in self.models:
            raise AskConfigError(f"Default model {self.default!r} is not in the catalog")

    def __len__(self) -> int:
        return len(self.models)

    def is_denied(self, name: str) -> bool:
        return any(marker in name for marker in self.deny_markers)


@dataclass(frozen=True, slots=True)
class ModelSelection:
    """Resolved model and how it was resolved."""

    model: str
    source: str
    warning: Optional[str] = None


def select_model(raw: Optional[str], catalog: ModelCatalog) -> ModelSelection:
    """Resolve operator input to exactly one model name.

    Resolution order, first match wins:
      1. empty or whitespace-only input -> catalog default
      2. a number within 1..len(catalog) -> entry at that 1-based position
      3. exact (case-sensitive) catalog entry -> that entry
      4. a name containing a deny marker -> catalog default, with a warning
      5. anything else -> accepted verbatim

    Numbers outside the catalog range are not indexes; they continue down the
    chain like any other text.
    """
    choice = (raw or "").strip()
    if not choice:
        return ModelSelection(model=catalog.default, source="default")

    if _INDEX_PATTERN.fullmatch(choice):
        index = int(choice)
        if 1 <= index <= len(catalog):
            return ModelSelection(model=catalog.models[index - 1], source="index")

    if choice in catalog.models:
        return ModelSelection(model=choice, source="catalog")

    if catalog.is_denied(choice):
        warning = f"Model {choice!r} is not allowed, using default {catalog.default!r}"
        logger.info("模型 %s 不允许使用，改用默认模型 %s", choice, catalog.default)
        return ModelSelection(model=catalog.default, source="denied", warning=warning)

    logger.debug("按原样使用模型名: %s", choice)
    return ModelSelection(model=choice, source="passthrough")


def _as_str_tuple(value: Any, key: str, source: Path) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) and item.strip() for item in value):
        raise AskConfigError(f"{source}: '{key}' must be a list of non-empty strings")
    return tuple(item.strip() for item in value)


def load_catalog(path: Optional[str | os.PathLike[str]] = None) -> ModelCatalog:
    """Load a catalog from YAML; the packaged catalog is used when no path is given."""
    catalog_path = Path(path) if path else DEFAULT_CATALOG_FILE
    if not catalog_path.is_file():
        raise AskConfigError(f"Model catalog not found: {catalog_path}")

    try:
        data = yaml.safe_load(catalog_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise AskConfigError(f"Failed to parse model catalog {catalog_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise AskConfigError(f"{catalog_path}: catalog must be a mapping")

    models = _as_str_tuple(data.get("models"), "models", catalog_path)
    default = data.get("default")
    if not isinstance(default, str) or not default.strip():
        raise AskConfigError(f"{catalog_path}: 'default' must be a non-empty string")

    catalog = ModelCatalog(
        models=models,
        default=default.strip(),
        deny_markers=_as_str_tuple(data.get("deny_markers"), "deny_markers", catalog_path),
    )
    logger.debug("已加载 %d 个模型 %s (默认 %s)", len(catalog), catalog_path, catalog.default)
    return catalog


__all__ = [
    "DEFAULT_CATALOG_FILE",
    "ModelCatalog",
    "ModelSelection",
    "load_catalog",
    "select_model",
]

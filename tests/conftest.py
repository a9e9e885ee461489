import pytest

from gemini_ask.catalog import ModelCatalog


@pytest.fixture
def catalog() -> ModelCatalog:
    return ModelCatalog(
        models=(
            "gemini-2.5-pro",
            "gemini-2.5-flash",
            "gemini-2.5-flash-lite",
            "gemini-2.0-flash",
            "gemini-2.0-flash-lite",
        ),
        default="gemini-2.5-flash",
        deny_markers=("2.0-pro",),
    )

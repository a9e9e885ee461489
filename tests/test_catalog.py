"""Model catalog loading and selection rules."""
import pytest

from gemini_ask.catalog import DEFAULT_CATALOG_FILE, ModelCatalog, load_catalog, select_model
from gemini_ask.exceptions import AskConfigError


@pytest.mark.parametrize("raw", ["", "   ", "\t\n", None])
def test_blank_input_selects_default(catalog, raw):
    selection = select_model(raw, catalog)
    assert selection.model == catalog.default
    assert selection.source == "default"
    assert selection.warning is None


def test_every_index_in_range_selects_that_entry(catalog):
    for n in range(1, len(catalog) + 1):
        selection = select_model(str(n), catalog)
        assert selection.model == catalog.models[n - 1]
        assert selection.source == "index"


def test_index_three_of_five(catalog):
    assert select_model("3", catalog).model == catalog.models[2]


def test_index_with_surrounding_whitespace(catalog):
    assert select_model(" 1 \n", catalog).model == catalog.models[0]


@pytest.mark.parametrize("raw", ["0", "6", "42"])
def test_out_of_range_number_is_passed_through(catalog, raw):
    selection = select_model(raw, catalog)
    assert selection.model == raw
    assert selection.source == "passthrough"


def test_exact_catalog_name(catalog):
    selection = select_model("gemini-2.0-flash", catalog)
    assert selection.model == "gemini-2.0-flash"
    assert selection.source == "catalog"


def test_catalog_match_is_case_sensitive(catalog):
    selection = select_model("Gemini-2.5-Pro", catalog)
    assert selection.model == "Gemini-2.5-Pro"
    assert selection.source == "passthrough"


def test_denied_model_falls_back_to_default(catalog):
    selection = select_model("gemini-2.0-pro", catalog)
    assert selection.model == catalog.default
    assert selection.source == "denied"
    assert "gemini-2.0-pro" in selection.warning
    assert "not allowed" in selection.warning


def test_denied_marker_anywhere_in_name(catalog):
    selection = select_model("gemini-2.0-pro-exp-02-05", catalog)
    assert selection.model == catalog.default
    assert selection.warning


def test_unknown_name_is_accepted_verbatim(catalog):
    selection = select_model("gemini-3-pro-preview", catalog)
    assert selection.model == "gemini-3-pro-preview"
    assert selection.warning is None


def test_default_must_be_in_catalog():
    with pytest.raises(AskConfigError):
        ModelCatalog(models=("a", "b"), default="c")


def test_empty_catalog_rejected():
    with pytest.raises(AskConfigError):
        ModelCatalog(models=(), default="a")


def test_packaged_catalog_loads():
    catalog = load_catalog()
    assert DEFAULT_CATALOG_FILE.name == "models.yaml"
    assert catalog.default in catalog.models
    assert catalog.is_denied("gemini-2.0-pro")


def test_load_custom_catalog(tmp_path):
    path = tmp_path / "catalog.yaml"
    path.write_text("models:\n  - m1\n  - m2\ndefault: m2\n", encoding="utf-8")
    catalog = load_catalog(path)
    assert catalog.models == ("m1", "m2")
    assert catalog.default == "m2"
    assert catalog.deny_markers == ()


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "models: [m1]\ndefault: m2\n",
        "models: m1\ndefault: m1\n",
        "models: [m1]\n",
        "models: [m1\n",
    ],
)
def test_invalid_catalog_files(tmp_path, content):
    path = tmp_path / "catalog.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(AskConfigError):
        load_catalog(path)


def test_missing_catalog_file(tmp_path):
    with pytest.raises(AskConfigError):
        load_catalog(tmp_path / "nope.yaml")

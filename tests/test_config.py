from __future__ import annotations

from pathlib import Path

import pytest

from quillsmith.core.config import RenderSettings, load_settings
from quillsmith.core.exceptions import ConfigError
from quillsmith.core.ops import Op
from quillsmith.core.registry import FormatRegistry, load_custom_formats


FORMATS_MODULE = """
from quillsmith.core.formats import Format, Formatter


class Mark(Formatter):
    def describe(self):
        return Format("mark")

    def applies_to(self, op):
        return op.has_attr("highlight")


def resolve(keyword, op):
    return Mark() if keyword == "highlight" else None


NOT_CALLABLE = 3
"""


@pytest.fixture
def formats_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    (tmp_path / "sample_quill_formats.py").write_text(FORMATS_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return "sample_quill_formats"


def test_defaults() -> None:
    settings = RenderSettings()

    assert settings.formats is None
    assert settings.pretty is False
    assert settings.keep_partial is True
    assert settings.warn_unknown_attributes is False
    assert settings.custom_formats() is None


def test_load_yaml_settings(tmp_path: Path) -> None:
    path = tmp_path / "quillsmith.yml"
    path.write_text("pretty: true\nwarn_unknown_attributes: yes\n", encoding="utf-8")

    settings = load_settings(path)

    assert settings.pretty is True
    assert settings.warn_unknown_attributes is True
    assert settings.keep_partial is True


def test_load_json_settings(tmp_path: Path) -> None:
    path = tmp_path / "quillsmith.json"
    path.write_text('{"keep_partial": false, "formats": "pkg.mod:resolve"}', encoding="utf-8")

    settings = load_settings(str(path))

    assert settings.keep_partial is False
    assert settings.formats == "pkg.mod:resolve"


def test_empty_settings_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_settings(path) == RenderSettings()


@pytest.mark.parametrize(
    ("name", "content", "message"),
    [
        ("list.yaml", "- pretty\n", "must contain a mapping"),
        ("unknown.yaml", "colour: red\n", "Invalid settings"),
        ("typed.yaml", "pretty: [1, 2]\n", "Invalid settings"),
        ("broken.json", "{pretty: true", "Invalid settings file"),
        ("broken.yaml", "pretty: [unclosed\n", "Invalid settings file"),
    ],
)
def test_invalid_settings(tmp_path: Path, name: str, content: str, message: str) -> None:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError, match=message):
        load_settings(path)


def test_missing_settings_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unable to read settings file"):
        load_settings(tmp_path / "absent.yaml")


def test_settings_load_custom_formats(formats_module: str) -> None:
    settings = RenderSettings(formats=f"{formats_module}:resolve")

    resolver = settings.custom_formats()

    assert resolver is not None
    registry = FormatRegistry(resolver)
    op = Op(data="x", attrs={"highlight": "y"})
    formatter = registry.resolve("highlight", op)
    assert formatter is not None
    assert formatter.applies_to(op)
    assert formatter.describe().value == "mark"
    assert registry.resolve("bold", op) is not None


@pytest.mark.parametrize(
    ("entrypoint", "message"),
    [
        ("no_colon", "module:attribute"),
        (":resolve", "module:attribute"),
        ("quillsmith_missing_module_xyz:resolve", "Unable to import"),
        ("{module}:absent", "has no attribute 'absent'"),
        ("{module}:NOT_CALLABLE", "is not callable"),
    ],
)
def test_invalid_entrypoints(formats_module: str, entrypoint: str, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        load_custom_formats(entrypoint.format(module=formats_module))


def test_registry_describes_catalog() -> None:
    keywords = [entry["keyword"] for entry in FormatRegistry().describe()]

    assert "bold" in keywords
    assert "image" in keywords

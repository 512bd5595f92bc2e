from __future__ import annotations

import json
from pathlib import Path
import sys

import pytest
from typer.testing import CliRunner

from quillsmith.core.exceptions import MalformedOpError
from quillsmith.ui.cli import app, main


SAMPLE_DELTA = [
    {"insert": "Title"},
    {"attributes": {"header": 1}, "insert": "\n"},
    {"insert": "Hello "},
    {"attributes": {"bold": True}, "insert": "world"},
    {"insert": "\n"},
]
SAMPLE_HTML = "<h1>Title</h1><p>Hello <strong>world</strong></p>"


def _write_delta(tmp_path: Path, delta: object, name: str = "delta.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(delta), encoding="utf-8")
    return path


def test_render_file_to_stdout(tmp_path: Path) -> None:
    runner = CliRunner()
    source = _write_delta(tmp_path, SAMPLE_DELTA)

    result = runner.invoke(app, [str(source)])

    assert result.exit_code == 0, result.output
    assert result.stdout == f"{SAMPLE_HTML}\n"


def test_render_from_stdin() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["-"], input=json.dumps(SAMPLE_DELTA))

    assert result.exit_code == 0, result.output
    assert SAMPLE_HTML in result.stdout


def test_render_to_output_file(tmp_path: Path) -> None:
    runner = CliRunner()
    source = _write_delta(tmp_path, SAMPLE_DELTA)
    target = tmp_path / "build" / "out.html"

    result = runner.invoke(app, [str(source), "--output", str(target)])

    assert result.exit_code == 0, result.output
    assert target.read_text(encoding="utf-8") == SAMPLE_HTML
    assert SAMPLE_HTML not in result.stdout


def test_pretty_output(tmp_path: Path) -> None:
    runner = CliRunner()
    source = _write_delta(tmp_path, [{"insert": "hi\n"}])

    result = runner.invoke(app, [str(source), "--pretty"])

    assert result.exit_code == 0, result.output
    assert result.stdout.startswith("<p>\n")
    assert " hi\n" in result.stdout


def test_list_formats() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["--list-formats"])

    assert result.exit_code == 0, result.output
    assert "Built-in Formats:" in result.stdout
    assert "  - bold: tag <strong>" in result.stdout
    assert "  - list: wrapper (block)" in result.stdout


def test_malformed_op_keeps_partial_output(tmp_path: Path) -> None:
    runner = CliRunner()
    source = _write_delta(tmp_path, [{"insert": "one\n"}, {"insert": None}])

    result = runner.invoke(app, [str(source)])

    assert result.exit_code == 1
    assert "<p>one</p>" in result.output
    assert "lacks an insert" in result.output


def test_config_can_drop_partial_output(tmp_path: Path) -> None:
    runner = CliRunner()
    source = _write_delta(tmp_path, [{"insert": "one\n"}, {"insert": None}])
    config = tmp_path / "quillsmith.yml"
    config.write_text("keep_partial: false\n", encoding="utf-8")

    result = runner.invoke(app, [str(source), "--config", str(config)])

    assert result.exit_code == 1
    assert "<p>one</p>" not in result.output
    assert "lacks an insert" in result.output


def test_invalid_config_is_reported(tmp_path: Path) -> None:
    runner = CliRunner()
    source = _write_delta(tmp_path, SAMPLE_DELTA)
    config = tmp_path / "quillsmith.yml"
    config.write_text("colour: red\n", encoding="utf-8")

    result = runner.invoke(app, [str(source), "-c", str(config)])

    assert result.exit_code == 1
    assert "Invalid settings" in result.output


def test_decode_error_exits_with_failure(tmp_path: Path) -> None:
    runner = CliRunner()
    source = tmp_path / "broken.json"
    source.write_text('{"insert": "x"}', encoding="utf-8")

    result = runner.invoke(app, [str(source)])

    assert result.exit_code == 1
    assert "Invalid delta" in result.output


def test_missing_input_file(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, [str(tmp_path / "absent.json")])

    assert result.exit_code == 1
    assert "Failed to read delta" in result.output


def test_debug_reraises_render_errors(tmp_path: Path) -> None:
    runner = CliRunner()
    source = _write_delta(tmp_path, [{"insert": {"video": "clip.mp4"}}])

    result = runner.invoke(app, [str(source), "--debug"])

    assert result.exit_code == 1
    assert isinstance(result.exception, MalformedOpError)


def test_verbose_reports_ignored_attributes(tmp_path: Path) -> None:
    runner = CliRunner()
    delta = [
        {"attributes": {"font": "serif"}, "insert": "a"},
        {"attributes": {"font": "mono"}, "insert": "b"},
        {"insert": "\n"},
    ]
    source = _write_delta(tmp_path, delta)

    result = runner.invoke(app, [str(source), "-v"])

    assert result.exit_code == 0, result.output
    assert "<p>ab</p>" in result.output
    assert "Ignored attributes:" in result.output
    assert "  - font: 2" in result.output


def test_quiet_run_hides_ignored_attributes(tmp_path: Path) -> None:
    runner = CliRunner()
    source = _write_delta(tmp_path, [{"attributes": {"font": "serif"}, "insert": "a\n"}])

    result = runner.invoke(app, [str(source)])

    assert result.exit_code == 0, result.output
    assert result.stdout == "<p>a</p>\n"


@pytest.fixture
def formats_entrypoint(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    module = tmp_path / "cli_quill_formats.py"
    module.write_text(
        "from quillsmith.core.formats import Format, Formatter\n"
        "\n"
        "\n"
        "class Bold(Formatter):\n"
        "    def describe(self):\n"
        '        return Format("b")\n'
        "\n"
        "    def applies_to(self, op):\n"
        '        return op.has_attr("bold")\n'
        "\n"
        "\n"
        "def resolve(keyword, op):\n"
        '    return Bold() if keyword == "bold" else None\n',
        encoding="utf-8",
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    return "cli_quill_formats:resolve"


def test_custom_formats_entrypoint(tmp_path: Path, formats_entrypoint: str) -> None:
    runner = CliRunner()
    source = _write_delta(tmp_path, SAMPLE_DELTA)

    result = runner.invoke(app, [str(source), "--formats", formats_entrypoint])

    assert result.exit_code == 0, result.output
    assert "<p>Hello <b>world</b></p>" in result.stdout


def test_main_prints_traceback_under_debug(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write_delta(tmp_path, [{"insert": {"video": "clip.mp4"}}])
    monkeypatch.setattr(sys, "argv", ["quillsmith", str(source), "--debug"])

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    assert "MalformedOpError" in capsys.readouterr().err


def test_main_summarises_render_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write_delta(tmp_path, [{"insert": {"video": "clip.mp4"}}])
    monkeypatch.setattr(sys, "argv", ["quillsmith", str(source)])

    with pytest.raises(SystemExit) as excinfo:
        main()

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "no format defined for its type 'video'" in err
    assert "Traceback" not in err

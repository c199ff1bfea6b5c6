import io
import json
from pathlib import Path
from types import MappingProxyType

import pytest

import code_screenshot
from code_settings import __version__
from code_settings.cli_args import parse_cli
from code_settings.models import (
    MAX_TAB_WIDTH,
    CodeConfig,
    ContentSource,
    GenerationSettings,
)
from code_settings.paths import CONFIG_DIR_ENV
from code_settings.ranges import UNBOUNDED, LineRange


class RecordingBackend:
    def __init__(self):
        self.rendered = []

    def list_file_types(self):
        return ["Python", "Rust"]

    def list_themes(self):
        return ["base16-ocean.dark", "Dracula"]

    def render(self, content, code, settings):
        self.rendered.append((content, code, settings))


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    directory = tmp_path / "sss"
    monkeypatch.setenv(CONFIG_DIR_ENV, str(directory))
    return directory


def test_parse_cli_leaves_unset_options_silent():
    cli = parse_cli([])

    assert cli.code.content is None
    assert cli.code.theme is None
    assert cli.code.tab_width is None
    assert cli.code.line_numbers is False
    assert cli.code.lines == LineRange(0, UNBOUNDED)
    assert cli.code.highlight_lines == LineRange(0, UNBOUNDED)
    assert cli.general.save_format is None
    assert cli.verbosity == 0


def test_parse_cli_reads_flags_and_ranges():
    cli = parse_cli(
        [
            "main.rs",
            "-t",
            "Dracula",
            "-e",
            "rs",
            "-n",
            "-l",
            "-L",
            "--lines",
            "1..10",
            "--highlight-lines",
            "3..4",
            "--tab-width",
            "2",
            "-o",
            "out.png",
            "-c",
            "--save-format",
            "JPEG",
            "-vv",
        ]
    )

    assert cli.code.content == ContentSource(Path("main.rs"))
    assert cli.code.theme == "Dracula"
    assert cli.code.extension == "rs"
    assert cli.code.line_numbers is True
    assert cli.code.list_file_types is True
    assert cli.code.list_themes is True
    assert cli.code.lines == LineRange(0, 11)
    assert cli.code.highlight_lines == LineRange(2, 5)
    assert cli.code.tab_width == 2
    assert cli.general.output == "out.png"
    assert cli.general.copy is True
    assert cli.general.save_format == "jpeg"
    assert cli.verbosity == 2


def test_dash_content_means_stdin():
    cli = parse_cli(["-"])

    assert cli.code.content is not None
    assert cli.code.content.is_stdin


def test_range_without_delimiter_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_cli(["--lines", "123"])

    assert excinfo.value.code == 2
    assert "Invalid lines format, expected start..end" in capsys.readouterr().err


@pytest.mark.parametrize("value", ["300", "-1", "wide"])
def test_tab_width_must_fit_a_byte(value):
    with pytest.raises(SystemExit):
        parse_cli(["--tab-width", value])


def test_main_without_backend_prints_resolved_config(config_dir, capsys):
    config_dir.mkdir()
    (config_dir / "config.toml").write_text(
        '[code]\ntheme = "from-file"\n', encoding="utf-8"
    )

    exit_code = code_screenshot.main(["--lines", "2..3", "snippet.py"])

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["code"]["theme"] == "from-file"
    assert summary["code"]["content"] == "snippet.py"
    assert summary["code"]["lines"] == {"start": 1, "end": 4}
    assert summary["code"]["highlight_lines"] == {"start": 0, "end": None}
    assert summary["general"]["background"] == "#323232"


def test_main_lists_and_skips_rendering(config_dir, capsys):
    backend = RecordingBackend()

    exit_code = code_screenshot.main(["-L"], backend=backend)

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == [
        "base16-ocean.dark",
        "Dracula",
    ]
    assert backend.rendered == []


def test_main_renders_file_content(config_dir, tmp_path):
    source = tmp_path / "snippet.py"
    source.write_text("print('hi')\n", encoding="utf-8")
    backend = RecordingBackend()

    code_screenshot.main([str(source), "-n"], backend=backend)

    content, code, settings = backend.rendered[0]
    assert content == "print('hi')\n"
    assert code.line_numbers is True
    assert settings == GenerationSettings()


def test_main_reports_malformed_config(config_dir):
    config_dir.mkdir()
    (config_dir / "config.toml").write_text("[code", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        code_screenshot.main([])

    assert str(excinfo.value.code).startswith("Config error:")


def test_main_reports_missing_content_file(config_dir, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        code_screenshot.main(
            [str(tmp_path / "missing.py")], backend=RecordingBackend()
        )

    assert str(excinfo.value.code).startswith("Input error:")


def test_run_reads_stdin_when_content_is_absent():
    backend = RecordingBackend()

    code_screenshot.run(
        CodeConfig(),
        GenerationSettings(),
        backend,
        stdin=io.StringIO("fn main() {}\n"),
    )

    assert backend.rendered[0][0] == "fn main() {}\n"


def test_describe_reports_unbounded_ranges_as_none():
    summary = code_screenshot.describe(
        CodeConfig(lines=LineRange(4, UNBOUNDED)), GenerationSettings()
    )

    assert summary["code"]["lines"] == {"start": 4, "end": None}
    assert summary["code"]["content"] is None


def test_version_flag_prints_package_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_cli(["--version"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == f"sss-code {__version__}"


def test_tab_width_accepts_the_largest_byte():
    assert parse_cli(["--tab-width", str(MAX_TAB_WIDTH)]).code.tab_width == 255


def test_describe_copies_extra_settings():
    settings = GenerationSettings(extra=MappingProxyType({"show_notify": True}))

    summary = code_screenshot.describe(CodeConfig(), settings)

    assert summary["general"]["extra"] == {"show_notify": True}
    assert json.loads(json.dumps(summary))["general"]["extra"] == {
        "show_notify": True
    }

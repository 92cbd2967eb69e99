"""End-to-end tests for the Typer CLI."""

import logging
from pathlib import Path

from typer.testing import CliRunner

from condlint.config import get_default_config
from condlint.main import app, run_rules
from condlint.rules.ifs_in_if_conditions import IfsInIfConditionsRule

runner = CliRunner()

NESTED = b"int f(int a) {\n    if ((a ? 1 : 0) > 5) {\n        return 1;\n    }\n    return 0;\n}\n"


def _write(path: Path, source: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(source)
    return path


def test_analyze_clean_file():
    sample = Path(__file__).parent / "sample.c"
    result = runner.invoke(app, ["analyze", str(sample), "--plain"])
    assert result.exit_code == 0
    assert "No findings." in result.output


def test_analyze_reports_finding(tmp_path):
    c_file = _write(tmp_path / "nested.c", NESTED)
    result = runner.invoke(app, ["analyze", str(c_file), "--plain", "--verbose"])
    assert result.exit_code == 1
    assert f"{c_file.resolve()}:2:10: STYLE [ifs-in-if-conditions]" in result.output
    assert "help: assign the result of the inner conditional" in result.output


def test_analyze_directory_rich_output(tmp_path):
    _write(tmp_path / "src" / "nested.c", NESTED)
    _write(tmp_path / "src" / "clean.c", b"int g(void) { return 0; }\n")
    _write(tmp_path / "src" / "api.h", b"static inline int h(int a) { if ((a ? 1 : 0)) return 1; return 0; }\n")
    result = runner.invoke(app, ["analyze", str(tmp_path)])
    assert result.exit_code == 1
    assert "1 finding" in result.output


def test_analyze_headers_flag(tmp_path):
    _write(tmp_path / "api.h", b"static inline int h(int a) { if ((a ? 1 : 0)) return 1; return 0; }\n")
    without = runner.invoke(app, ["analyze", str(tmp_path), "--plain"])
    assert without.exit_code == 0
    with_headers = runner.invoke(app, ["analyze", str(tmp_path), "--plain", "--headers"])
    assert with_headers.exit_code == 1
    assert "api.h:1:" in with_headers.output


def test_analyze_severity_override(tmp_path):
    c_file = _write(tmp_path / "nested.c", NESTED)
    result = runner.invoke(app, ["analyze", str(c_file), "--plain", "--severity", "ifs-in-if-conditions=error"])
    assert result.exit_code == 1
    assert "ERROR [ifs-in-if-conditions]" in result.output


def test_analyze_macro_option(tmp_path):
    """--macro keeps reporting conditionals the user wrote in the macro arguments."""
    c_file = _write(tmp_path / "m.c", b"int f(int a) { if (LIKELY((a ? 1 : 0) > 0)) { return 1; } return 0; }\n")
    plain = runner.invoke(app, ["analyze", str(c_file), "--plain"])
    as_macro = runner.invoke(app, ["analyze", str(c_file), "--plain", "--macro", "LIKELY"])
    assert plain.exit_code == 1
    assert as_macro.exit_code == 1
    assert as_macro.output == plain.output
    assert "m.c:1:28: STYLE" in as_macro.output


def test_analyze_bad_severity(tmp_path):
    c_file = _write(tmp_path / "nested.c", NESTED)
    result = runner.invoke(app, ["analyze", str(c_file), "--severity", "bogus"])
    assert result.exit_code == 2


def test_analyze_rejects_non_c_file(tmp_path):
    txt = _write(tmp_path / "notes.txt", b"hello")
    result = runner.invoke(app, ["analyze", str(txt)])
    assert result.exit_code == 2


def test_analyze_all_rules_disabled(tmp_path):
    c_file = _write(tmp_path / "nested.c", NESTED)
    result = runner.invoke(app, ["analyze", str(c_file), "--disable", "ifs-in-if-conditions"])
    assert result.exit_code == 1
    assert "No rules are enabled" in result.output


def test_rules_command_lists_rule():
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0
    assert "ifs-in-if-conditions [style]" in result.output


def test_rule_crash_on_one_file_does_not_stop_scan(tmp_path, monkeypatch, caplog):
    """A rule raising on one file is logged and the remaining files are still checked."""
    first = _write(tmp_path / "a.c", NESTED)
    second = _write(tmp_path / "b.c", NESTED)
    original_run = IfsInIfConditionsRule.run

    def run_failing_on_first(self, context, config):
        if context.path == first:
            raise RuntimeError("tree walk exploded")
        return original_run(self, context, config)

    monkeypatch.setattr(IfsInIfConditionsRule, "run", run_failing_on_first)
    with caplog.at_level(logging.ERROR, logger="condlint.main"):
        findings = run_rules([first, second], get_default_config())

    assert [f.location.path for f in findings] == [second]
    assert "failed on" in caplog.text
    assert str(first) in caplog.text

"""
Tests for the command-line entry point and environment configuration.
"""

import io
import json

import pytest

import run_extract
from rolescope import config

RAW = '```json\n{"company": "Acme", "jobTitle": "SWE", "source_url": "https://x.test/1"}\n```'


@pytest.fixture(autouse=True)
def no_default_output(monkeypatch):
    monkeypatch.delenv("ROLESCOPE_OUTPUT", raising=False)


class TestConfig:
    """Test environment lookups."""

    def test_get_env_strips(self, monkeypatch):
        """Test values are stripped of surrounding whitespace."""
        monkeypatch.setenv("ROLESCOPE_TEST_VALUE", "  debug \n")
        assert config.get_env("ROLESCOPE_TEST_VALUE") == "debug"

    def test_log_level_default(self, monkeypatch):
        """Test LOG_LEVEL defaults to INFO and is upper-cased."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        assert config.log_level() == "INFO"
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert config.log_level() == "DEBUG"

    def test_default_output_path(self, monkeypatch, tmp_path):
        """Test ROLESCOPE_OUTPUT is unset by default and read as a path otherwise."""
        assert config.default_output_path() is None
        monkeypatch.setenv("ROLESCOPE_OUTPUT", str(tmp_path / "data.jsonl"))
        assert config.default_output_path() == tmp_path / "data.jsonl"


class TestMain:
    """Test run_extract.main."""

    def test_file_to_stdout(self, tmp_path, capsys):
        """Test a successful run prints one JSON line."""
        src = tmp_path / "response.txt"
        src.write_text(RAW, encoding="utf-8")

        assert run_extract.main([str(src)]) == 0

        out = capsys.readouterr().out
        assert out.count("\n") == 1
        assert json.loads(out)["company"] == "Acme"

    def test_stdin_input(self, monkeypatch, capsys):
        """Test input is read from stdin when no file is given."""
        monkeypatch.setattr("sys.stdin", io.StringIO(RAW))

        assert run_extract.main([]) == 0
        assert json.loads(capsys.readouterr().out)["jobTitle"] == "SWE"

    def test_append_to_out(self, tmp_path):
        """Test --out appends one line per run."""
        src = tmp_path / "response.txt"
        src.write_text(RAW, encoding="utf-8")
        out = tmp_path / "nested" / "data.jsonl"

        assert run_extract.main([str(src), "--out", str(out)]) == 0
        assert run_extract.main([str(src), "--out", str(out)]) == 0

        lines = out.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert all(json.loads(line)["sourceUrl"] == "https://x.test/1" for line in lines)

    def test_env_output(self, tmp_path, monkeypatch, capsys):
        """Test ROLESCOPE_OUTPUT is used when --out is omitted."""
        src = tmp_path / "response.txt"
        src.write_text(RAW, encoding="utf-8")
        out = tmp_path / "env.jsonl"
        monkeypatch.setenv("ROLESCOPE_OUTPUT", str(out))

        assert run_extract.main([str(src)]) == 0
        assert capsys.readouterr().out == ""
        assert len(out.read_text(encoding="utf-8").splitlines()) == 1

    def test_failure_writes_nothing(self, tmp_path, capsys):
        """Test a failed run exits 1 and leaves the dataset untouched."""
        src = tmp_path / "response.txt"
        src.write_text("No posting found.", encoding="utf-8")
        out = tmp_path / "data.jsonl"

        assert run_extract.main([str(src), "--out", str(out)]) == 1
        assert not out.exists()
        assert capsys.readouterr().out == ""

    def test_log_level_flag(self, tmp_path, capsys):
        """Test --log-level is accepted and output is unaffected."""
        src = tmp_path / "response.txt"
        src.write_text(RAW, encoding="utf-8")

        assert run_extract.main([str(src), "--log-level", "DEBUG"]) == 0
        assert json.loads(capsys.readouterr().out)["company"] == "Acme"

    def test_missing_input_file(self, tmp_path, capsys):
        """Test an unreadable input path exits 1 without output."""
        assert run_extract.main([str(tmp_path / "absent.txt")]) == 1
        assert capsys.readouterr().out == ""

    def test_non_utf8_input(self, tmp_path, capsys):
        """Test input that is not UTF-8 exits 1 without output."""
        src = tmp_path / "response.txt"
        src.write_bytes(b'{"company": "\xff\xfe"}')

        assert run_extract.main([str(src)]) == 1
        assert capsys.readouterr().out == ""

    def test_surrogate_escape_exits_cleanly(self, tmp_path, capsys):
        """Test a record that cannot be encoded fails with status 1, not a traceback."""
        src = tmp_path / "response.txt"
        src.write_text('{"company": "\\ud800", "jobTitle": "B", "source_url": "u"}', encoding="utf-8")
        out = tmp_path / "data.jsonl"

        assert run_extract.main([str(src), "--out", str(out)]) == 1
        assert not out.exists()

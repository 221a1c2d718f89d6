"""Tests for the largefile CLI."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from largefile.cli.main import cli

runner = CliRunner()


class TestGroup:
    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("serve", "structure", "chunk", "line", "search"):
            assert name in result.output

    def test_missing_config_file(self, tmp_path: Path, ten_line_file: Path) -> None:
        result = runner.invoke(
            cli, ["-c", str(tmp_path / "missing.yaml"), "structure", str(ten_line_file)]
        )
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_config_file_applied(self, tmp_path: Path, ten_line_file: Path) -> None:
        config_file = tmp_path / "largefile.yaml"
        config_file.write_text("chunking:\n  default_overlap: 0\n")
        result = runner.invoke(
            cli,
            ["-c", str(config_file), "chunk", str(ten_line_file), "1", "--lines", "5", "--json"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["start_line"] == 6


class TestStructure:
    def test_json(self, ten_line_file: Path) -> None:
        result = runner.invoke(cli, ["structure", str(ten_line_file), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["line_stats"]["total"] == 10
        assert data["metadata"]["file_type"] == "text"

    def test_table(self, error_log: Path) -> None:
        result = runner.invoke(cli, ["structure", str(error_log)])
        assert result.exit_code == 0, result.output
        assert "10 (0 empty)" in result.output
        assert "startup complete" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["structure", str(tmp_path / "missing.log")])
        assert result.exit_code == 1
        assert "not accessible" in result.output


class TestChunk:
    def test_content_and_footer(self, ten_line_file: Path) -> None:
        result = runner.invoke(cli, ["chunk", str(ten_line_file), "0", "--lines", "5", "-n"])
        assert result.exit_code == 0, result.output
        assert "1: line 1" in result.output
        assert "chunk 1/2, lines 1-5 of 10" in result.output

    def test_out_of_range(self, ten_line_file: Path) -> None:
        result = runner.invoke(cli, ["chunk", str(ten_line_file), "7", "--lines", "5"])
        assert result.exit_code == 1
        assert "out of range" in result.output

    def test_negative_index_rejected(self, ten_line_file: Path) -> None:
        result = runner.invoke(cli, ["chunk", str(ten_line_file), "--", "-1"])
        assert result.exit_code == 2


class TestLine:
    def test_marks_target(self, ten_line_file: Path) -> None:
        result = runner.invoke(cli, ["line", str(ten_line_file), "5", "-C", "1"])
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["  4: line 4", "→ 5: line 5", "  6: line 6"]

    def test_out_of_range(self, ten_line_file: Path) -> None:
        result = runner.invoke(cli, ["line", str(ten_line_file), "11"])
        assert result.exit_code == 1


class TestSearch:
    def test_grep_style_output(self, error_log: Path) -> None:
        result = runner.invoke(cli, ["search", str(error_log), "ERROR", "-s", "-B", "0", "-A", "0"])
        assert result.exit_code == 0, result.output
        assert "3:ERROR disk full" in result.stdout
        assert "7:ERROR connection reset" in result.stdout

    def test_json(self, error_log: Path) -> None:
        result = runner.invoke(cli, ["search", str(error_log), "error", "--json"])
        assert result.exit_code == 0, result.output
        assert [m["line_number"] for m in json.loads(result.stdout)] == [3, 7]

    def test_invalid_regex(self, error_log: Path) -> None:
        result = runner.invoke(cli, ["search", str(error_log), "(", "-E"])
        assert result.exit_code == 1
        assert "Invalid regular expression" in result.output

    def test_bad_range(self, error_log: Path) -> None:
        result = runner.invoke(
            cli, ["search", str(error_log), "x", "--start-line", "5", "--end-line", "2"]
        )
        assert result.exit_code == 2


class TestServe:
    def test_overrides_transport_and_port(self) -> None:
        with patch("largefile.cli.serve.run_server") as run_server:
            result = runner.invoke(cli, ["serve", "--transport", "http", "--port", "9000"])
        assert result.exit_code == 0, result.output
        config = run_server.call_args.args[0]
        assert config.server.transport == "http"
        assert config.server.port == 9000

    def test_defaults_to_stdio(self) -> None:
        with patch("largefile.cli.serve.run_server") as run_server:
            result = runner.invoke(cli, ["serve"])
        assert result.exit_code == 0, result.output
        assert run_server.call_args.args[0].server.transport == "stdio"

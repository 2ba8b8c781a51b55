"""Tests for the generate CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pagesmith.cli import cli
from tests.conftest import ContentWriter, list_index, post


@pytest.fixture
def blog(write_content: ContentWriter) -> Path:
    return write_content(
        {
            "blog/index.md": list_index(),
            "blog/first.md": post("First", date="2024-01-15"),
            "blog/second.md": post("Second", date="2024-02-20"),
            "about.txt": "About us\n\nMore.",
        }
    )


@pytest.mark.usefixtures("_isolated_project")
class TestGenerateCommand:
    def test_human_output(self, cli_runner: CliRunner, blog: Path) -> None:
        result = cli_runner.invoke(cli, ["generate"])
        assert result.exit_code == 0
        assert "OK" in result.stdout
        assert "generate" in result.stdout
        assert "blog/first" in result.stdout
        assert "sort=date desc" in result.stdout

    def test_json_output(self, cli_runner: CliRunner, blog: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "generate"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert data["op"] == "generate"
        assert data["data"]["count"] == 4
        assert data["data"]["list_pages"]["blog"]["items"] == ["blog/second", "blog/first"]

    def test_quiet_lists_urls(self, cli_runner: CliRunner, blog: Path) -> None:
        result = cli_runner.invoke(cli, ["-q", "generate"])
        assert result.exit_code == 0
        assert result.stdout.split() == ["about", "blog/first", "blog/index", "blog/second"]

    def test_explicit_content_dir(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        docs = tmp_path / "docs"
        docs.mkdir()
        (docs / "guide.md").write_text("# Guide", encoding="utf-8")
        result = cli_runner.invoke(cli, ["--json", "generate", str(docs)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [d["title"] for d in data["data"]["documents"]] == ["Guide"]

    def test_missing_content_dir(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "generate"])
        assert result.exit_code == 1
        assert result.stdout == ""
        payload = json.loads(result.stderr)
        assert payload["ok"] is False
        assert payload["error"]["code"] == "CONTENT_ROOT_MISSING"

    def test_document_errors_do_not_fail_run(
        self, cli_runner: CliRunner, write_content: ContentWriter
    ) -> None:
        write_content({"ok.md": "# Ok", "broken.md": "+++\ntitle = 'x'\n"})
        result = cli_runner.invoke(cli, ["generate"])
        assert result.exit_code == 0
        assert "malformed_frontmatter" in result.stdout
        assert "1 errors, 0 warnings" in result.stdout

    def test_strict_fails_on_document_errors(
        self, cli_runner: CliRunner, write_content: ContentWriter
    ) -> None:
        write_content({"ok.md": "# Ok", "image.png": "not really"})
        result = cli_runner.invoke(cli, ["--json", "generate", "--strict"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["data"]["errors"][0]["code"] == "unsupported_format"

    def test_workers_option(self, cli_runner: CliRunner, blog: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "generate", "--workers", "1"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["count"] == 4

    def test_workers_must_be_positive(self, cli_runner: CliRunner, blog: Path) -> None:
        result = cli_runner.invoke(cli, ["generate", "--workers", "0"])
        assert result.exit_code == 2

    def test_config_content_root(
        self, cli_runner: CliRunner, tmp_path: Path, write_content: ContentWriter
    ) -> None:
        (tmp_path / "pagesmith.toml").write_text('[content]\nroot = "pages"\n', encoding="utf-8")
        pages = tmp_path / "pages"
        pages.mkdir()
        (pages / "home.md").write_text("# Home", encoding="utf-8")
        result = cli_runner.invoke(cli, ["--json", "generate"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["documents"][0]["url"] == "home"

    def test_verbose_includes_telemetry(self, cli_runner: CliRunner, blog: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "-v", "generate"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["meta"]["telemetry"]["name"] == "GenerateService.generate"

    def test_warnings_to_stderr(self, cli_runner: CliRunner, write_content: ContentWriter) -> None:
        write_content({"index.md": list_index(sort_by="views")})
        result = cli_runner.invoke(cli, ["generate"])
        assert result.exit_code == 0
        assert "WARNING: index.md: Invalid sort_by 'views'" in result.stderr

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["generate", "--examples"])
        assert result.exit_code == 0
        assert "pagesmith generate --strict" in result.output

    def test_help_mentions_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["generate", "--help"])
        assert result.exit_code == 0
        assert "--examples" in result.output

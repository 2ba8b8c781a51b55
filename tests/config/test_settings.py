"""Tests for PagesmithSettings — unified settings with TOML source."""

from __future__ import annotations

from pathlib import Path

import click
import pytest

from pagesmith.config.settings import PagesmithSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PAGESMITH_CONFIG", "PAGESMITH_VERBOSE", "PAGESMITH_GENERATION__WORKERS"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = PagesmithSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.site.title == "My Site"
        assert settings.content.root == "content"
        assert settings.content.index_name == "index"
        assert ".git" in settings.content.exclude
        assert settings.parsers.aliases == {}
        assert settings.parsers.plugins is True
        assert settings.generation.workers == 4

    def test_derived_paths(self, tmp_path: Path) -> None:
        settings = PagesmithSettings.from_cli(project_root=tmp_path)
        assert settings.content_root == tmp_path / "content"
        assert settings.plugin_dir == tmp_path / ".pagesmith" / "plugins"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = PagesmithSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_sections(self, tmp_path: Path) -> None:
        (tmp_path / "pagesmith.toml").write_text(
            '[site]\ntitle = "Field Notes"\n'
            '[content]\nroot = "src"\nindex_name = "_index"\n'
            '[parsers]\naliases = { conf = "toml" }\nplugins = false\n'
            "[generation]\nworkers = 2\n",
            encoding="utf-8",
        )
        settings = PagesmithSettings.from_cli(project_root=tmp_path)
        assert settings.site.title == "Field Notes"
        assert settings.content_root == tmp_path / "src"
        assert settings.content.index_name == "_index"
        assert settings.parsers.aliases == {"conf": "toml"}
        assert settings.parsers.plugins is False
        assert settings.generation.workers == 2

    def test_sparse_override(self, tmp_path: Path) -> None:
        (tmp_path / "pagesmith.toml").write_text("[generation]\nworkers = 8\n", encoding="utf-8")
        settings = PagesmithSettings.from_cli(project_root=tmp_path)
        assert settings.generation.workers == 8
        assert settings.content.root == "content"

    def test_walk_up_discovery(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pagesmith.toml").write_text('[site]\ntitle = "Up"\n', encoding="utf-8")
        nested = tmp_path / "content" / "blog"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = PagesmithSettings.from_cli()
        assert settings.site.title == "Up"
        assert settings.project_root == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "conf" / "site.toml"
        custom.parent.mkdir()
        custom.write_text('[site]\ntitle = "Custom"\n', encoding="utf-8")
        settings = PagesmithSettings.from_cli(config_path=str(custom))
        assert settings.site.title == "Custom"
        assert settings.config_path == custom
        assert settings.project_root == custom.parent

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pagesmith.toml").write_text("[site\n", encoding="utf-8")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            PagesmithSettings.from_cli(project_root=tmp_path)

    def test_invalid_workers(self, tmp_path: Path) -> None:
        (tmp_path / "pagesmith.toml").write_text("[generation]\nworkers = 0\n", encoding="utf-8")
        with pytest.raises(Exception):
            PagesmithSettings.from_cli(project_root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pagesmith.toml").write_text("[generation]\nworkers = 2\n", encoding="utf-8")
        monkeypatch.setenv("PAGESMITH_GENERATION__WORKERS", "6")
        settings = PagesmithSettings.from_cli(project_root=tmp_path)
        assert settings.generation.workers == 6

    def test_cli_flag_overrides_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAGESMITH_VERBOSE", "false")
        settings = PagesmithSettings.from_cli(project_root=tmp_path, verbose=True)
        assert settings.verbose is True

    def test_config_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "elsewhere.toml"
        custom.write_text('[site]\ntitle = "From Env"\n', encoding="utf-8")
        monkeypatch.setenv("PAGESMITH_CONFIG", str(custom))
        settings = PagesmithSettings.from_cli()
        assert settings.site.title == "From Env"

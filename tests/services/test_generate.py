"""Tests for GenerateService — registry assembly and ServiceResult contract."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from pagesmith.config.settings import PagesmithSettings
from pagesmith.plugins.manager import PluginManager
from pagesmith.services.generate import GenerateService, summarize_site
from pagesmith.services.telemetry import enable_telemetry
from tests.conftest import ContentWriter, list_index, post

_ORG_PLUGIN_SRC = """\
from pagesmith.domain.content import ParsedContent
from pagesmith.plugins.hookspecs import hookimpl


class OrgParser:
    name = "org"

    def parse(self, content, path):
        return ParsedContent(title="From Org", content=content)


class OrgPlugin:
    @hookimpl
    def register_parsers(self, registry):
        registry.register("org", OrgParser())
"""


def _settings(tmp_path: Path, **overrides: object) -> PagesmithSettings:
    return PagesmithSettings.from_cli(project_root=tmp_path, **overrides)


class TestGenerate:
    def test_success_payload(
        self, settings: PagesmithSettings, write_content: ContentWriter
    ) -> None:
        write_content(
            {
                "blog/index.md": list_index(),
                "blog/first.md": post("First", date="2024-02-01"),
                "blog/second.md": post("Second", date="2024-03-01"),
            }
        )
        result = GenerateService(settings).generate()

        assert result.ok is True
        assert result.op == "generate"
        assert result.data["count"] == 3
        assert result.data["list_pages"]["blog"] == {
            "index": "blog/index.md",
            "sort_by": "date",
            "sort_order": "desc",
            "items": ["blog/second", "blog/first"],
        }
        assert result.data["errors"] == []

    def test_document_failures_keep_run_ok(
        self, settings: PagesmithSettings, write_content: ContentWriter
    ) -> None:
        write_content({"good.md": "# Good", "bad.xyz": "?"})
        result = GenerateService(settings).generate()

        assert result.ok is True
        assert result.data["count"] == 1
        (error,) = result.data["errors"]
        assert error["code"] == "unsupported_format"
        assert error["path"] == "bad.xyz"

    def test_document_warnings_surface(
        self, settings: PagesmithSettings, write_content: ContentWriter
    ) -> None:
        write_content({"index.md": list_index(sort_order="sideways")})
        result = GenerateService(settings).generate()

        assert result.ok is True
        assert len(result.data["warnings"]) == 1
        assert result.warnings[0].startswith("index.md: ")

    def test_explicit_root(self, settings: PagesmithSettings, tmp_path: Path) -> None:
        other = tmp_path / "elsewhere"
        other.mkdir()
        (other / "page.txt").write_text("hello", encoding="utf-8")
        result = GenerateService(settings).generate(other)
        assert result.ok is True
        assert [d["url"] for d in result.data["documents"]] == ["page"]

    def test_missing_root(self, settings: PagesmithSettings) -> None:
        result = GenerateService(settings).generate()
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "CONTENT_ROOT_MISSING"
        assert result.error.detail["root"].endswith("content")

    def test_cancelled(self, settings: PagesmithSettings, write_content: ContentWriter) -> None:
        write_content({"a.md": "# A"})
        cancel = threading.Event()
        cancel.set()
        result = GenerateService(settings).generate(cancel=cancel)
        assert result.ok is False
        assert result.error is not None
        assert result.error.code == "CANCELLED"
        assert result.data == {}

    def test_telemetry_spans(
        self, settings: PagesmithSettings, write_content: ContentWriter
    ) -> None:
        write_content({"a.md": "# A"})
        enable_telemetry()
        result = GenerateService(settings).generate()

        assert result.meta is not None
        span = result.meta["telemetry"]
        assert span["name"] == "GenerateService.generate"
        assert [c["name"] for c in span["children"]] == [
            "registry",
            "discover",
            "parse",
            "aggregate",
        ]
        assert span["children"][1]["annotations"] == {"files": 1}
        assert span["children"][2]["annotations"] == {"workers": 4}
        assert span["children"][3]["annotations"] == {"list_pages": 0}

    def test_no_telemetry_by_default(
        self, settings: PagesmithSettings, write_content: ContentWriter
    ) -> None:
        write_content({"a.md": "# A"})
        assert GenerateService(settings).generate().meta is None


class TestBuildRegistry:
    def test_registry_is_frozen(self, settings: PagesmithSettings) -> None:
        registry, warnings = GenerateService(settings).build_registry()
        assert registry.frozen
        assert warnings == []

    def test_aliases(self, tmp_path: Path) -> None:
        settings = _settings(tmp_path, parsers={"aliases": {".CONF": "toml", "mdx": "markdown"}})
        registry, _ = GenerateService(settings).build_registry()
        assert registry.resolve("site.conf") is registry.resolve("site.toml")
        assert registry.resolve("page.mdx").name == "markdown"

    def test_unknown_alias_warns(self, tmp_path: Path) -> None:
        settings = _settings(tmp_path, parsers={"aliases": {"rst": "restructured"}})
        registry, warnings = GenerateService(settings).build_registry()
        assert "rst" not in registry
        assert len(warnings) == 1
        assert "restructured" in warnings[0]

    def test_local_plugin_loaded(self, tmp_path: Path, content_root: Path) -> None:
        plugin_dir = tmp_path / ".pagesmith" / "plugins"
        plugin_dir.mkdir(parents=True)
        (plugin_dir / "org.py").write_text(_ORG_PLUGIN_SRC, encoding="utf-8")
        (content_root / "notes.org").write_text("* heading", encoding="utf-8")

        result = GenerateService(_settings(tmp_path)).generate()
        assert result.ok is True
        assert [d["title"] for d in result.data["documents"]] == ["From Org"]

    def test_plugins_disabled(self, tmp_path: Path) -> None:
        plugin_dir = tmp_path / ".pagesmith" / "plugins"
        plugin_dir.mkdir(parents=True)
        (plugin_dir / "org.py").write_text(_ORG_PLUGIN_SRC, encoding="utf-8")

        settings = _settings(tmp_path, parsers={"plugins": False})
        registry, _ = GenerateService(settings).build_registry()
        assert "org" not in registry

    def test_broken_local_plugin_is_a_warning(self, tmp_path: Path) -> None:
        plugin_dir = tmp_path / ".pagesmith" / "plugins"
        plugin_dir.mkdir(parents=True)
        (plugin_dir / "bad.py").write_text("raise RuntimeError('nope')\n", encoding="utf-8")

        registry, warnings = GenerateService(_settings(tmp_path)).build_registry()
        assert registry.supported_extensions() == ["json", "markdown", "md", "toml", "txt"]
        assert warnings == ["Local plugin bad.py failed to load: nope"]

    def test_injected_plugin_manager(self, settings: PagesmithSettings) -> None:
        manager = PluginManager()
        manager.discover_and_load()
        svc = GenerateService(settings, plugin_manager=manager)
        registry, _ = svc.build_registry()
        assert registry.supported_extensions() == ["json", "markdown", "md", "toml", "txt"]


class TestListParsers:
    def test_table(self, settings: PagesmithSettings) -> None:
        result = GenerateService(settings).list_parsers()
        assert result.ok is True
        assert result.op == "parsers"
        assert result.data["count"] == 5
        by_ext = {p["extension"]: p["parser"] for p in result.data["parsers"]}
        assert by_ext == {
            "json": "json",
            "markdown": "markdown",
            "md": "markdown",
            "toml": "toml",
            "txt": "text",
        }


class TestSummarizeSite:
    def test_json_ready(self, settings: PagesmithSettings, write_content: ContentWriter) -> None:
        root = write_content({"about.toml": 'title = "About"\ndate = 2024-01-01'})
        site = GenerateService(settings).build_site(root)
        summary = summarize_site(site)
        (doc,) = summary["documents"]
        assert doc == {
            "path": "about.toml",
            "url": "about",
            "title": "About",
            "parser": "toml",
            "date": "2024-01-01",
            "excerpt": None,
            "list": False,
        }
        assert summary["root"] == str(root)


@pytest.mark.parametrize("workers", [1, 3])
def test_workers_setting_respected(
    tmp_path: Path, write_content: ContentWriter, workers: int
) -> None:
    write_content({f"p{i}.md": f"# P{i}" for i in range(5)})
    settings = _settings(tmp_path, generation={"workers": workers})
    result = GenerateService(settings).generate()
    assert result.data["count"] == 5

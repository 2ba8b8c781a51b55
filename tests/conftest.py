"""Shared pytest fixtures and test helpers for pagesmith tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from pagesmith.config.settings import PagesmithSettings
from pagesmith.plugins.registry import ParserRegistry, default_registry
from pagesmith.services.telemetry import _current_span, disable_telemetry

ContentWriter = Callable[[dict[str, str]], Path]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def registry() -> ParserRegistry:
    """A fresh, unfrozen registry with the built-in parsers."""
    return default_registry()


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    """Empty ``content/`` directory inside a temporary project root."""
    root = tmp_path / "content"
    root.mkdir()
    return root


@pytest.fixture
def write_content(content_root: Path) -> ContentWriter:
    """Write ``{relative_path: text}`` files under the content root.

    Returns the content root so calls can be chained into a build.
    """

    def _write(files: dict[str, str]) -> Path:
        for relative, text in files.items():
            target = content_root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        return content_root

    return _write


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> PagesmithSettings:
    """Settings rooted at the temporary project, isolated from the host env."""
    monkeypatch.delenv("PAGESMITH_CONFIG", raising=False)
    return PagesmithSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temporary project root so the CLI discovers it.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    monkeypatch.delenv("PAGESMITH_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None]:
    """CLI runs reconfigure logging onto CliRunner streams; undo that after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """CLI runs with ``-v`` enable telemetry; never leak it between tests."""
    yield
    disable_telemetry()
    _current_span.set(None)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def post(title: str | None = None, *, date: str | None = None, body: str = "Body.") -> str:
    """Markdown source with an optional TOML frontmatter block."""
    lines: list[str] = []
    if title is not None:
        lines.append(f'title = "{title}"')
    if date is not None:
        lines.append(f'date = "{date}"')
    if not lines:
        return body
    return "+++\n" + "\n".join(lines) + "\n+++\n" + body


def list_index(**fields: str) -> str:
    """Markdown index document with ``list = true`` and extra TOML fields."""
    extra = "".join(f'{key} = "{value}"\n' for key, value in fields.items())
    return f"+++\nlist = true\n{extra}+++\n# Index\n\n<!-- BLOG_POSTS_LIST -->\n"

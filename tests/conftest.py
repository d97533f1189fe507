"""Shared fixtures for the genry test suite."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from genry.core.bridge import EditorBridge

WriteFn = Callable[[str, str], Path]


@pytest.fixture
def package(tmp_path: Path) -> Path:
    """An empty package root: a directory with a pyproject.toml."""
    root = tmp_path / "proj"
    root.mkdir()
    (root / "pyproject.toml").write_text('[project]\nname = "proj"\nversion = "0.1.0"\n')
    return root


@pytest.fixture
def write_file(package: Path) -> WriteFn:
    """Write a file relative to the package root, dedenting its content."""

    def write(rel_path: str, content: str) -> Path:
        path = package / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content))
        return path

    return write


def template_source(*names: str) -> str:
    """Source of a template file exporting one template per name.

    Each template writes ``<name>.txt`` into the target path.
    """
    items = ", ".join(
        f"Template(name={name!r}, description='Template {name}', generate=_make({name!r}))"
        for name in names
    )
    export = items if len(names) == 1 else f"[{items}]"
    return textwrap.dedent(
        f"""\
        from genry import Template


        def _make(name):
            async def generate(context, config):
                context.target_path.mkdir(parents=True, exist_ok=True)
                (context.target_path / f"{{name}}.txt").write_text(name)

            return generate


        template = {export}
        """
    )


class RecordingBridge(EditorBridge):
    """Editor bridge that remembers the events instead of sending them."""

    def __init__(self, server_id: str | None = None, terminal_id: str | None = None) -> None:
        super().__init__(server_id=server_id, terminal_id=terminal_id)
        self.events: list[str] = []

    def emit(self, event) -> None:  # type: ignore[override]
        self.events.append(event)


@pytest.fixture
def bridge() -> RecordingBridge:
    return RecordingBridge(server_id="srv", terminal_id="term")


@pytest.fixture
def write_template(write_file: WriteFn) -> Callable[..., Path]:
    """Write a template file exporting one template per given name."""

    def write(rel_path: str, *names: str) -> Path:
        return write_file(rel_path, template_source(*names))

    return write

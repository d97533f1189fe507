"""Typer CLI application for genry."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated

from rich.console import Console
from rich.markup import escape
from typer import Exit, Option, Typer

import genry
from genry.cli._logging import configure_logging
from genry.cli._prompts import select_template
from genry.cli._spinner import Spinner
from genry.core.bridge import EditorBridge
from genry.core.config import resolve
from genry.core.runner import Genry, SelectFn
from genry.core.types import GenryError, Template

app = Typer(add_completion=False, context_settings={"help_option_names": ["-h", "--help"]})
_console = Console()


def _print_templates(templates: Sequence[Template]) -> None:
    _console.print()
    _console.print("[bold cyan]◆[/]  Available templates")
    _console.print("[dim]│[/]")
    for t in templates:
        _console.print(f"[dim]│[/]  [bold cyan]{escape(t.name)}[/]")
        if t.description:
            _console.print(f"[dim]│[/]  [dim]{escape(t.description)}[/]")
        _console.print("[dim]│[/]")
    _console.print()


def _select_by_name(name: str) -> SelectFn:
    async def select(templates: Sequence[Template]) -> Template | None:
        for t in templates:
            if t.name == name:
                _console.print("[bold green]◇[/]  Select template")
                _console.print(f"[dim]│[/]  {escape(t.name)}")
                _console.print("[dim]│[/]")
                return t
        _console.print()
        _console.print(
            f"[bold red]Error:[/] [bold]{escape(repr(name))}[/] is not a known template."
        )
        _print_templates(templates)
        raise Exit(code=2)

    return select


def _version_callback(value: bool) -> None:
    if value:
        _console.print(f"genry {genry.__version__}")
        raise Exit()


@app.command()
def main(
    path: Annotated[
        Path | None,
        Option(
            "--path",
            "-p",
            help="The path by which the template will be generated",
            show_default="current directory",
        ),
    ] = None,
    ipc_server: Annotated[
        str | None, Option("--ipcServer", help="IPC server for the editor extension", hidden=True)
    ] = None,
    terminal_id: Annotated[
        str | None, Option("--terminalId", help="Terminal id for the editor extension", hidden=True)
    ] = None,
    template_name: Annotated[
        str | None,
        Option(
            "--template",
            "-t",
            help="Generate this template without prompting.",
            show_default=False,
        ),
    ] = None,
    list_templates: Annotated[
        bool,
        Option("--list-templates", "-l", help="List the templates found and exit."),
    ] = False,
    verbose: Annotated[bool, Option("--verbose", help="Show debug logging.")] = False,
    version: Annotated[
        bool,
        Option(
            "--version",
            "-v",
            help="Show the version and exit.",
            callback=_version_callback,
            is_eager=True,
            expose_value=False,
        ),
    ] = False,
) -> None:
    """Scaffolding tool: generate code from the templates of your package."""
    configure_logging(verbose)
    target_path = (path or Path.cwd()).resolve()

    try:
        resolved = resolve(target_path)
    except GenryError as e:
        _console.print(f"[bold red]Error:[/] {escape(str(e))}")
        raise Exit(code=1) from None

    select = select_template if template_name is None else _select_by_name(template_name)

    _console.print()
    _console.print(f"[bold cyan]●[/]  genry v{genry.__version__}")
    _console.print("[dim]│[/]")

    with EditorBridge(server_id=ipc_server, terminal_id=terminal_id) as bridge, Spinner(
        _console
    ) as spinner:
        runner = Genry(
            bridge=bridge,
            package_root=resolved.package_root,
            config=resolved.config,
            target_path=target_path,
            select=select,
            progress=spinner,
        )
        try:
            if list_templates:
                _print_templates(asyncio.run(runner.search_templates()))
                return
            generated = asyncio.run(runner.start())
        except GenryError as e:
            spinner.stop()
            _console.print(f"[bold red]Error:[/] {escape(str(e))}")
            raise Exit(code=1) from None

    if generated is not None:
        _console.print(
            f"[bold cyan]●[/]  Done! {escape(generated.name)} generated in {escape(str(target_path))}"
        )
        _console.print()

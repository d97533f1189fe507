"""Clack-style template picker using Rich + prompt_toolkit."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from rich.console import Console
from rich.markup import escape

from genry.core.suggest import suggest
from genry.core.types import Template

_console = Console()

QUESTION = "Select template"


def _print_bar() -> None:
    _console.print("[dim]│[/]")


def choice_labels(templates: Sequence[Template]) -> dict[int, str]:
    """
    Map each template (by id) to the text the picker inserts for it.

    A name shared by several templates gets a counter from its second use on
    (``Page``, ``Page (2)``), so every entry stays selectable.
    """
    labels: dict[int, str] = {}
    used: set[str] = set()
    seen: dict[str, int] = {}
    for template in templates:
        count = seen[template.name] = seen.get(template.name, 0) + 1
        label = template.name if count == 1 else f"{template.name} ({count})"
        while label in used:
            count += 1
            label = f"{template.name} ({count})"
        used.add(label)
        labels[id(template)] = label
    return labels


class TemplateCompleter(Completer):
    """Completes the typed text with the templates ``suggest`` finds for it."""

    def __init__(self, templates: Sequence[Template]) -> None:
        self.templates = templates
        self.labels = choice_labels(templates)

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        for template in suggest(text, self.templates):
            yield Completion(
                self.labels[id(template)],
                start_position=-len(text),
                display_meta=template.description or "",
            )


def match_template(text: str, templates: Sequence[Template]) -> Template | None:
    """Resolve submitted text: a picker label, an exact name, then the best suggestion."""
    text = text.strip()
    if not text:
        return None
    labels = choice_labels(templates)
    for template in templates:
        if labels[id(template)] == text:
            return template
    for template in templates:
        if template.name == text:
            return template
    matches = suggest(text, templates)
    return matches[0] if matches else None


async def select_template(templates: Sequence[Template]) -> Template | None:
    """Prompt for a template. Returns ``None`` if the user cancels."""
    if not templates:
        raise ValueError("select_template() needs at least one template")

    _console.print(f"[bold cyan]◆[/]  {QUESTION}")
    _print_bar()

    session: PromptSession[str] = PromptSession(
        completer=TemplateCompleter(templates),
        complete_while_typing=True,
    )
    while True:
        try:
            text = await session.prompt_async(
                "│  ",
                pre_run=lambda: session.default_buffer.start_completion(select_first=False),
            )
        except (KeyboardInterrupt, EOFError):
            _console.print("[bold red]■[/]  Cancelled")
            return None

        selected = match_template(text, templates)
        if selected is not None:
            break
        if text.strip():
            _console.print(f"[dim]│[/]  [yellow]No template matches {escape(text.strip())!r}[/]")

    _console.print(f"[bold green]◇[/]  {QUESTION}")
    _console.print(f"[dim]│[/]  {escape(selected.name)}")
    _print_bar()
    return selected

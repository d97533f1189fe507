"""Spinner shown while templates are searched and imported."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.status import Status


class Spinner:
    """Rich status spinner that ends on a warning or success line."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._status: Status | None = None

    def start(self, text: str) -> None:
        self.stop()
        self._status = self._console.status(text, spinner="dots")
        self._status.start()

    def update(self, text: str) -> None:
        if self._status is not None:
            self._status.update(text)

    def warn(self, text: str) -> None:
        self.stop()
        self._console.print(f"[bold yellow]▲[/]  {text}")
        self._console.print("[dim]│[/]")

    def succeed(self, text: str) -> None:
        self.stop()
        self._console.print(f"[bold green]◇[/]  {text}")
        self._console.print("[dim]│[/]")

    def stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def __enter__(self) -> Spinner:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()

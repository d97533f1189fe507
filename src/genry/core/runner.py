"""Search, selection and generation for one run of genry."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import Protocol

from genry.core.bridge import EditorBridge
from genry.core.loader import find_template_files, load_templates
from genry.core.types import RunConfig, RunContext, Template

logger = logging.getLogger(__name__)

SelectFn = Callable[[Sequence[Template]], Awaitable[Template | None]]


class Progress(Protocol):
    """Receives progress text while templates are loaded."""

    def start(self, text: str) -> None: ...

    def update(self, text: str) -> None: ...

    def warn(self, text: str) -> None: ...

    def succeed(self, text: str) -> None: ...


class _SilentProgress:
    def start(self, text: str) -> None:
        logger.debug(text)

    def update(self, text: str) -> None:
        logger.debug(text)

    def warn(self, text: str) -> None:
        logger.debug(text)

    def succeed(self, text: str) -> None:
        logger.debug(text)


class Genry:
    """
    One scaffolding run.

    Templates are searched under the package root, one is chosen through
    *select* and its ``generate`` is awaited with the run context. The editor
    bridge hears about each step.
    """

    def __init__(
        self,
        *,
        bridge: EditorBridge,
        package_root: Path,
        config: RunConfig,
        target_path: Path,
        select: SelectFn,
        progress: Progress | None = None,
    ) -> None:
        self.bridge = bridge
        self.package_root = package_root
        self.config = config
        self.target_path = target_path
        self.select = select
        self.progress = progress or _SilentProgress()

    @property
    def context(self) -> RunContext:
        return RunContext(
            target_path=self.target_path,
            package_root=self.package_root,
            ipc_server_id=self.bridge.server_id,
            terminal_id=self.bridge.terminal_id,
        )

    async def search_templates(self) -> list[Template]:
        self.progress.start("Loading templates")
        files = find_template_files(self.package_root, self.config.include, self.config.exclude)
        if not files:
            self.progress.warn("Templates not found")
            self.bridge.emit("notFound")
            return []

        self.progress.update(
            "Prepare template" if len(files) == 1 else f"Prepare {len(files)} templates"
        )
        self.bridge.emit("found")
        templates = await load_templates(files, self.package_root, self.config.loader_options)
        self.progress.succeed("Templates loaded")
        return templates

    async def generate(self, template: Template) -> None:
        """Run *template* once. Failures propagate to the caller."""
        logger.debug("Generating %r into %s", template.name, self.target_path)
        result = template.generate(self.context, self.config)
        if inspect.isawaitable(result):
            await result

    async def start(self) -> Template | None:
        """Run the whole flow. Returns the template that was generated, if any."""
        templates = await self.search_templates()
        if not templates:
            return None

        template = await self.select(templates)
        if template is not None:
            await self.generate(template)
        self.bridge.emit("end")
        return template

"""Records shared by the loader, the picker and the generation step."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeAlias

GenerateFn: TypeAlias = Callable[["RunContext", "RunConfig"], Awaitable[None] | None]


class GenryError(Exception):
    """Base class for errors raised by genry."""


class ConfigError(GenryError):
    """Raised when the package root or the configuration file cannot be used."""


class TemplateExportError(GenryError):
    """Raised when a template file exports something that is not a template."""


@dataclass(kw_only=True, eq=False)
class Template:
    """
    A unit of generation code authored in a ``*.genry.py`` file.

    Attributes:
        name: Name shown in the picker.
        generate: Called with the run context and configuration. May be a
            coroutine function.
        description: Optional text shown next to the name.
    """

    name: str
    generate: GenerateFn
    description: str | None = None


@dataclass(frozen=True, kw_only=True)
class RunConfig:
    """
    Configuration read from the rc file, immutable for the whole run.

    Attributes:
        include: Glob prefix under the package root where templates live.
        exclude: Pattern or patterns of relative paths to skip.
        loader_options: Options for the template loader.
        extra: Every other key of the configuration file.
    """

    include: str | None = None
    exclude: str | list[str] | None = None
    loader_options: Mapping[str, Any] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class RunContext:
    """
    Values handed to the chosen template's ``generate``.

    Attributes:
        target_path: Absolute directory the template should generate into.
        package_root: Absolute path of the package holding the templates.
        ipc_server_id: Editor integration channel, if any.
        terminal_id: Editor terminal, if any.
    """

    target_path: Path
    package_root: Path
    ipc_server_id: str | None = None
    terminal_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class ResolvedConfig:
    package_root: Path
    config: RunConfig
    config_path: Path | None = None

"""Discovery and import of ``*.genry.py`` template files."""

from __future__ import annotations

import asyncio
import contextlib
import glob
import hashlib
import importlib
import importlib.util
import logging
import sys
from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from genry.core.types import ConfigError, Template, TemplateExportError

logger = logging.getLogger(__name__)

TEMPLATE_MARKER = "genry"
TEMPLATE_SUFFIX = f".{TEMPLATE_MARKER}.py"
DEFAULT_INCLUDE = "**"
DEFAULT_EXPORT = "template"


def _glob_files(package_root: Path, pattern: str) -> set[str]:
    matches = glob.glob(pattern, root_dir=package_root, recursive=True, include_hidden=True)
    return {Path(match).as_posix() for match in matches if (package_root / match).is_file()}


def find_template_files(
    package_root: Path,
    include: str | None = None,
    exclude: str | Sequence[str] | None = None,
) -> list[str]:
    """
    Find template files under *package_root*.

    Args:
        package_root: Directory the patterns are relative to.
        include: Glob for the directories holding templates. Defaults to
            every directory, dotted ones included.
        exclude: Glob or globs of relative paths to leave out, with the same
            matching rules as *include*.

    Returns:
        Sorted POSIX paths relative to *package_root*.
    """
    pattern = f"{(include or DEFAULT_INCLUDE).rstrip('/')}/*{TEMPLATE_SUFFIX}"
    if exclude is None:
        excludes: list[str] = []
    elif isinstance(exclude, str):
        excludes = [exclude]
    else:
        excludes = list(exclude)

    files = _glob_files(package_root, pattern)
    for exclude_pattern in excludes:
        files -= _glob_files(package_root, exclude_pattern)
    return sorted(files)


def _coerce(value: Any) -> Template:
    if isinstance(value, Template):
        return value
    if isinstance(value, Mapping):
        name, generate = value.get("name"), value.get("generate")
        description = value.get("description")
    else:
        name, generate = getattr(value, "name", None), getattr(value, "generate", None)
        description = getattr(value, "description", None)
    if not isinstance(name, str) or not callable(generate):
        raise TemplateExportError(
            f"Expected a template with a 'name' and a callable 'generate', got {value!r}."
        )
    return Template(name=name, description=description, generate=generate)


def normalize_export(value: Any) -> list[Template]:
    """Turn a template file's export into a list of templates."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [_coerce(v) for v in value]
    if isinstance(value, (str, bytes)):
        raise TemplateExportError(f"Expected a template or a list of templates, got {value!r}.")
    if not value:
        return []
    return [_coerce(value)]


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    stem = path.name.removesuffix(TEMPLATE_SUFFIX).replace("-", "_").replace(".", "_")
    return f"_genry_template_{stem}_{digest}"


def load_template_file(path: Path, export: str = DEFAULT_EXPORT) -> list[Template]:
    """Import a single template file and return the templates it exports."""
    name = _module_name(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import {path}", path=str(path))

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
        templates = normalize_export(getattr(module, export, None))
    except BaseException:
        sys.modules.pop(name, None)
        raise

    if not templates:
        logger.debug("%s exports no templates under %r", path, export)
    return templates


@contextlib.contextmanager
def working_directory(path: Path, extra_paths: Iterable[Path] = ()) -> Iterator[None]:
    """
    Run the block with *path* as cwd and on ``sys.path``.

    Template files import their neighbours and open files relative to the
    package root. *extra_paths* follow *path* on ``sys.path``, duplicates
    dropped. Both the cwd and ``sys.path`` are restored when the block exits,
    however it exits.
    """
    entries = list(dict.fromkeys(str(p) for p in (path, *extra_paths)))
    with contextlib.chdir(path):
        sys.path[:0] = entries
        try:
            yield
        finally:
            for entry in entries:
                with contextlib.suppress(ValueError):
                    sys.path.remove(entry)


def _parse_loader_options(
    package_root: Path, loader_options: Mapping[str, Any] | None
) -> tuple[str, list[Path]]:
    options = dict(loader_options or {})
    export = options.pop("export", DEFAULT_EXPORT)
    paths = options.pop("paths", [])
    for key in options:
        logger.debug("Ignoring unknown loader option %r", key)

    if not isinstance(export, str) or not export.isidentifier():
        raise ConfigError(f"loader option 'export' must be an identifier, got {export!r}.")
    if isinstance(paths, str) or not all(isinstance(p, str) for p in paths):
        raise ConfigError(f"loader option 'paths' must be a list of strings, got {paths!r}.")
    return export, [package_root / p for p in paths]


async def load_templates(
    files: Sequence[str],
    package_root: Path,
    loader_options: Mapping[str, Any] | None = None,
) -> list[Template]:
    """
    Import every file concurrently and collect their templates.

    Each file sees the modules of its own directory, as when run as a script.
    A file that fails to import is logged and contributes nothing. The order
    of the result follows *files*, then the order inside each export.
    """
    export, extra_paths = _parse_loader_options(package_root, loader_options)
    paths = [package_root / f for f in files]
    template_dirs = [p.parent for p in paths]

    importlib.invalidate_caches()
    with working_directory(package_root, [*extra_paths, *template_dirs]):
        results = await asyncio.gather(
            *(asyncio.to_thread(load_template_file, p, export) for p in paths),
            return_exceptions=True,
        )

    templates: list[Template] = []
    for path, result in zip(paths, results):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.error("Failed to load template file %s", path, exc_info=result)
            continue
        templates.extend(result)
    return templates

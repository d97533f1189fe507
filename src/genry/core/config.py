"""Package root discovery and rc-style configuration search."""

from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import yaml

from genry.core.types import ConfigError, ResolvedConfig, RunConfig

logger = logging.getLogger(__name__)

MODULE_NAME = "genry"

MANIFEST_FILES: tuple[str, ...] = ("pyproject.toml", "setup.cfg", "setup.py")

SEARCH_PLACES: tuple[str, ...] = (
    "pyproject.toml",
    f".{MODULE_NAME}rc",
    f".{MODULE_NAME}rc.json",
    f".{MODULE_NAME}rc.yaml",
    f".{MODULE_NAME}rc.yml",
    f".{MODULE_NAME}rc.toml",
)


def _ancestors(start: Path) -> list[Path]:
    start = start.resolve()
    return [start, *start.parents]


def find_package_root(start: Path) -> Path:
    """Return the nearest directory at or above *start* holding a manifest file."""
    for directory in _ancestors(start):
        if any((directory / name).is_file() for name in MANIFEST_FILES):
            return directory
    looked_for = ", ".join(MANIFEST_FILES)
    raise ConfigError(f"No package root found above {start} (looked for {looked_for}).")


def _load_pyproject(path: Path) -> Any:
    with path.open("rb") as f:
        data = tomllib.load(f)
    tool = data.get("tool", {})
    if not isinstance(tool, Mapping):
        raise ConfigError(f"'tool' in {path} must be a table, got {tool!r}.")
    return tool.get(MODULE_NAME)


def _load_toml(path: Path) -> Any:
    with path.open("rb") as f:
        return tomllib.load(f)


def _load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _load_yaml(path: Path) -> Any:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def _loader_for(path: Path) -> Callable[[Path], Any]:
    if path.name == "pyproject.toml":
        return _load_pyproject
    if path.suffix == ".toml":
        return _load_toml
    if path.suffix == ".json":
        return _load_json
    # extensionless rc files hold YAML or JSON
    return _load_yaml


def _stop_dir() -> Path | None:
    try:
        return Path.home().resolve()
    except RuntimeError:
        return None


def search_config(start: Path) -> tuple[Any, Path] | None:
    """
    Search upward from *start* for a configuration file.

    Returns the raw parsed content and the path it was read from, or ``None``
    if nothing was found before the home directory or the filesystem root.
    A ``pyproject.toml`` without a ``[tool.genry]`` table does not count.
    """
    stop = _stop_dir()
    for directory in _ancestors(start):
        for place in SEARCH_PLACES:
            path = directory / place
            if not path.is_file():
                continue
            try:
                content = _loader_for(path)(path)
            except (OSError, ValueError, yaml.YAMLError) as e:
                # tomllib.TOMLDecodeError and json.JSONDecodeError are ValueErrors
                raise ConfigError(f"Could not read configuration file {path}: {e}") from e
            if content is None and path.name == "pyproject.toml":
                continue
            logger.debug("Using configuration file %s", path)
            return content, path
        if directory == stop:
            break
    return None


def parse_config(raw: Any, source: Path | None = None) -> RunConfig:
    """Validate raw configuration content and build a ``RunConfig``."""
    where = f" in {source}" if source is not None else ""
    if raw is None:
        return RunConfig()
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Configuration{where} must be a mapping, got {type(raw).__name__}.")

    data = dict(raw)
    include = data.pop("include", None)
    exclude = data.pop("exclude", None)
    loader_options = data.pop("loader_options", None)
    if loader_options is None:
        loader_options = data.pop("loaderOptions", None)
    else:
        data.pop("loaderOptions", None)

    if include is not None and not isinstance(include, str):
        raise ConfigError(f"'include'{where} must be a string, got {include!r}.")
    if exclude is not None:
        if isinstance(exclude, (list, tuple)):
            if not all(isinstance(p, str) for p in exclude):
                raise ConfigError(f"'exclude'{where} must only contain strings, got {exclude!r}.")
            exclude = list(exclude)
        elif not isinstance(exclude, str):
            raise ConfigError(
                f"'exclude'{where} must be a string or a list of strings, got {exclude!r}."
            )
    if loader_options is None:
        loader_options = {}
    elif not isinstance(loader_options, Mapping):
        raise ConfigError(f"'loader_options'{where} must be a mapping, got {loader_options!r}.")

    return RunConfig(
        include=include,
        exclude=exclude,
        loader_options=dict(loader_options),
        extra=data,
    )


def resolve(start: Path) -> ResolvedConfig:
    """Locate the package root and the configuration for a run started at *start*."""
    package_root = find_package_root(start)
    found = search_config(start)
    if found is None:
        logger.debug("No configuration file found above %s", start)
        return ResolvedConfig(package_root=package_root, config=RunConfig())

    raw, path = found
    return ResolvedConfig(
        package_root=package_root,
        config=parse_config(raw, path),
        config_path=path,
    )

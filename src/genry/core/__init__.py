"""Core building blocks: configuration, template loading, selection and generation."""

from genry.core.bridge import EditorBridge
from genry.core.config import find_package_root, resolve, search_config
from genry.core.loader import find_template_files, load_template_file, load_templates
from genry.core.runner import Genry, Progress
from genry.core.suggest import suggest
from genry.core.types import (
    ConfigError,
    GenryError,
    ResolvedConfig,
    RunConfig,
    RunContext,
    Template,
    TemplateExportError,
)

__all__ = [
    "ConfigError",
    "EditorBridge",
    "Genry",
    "GenryError",
    "Progress",
    "ResolvedConfig",
    "RunConfig",
    "RunContext",
    "Template",
    "TemplateExportError",
    "find_package_root",
    "find_template_files",
    "load_template_file",
    "load_templates",
    "resolve",
    "search_config",
    "suggest",
]

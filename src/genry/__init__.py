"""genry: scaffolding tool driven by templates that live in your own package."""

from importlib.metadata import PackageNotFoundError, version

from genry.core.types import RunConfig, RunContext, Template

try:
    __version__ = version("genry")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "RunConfig",
    "RunContext",
    "Template",
    "__version__",
]

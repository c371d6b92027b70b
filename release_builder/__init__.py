"""Release builder: builds the client and server and assembles the distribution."""

from .config import Settings, get_settings, load_settings
from .exceptions import (
    AssemblyError,
    BuildError,
    BuildFailedError,
    BuildOutputError,
    BuildToolNotFoundError,
    ConfigurationError,
    ReleaseError,
)
from .orchestrator import ReleaseResult, run_release

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "ReleaseError",
    "ConfigurationError",
    "BuildError",
    "BuildToolNotFoundError",
    "BuildFailedError",
    "BuildOutputError",
    "AssemblyError",
    "ReleaseResult",
    "run_release",
]

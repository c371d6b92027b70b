"""
Shared pytest fixtures for release builder tests.

Fixtures are automatically discovered by pytest.
"""
import logging
import os
import stat
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest

# Ensure project root is in path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from release_builder.config import Settings, get_settings


# =============================================================================
# Environment Isolation
# =============================================================================

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop RELEASE_* variables and the settings cache around every test."""
    for key in list(os.environ):
        if key.startswith("RELEASE_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

    # Handlers may point at streams captured by a CliRunner
    logger = logging.getLogger("release_builder")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def repo(temp_dir: Path) -> Path:
    """
    Create an empty repository layout with client and server projects.
    """
    (temp_dir / "client").mkdir()
    (temp_dir / "server").mkdir()
    return temp_dir


@pytest.fixture
def make_settings(repo: Path):
    """
    Factory fixture for Settings rooted at the temporary repository.
    """
    def _create(**overrides) -> Settings:
        values = {
            "project_root": repo,
            "server_binary": "server-bin",
            "public_url": "/",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _create


# =============================================================================
# Build Output Helpers
# =============================================================================

@pytest.fixture
def write_client_output():
    """
    Factory fixture writing what a client build would produce.
    """
    def _write(settings: Settings, public_url: str = "/") -> None:
        out = settings.client_output_path
        out.mkdir(parents=True, exist_ok=True)
        (out / "index.html").write_text(
            f'<html><script src="{public_url}app.js"></script></html>'
        )
        (out / "app.js").write_text("console.log('hello');")

    return _write


@pytest.fixture
def write_server_output():
    """
    Factory fixture writing what a server build would produce.
    """
    def _write(settings: Settings) -> None:
        artifact = settings.server_artifact_path
        artifact.parent.mkdir(parents=True, exist_ok=True)
        artifact.write_bytes(b"\x7fELF fake server")

    return _write


@pytest.fixture
def finished_process():
    """
    Factory fixture for Popen stand-ins that have already exited.
    """
    popen_spec = subprocess.Popen

    def _create(returncode: int = 0):
        process = MagicMock(spec=popen_spec)
        process.pid = 4242
        process.wait.return_value = returncode
        process.poll.return_value = returncode
        return process

    return _create


# =============================================================================
# Fake Build Tools
# =============================================================================

CLIENT_TOOL = """#!/bin/sh
echo "$@" >> "{log}"
if [ -n "{fail}" ]; then exit {fail}; fi
mkdir -p dist/assets
printf '<html><script src="%sassets/app.js"></script></html>' "$4" > dist/index.html
printf "console.log('hello');" > dist/assets/app.js
"""

SERVER_TOOL = """#!/bin/sh
echo "$@" >> "{log}"
if [ -n "{fail}" ]; then exit {fail}; fi
mkdir -p target/release
printf 'fake server binary' > target/release/server-bin
"""


@pytest.fixture
def fake_tools(temp_dir: Path):
    """
    Factory fixture writing executable fake client/server build tools.

    Each tool appends its arguments to a log file next to it, so tests can
    check whether and how it was invoked.

    Returns:
        Function taking (client_exit, server_exit) and returning a dict with
        tool paths and log paths.
    """
    tools_dir = temp_dir / "tools"
    tools_dir.mkdir()

    def _create(client_exit: int = 0, server_exit: int = 0) -> dict:
        tools = {}
        for name, template, exit_code in (
            ("client", CLIENT_TOOL, client_exit),
            ("server", SERVER_TOOL, server_exit),
        ):
            log = tools_dir / f"{name}.log"
            tool = tools_dir / f"fake-{name}"
            tool.write_text(template.format(log=log, fail=exit_code or ""))
            tool.chmod(tool.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
            tools[name] = tool
            tools[f"{name}_log"] = log
        return tools

    return _create

"""
Client and server release builds.

Each build runs its external tool with the project directory as working
directory and blocks until the tool exits. Output is inherited so the
tool's own progress shows up in the terminal. A build only counts as
successful if the tool exits with status 0 and leaves its expected
output behind.
"""

import os
import shutil
import signal
import subprocess
import sys
from pathlib import Path

from .config import Settings
from .exceptions import (
    BuildError,
    BuildFailedError,
    BuildOutputError,
    BuildToolNotFoundError,
)
from .logging_config import get_logger

logger = get_logger("release_builder.builders")

CLIENT = "client"
SERVER = "server"

INSTALL_HINTS = {
    "trunk": "Install it with: cargo install trunk",
    "cargo": "Install the Rust toolchain from https://rustup.rs",
}


def find_tool(step: str, name: str) -> str:
    """
    Find a build tool executable.

    Args:
        step: Build step the tool belongs to
        name: Executable name or path

    Returns:
        Full path to the executable

    Raises:
        BuildToolNotFoundError: If the tool is not on PATH
    """
    tool = shutil.which(name)
    if not tool:
        hint = INSTALL_HINTS.get(Path(name).name, "Make sure it is installed and in PATH")
        raise BuildToolNotFoundError(step, f"'{name}' not found. {hint}")
    # Tools run from the project directory, so relative paths must be pinned here
    return os.path.abspath(tool)


def client_build_command(settings: Settings) -> list[str]:
    """Release build command for the client, with the public base path."""
    return [
        settings.client_tool,
        "build",
        "--release",
        "--public-url",
        settings.public_url,
    ]


def server_build_command(settings: Settings) -> list[str]:
    """Release build command for the server."""
    return [settings.server_tool, "build", "--release"]


def run_build_tool(step: str, command: list[str], cwd: Path) -> None:
    """
    Run a build tool and wait for it to finish.

    Args:
        step: Build step name, used in errors
        command: Command and arguments
        cwd: Project directory to run in

    Raises:
        BuildError: If the project directory is missing
        BuildToolNotFoundError: If the executable cannot be found
        BuildFailedError: If the tool exits with a nonzero status
    """
    if not cwd.is_dir():
        raise BuildError(step, f"project directory not found: {cwd}")

    executable = find_tool(step, command[0])
    logger.info(f"Running {step} build: {' '.join(command)}")
    logger.debug(f"Working directory: {cwd}")

    try:
        process = start_process([executable, *command[1:]], cwd)
    except FileNotFoundError as e:
        raise BuildToolNotFoundError(step, f"could not execute '{command[0]}': {e}") from e

    try:
        returncode = process.wait()
    except BaseException:
        # Interrupted: take down the tool and everything it spawned
        logger.warning(f"Stopping {step} build (pid {process.pid})")
        stop_process_tree(process)
        raise

    if returncode != 0:
        logger.error(f"{step} build failed with exit code {returncode}")
        raise BuildFailedError(step, command, returncode)

    logger.info(f"{step} build finished")


def start_process(command: list[str], cwd: Path) -> subprocess.Popen:
    """
    Start a build tool in its own process group.

    The tool's children (cargo, rustc, ...) join that group, so the whole
    build can be stopped with one signal.
    """
    if sys.platform == "win32":
        return subprocess.Popen(
            command,
            cwd=cwd,
            creationflags=subprocess.CREATE_NEW_PROCESS_GROUP,
        )
    return subprocess.Popen(command, cwd=cwd, start_new_session=True)


def stop_process_tree(process: subprocess.Popen, timeout: float = 5.0) -> None:
    """
    Terminate a build tool and its process group, killing it if it lingers.

    Args:
        process: Process started by start_process
        timeout: Seconds to wait after SIGTERM before SIGKILL
    """
    if sys.platform == "win32":
        process.kill()
        process.wait()
        return

    try:
        os.killpg(process.pid, signal.SIGTERM)
    except ProcessLookupError:
        pass

    try:
        process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        pass

    # The leader may be gone while its children still linger in the group
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    process.wait()


def build_client(settings: Settings) -> Path:
    """
    Build the client bundle in release mode.

    Returns:
        Path to the populated client output directory
    """
    run_build_tool(CLIENT, client_build_command(settings), settings.client_path)

    out_dir = settings.client_output_path
    if not out_dir.is_dir() or not any(out_dir.iterdir()):
        raise BuildOutputError(CLIENT, f"build output missing or empty: {out_dir}")

    return out_dir


def build_server(settings: Settings) -> Path:
    """
    Build the server executable in release mode.

    Returns:
        Path to the compiled server artifact
    """
    run_build_tool(SERVER, server_build_command(settings), settings.server_path)

    artifact = settings.server_artifact_path
    if not artifact.is_file():
        raise BuildOutputError(SERVER, f"build artifact not found: {artifact}")

    return artifact

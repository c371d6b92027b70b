"""
Release orchestration.

Runs the three release steps strictly in order:
1. Build the client with the configured public base path
2. Build the server
3. Replace the distribution directory with the client output

The first failure aborts the run. The previous distribution directory
stays in place until both builds have succeeded in the same run.
"""

import time
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, Field

from .assemble import DistributionSummary, assemble_distribution
from .builders import build_client, build_server
from .config import Settings, get_settings
from .logging_config import get_logger

logger = get_logger("release_builder.orchestrator")

STEPS = ("Build client", "Build server", "Assemble distribution")


class ReleaseResult(BaseModel):
    """Outcome of a successful release run."""

    public_url: str = Field(description="Base path the client was built for")
    client_output: Path = Field(description="Client build output directory")
    server_artifact: Path = Field(description="Compiled server executable")
    distribution: DistributionSummary = Field(description="Assembled distribution")
    duration_seconds: float = Field(description="Wall time of the whole run")


def run_release(
    settings: Settings | None = None,
    on_step: Callable[[int, str], None] | None = None,
) -> ReleaseResult:
    """
    Build client and server, then assemble the distribution directory.

    Args:
        settings: Release settings (default: cached settings)
        on_step: Called with (step number, step name) before each step

    Returns:
        ReleaseResult describing the outputs

    Raises:
        ReleaseError: From whichever step failed first
    """
    settings = settings or get_settings()
    start = time.monotonic()

    def step(number: int) -> None:
        logger.info(f"[Step {number}] {STEPS[number - 1]}")
        if on_step:
            on_step(number, STEPS[number - 1])

    logger.info(f"Release build in {settings.root_path} (public url {settings.public_url})")

    step(1)
    client_output = build_client(settings)

    step(2)
    server_artifact = build_server(settings)

    step(3)
    summary = assemble_distribution(client_output, settings.dist_path)

    duration = time.monotonic() - start
    logger.info(f"Release finished in {duration:.1f}s")

    return ReleaseResult(
        public_url=settings.public_url,
        client_output=client_output,
        server_artifact=server_artifact,
        distribution=summary,
        duration_seconds=duration,
    )

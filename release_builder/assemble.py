"""Distribution directory assembly."""

import shutil
from pathlib import Path

from pydantic import BaseModel, Field

from .exceptions import AssemblyError
from .logging_config import get_logger

logger = get_logger("release_builder.assemble")


class DistributionSummary(BaseModel):
    """What ended up in the distribution directory."""

    path: Path = Field(description="Distribution directory")
    file_count: int = Field(description="Number of files copied")
    total_bytes: int = Field(description="Combined size of all files")

    @property
    def total_mb(self) -> float:
        return self.total_bytes / 1024 / 1024


def summarize_directory(path: Path) -> DistributionSummary:
    """Count the files below a directory and their total size."""
    files = [f for f in path.rglob("*") if f.is_file()]
    return DistributionSummary(
        path=path,
        file_count=len(files),
        total_bytes=sum(f.stat().st_size for f in files),
    )


def _overlaps(a: Path, b: Path) -> bool:
    return a == b or a in b.parents or b in a.parents


def assemble_distribution(source: Path, dist: Path) -> DistributionSummary:
    """
    Replace the distribution directory with a copy of the client output.

    The old distribution directory is only removed once the source has
    been checked. There is no rollback if removal or copying fails
    part way through.

    Args:
        source: Client build output directory
        dist: Distribution directory to recreate

    Returns:
        Summary of the assembled distribution

    Raises:
        AssemblyError: If the source is unusable or a filesystem operation fails
    """
    source = source.resolve()
    dist = dist.parent.resolve() / dist.name

    if not source.is_dir():
        raise AssemblyError(f"Client output directory not found: {source}")
    if not any(source.iterdir()):
        raise AssemblyError(f"Client output directory is empty: {source}")
    if _overlaps(source, dist):
        raise AssemblyError(
            f"Distribution directory {dist} overlaps client output {source}"
        )

    try:
        if dist.is_dir() and not dist.is_symlink():
            logger.info(f"Removing previous distribution: {dist}")
            shutil.rmtree(dist)
        elif dist.exists() or dist.is_symlink():
            logger.info(f"Removing stale file at distribution path: {dist}")
            dist.unlink()

        logger.info(f"Copying {source} -> {dist}")
        shutil.copytree(source, dist)
    except OSError as e:
        logger.error(f"Assembly failed: {e}")
        raise AssemblyError(f"Failed to assemble {dist}: {e}") from e

    summary = summarize_directory(dist)
    logger.info(
        f"Distribution ready: {summary.file_count} files, {summary.total_mb:.2f} MB"
    )
    return summary

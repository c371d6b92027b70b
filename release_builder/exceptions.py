"""Release builder exceptions."""


class ReleaseError(Exception):
    """Base exception for release build errors."""
    pass


class ConfigurationError(ReleaseError):
    """Raised when the release configuration is unusable."""
    pass


class BuildError(ReleaseError):
    """Base exception for a failed build step."""

    def __init__(self, step: str, message: str):
        self.step = step
        super().__init__(f"{step} build: {message}")


class BuildToolNotFoundError(BuildError):
    """Raised when a build tool executable cannot be found."""
    pass


class BuildFailedError(BuildError):
    """Raised when a build tool exits with a nonzero status."""

    def __init__(self, step: str, command: list[str], returncode: int):
        self.command = command
        self.returncode = returncode
        if returncode < 0:
            reason = f"terminated by signal {-returncode}"
        else:
            reason = f"exited with status {returncode}"
        super().__init__(step, f"'{' '.join(command)}' {reason}")


class BuildOutputError(BuildError):
    """Raised when a build succeeded but its expected output is missing."""
    pass


class AssemblyError(ReleaseError):
    """Raised when the distribution directory cannot be assembled."""
    pass

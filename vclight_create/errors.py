"""Error taxonomy for a scaffold run.

Every error raised by the engine derives from ``ScaffoldError`` and carries
the process exit code the CLI uses when the error reaches the top level.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""

    exit_code: int = 1


class InvalidNameError(ScaffoldError):
    """The project name cannot be used as a folder name."""

    exit_code = 2

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name!r} can't be the name of a project, please retry.")


class TargetExistsError(ScaffoldError):
    """The project root directory could not be created."""

    exit_code = 3

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Can't create project folder {path}, "
            "check if a project with the same name exists."
        )


class FilesystemError(ScaffoldError):
    """A read, write or mkdir failed for a reason other than already-exists."""

    exit_code = 4

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class RenderError(ScaffoldError):
    """One or more directive templates failed to render.

    ``failures`` maps each failing template path to its error message.
    """

    exit_code = 5

    def __init__(self, failures: dict[Path, str]) -> None:
        self.failures = dict(failures)
        details = "; ".join(f"{path}: {msg}" for path, msg in self.failures.items())
        super().__init__(f"Failed to render {len(self.failures)} template(s): {details}")


class ResolutionError(ScaffoldError):
    """One or more package versions could not be resolved from the registry.

    ``failures`` maps each package name to the reason its lookup failed.
    """

    exit_code = 6

    def __init__(self, failures: dict[str, str]) -> None:
        self.failures = dict(failures)
        packages = ", ".join(sorted(self.failures))
        super().__init__(f"Could not resolve versions for: {packages}")

"""Path arithmetic between the template tree and the generated project."""

from __future__ import annotations

from pathlib import Path, PurePath
from typing import Iterable


def relative_destination(absolute_path: str | PurePath, depth: int) -> Path:
    """Return the last ``depth + 1`` segments of *absolute_path*.

    *depth* is the number of directories between the file and the template
    root, so the result is the file's path relative to that root:

        relative_destination("/tpl/src/app/router.ts", 2) -> Path("src/app/router.ts")

    A depth that does not match the real nesting yields a well-formed but
    wrong path.
    """
    parts = PurePath(absolute_path).parts
    return Path(*parts[-(depth + 1):])


def destination_path(root: str | Path, segments: Iterable[str]) -> Path:
    """Join a project root with a node's relative path segments."""
    return Path(root).joinpath(*segments)


def strip_extension(name: str, extension: str) -> str:
    """Drop *extension* from the end of *name* when present."""
    if extension and name.endswith(extension):
        return name[: -len(extension)]
    return name

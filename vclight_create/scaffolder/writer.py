"""File writer that creates missing parent directories on demand."""

from __future__ import annotations

import asyncio
from pathlib import Path

from ..errors import FilesystemError


class DirectoryEnsuringWriter:
    """Writes files, creating missing ancestor directories on first failure.

    The first attempt writes directly.  If it fails because a parent directory
    is missing, every missing ancestor is created left to right and the write
    is retried exactly once.  Concurrent writers may race to create the same
    directory; "already exists" is treated as success.  Blocking calls run in
    a worker thread so several writes can be in flight at once.
    """

    async def write(self, destination: str | Path, content: bytes | str) -> Path:
        """Write *content* to *destination* and return the path written.

        Raises:
            FilesystemError: For any failure other than a missing parent, or
                if the retry after creating parents also fails.
        """
        path = Path(destination)
        data = content.encode("utf-8") if isinstance(content, str) else content
        try:
            await asyncio.to_thread(path.write_bytes, data)
        except FileNotFoundError:
            await asyncio.to_thread(ensure_parents, path)
            try:
                await asyncio.to_thread(path.write_bytes, data)
            except OSError as exc:
                raise FilesystemError(path, exc.strerror or str(exc)) from exc
        except OSError as exc:
            raise FilesystemError(path, exc.strerror or str(exc)) from exc
        return path


def ensure_parents(path: Path) -> None:
    """Create every missing ancestor directory of *path*, outermost first.

    A directory that appears between the existence check and ``mkdir`` (made
    by a concurrent writer) is accepted.

    Raises:
        FilesystemError: If an ancestor cannot be created or exists as a
            non-directory.
    """
    parent = path.parent
    current = Path(parent.anchor) if parent.anchor else Path()
    for part in parent.parts[1 if parent.anchor else 0:]:
        current = current / part
        if current.is_dir():
            continue
        try:
            current.mkdir()
        except FileExistsError:
            if not current.is_dir():
                raise FilesystemError(current, "exists and is not a directory") from None
        except OSError as exc:
            raise FilesystemError(current, exc.strerror or str(exc)) from exc

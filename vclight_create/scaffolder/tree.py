"""In-memory model of a template source tree.

``read_tree`` scans a directory once into frozen ``DirectoryNode`` and
``FileNode`` objects.  Every node carries the path segments leading to it from
the tree root, so destinations are derived from the node itself rather than
recomputed from a depth counter.  File nodes are classified as literal or
directive when the tree is built.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Union

from ..errors import FilesystemError

DEFAULT_DIRECTIVE_EXTENSION = ".j2"


class FileMode(str, Enum):
    """How a file node becomes output."""

    LITERAL = "literal"
    DIRECTIVE = "directive"


@dataclass(frozen=True)
class FileNode:
    path: Path
    title: str
    depth: int
    extension: str
    segments: tuple[str, ...]
    mode: FileMode = FileMode.LITERAL
    kind: str = field(default="file", init=False)

    @property
    def relative_path(self) -> Path:
        """Path of the source file relative to the tree root."""
        return Path(*self.segments)


@dataclass(frozen=True)
class DirectoryNode:
    path: Path
    title: str
    depth: int
    segments: tuple[str, ...] = ()
    children: tuple["TreeNode", ...] = ()
    kind: str = field(default="directory", init=False)

    @property
    def relative_path(self) -> Path:
        return Path(*self.segments) if self.segments else Path(".")


TreeNode = Union[DirectoryNode, FileNode]


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def file_extension(name: str) -> str:
    """Return the final suffix of *name* (``""`` when there is none).

    Dotfiles without a further suffix have no extension:
    ``".gitignore"`` -> ``""``, ``"main.ts.j2"`` -> ``".j2"``.
    """
    return Path(name).suffix


def read_tree(
    source_dir: str | Path,
    directive_extension: str = DEFAULT_DIRECTIVE_EXTENSION,
) -> DirectoryNode:
    """Scan *source_dir* recursively into a ``DirectoryNode``.

    Entries keep the order the operating system lists them in.  The root and
    the entries directly under it have depth 0; entries of a depth ``d``
    subdirectory have depth ``d + 1``.

    Raises:
        FilesystemError: If *source_dir* is missing, not a directory, or any
            directory inside it cannot be listed.
    """
    root = Path(source_dir).resolve()
    if not root.is_dir():
        raise FilesystemError(root, "template source directory does not exist")
    children = _read_children(root, 0, (), directive_extension)
    return DirectoryNode(path=root, title=root.name, depth=0, children=children)


def _read_children(
    directory: Path,
    depth: int,
    segments: tuple[str, ...],
    directive_extension: str,
) -> tuple[TreeNode, ...]:
    try:
        with os.scandir(directory) as it:
            entries = list(it)
    except OSError as exc:
        raise FilesystemError(directory, exc.strerror or str(exc)) from exc

    nodes: list[TreeNode] = []
    for entry in entries:
        entry_path = Path(entry.path)
        entry_segments = (*segments, entry.name)
        if entry.is_dir():
            nodes.append(
                DirectoryNode(
                    path=entry_path,
                    title=entry.name,
                    depth=depth,
                    segments=entry_segments,
                    children=_read_children(
                        entry_path, depth + 1, entry_segments, directive_extension
                    ),
                )
            )
        else:
            extension = file_extension(entry.name)
            mode = FileMode.DIRECTIVE if extension == directive_extension else FileMode.LITERAL
            nodes.append(
                FileNode(
                    path=entry_path,
                    title=entry.name,
                    depth=depth,
                    extension=extension,
                    segments=entry_segments,
                    mode=mode,
                )
            )
    return tuple(nodes)


# ---------------------------------------------------------------------------
# Traversal
# ---------------------------------------------------------------------------


def walk(node: TreeNode) -> Iterator[TreeNode]:
    """Yield *node* and its descendants depth-first, parents before children."""
    yield node
    if isinstance(node, DirectoryNode):
        for child in node.children:
            yield from walk(child)


def iter_files(node: TreeNode) -> Iterator[FileNode]:
    """Yield the file nodes under *node* in depth-first order."""
    for item in walk(node):
        if isinstance(item, FileNode):
            yield item

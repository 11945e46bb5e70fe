"""Jinja2 rendering of template-tree files.

Provides the TemplateRenderer class which turns a ``FileNode`` into output
bytes.  Directive files (``.j2``) are rendered with the run's context and lose
their extension; every other file is copied byte-for-byte under its original
name.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateError

from ..errors import FilesystemError, RenderError
from ..utils import to_valid_npm_name
from .paths import strip_extension
from .tree import FileMode, FileNode


@dataclass(frozen=True)
class RenderedFile:
    """Output of rendering one file node."""

    content: bytes
    relative_path: Path

    @property
    def final_name(self) -> str:
        return self.relative_path.name


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template-tree files against a flat context.

    Templates may only reference bindings present in the context: the
    environment uses ``StrictUndefined`` so a missing binding fails the file
    instead of rendering as an empty string.
    """

    def __init__(self) -> None:
        self.env = Environment(
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["npm_name"] = to_valid_npm_name

    # -- Single file rendering ---------------------------------------------

    def render(self, node: FileNode, context: Mapping[str, Any]) -> RenderedFile:
        """Render *node* with *context*.

        Returns:
            A ``RenderedFile`` holding the output bytes and the destination
            path relative to the project root.

        Raises:
            RenderError: If a directive template is malformed or references
                a binding missing from *context*.
            FilesystemError: If the source file cannot be read.
        """
        raw = _read_bytes(node.path)
        if node.mode is FileMode.LITERAL:
            return RenderedFile(content=raw, relative_path=node.relative_path)

        try:
            source = raw.decode("utf-8")
            text = self.render_string(source, context)
        except (TemplateError, UnicodeDecodeError) as exc:
            raise RenderError({node.relative_path: _describe(exc)}) from exc

        final_name = strip_extension(node.title, node.extension)
        relative = Path(*node.segments[:-1], final_name)
        return RenderedFile(content=text.encode("utf-8"), relative_path=relative)

    def render_string(self, template_string: str, context: Mapping[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise FilesystemError(path, exc.strerror or str(exc)) from exc


def _describe(exc: Exception) -> str:
    lineno = getattr(exc, "lineno", None)
    message = getattr(exc, "message", None) or str(exc)
    return f"line {lineno}: {message}" if lineno else message

"""vclight-create scaffolder -- renders a template tree into a new project.

Reads one or more template layers, renders ``.j2`` directive files with the
user's options, copies every other file verbatim, and writes a
``package.json`` whose dependency versions are resolved from the registry.

Quick usage::

    from vclight_create.scaffolder import ProjectGenerator, ProjectOptions

    options = ProjectOptions(name="demo", template="router", plugins=["prettier"])
    generator = ProjectGenerator(options)
    result = await generator.generate("/tmp/output")
"""

from vclight_create.scaffolder.generator import (
    GenerationResult,
    ProjectGenerator,
    ProjectOptions,
)
from vclight_create.scaffolder.manifest import Manifest, ManifestAssembler
from vclight_create.scaffolder.templates import RenderedFile, TemplateRenderer
from vclight_create.scaffolder.tree import DirectoryNode, FileMode, FileNode, read_tree
from vclight_create.scaffolder.writer import DirectoryEnsuringWriter

__all__ = [
    "DirectoryEnsuringWriter",
    "DirectoryNode",
    "FileMode",
    "FileNode",
    "GenerationResult",
    "Manifest",
    "ManifestAssembler",
    "ProjectGenerator",
    "ProjectOptions",
    "RenderedFile",
    "TemplateRenderer",
    "read_tree",
]

"""Main scaffolding orchestrator.

Takes a ``ProjectOptions`` (the answers to the interactive prompts) and
generates a complete VCLight project directory: the rendered template tree
plus a ``package.json`` whose dependency versions are resolved from the
registry at generation time.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from ..config import Config
from ..errors import InvalidNameError, RenderError, TargetExistsError
from ..registry_client import RegistryClient
from ..utils import is_valid_folder_name, to_valid_npm_name
from .manifest import MANIFEST_FILENAME, Manifest, ManifestAssembler, write_manifest
from .paths import destination_path
from .templates import RenderedFile, TemplateRenderer
from .tree import iter_files, read_tree
from .writer import DirectoryEnsuringWriter

TemplateChoice = Literal["router", "blank"]

KNOWN_TEMPLATES: tuple[str, ...] = ("router", "blank")
KNOWN_PLUGINS: tuple[str, ...] = ("prettier",)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ProjectOptions(BaseModel):
    """Pydantic model describing the project to scaffold."""

    name: str = Field(..., description="Project folder name")
    template: TemplateChoice = Field(default="router", description="Template to generate from")
    plugins: list[str] = Field(default_factory=list, description="Optional plugins to add")
    pinned: dict[str, str] = Field(
        default_factory=dict,
        description="Exact package versions that override registry lookups",
    )

    @field_validator("plugins")
    @classmethod
    def _known_plugins(cls, value: list[str]) -> list[str]:
        unknown = [p for p in value if p not in KNOWN_PLUGINS]
        if unknown:
            raise ValueError(f"unknown plugin(s): {', '.join(unknown)}")
        return list(dict.fromkeys(value))


class GenerationResult(BaseModel):
    """What a successful run produced."""

    project_root: Path
    files_written: list[Path] = Field(default_factory=list)
    manifest: Manifest


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Main scaffolding orchestrator.

    A run moves through: validate name, create the root directory, then copy
    the template tree and resolve the manifest concurrently.  Both branches
    settle before the run succeeds or fails.  Nothing is rolled back: a failed
    run can leave a partially populated project directory.

    Args:
        options: The user's answers.
        config: Settings; defaults to ``Config()``.
        resolver: Async callable returning the latest version of a package.
            Defaults to ``RegistryClient.resolve_latest_version``.
        on_file_written: Optional callback invoked with each written path.
    """

    def __init__(
        self,
        options: ProjectOptions,
        config: Config | None = None,
        resolver: Callable[[str], Awaitable[str]] | None = None,
        on_file_written: Callable[[Path], None] | None = None,
    ) -> None:
        self.options = options
        self.config = config or Config()
        if resolver is None:
            client = RegistryClient(
                base_url=self.config.registry.url,
                timeout=self.config.registry.timeout,
            )
            resolver = client.resolve_latest_version
        self.resolver = resolver
        self.renderer = TemplateRenderer()
        self.writer = DirectoryEnsuringWriter()
        self.on_file_written = on_file_written

    # -- Public API --------------------------------------------------------

    async def generate(self, output_dir: str | Path = ".") -> GenerationResult:
        """Generate the project inside *output_dir*.

        Returns:
            A ``GenerationResult`` describing the written project.

        Raises:
            InvalidNameError: Before any filesystem change.
            TargetExistsError: If the project directory cannot be created.
            FilesystemError, RenderError, ResolutionError: From the copy or
                manifest branch, after both have settled.
        """
        name = self.options.name
        if not is_valid_folder_name(name):
            raise InvalidNameError(name)

        project_root = Path(output_dir) / name
        try:
            await asyncio.to_thread(project_root.mkdir)
        except OSError as exc:
            raise TargetExistsError(project_root) from exc

        context = self.build_context()
        copied, manifest = await asyncio.gather(
            self.copy_tree(project_root, context),
            self.build_manifest(project_root),
            return_exceptions=True,
        )
        for outcome in (copied, manifest):
            if isinstance(outcome, BaseException):
                raise outcome

        files = sorted([*copied, Path(MANIFEST_FILENAME)])
        return GenerationResult(project_root=project_root, files_written=files, manifest=manifest)

    # -- Context building --------------------------------------------------

    def build_context(self) -> Mapping[str, Any]:
        """Build the read-only template context from the options."""
        context: dict[str, Any] = {
            "project_name": self.options.name,
            "package_name": to_valid_npm_name(self.options.name),
            "template": self.options.template,
        }
        for template in KNOWN_TEMPLATES:
            context[template] = self.options.template == template
        for plugin in KNOWN_PLUGINS:
            context[plugin] = plugin in self.options.plugins
        return MappingProxyType(context)

    # -- Tree copy ---------------------------------------------------------

    def plan(self, context: Mapping[str, Any]) -> tuple[dict[Path, RenderedFile], dict[Path, str]]:
        """Render every file of every layer without writing anything.

        Returns:
            ``(planned, failures)``: rendered files keyed by destination path
            relative to the project root, and render failures keyed by
            template path.  A later layer replaces an earlier layer's file at
            the same destination.
        """
        templates = self.config.templates
        planned: dict[Path, RenderedFile] = {}
        failures: dict[Path, str] = {}
        for layer in templates.layer_dirs(self.options.template, self.options.plugins):
            tree = read_tree(layer, templates.directive_extension)
            for node in iter_files(tree):
                try:
                    rendered = self.renderer.render(node, context)
                except RenderError as exc:
                    failures.update(exc.failures)
                    continue
                planned[rendered.relative_path] = rendered
        return planned, failures

    async def copy_tree(self, project_root: Path, context: Mapping[str, Any]) -> list[Path]:
        """Render the template layers into *project_root*.

        Every write is launched as a task and all of them are joined before
        returning, even when one of them fails.  A file that fails to render
        is skipped so the rest of the tree is still written; the failures are
        then raised together.

        Returns:
            Relative paths of the files written.
        """
        planned, failures = await asyncio.to_thread(self.plan, context)
        tasks = [
            asyncio.create_task(self._write(project_root, rendered))
            for rendered in planned.values()
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        if failures:
            raise RenderError(failures)
        return list(planned)

    async def _write(self, project_root: Path, rendered: RenderedFile) -> Path:
        path = await self.writer.write(
            destination_path(project_root, rendered.relative_path.parts),
            rendered.content,
        )
        if self.on_file_written is not None:
            self.on_file_written(path)
        return path

    # -- Manifest ----------------------------------------------------------

    async def build_manifest(self, project_root: Path) -> Manifest:
        """Resolve dependency versions and write ``package.json``."""
        assembler = ManifestAssembler(
            name=to_valid_npm_name(self.options.name),
            version=self.config.project_version,
            scripts=self.config.scripts,
            timeout=self.config.registry.resolve_timeout,
        )
        manifest = await assembler.assemble(
            self.config.dependencies_for(self.options.template),
            self.config.dev_dependencies,
            self.options.pinned,
            self.resolver,
        )
        await write_manifest(manifest, project_root, self.writer)
        if self.on_file_written is not None:
            self.on_file_written(project_root / MANIFEST_FILENAME)
        return manifest


"""Assembly of the generated project's ``package.json``.

Versions for every dependency are resolved concurrently through an injected
resolver.  Each lookup is captured as a ``VersionLookup`` result, the lookups
are joined, and any failure aborts assembly with a ``ResolutionError`` naming
every package that could not be resolved.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable, Mapping, Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ResolutionError
from ..registry_client import VersionLookup
from .writer import DirectoryEnsuringWriter

MANIFEST_FILENAME = "package.json"

Resolver = Callable[[str], Awaitable[str]]


class Manifest(BaseModel):
    """The generated project descriptor.

    Field order is the serialisation order of ``package.json``.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str = "0.1.0"
    private: bool = True
    scripts: dict[str, str] = Field(default_factory=dict)
    dependencies: dict[str, str] = Field(default_factory=dict)
    dev_dependencies: dict[str, str] = Field(default_factory=dict, alias="devDependencies")

    def to_json(self) -> str:
        """Pretty-printed ``package.json`` text with a trailing newline."""
        return json.dumps(self.model_dump(by_alias=True), indent=2, ensure_ascii=False) + "\n"


class ManifestAssembler:
    """Builds a ``Manifest`` from package lists and a version resolver.

    Args:
        name: Normalised npm package name of the project.
        version: Project version written to the manifest.
        scripts: npm scripts written to the manifest.
        timeout: Upper bound in seconds on a single lookup.  ``None`` waits
            indefinitely.
    """

    def __init__(
        self,
        name: str,
        version: str = "0.1.0",
        scripts: Mapping[str, str] | None = None,
        timeout: float | None = 30.0,
    ) -> None:
        self.name = name
        self.version = version
        self.scripts = dict(scripts or {})
        self.timeout = timeout

    async def assemble(
        self,
        package_names: Sequence[str],
        dev_package_names: Sequence[str],
        pinned: Mapping[str, str],
        resolver: Resolver,
    ) -> Manifest:
        """Resolve every package concurrently and build the manifest.

        Resolved versions become caret ranges (``^1.2.3``).  Entries in
        *pinned* are applied afterwards: they replace the version in whichever
        map already lists the package, or are added to ``dependencies``.

        Raises:
            ResolutionError: If any lookup fails or times out.  Raised only
                after every lookup has settled.
        """
        names = [*package_names, *dev_package_names]
        results = await asyncio.gather(*(self._lookup(n, resolver) for n in names))

        failures = {r.package: r.error or "unknown error" for r in results if not r.success}
        if failures:
            raise ResolutionError(failures)

        versions = {r.package: r.version for r in results}
        manifest = Manifest(
            name=self.name,
            version=self.version,
            scripts=dict(self.scripts),
            dependencies={n: f"^{versions[n]}" for n in package_names},
            dev_dependencies={n: f"^{versions[n]}" for n in dev_package_names},
        )

        for package, exact in pinned.items():
            if package in manifest.dev_dependencies:
                manifest.dev_dependencies[package] = exact
            else:
                manifest.dependencies[package] = exact
        return manifest

    async def _lookup(self, name: str, resolver: Resolver) -> VersionLookup:
        try:
            version = await asyncio.wait_for(resolver(name), timeout=self.timeout)
        except asyncio.TimeoutError:
            return VersionLookup(
                package=name,
                success=False,
                error=f"Lookup timed out after {self.timeout}s.",
            )
        except ResolutionError as exc:
            return VersionLookup(
                package=name,
                success=False,
                error=exc.failures.get(name, str(exc)),
            )
        except Exception as exc:  # noqa: BLE001
            return VersionLookup(package=name, success=False, error=str(exc) or type(exc).__name__)
        return VersionLookup(package=name, version=version)


async def write_manifest(
    manifest: Manifest,
    project_root: str | Path,
    writer: DirectoryEnsuringWriter | None = None,
) -> Path:
    """Serialise *manifest* to ``<project_root>/package.json``."""
    writer = writer or DirectoryEnsuringWriter()
    return await writer.write(Path(project_root) / MANIFEST_FILENAME, manifest.to_json())

"""vclight-create configuration.

Typed settings for a scaffold run. All settings use Pydantic v2 models so they
are validated at construction time and can be serialised to/from JSON or
environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


class RegistryConfig(BaseModel):
    """Where and how package versions are resolved."""

    url: str = Field(default="https://registry.npmjs.org")
    timeout: float = Field(default=15.0, gt=0, description="Per-request HTTP timeout in seconds")
    resolve_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on a single version lookup, including retries inside the resolver",
    )


class TemplateConfig(BaseModel):
    """Layout of the template source tree.

    ``layers`` maps a template choice to the layer directories copied for it,
    in order.  ``plugins`` maps a plugin name to its layer directory.  Later
    layers override earlier ones at the same relative path.
    """

    root: Path = Field(default=_DEFAULT_TEMPLATE_DIR)
    directive_extension: str = Field(default=".j2", pattern=r"^\.[A-Za-z0-9]+$")
    layers: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "router": ["base", "router"],
            "blank": ["base"],
        }
    )
    plugins: dict[str, str] = Field(
        default_factory=lambda: {"prettier": "plugins/prettier"}
    )
    descriptions: dict[str, str] = Field(
        default_factory=lambda: {
            "router": "A template project with VCLight and router",
            "blank": "A blank project with VCLight",
            "prettier": "Prettier",
        }
    )

    def layer_dirs(self, template: str, plugins: list[str]) -> list[Path]:
        """Return the absolute layer directories for a template and plugin set."""
        dirs = [self.root / layer for layer in self.layers[template]]
        dirs.extend(self.root / self.plugins[p] for p in plugins)
        return dirs


class Config(BaseModel):
    """Global vclight-create configuration.

    Holds the manifest defaults, the dependency lists of every template and
    the registry/template settings.  Created once by the CLI and passed to
    ``ProjectGenerator``.
    """

    project_version: str = Field(default="0.1.0")
    scripts: dict[str, str] = Field(default_factory=lambda: {"serve": "vercel dev"})
    dependencies: list[str] = Field(default_factory=lambda: ["vercel", "vclight"])
    dev_dependencies: list[str] = Field(default_factory=lambda: ["@vercel/node"])
    template_dependencies: dict[str, list[str]] = Field(
        default_factory=lambda: {"router": ["vclight-router"]}
    )
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    templates: TemplateConfig = Field(default_factory=TemplateConfig)

    def dependencies_for(self, template: str) -> list[str]:
        """Runtime dependencies for *template*, base packages first."""
        return [*self.dependencies, *self.template_dependencies.get(template, [])]

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            VCLIGHT_REGISTRY_URL, VCLIGHT_REGISTRY_TIMEOUT,
            VCLIGHT_RESOLVE_TIMEOUT, VCLIGHT_TEMPLATE_DIR,
            VCLIGHT_PROJECT_VERSION.
        """
        registry_kwargs: dict[str, Any] = {}
        if os.environ.get("VCLIGHT_REGISTRY_URL"):
            registry_kwargs["url"] = os.environ["VCLIGHT_REGISTRY_URL"]
        if os.environ.get("VCLIGHT_REGISTRY_TIMEOUT"):
            registry_kwargs["timeout"] = float(os.environ["VCLIGHT_REGISTRY_TIMEOUT"])
        if os.environ.get("VCLIGHT_RESOLVE_TIMEOUT"):
            registry_kwargs["resolve_timeout"] = float(os.environ["VCLIGHT_RESOLVE_TIMEOUT"])

        template_kwargs: dict[str, Any] = {}
        if os.environ.get("VCLIGHT_TEMPLATE_DIR"):
            template_kwargs["root"] = Path(os.environ["VCLIGHT_TEMPLATE_DIR"])

        kwargs: dict[str, Any] = {}
        if os.environ.get("VCLIGHT_PROJECT_VERSION"):
            kwargs["project_version"] = os.environ["VCLIGHT_PROJECT_VERSION"]

        return cls(
            registry=RegistryConfig(**registry_kwargs),
            templates=TemplateConfig(**template_kwargs),
            **kwargs,
        )

"""Shared pytest fixtures for the vclight-create test suite.

Provides reusable fixtures for:
- A small on-disk template tree with literal, directive and binary files
- Layered template roots and a matching ``Config``
- Fake version resolvers (static, failing, slow)
"""

from __future__ import annotations

import asyncio
import textwrap
from pathlib import Path
from typing import Awaitable, Callable

import pytest

from vclight_create.config import Config, TemplateConfig

# Small binary payload with bytes that are not valid UTF-8.
BINARY_PAYLOAD = bytes([0x00, 0x01, 0xFF, 0xFE, 0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A])

# Versions returned by ``static_resolver``.
RESOLVED_VERSIONS: dict[str, str] = {
    "vercel": "33.0.0",
    "vclight": "1.4.2",
    "vclight-router": "1.1.0",
    "@vercel/node": "3.0.12",
}


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------

@pytest.fixture
def template_tree(tmp_path: Path) -> Path:
    """A template tree three levels deep.

    Layout::

        tpl/
            README.md
            src/
                main.ts.j2
                app/
                    router.ts
                    logo.bin
    """
    root = tmp_path / "tpl"
    (root / "src" / "app").mkdir(parents=True)
    (root / "README.md").write_text("# Template\n", encoding="utf-8")
    (root / "src" / "main.ts.j2").write_text(
        textwrap.dedent(
            """\
            import VCLight from "vclight";
            {% if router %}
            import router from "./app/router";
            {% endif %}
            // {{ project_name }}
            """
        ),
        encoding="utf-8",
    )
    (root / "src" / "app" / "router.ts").write_text(
        "export default {};\n", encoding="utf-8"
    )
    (root / "src" / "app" / "logo.bin").write_bytes(BINARY_PAYLOAD)
    yield root


@pytest.fixture
def layered_templates(tmp_path: Path) -> Path:
    """Template root with ``base``, ``router`` and ``plugins/prettier`` layers."""
    root = tmp_path / "layers"
    base = root / "base"
    (base / "src").mkdir(parents=True)
    (base / "src" / "main.ts.j2").write_text(
        "{% if router %}router{% else %}blank{% endif %}:{{ package_name }}\n",
        encoding="utf-8",
    )
    (base / "vercel.json").write_text('{"builds": []}\n', encoding="utf-8")

    router = root / "router"
    (router / "src" / "app" / "routers").mkdir(parents=True)
    (router / "src" / "app" / "router.ts").write_text("router\n", encoding="utf-8")
    (router / "src" / "app" / "routers" / "index.ts").write_text("index\n", encoding="utf-8")
    (router / "vercel.json").write_text('{"builds": ["router"]}\n', encoding="utf-8")

    prettier = root / "plugins" / "prettier"
    prettier.mkdir(parents=True)
    (prettier / ".prettierrc.json").write_text('{"tabWidth": 4}\n', encoding="utf-8")
    yield root


@pytest.fixture
def layered_config(layered_templates: Path) -> Config:
    """``Config`` pointing at ``layered_templates``."""
    return Config(templates=TemplateConfig(root=layered_templates))


# ---------------------------------------------------------------------------
# Resolvers
# ---------------------------------------------------------------------------

@pytest.fixture
def static_resolver() -> Callable[[str], Awaitable[str]]:
    """Resolver answering from ``RESOLVED_VERSIONS``; unknown names raise ``LookupError``."""

    async def _resolve(name: str) -> str:
        await asyncio.sleep(0)
        if name not in RESOLVED_VERSIONS:
            raise LookupError(f"{name} not found")
        return RESOLVED_VERSIONS[name]

    return _resolve


@pytest.fixture
def failing_resolver() -> Callable[[str], Awaitable[str]]:
    """Resolver that fails for every package."""

    async def _resolve(name: str) -> str:
        raise ConnectionError("registry unreachable")

    return _resolve


@pytest.fixture
def binary_payload() -> bytes:
    """The bytes stored in ``template_tree``'s ``src/app/logo.bin``."""
    return BINARY_PAYLOAD

"""Async client for the npm registry.

Resolves the latest published version of a package by reading the
``dist-tags`` of its abbreviated packument.  ``lookup`` never raises: every
failure is folded into a ``VersionLookup`` result.  ``resolve_latest_version``
is the resolver capability handed to the manifest assembler; it returns the
version string or raises ``ResolutionError``.

Typical usage::

    client = RegistryClient()
    result = await client.lookup("vclight")
    if result.success:
        print(result.version)
"""

from __future__ import annotations

from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field

from .errors import ResolutionError

# Abbreviated metadata is much smaller than the full packument and still
# carries dist-tags.
_ABBREVIATED_ACCEPT = "application/vnd.npm.install-v1+json"


class VersionLookup(BaseModel):
    """Outcome of resolving one package version."""

    package: str = Field(..., description="Package name as requested")
    version: str | None = Field(default=None, description="Resolved version on success")
    success: bool = Field(default=True, description="Whether the lookup succeeded")
    error: str | None = Field(default=None, description="Error message on failure")


class RegistryClient:
    """Async client for an npm-compatible registry.

    Uses ``httpx.AsyncClient`` for non-blocking HTTP.  A fresh client is
    opened per lookup so concurrent lookups never share connection state.
    """

    def __init__(self, base_url: str = "https://registry.npmjs.org", timeout: float = 15.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"Accept": _ABBREVIATED_ACCEPT},
            follow_redirects=True,
        )

    @staticmethod
    def _package_path(name: str) -> str:
        """URL path of a package document.

        Scoped names keep their ``@`` but encode the slash:
        ``@vercel/node`` -> ``/@vercel%2Fnode``.
        """
        return "/" + quote(name, safe="@")

    @staticmethod
    def _extract_latest(data: dict) -> str | None:
        """Pull the ``latest`` dist-tag out of a packument."""
        tags = data.get("dist-tags") or {}
        latest = tags.get("latest")
        return latest if isinstance(latest, str) and latest else None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def lookup(self, name: str) -> VersionLookup:
        """Resolve the latest version of *name*.

        Returns:
            A ``VersionLookup`` with the version or an error message.
        """
        try:
            async with self._client() as client:
                response = await client.get(self._package_path(name))
                response.raise_for_status()
                data = response.json()
        except httpx.ConnectError:
            return VersionLookup(
                package=name,
                success=False,
                error=f"Cannot connect to the registry at {self.base_url}.",
            )
        except httpx.TimeoutException:
            return VersionLookup(
                package=name,
                success=False,
                error=f"Registry request timed out after {self.timeout}s.",
            )
        except httpx.HTTPStatusError as exc:
            return VersionLookup(
                package=name,
                success=False,
                error=f"Registry returned HTTP {exc.response.status_code}.",
            )
        except Exception as exc:  # noqa: BLE001
            return VersionLookup(
                package=name,
                success=False,
                error=f"Unexpected error during registry lookup: {exc}",
            )

        latest = self._extract_latest(data) if isinstance(data, dict) else None
        if latest is None:
            return VersionLookup(
                package=name,
                success=False,
                error="Registry response has no 'latest' dist-tag.",
            )
        return VersionLookup(package=name, version=latest)

    async def resolve_latest_version(self, name: str) -> str:
        """Return the latest version of *name* or raise ``ResolutionError``."""
        result = await self.lookup(name)
        if not result.success or result.version is None:
            raise ResolutionError({name: result.error or "unknown error"})
        return result.version

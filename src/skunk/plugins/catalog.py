"""Latest plugin versions published by the vendor."""

import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel

from skunk.core.exceptions import CatalogError
from skunk.utils import http

if TYPE_CHECKING:
    from skunk.utils.config import Config

logger = logging.getLogger(__name__)


class PluginVersion(BaseModel):
    """One row of the status table."""

    slug: str
    latest: str
    installed: str | None = None

    @property
    def outdated(self) -> bool:
        return self.installed is not None and self.installed != self.latest


def parse_versions(body: Any) -> dict[str, str]:
    """
    Normalize the versions payload to ``{slug: version}``.

    Accepts ``{slug: "1.2.3"}`` or ``{slug: {"version": "1.2.3"}}``, either
    bare or wrapped in ``{"plugins": ...}``.
    """
    if isinstance(body, dict) and isinstance(body.get("plugins"), dict):
        body = body["plugins"]
    if not isinstance(body, dict):
        raise CatalogError("Unexpected versions payload")

    versions = {}
    for slug, value in body.items():
        if isinstance(value, dict):
            value = value.get("version")
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            versions[str(slug)] = str(value)
    return versions


class PluginCatalog:
    """Client for the vendor's plugin-version listing."""

    @staticmethod
    def from_config(
        config: "Config", transport: httpx.AsyncBaseTransport | None = None
    ) -> "PluginCatalog":
        return PluginCatalog(config.api_base, config.request_timeout, transport)

    def __init__(
        self,
        api_base: str = "https://skunkglobal.com/api",
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.versions_url = f"{api_base}/plugins/versions"
        self.timeout = timeout
        self._transport = transport

    async def fetch_latest(self) -> dict[str, str]:
        """Fetch ``{slug: latest_version}``.

        Raises:
            CatalogError: If the endpoint is unreachable or returns garbage
        """
        try:
            async with http.create_client(self.timeout, self._transport) as client:
                response = await client.get(self.versions_url)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            raise CatalogError(f"Could not fetch plugin versions: {e}") from e
        except ValueError as e:
            raise CatalogError("Plugin versions response was not JSON") from e

        versions = parse_versions(body)
        logger.debug(f"Fetched {len(versions)} plugin versions")
        return versions

    @staticmethod
    def build_rows(
        latest: dict[str, str],
        slugs: list[str],
        installed: dict[str, str] | None = None,
    ) -> list[PluginVersion]:
        """Rows for the given slugs that appear in ``latest``, in slug order."""
        return [
            PluginVersion(
                slug=slug,
                latest=latest[slug],
                installed=installed.get(slug) if installed is not None else None,
            )
            for slug in slugs
            if slug in latest
        ]

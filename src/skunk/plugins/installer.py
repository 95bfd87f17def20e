"""Install Skunk WordPress plugins through WP-CLI or WordPress Studio."""

import logging
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel

from skunk.core.exceptions import DownloadError
from skunk.plugins.license import LicenseValidator
from skunk.plugins.registry import PluginRegistry, PluginRequest
from skunk.plugins.wordpress import WordPressCLI
from skunk.utils import http

if TYPE_CHECKING:
    from skunk.utils.config import Config

logger = logging.getLogger(__name__)

REDIRECT_CODES = (301, 302)
MAX_REDIRECTS = 1


class PluginInstallStatus(str, Enum):
    INSTALLED = "installed"
    UNKNOWN = "unknown"
    NO_TOOL = "no_tool"
    LICENSE_REQUIRED = "license_required"
    LICENSE_INVALID = "license_invalid"
    FAILED = "failed"


class PluginInstallResult(BaseModel):
    """Outcome of a plugin install attempt."""

    name: str
    status: PluginInstallStatus
    message: str = ""
    slug: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == PluginInstallStatus.INSTALLED


class PluginInstaller:
    """
    Resolve, license-check and install plugins.

    ``install`` never raises for expected failures; every outcome is reported
    through PluginInstallResult.
    """

    @staticmethod
    def from_config(
        config: "Config", transport: httpx.AsyncBaseTransport | None = None
    ) -> "PluginInstaller":
        """Create PluginInstaller from config."""
        return PluginInstaller(
            registry=PluginRegistry.with_builtins(),
            plugins_path=config.plugins_path,
            api_base=config.api_base,
            timeout=config.request_timeout,
            transport=transport,
            config=config,
        )

    def __init__(
        self,
        registry: PluginRegistry,
        plugins_path: Path,
        api_base: str = "https://skunkglobal.com/api",
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        config: "Config | None" = None,
    ):
        self.registry = registry
        self.plugins_path = plugins_path
        self.download_base = f"{api_base}/plugins/download"
        self.timeout = timeout
        self._transport = transport
        self.config = config
        self.validator = LicenseValidator(api_base, timeout, transport)

    def download_url(self, slug: str, license_key: str | None = None) -> str:
        params = {"slug": slug}
        if license_key:
            params["license"] = license_key
        return f"{self.download_base}?{urlencode(params)}"

    def archive_path(self, slug: str) -> Path:
        return self.plugins_path / f"{slug}.zip"

    async def install(
        self,
        name: str,
        license_key: str | None = None,
        wp_path: Path | None = None,
    ) -> PluginInstallResult:
        """Install a plugin by short name, e.g. "skunkcrm" or "skunkcrm-pro".

        Args:
            name: Registry name with optional -pro suffix
            license_key: License key for pro variants
            wp_path: WordPress install to target (passed as --path)

        Returns:
            PluginInstallResult
        """
        request = self.registry.resolve(name, license_key)
        if request is None:
            logger.info(f"Unknown plugin requested: {name}")
            return PluginInstallResult(
                name=name,
                status=PluginInstallStatus.UNKNOWN,
                message=f"Unknown plugin: {name}",
            )

        wp = WordPressCLI.detect(wp_path)
        if wp is None:
            return PluginInstallResult(
                name=name,
                status=PluginInstallStatus.NO_TOOL,
                message="No WordPress CLI tool found (need wp or studio)",
                slug=request.slug,
            )

        if request.pro and not request.license_key:
            return PluginInstallResult(
                name=name,
                status=PluginInstallStatus.LICENSE_REQUIRED,
                message=f"{request.display_name} requires a license key",
                slug=request.slug,
            )

        if request.pro:
            license_result = await self.validator.validate(request.license_key, request.slug)
            if not license_result.valid:
                return PluginInstallResult(
                    name=name,
                    status=PluginInstallStatus.LICENSE_INVALID,
                    message=license_result.error or "License key is not valid",
                    slug=request.slug,
                )

        result = await self.install_request(request, wp)
        if result.ok and request.pro:
            self._remember_license(request)
        return result

    def _remember_license(self, request: PluginRequest) -> None:
        """Store a license that just installed successfully. Failure only warns."""
        if self.config is None:
            return
        try:
            self.config.set_user(f"licenses.{request.entry.key}", request.license_key)
        except OSError as e:
            logger.warning(f"Could not save license for {request.entry.key}: {e}")

    async def install_request(
        self, request: PluginRequest, wp: WordPressCLI, force: bool = False
    ) -> PluginInstallResult:
        """Fetch and install an already-resolved (and licensed) request."""
        url = self.download_url(request.slug, request.license_key)

        if wp.accepts_urls:
            source = url
        else:
            try:
                source = str(await self.download(url, self.archive_path(request.slug)))
            except DownloadError as e:
                logger.error(str(e))
                return PluginInstallResult(
                    name=request.slug,
                    status=PluginInstallStatus.FAILED,
                    message=f"Download failed: {e.reason}",
                    slug=request.slug,
                )

        result = wp.install_plugin(source, force=force)
        if not result.ok:
            detail = result.stderr.strip() or result.stdout.strip() or f"exit code {result.returncode}"
            return PluginInstallResult(
                name=request.slug,
                status=PluginInstallStatus.FAILED,
                message=f"{wp.tool} could not install {request.slug}: {detail}",
                slug=request.slug,
            )

        logger.info(f"Installed plugin {request.slug} via {wp.tool}")
        return PluginInstallResult(
            name=request.slug,
            status=PluginInstallStatus.INSTALLED,
            message=f"Installed {request.display_name}",
            slug=request.slug,
        )

    async def download(self, url: str, dest: Path) -> Path:
        """
        Stream ``url`` to ``dest``, following at most one 301/302 redirect.

        Raises:
            DownloadError: On transport failure, non-2xx status, or a second
                redirect. A partially written file is removed and an
                archive cached by an earlier run is kept.
        """
        dest.parent.mkdir(parents=True, exist_ok=True)
        part = dest.with_name(f"{dest.name}.part")
        try:
            async with http.create_client(self.timeout, self._transport) as client:
                target = url
                for _ in range(MAX_REDIRECTS + 1):
                    async with client.stream("GET", target) as response:
                        if response.status_code in REDIRECT_CODES:
                            location = response.headers.get("location")
                            if not location:
                                raise DownloadError(url, "redirect without location")
                            target = str(response.url.join(location))
                            logger.debug(f"Following redirect to {target}")
                            continue

                        if not response.is_success:
                            raise DownloadError(url, f"HTTP {response.status_code}")

                        with open(part, "wb") as f:
                            async for chunk in response.aiter_bytes():
                                f.write(chunk)
                        part.replace(dest)
                        logger.info(f"Cached {dest.name} ({dest.stat().st_size} bytes)")
                        return dest

                raise DownloadError(url, "too many redirects")
        except DownloadError:
            part.unlink(missing_ok=True)
            raise
        except (httpx.HTTPError, OSError) as e:
            part.unlink(missing_ok=True)
            raise DownloadError(url, str(e)) from e

"""Tests for PluginInstaller."""

from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from skunk.core.exceptions import DownloadError
from skunk.plugins.installer import PluginInstaller, PluginInstallStatus
from skunk.plugins.registry import PluginRegistry
from skunk.utils.config import Config
from skunk.utils.tools import ToolResult

DOWNLOAD = "/api/plugins/download"
VALIDATE = "/api/license/validate"
VALID_LICENSE = httpx.Response(200, json={"data": {"valid": True, "max_sites": 3}})


def tools(*available: str):
    """side_effect for command_exists: only the named tools exist."""
    return lambda cmd: cmd in available


@pytest.fixture
def installer_factory(tmp_path: Path, make_transport):
    def factory(routes: dict[str, httpx.Response] | None = None, config: Config | None = None):
        return PluginInstaller(
            registry=PluginRegistry.with_builtins(),
            plugins_path=tmp_path / "plugins",
            transport=make_transport(routes or {}),
            config=config,
        )

    return factory


class TestInstallGuards:
    """Outcomes that must stop before any download or subprocess."""

    @pytest.mark.asyncio
    async def test_unknown_plugin_runs_nothing(self, installer_factory, requests_seen):
        installer = installer_factory()

        with (
            patch("skunk.utils.tools.subprocess.run") as mock_run,
            patch("skunk.plugins.wordpress.command_exists") as mock_exists,
        ):
            result = await installer.install("jetpack")

        assert result.status == PluginInstallStatus.UNKNOWN
        assert "jetpack" in result.message
        mock_run.assert_not_called()
        mock_exists.assert_not_called()
        assert requests_seen == []

    @pytest.mark.asyncio
    async def test_no_wordpress_tool(self, installer_factory, requests_seen):
        installer = installer_factory()

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools()),
            patch("skunk.plugins.wordpress.run_tool") as mock_run,
        ):
            result = await installer.install("skunkcrm")

        assert result.status == PluginInstallStatus.NO_TOOL
        mock_run.assert_not_called()
        assert requests_seen == []

    @pytest.mark.asyncio
    async def test_pro_without_license(self, installer_factory, requests_seen):
        installer = installer_factory()

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools("wp")),
            patch("skunk.plugins.wordpress.run_tool") as mock_run,
        ):
            result = await installer.install("skunkcrm-pro")

        assert result.status == PluginInstallStatus.LICENSE_REQUIRED
        assert result.slug == "skunkcrm-pro"
        mock_run.assert_not_called()
        assert requests_seen == []

    @pytest.mark.asyncio
    async def test_pro_with_rejected_license(self, installer_factory, requests_seen):
        installer = installer_factory(
            {VALIDATE: httpx.Response(200, json={"data": {"valid": False}, "message": "Expired"})}
        )

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools("wp")),
            patch("skunk.plugins.wordpress.run_tool") as mock_run,
        ):
            result = await installer.install("skunkcrm-pro", license_key="OLD")

        assert result.status == PluginInstallStatus.LICENSE_INVALID
        assert result.message == "Expired"
        mock_run.assert_not_called()
        assert [r.url.path for r in requests_seen] == [VALIDATE]


class TestInstallWithWpCli:
    """wp installs straight from the download URL."""

    @pytest.mark.asyncio
    async def test_free_plugin(self, installer_factory, requests_seen):
        installer = installer_factory()

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools("wp", "studio")),
            patch("skunk.plugins.wordpress.run_tool", return_value=ToolResult(0)) as mock_run,
        ):
            result = await installer.install("skunkforms")

        assert result.ok
        mock_run.assert_called_once_with(
            [
                "wp",
                "plugin",
                "install",
                "https://skunkglobal.com/api/plugins/download?slug=skunkforms",
                "--activate",
            ]
        )
        assert requests_seen == []

    @pytest.mark.asyncio
    async def test_pro_plugin_embeds_license_and_saves_it(
        self, installer_factory, test_config: Config
    ):
        installer = installer_factory({VALIDATE: VALID_LICENSE}, config=test_config)

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools("wp")),
            patch("skunk.plugins.wordpress.run_tool", return_value=ToolResult(0)) as mock_run,
        ):
            result = await installer.install(
                "skunkcrm-pro", license_key="AB CD", wp_path=Path("/srv/site")
            )

        assert result.status == PluginInstallStatus.INSTALLED
        args = mock_run.call_args[0][0]
        assert args[3] == (
            "https://skunkglobal.com/api/plugins/download?slug=skunkcrm-pro&license=AB+CD"
        )
        assert args[-1] == "--path=/srv/site"
        assert test_config.licenses == {"skunkcrm": "AB CD"}
        assert "skunkcrm: AB CD" in test_config.config_file.read_text()

    @pytest.mark.asyncio
    async def test_license_not_saved_when_install_fails(
        self, installer_factory, test_config: Config
    ):
        installer = installer_factory({VALIDATE: VALID_LICENSE}, config=test_config)

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools("wp")),
            patch("skunk.plugins.wordpress.run_tool", return_value=ToolResult(1, stderr="boom")),
        ):
            result = await installer.install("skunkcrm-pro", license_key="KEY-1")

        assert result.status == PluginInstallStatus.FAILED
        assert test_config.licenses == {}
        assert not test_config.config_file.exists()

    @pytest.mark.asyncio
    async def test_unwritable_config_does_not_block_install(
        self, installer_factory, test_config: Config
    ):
        """A config file that cannot be written only loses the saved license."""
        test_config.config_file.mkdir(parents=True)
        installer = installer_factory({VALIDATE: VALID_LICENSE}, config=test_config)

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools("wp")),
            patch("skunk.plugins.wordpress.run_tool", return_value=ToolResult(0)) as mock_run,
        ):
            result = await installer.install("skunkcrm-pro", license_key="KEY-1")

        assert result.status == PluginInstallStatus.INSTALLED
        mock_run.assert_called_once()
        assert test_config.licenses == {}

    @pytest.mark.asyncio
    async def test_tool_failure_is_reported(self, installer_factory):
        installer = installer_factory()

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools("wp")),
            patch(
                "skunk.plugins.wordpress.run_tool",
                return_value=ToolResult(1, stderr="Error: This does not seem to be a WordPress installation."),
            ),
        ):
            result = await installer.install("skunkpages")

        assert result.status == PluginInstallStatus.FAILED
        assert "WordPress installation" in result.message


class TestInstallWithStudio:
    """studio installs from a cached archive."""

    @pytest.mark.asyncio
    async def test_downloads_then_installs_archive(self, installer_factory, tmp_path: Path):
        installer = installer_factory(
            {
                DOWNLOAD: httpx.Response(302, headers={"Location": "https://cdn.example.com/skunkcrm.zip"}),
                "/skunkcrm.zip": httpx.Response(200, content=b"PK\x03\x04zip"),
            }
        )

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools("studio")),
            patch("skunk.plugins.wordpress.run_tool", return_value=ToolResult(0)) as mock_run,
        ):
            result = await installer.install("skunkcrm")

        archive = tmp_path / "plugins" / "skunkcrm.zip"
        assert result.ok
        assert archive.read_bytes() == b"PK\x03\x04zip"
        mock_run.assert_called_once_with(
            ["studio", "wp", "plugin", "install", str(archive), "--activate"]
        )

    @pytest.mark.asyncio
    async def test_download_failure_skips_install(self, installer_factory, tmp_path: Path):
        installer = installer_factory({DOWNLOAD: httpx.Response(500)})

        with (
            patch("skunk.plugins.wordpress.command_exists", side_effect=tools("studio")),
            patch("skunk.plugins.wordpress.run_tool") as mock_run,
        ):
            result = await installer.install("skunkcrm")

        assert result.status == PluginInstallStatus.FAILED
        assert "HTTP 500" in result.message
        mock_run.assert_not_called()
        assert not (tmp_path / "plugins" / "skunkcrm.zip").exists()


class TestDownload:
    """Tests for PluginInstaller.download redirect handling."""

    @pytest.mark.asyncio
    async def test_direct_download(self, installer_factory, tmp_path: Path):
        installer = installer_factory({"/file.zip": httpx.Response(200, content=b"data")})
        dest = tmp_path / "cache" / "file.zip"

        path = await installer.download("https://cdn.example.com/file.zip", dest)

        assert path == dest
        assert dest.read_bytes() == b"data"

    @pytest.mark.asyncio
    async def test_follows_one_relative_redirect(
        self, installer_factory, tmp_path: Path, requests_seen
    ):
        installer = installer_factory(
            {
                "/start": httpx.Response(301, headers={"Location": "/final.zip"}),
                "/final.zip": httpx.Response(200, content=b"zip"),
            }
        )
        dest = tmp_path / "out.zip"

        await installer.download("https://cdn.example.com/start", dest)

        assert dest.read_bytes() == b"zip"
        assert [str(r.url) for r in requests_seen] == [
            "https://cdn.example.com/start",
            "https://cdn.example.com/final.zip",
        ]

    @pytest.mark.asyncio
    async def test_second_redirect_is_not_followed(
        self, installer_factory, tmp_path: Path, requests_seen
    ):
        installer = installer_factory(
            {
                "/a": httpx.Response(302, headers={"Location": "/b"}),
                "/b": httpx.Response(302, headers={"Location": "/c"}),
                "/c": httpx.Response(200, content=b"never"),
            }
        )
        dest = tmp_path / "out.zip"

        with pytest.raises(DownloadError, match="too many redirects"):
            await installer.download("https://cdn.example.com/a", dest)

        assert [r.url.path for r in requests_seen] == ["/a", "/b"]
        assert not dest.exists()

    @pytest.mark.asyncio
    async def test_redirect_without_location(self, installer_factory, tmp_path: Path):
        installer = installer_factory({"/a": httpx.Response(302)})

        with pytest.raises(DownloadError, match="redirect without location"):
            await installer.download("https://cdn.example.com/a", tmp_path / "out.zip")

    @pytest.mark.asyncio
    async def test_connection_error(self, tmp_path: Path):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        installer = PluginInstaller(
            registry=PluginRegistry.with_builtins(),
            plugins_path=tmp_path,
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(DownloadError) as exc_info:
            await installer.download("https://cdn.example.com/a", tmp_path / "out.zip")

        assert "refused" in exc_info.value.reason
        assert not (tmp_path / "out.zip").exists()

    @pytest.mark.asyncio
    async def test_failed_download_keeps_cached_archive(self, installer_factory, tmp_path: Path):
        dest = tmp_path / "skunkcrm.zip"
        dest.write_bytes(b"previous")
        installer = installer_factory({"/a": httpx.Response(500)})

        with pytest.raises(DownloadError):
            await installer.download("https://cdn.example.com/a", dest)

        assert dest.read_bytes() == b"previous"
        assert not (tmp_path / "skunkcrm.zip.part").exists()

    @pytest.mark.asyncio
    async def test_successful_download_replaces_cached_archive(
        self, installer_factory, tmp_path: Path
    ):
        dest = tmp_path / "skunkcrm.zip"
        dest.write_bytes(b"previous")
        installer = installer_factory({"/a": httpx.Response(200, content=b"fresh")})

        await installer.download("https://cdn.example.com/a", dest)

        assert dest.read_bytes() == b"fresh"
        assert not (tmp_path / "skunkcrm.zip.part").exists()

"""WordPress plugin registry, licensing and installation."""

from skunk.plugins.catalog import PluginCatalog, PluginVersion
from skunk.plugins.installer import (
    PluginInstaller,
    PluginInstallResult,
    PluginInstallStatus,
)
from skunk.plugins.license import LicenseResult, LicenseValidator
from skunk.plugins.registry import (
    PluginEntry,
    PluginRegistry,
    PluginRequest,
    parse_plugin_name,
)
from skunk.plugins.wordpress import WordPressCLI

__all__ = [
    "LicenseResult",
    "LicenseValidator",
    "PluginCatalog",
    "PluginEntry",
    "PluginInstallResult",
    "PluginInstallStatus",
    "PluginInstaller",
    "PluginRegistry",
    "PluginRequest",
    "PluginVersion",
    "WordPressCLI",
    "parse_plugin_name",
]

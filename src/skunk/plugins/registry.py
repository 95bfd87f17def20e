"""Registry of the Skunk WordPress plugins skunk knows how to install."""

from pydantic import BaseModel, ConfigDict

PRO_SUFFIX = "-pro"


class PluginEntry(BaseModel):
    """Static description of one plugin family (free + pro variant)."""

    model_config = ConfigDict(frozen=True)

    key: str
    free_slug: str
    pro_slug: str
    display_name: str

    def slug(self, pro: bool = False) -> str:
        return self.pro_slug if pro else self.free_slug


class PluginRequest(BaseModel):
    """A registry entry resolved from user input."""

    entry: PluginEntry
    pro: bool = False
    license_key: str | None = None

    @property
    def slug(self) -> str:
        return self.entry.slug(self.pro)

    @property
    def display_name(self) -> str:
        suffix = " Pro" if self.pro else ""
        return f"{self.entry.display_name}{suffix}"


def parse_plugin_name(name: str) -> tuple[str, bool]:
    """
    Split an optional ``-pro`` suffix off a plugin name.

    Returns:
        Tuple of (base_name, is_pro)
    """
    name = name.strip().lower()
    if name.endswith(PRO_SUFFIX) and len(name) > len(PRO_SUFFIX):
        return name[: -len(PRO_SUFFIX)], True
    return name, False


class PluginRegistry:
    """
    Registry for all installable plugins.

    Keyed by short name (e.g. "skunkcrm"); entries are immutable.
    """

    def __init__(self) -> None:
        self._plugins: dict[str, PluginEntry] = {}

    def register(self, entry: PluginEntry) -> None:
        """Register a plugin family."""
        self._plugins[entry.key] = entry

    def get(self, key: str) -> PluginEntry | None:
        """Get a plugin family by short name."""
        return self._plugins.get(key)

    def list_all(self) -> list[PluginEntry]:
        """List all registered plugin families."""
        return list(self._plugins.values())

    def slugs(self) -> set[str]:
        """Every free and pro slug in the registry."""
        return {slug for e in self._plugins.values() for slug in (e.free_slug, e.pro_slug)}

    def resolve(self, name: str, license_key: str | None = None) -> PluginRequest | None:
        """
        Resolve user input such as "skunkcrm-pro" to a PluginRequest.

        Returns:
            PluginRequest, or None if the base name is unknown
        """
        base, pro = parse_plugin_name(name)
        entry = self.get(base)
        if entry is None:
            return None
        return PluginRequest(entry=entry, pro=pro, license_key=license_key or None)

    @classmethod
    def with_builtins(cls) -> "PluginRegistry":
        """Create a PluginRegistry with the Skunk plugins registered."""
        registry = cls()
        registry.register(
            PluginEntry(
                key="skunkcrm",
                free_slug="skunkcrm",
                pro_slug="skunkcrm-pro",
                display_name="SkunkCRM",
            )
        )
        registry.register(
            PluginEntry(
                key="skunkforms",
                free_slug="skunkforms",
                pro_slug="skunkforms-pro",
                display_name="SkunkForms",
            )
        )
        registry.register(
            PluginEntry(
                key="skunkpages",
                free_slug="skunkpages",
                pro_slug="skunkpages-pro",
                display_name="SkunkPages",
            )
        )
        return registry

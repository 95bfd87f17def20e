"""Custom exceptions for skunk."""


class SkunkError(Exception):
    """Base class for errors raised inside skunk."""
    pass


class SkillSourceError(SkunkError):
    """Raised when the remote skills source cannot be read."""
    pass


class DownloadError(SkunkError):
    """Raised when a plugin archive cannot be downloaded."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Download failed ({reason}): {url}")
        self.url = url
        self.reason = reason


class CatalogError(SkunkError):
    """Raised when the plugin version catalog cannot be read."""
    pass

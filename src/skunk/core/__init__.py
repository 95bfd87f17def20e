"""Core types shared across skunk."""

from skunk.core.exceptions import (
    CatalogError,
    DownloadError,
    SkillSourceError,
    SkunkError,
)

__all__ = [
    "CatalogError",
    "DownloadError",
    "SkillSourceError",
    "SkunkError",
]

"""Fetch, list and remove OpenClaw skills."""

import json
import logging
import re
import shutil
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import httpx
from pydantic import BaseModel, Field

from skunk.core.exceptions import SkillSourceError
from skunk.utils import http

if TYPE_CHECKING:
    from skunk.utils.config import Config

logger = logging.getLogger(__name__)

SKILL_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class SkillInstallStatus(str, Enum):
    INSTALLED = "installed"
    UPDATED = "updated"
    EXISTS = "exists"
    NOT_INSTALLED = "not_installed"
    NOT_FOUND = "not_found"
    INVALID = "invalid"


class SkillInstallResult(BaseModel):
    """Outcome of an install or update attempt."""

    name: str
    status: SkillInstallStatus
    path: Path | None = None
    files: list[str] = Field(default_factory=list)


class InstalledSkill(BaseModel):
    """Health of one directory under the skills path."""

    name: str
    has_skill_md: bool
    config_state: Literal["ok", "invalid", "missing"]


class SkillInstaller:
    """Install skills from the remote skills repository into the skills path."""

    MARKER_FILE = "SKILL.md"
    SKILL_FILES = ["SKILL.md", "config.json", "README.md"]
    RAW_URL = "https://raw.githubusercontent.com/{repo}/{branch}/skills/{name}/{file}"
    LISTING_URL = "https://api.github.com/repos/{repo}/contents/skills"

    @staticmethod
    def from_config(
        config: "Config", transport: httpx.AsyncBaseTransport | None = None
    ) -> "SkillInstaller":
        """Create SkillInstaller from config."""
        return SkillInstaller(
            skills_path=config.skills_path,
            repo=config.skills_repo,
            branch=config.skills_branch,
            timeout=config.request_timeout,
            transport=transport,
        )

    def __init__(
        self,
        skills_path: Path,
        repo: str = "skunkceo/openclaw-skills",
        branch: str = "main",
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.skills_path = skills_path
        self.repo = repo
        self.branch = branch
        self.timeout = timeout
        self._transport = transport

    @staticmethod
    def is_valid_name(name: str | None) -> bool:
        return bool(name) and SKILL_NAME_PATTERN.match(name) is not None

    def file_url(self, name: str, filename: str) -> str:
        return self.RAW_URL.format(
            repo=self.repo, branch=self.branch, name=name, file=filename
        )

    async def install(self, name: str) -> SkillInstallResult:
        """Install a skill by name.

        A pre-existing directory is never touched. If SKILL.md cannot be
        fetched, the newly created directory is removed again.

        Args:
            name: Skill name (directory under skills/ in the repository)

        Returns:
            SkillInstallResult describing what happened
        """
        if not self.is_valid_name(name):
            return SkillInstallResult(name=name or "", status=SkillInstallStatus.INVALID)

        self.skills_path.mkdir(parents=True, exist_ok=True)
        skill_dir = self.skills_path / name

        if skill_dir.exists():
            logger.info(f"Skill '{name}' already installed at {skill_dir}")
            return SkillInstallResult(
                name=name, status=SkillInstallStatus.EXISTS, path=skill_dir
            )

        skill_dir.mkdir(parents=True)
        files = await self._fetch_into(name, skill_dir)

        if self.MARKER_FILE not in files:
            shutil.rmtree(skill_dir, ignore_errors=True)
            logger.warning(f"Skill '{name}' not found in {self.repo}")
            return SkillInstallResult(name=name, status=SkillInstallStatus.NOT_FOUND)

        logger.info(f"Installed skill '{name}' ({', '.join(files)})")
        return SkillInstallResult(
            name=name, status=SkillInstallStatus.INSTALLED, path=skill_dir, files=files
        )

    async def update(self, name: str) -> SkillInstallResult:
        """Re-fetch an installed skill, replacing it only if SKILL.md arrives."""
        if not self.is_valid_name(name):
            return SkillInstallResult(name=name or "", status=SkillInstallStatus.INVALID)

        skill_dir = self.skills_path / name
        if not skill_dir.is_dir():
            return SkillInstallResult(name=name, status=SkillInstallStatus.NOT_INSTALLED)

        staging_dir = self.skills_path / f".{name}.update"
        if staging_dir.exists():
            shutil.rmtree(staging_dir)
        staging_dir.mkdir()

        files = await self._fetch_into(name, staging_dir)
        if self.MARKER_FILE not in files:
            shutil.rmtree(staging_dir, ignore_errors=True)
            return SkillInstallResult(
                name=name, status=SkillInstallStatus.NOT_FOUND, path=skill_dir
            )

        shutil.rmtree(skill_dir)
        staging_dir.rename(skill_dir)
        logger.info(f"Updated skill '{name}'")
        return SkillInstallResult(
            name=name, status=SkillInstallStatus.UPDATED, path=skill_dir, files=files
        )

    async def _fetch_into(self, name: str, target: Path) -> list[str]:
        """Download each known skill file into target. Returns the files written."""
        written = []
        async with http.create_client(self.timeout, self._transport) as client:
            for filename in self.SKILL_FILES:
                url = self.file_url(name, filename)
                try:
                    content = await self._fetch_file(client, url)
                except httpx.HTTPError as e:
                    logger.warning(f"Skipping {filename} for '{name}': {e}")
                    continue

                if content is None:
                    logger.debug(f"{filename} not present for '{name}'")
                    continue

                (target / filename).write_bytes(content)
                written.append(filename)
        return written

    @staticmethod
    async def _fetch_file(client: httpx.AsyncClient, url: str) -> bytes | None:
        """GET a file. Returns None on 404, raises on any other non-2xx."""
        response = await client.get(url)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.content

    def remove(self, name: str) -> bool:
        """Delete an installed skill. Returns False if it was not installed."""
        if not self.is_valid_name(name):
            return False

        skill_dir = self.skills_path / name
        if not skill_dir.is_dir():
            return False

        shutil.rmtree(skill_dir)
        logger.info(f"Removed skill '{name}'")
        return True

    def list_installed(self) -> list[str]:
        """Names of installed skills (directories that contain SKILL.md)."""
        return [
            skill.name for skill in self.inspect_installed() if skill.has_skill_md
        ]

    def inspect_installed(self) -> list[InstalledSkill]:
        """Report every skill directory, including broken ones."""
        if not self.skills_path.is_dir():
            return []

        results = []
        for skill_dir in sorted(self.skills_path.iterdir(), key=lambda p: p.name):
            if not skill_dir.is_dir() or skill_dir.name.startswith("."):
                continue

            config_file = skill_dir / "config.json"
            if not config_file.exists():
                config_state = "missing"
            else:
                try:
                    json.loads(config_file.read_text())
                    config_state = "ok"
                except (ValueError, OSError):
                    config_state = "invalid"

            results.append(
                InstalledSkill(
                    name=skill_dir.name,
                    has_skill_md=(skill_dir / self.MARKER_FILE).exists(),
                    config_state=config_state,
                )
            )
        return results

    async def list_available(self) -> list[str]:
        """List skill names published in the remote repository.

        Raises:
            SkillSourceError: If the listing cannot be fetched or parsed
        """
        url = self.LISTING_URL.format(repo=self.repo)
        try:
            async with http.create_client(self.timeout, self._transport) as client:
                response = await client.get(url, params={"ref": self.branch})
                response.raise_for_status()
                entries = response.json()
        except httpx.HTTPError as e:
            raise SkillSourceError(f"Failed to fetch skills: {e}") from e
        except ValueError as e:
            raise SkillSourceError("Failed to fetch skills list") from e

        if not isinstance(entries, list):
            raise SkillSourceError("Failed to fetch skills list")

        return sorted(
            entry["name"]
            for entry in entries
            if isinstance(entry, dict) and entry.get("type") == "dir" and "name" in entry
        )

"""Skill installation."""

from skunk.skills.installer import (
    InstalledSkill,
    SkillInstaller,
    SkillInstallResult,
    SkillInstallStatus,
)

__all__ = [
    "InstalledSkill",
    "SkillInstaller",
    "SkillInstallResult",
    "SkillInstallStatus",
]

"""Configuration management for skunk."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


DEFAULT_WORKSPACE_NAME = ".skunk"
CONFIG_FILENAME = "config.yaml"


def default_workspace() -> Path:
    """Return ~/.skunk, resolved against the current HOME."""
    return Path.home() / DEFAULT_WORKSPACE_NAME


def default_skills_path() -> Path:
    """Return the directory OpenClaw loads skills from."""
    return Path.home() / ".openclaw" / "skills"


class Config(BaseModel):
    """
    Main configuration for skunk.

    Configuration is loaded from ~/.skunk/config.yaml. The file is optional:
    every field has a default, so a fresh machine works without one.

    Relative paths are resolved against the workspace directory. The skills
    path is absolute by default because it belongs to OpenClaw, not to us.
    """

    workspace: Path
    skills_path: Path = Field(default_factory=default_skills_path)
    plugins_path: Path = Field(default=Path("plugins"))
    logging_path: Path = Field(default=Path("logs"))
    skills_repo: str = "skunkceo/openclaw-skills"
    skills_branch: str = "main"
    api_base: str = "https://skunkglobal.com/api"
    request_timeout: float = Field(default=30.0, gt=0)
    licenses: dict[str, str] = Field(default_factory=dict)

    @field_validator("api_base")
    @classmethod
    def api_base_must_be_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_base must be a valid URL")
        return v.rstrip("/")

    @field_validator("skills_repo")
    @classmethod
    def skills_repo_must_be_owner_name(cls, v: str) -> str:
        if v.count("/") != 1 or not all(v.split("/")):
            raise ValueError("skills_repo must look like 'owner/name'")
        return v

    @model_validator(mode="after")
    def resolve_paths(self) -> "Config":
        """Resolve relative paths to absolute using workspace."""
        for field_name in ("skills_path", "plugins_path", "logging_path"):
            path = getattr(self, field_name).expanduser()
            if not path.is_absolute():
                path = self.workspace / path
            setattr(self, field_name, path)
        return self

    @property
    def config_file(self) -> Path:
        return self.workspace / CONFIG_FILENAME

    @classmethod
    def load(cls, workspace_dir: Path | None = None) -> "Config":
        """
        Load configuration from ~/.skunk/config.yaml.

        Args:
            workspace_dir: Path to workspace directory. Defaults to ~/.skunk/

        Returns:
            Config instance with all settings loaded and validated

        Raises:
            ValidationError: If configuration is invalid
            yaml.YAMLError: If the config file is not valid YAML
            ValueError: If the config file is not a mapping
        """
        workspace_dir = workspace_dir or default_workspace()
        config_data: dict[str, Any] = {"workspace": workspace_dir}

        config_file = workspace_dir / CONFIG_FILENAME
        if config_file.exists():
            with open(config_file) as f:
                user_data = yaml.safe_load(f) or {}
            if not isinstance(user_data, dict):
                raise ValueError(f"{config_file} must contain a mapping of settings")
            config_data = cls._deep_merge(config_data, user_data)

        return cls.model_validate(config_data)

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """
        Deep merge override dict into base dict.

        Args:
            base: Base dictionary
            override: Override dictionary (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _set_nested(self, obj: dict, key: str, value: Any) -> None:
        """Set a nested value in a dict using dot notation."""
        keys = key.split(".")
        for k in keys[:-1]:
            if k not in obj or not isinstance(obj[k], dict):
                obj[k] = {}
            obj = obj[k]
        obj[keys[-1]] = value

    def _update_in_memory(self, key: str, value: Any) -> None:
        """Update in-memory config, supporting nested attributes and dict keys."""
        keys = key.split(".")
        obj: Any = self
        for k in keys[:-1]:
            if isinstance(obj, dict):
                obj = obj.setdefault(k, {})
            else:
                obj = getattr(obj, k)

        final_key = keys[-1]
        if isinstance(obj, dict):
            obj[final_key] = value
        else:
            setattr(obj, final_key, value)

    def set_user(self, key: str, value: Any) -> None:
        """
        Update a config value in config.yaml.

        Args:
            key: Config key (supports dot notation, e.g., "licenses.skunkcrm")
            value: New value
        """
        if self.config_file.exists():
            with open(self.config_file) as f:
                data = yaml.safe_load(f) or {}
        else:
            data = {}

        self._set_nested(data, key, value)

        self.workspace.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

        self._update_in_memory(key, value)

"""
Configuration for the affinity suggestion client.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_API_KEY_ENV = "AFFINITY_API_KEY"


class ConfigError(ValueError):
    """Configuration cannot produce a usable client."""


@dataclass
class SuggestionConfig:
    """Remote affinity service connection settings."""

    environment: str = "production"
    urls: dict[str, str] = field(default_factory=dict)  # environment -> base URL
    api_key: str | None = None
    api_key_env: str | None = DEFAULT_API_KEY_ENV
    timeout_seconds: float = 10.0

    @property
    def base_url(self) -> str:
        """Base URL for the selected environment."""
        url = self.urls.get(self.environment)
        if not url:
            raise ConfigError(f"No URL configured for environment '{self.environment}'")
        # httpx joins relative paths onto the base, so it must end with a slash
        return url.rstrip("/") + "/"

    def get_api_key(self) -> str | None:
        """Get API key from config or environment."""
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.environ.get(self.api_key_env)
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SuggestionConfig":
        """Create config from a dictionary (e.g., from YAML)."""
        config = cls()

        if "environment" in data:
            config.environment = data["environment"]
        if "urls" in data:
            config.urls = dict(data["urls"] or {})
        if "api_key" in data:
            config.api_key = data["api_key"]
        if "api_key_env" in data:
            config.api_key_env = data["api_key_env"]
        if "timeout_seconds" in data:
            config.timeout_seconds = float(data["timeout_seconds"])

        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "SuggestionConfig":
        """Load config from the `suggestion:` section of a YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        section = data.get("suggestion", {}) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"'suggestion' section of {path} must be a mapping")

        return cls.from_dict(section)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary. The API key is never included."""
        return {
            "environment": self.environment,
            "urls": dict(self.urls),
            "api_key_env": self.api_key_env,
            "timeout_seconds": self.timeout_seconds,
        }

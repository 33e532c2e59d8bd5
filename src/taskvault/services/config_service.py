"""Configuration service for taskvault.

Loads and saves ``config.json`` in the user config directory and exposes
dotted-key access (``search.min_score``) for the CLI.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from taskvault.models.config_models import AppConfig


class ConfigService:
    """Single source of truth for the application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir("taskvault"))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir("taskvault"))

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from disk, writing defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            self._config = self.create_default_config()
            self.save_config()
        except (OSError, ValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def create_default_config(self) -> AppConfig:
        config = AppConfig()
        config.store.db_path = str(self.data_dir / "vault.db")
        return config

    def save_config(self) -> None:
        """Write the current configuration to disk (owner read/write only)."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self) -> AppConfig:
        """Delete the stored configuration and recreate the defaults."""
        self._config = None
        if self.config_path.exists():
            self.config_path.unlink()
        return self.load_config()

    def get_value(self, key: str) -> Any:
        """Return the value at a dotted *key*, e.g. ``search.min_score``.

        Raises:
            KeyError: If the key does not exist
        """
        node: Any = self.config
        for part in key.split("."):
            if not isinstance(node, BaseModel) or part not in type(node).model_fields:
                raise KeyError(key)
            node = getattr(node, part)
        return node

    def set_value(self, key: str, value: Any) -> None:
        """Set the value at a dotted *key*, validating and saving the result.

        Raises:
            KeyError: If the key does not exist
            ValueError: If the value is invalid for the key
        """
        data = self.config.model_dump()
        parts = key.split(".")
        node = data
        for part in parts[:-1]:
            if not isinstance(node.get(part), dict):
                raise KeyError(key)
            node = node[part]
        if parts[-1] not in node:
            raise KeyError(key)
        node[parts[-1]] = value

        try:
            self._config = AppConfig.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid value for {key}: {e}") from e
        self.save_config()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service

"""Configuration service for bujo.

Loads and saves ``config.json`` in the user config directory and resolves
the settings the rest of the CLI needs (owner scope, database path).
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import ValidationError as PydanticValidationError

from bujo_cli.exceptions import ValidationError
from bujo_cli.models.config_models import AppConfig
from bujo_cli.utils.logger import get_logger

_APP_NAME = "bujo_cli"


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self, config_dir: Path | None = None, data_dir: Path | None = None):
        """Initialize the config service.

        Args:
            config_dir: Override for the config directory (tests)
            data_dir: Override for the data directory (tests)
        """
        self.config_dir = Path(config_dir or user_config_dir(_APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(data_dir or user_data_dir(_APP_NAME))

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
        """Load configuration from storage, creating defaults on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = AppConfig()
            self.save_config()
        except (OSError, PydanticValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self):
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()

    def get_value(self, key: str) -> Any:
        """Read a dotted config key.

        Raises:
            ValidationError: If the key is unknown
        """
        try:
            return self.config.get_value(key)
        except KeyError:
            raise ValidationError(f"Unknown config key: {key}") from None

    def set_value(self, key: str, value: Any) -> AppConfig:
        """Set a dotted config key and persist the result.

        Raises:
            ValidationError: If the key is unknown or the value is invalid
        """
        try:
            new_config = self.config.with_value(key, value)
        except KeyError:
            raise ValidationError(f"Unknown config key: {key}") from None
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid value for {key}: {value!r}") from e

        self._config = new_config
        self.save_config()
        get_logger("config").info("config updated: %s", key)
        return new_config

    @property
    def db_path(self) -> str:
        """Database path from config, or the default under the data dir."""
        return self.config.storage.db_path or str(self.data_dir / "bujo.db")

    @property
    def owner_id(self) -> str:
        return self.config.owner_id


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service

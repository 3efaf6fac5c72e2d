"""Configuration service for Pomo CLI.

Loads and saves ``config.json`` in the platform config directory. The file only
holds user defaults (session lengths, notification switches); the timer state
itself lives in the data directory and is never configurable.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from platformdirs import user_config_dir
from pydantic import ValidationError

from pomo_cli.models.config_models import AppConfig
from pomo_cli.models.exceptions import PomoError
from pomo_cli.utils.exit_codes import ERROR_INVALID_ARGS
from pomo_cli.utils.logger import get_logger


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        """Initialize the config service."""
        self.config_dir = Path(user_config_dir("pomo-cli"))
        self.config_path = self.config_dir / "config.json"
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except ValidationError as e:
            get_logger().warning(
                "invalid config %s, using defaults: %s", self.config_path, e
            )
            self._config = AppConfig()
        except OSError as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def set_value(self, key: str, value: str) -> AppConfig:
        """Set one key from its string form, validated by the model."""
        if key not in AppConfig.model_fields:
            known = ", ".join(AppConfig.model_fields)
            raise PomoError(
                f"Unknown configuration key '{key}' (expected one of: {known})",
                exit_code=ERROR_INVALID_ARGS,
            )

        data = self.config.model_dump()
        data[key] = value
        try:
            self._config = AppConfig.model_validate(data)
        except ValidationError as e:
            message = e.errors()[0]["msg"]
            raise PomoError(
                f"Invalid value '{value}' for '{key}': {message}",
                exit_code=ERROR_INVALID_ARGS,
            ) from e

        self.save_config()
        return self._config

    def reset_config(self) -> AppConfig:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()
        return self._config


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Return the process-wide ConfigService."""
    return ConfigService()

"""Configuration service facade for simplified configuration access.

Implements the Facade pattern so callers read ``config_service.api_key``
instead of ``config.detection.api_key``.
"""
from __future__ import annotations

from typing import Any

from config.config import AppConfig, ConfigLoader


class ConfigurationService:
    """Facade for application configuration management.

    All properties delegate to the underlying AppConfig instance.

    Example:
        config_service = ConfigurationService(config)
        top_k = config_service.top_k  # Instead of config.detection.top_k
    """

    def __init__(self, config: AppConfig):
        self._config = config

    # Detection API
    @property
    def api_base_url(self) -> str:
        return self._config.detection.base_url

    @property
    def api_key(self) -> str | None:
        return self._config.detection.api_key

    @property
    def top_k(self) -> int:
        return self._config.detection.top_k

    # Backend
    @property
    def backend_configured(self) -> bool:
        return self._config.backend.is_configured

    @property
    def species_table(self) -> str:
        return self._config.backend.species_table

    # Reference data
    @property
    def species_info_path(self) -> str:
        return self._config.species_info_path

    @property
    def common_names(self) -> dict[str, str]:
        return self._config.common_names

    # Stats
    @property
    def export_dir(self) -> str:
        return self._config.stats.export_dir

    # General
    @property
    def debug(self) -> bool:
        return self._config.debug

    @property
    def log_level(self) -> str:
        return self._config.log_level

    @property
    def log_dir(self) -> str:
        return self._config.log_dir

    @property
    def raw_config(self) -> AppConfig:
        """Underlying AppConfig for direct access."""
        return self._config

    def to_dict(self) -> dict[str, Any]:
        """Loggable summary; secrets are reduced to whether they are set."""
        return {
            "detection": {
                "base_url": self.api_base_url,
                "api_key_set": bool(self.api_key),
                "top_k": self.top_k,
            },
            "backend": {
                "configured": self.backend_configured,
                "species_table": self.species_table,
            },
            "species_info_path": self.species_info_path,
            "common_names": len(self.common_names),
            "export_dir": self.export_dir,
            "debug": self.debug,
            "log_level": self.log_level,
        }


class ConfigurationServiceFactory:
    """Static factory methods for common creation patterns."""

    @staticmethod
    def create_from_args(args: list[str]) -> tuple[ConfigurationService, list[str]]:
        config, unknown_args = ConfigLoader().load(args)
        return ConfigurationService(config), unknown_args

    @staticmethod
    def create_from_config(config: AppConfig) -> ConfigurationService:
        return ConfigurationService(config)

    @staticmethod
    def create_default() -> ConfigurationService:
        config, _ = ConfigLoader().load([])
        return ConfigurationService(config)

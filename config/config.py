"""Hierarchical configuration loading and validation.

Implements a configuration system with the following precedence:
1. Default values (lowest priority)
2. JSON configuration files
3. Environment variables
4. Command-line arguments (highest priority)

Configuration is deep-merged across all sources, allowing partial overrides
at any level of the configuration hierarchy.
"""
from __future__ import annotations

import argparse
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from core.exceptions import ConfigurationError

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class DetectionApiConfig:
    """Fish detection service configuration.

    Attributes:
        base_url: Service root, without trailing slash
        api_key: Value for the ``X-API-Key`` header
        top_k: Number of candidates requested and kept
        timeout_s: HTTP timeout in seconds
        max_retries: Attempts for transport-level failures
    """
    base_url: str = "https://fishapi.nickot.is"
    api_key: Optional[str] = None
    top_k: int = 3
    timeout_s: float = 30.0
    max_retries: int = 2

    def __post_init__(self):
        if int(self.top_k) < 1:
            raise ConfigurationError(f"Invalid top_k: {self.top_k}")
        if float(self.timeout_s) <= 0:
            raise ConfigurationError(f"Invalid timeout_s: {self.timeout_s}")
        if int(self.max_retries) < 1:
            raise ConfigurationError(f"Invalid max_retries: {self.max_retries}")


@dataclass(frozen=True)
class BackendConfig:
    """Backend (PostgREST) settings used by the species sync scripts.

    Attributes:
        url: Project URL
        service_key: Service role key sent as ``apikey`` and bearer token
        species_table: Table holding the species catalog
        insert_chunk_size: Rows per insert request
    """
    url: str = ""
    service_key: str = ""
    species_table: str = "fish_species"
    insert_chunk_size: int = 200

    def __post_init__(self):
        if int(self.insert_chunk_size) < 1:
            raise ConfigurationError(f"Invalid insert_chunk_size: {self.insert_chunk_size}")

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.service_key)


@dataclass(frozen=True)
class StatsConfig:
    """Statistics export settings.

    Attributes:
        export_dir: Directory for exported workbooks
    """
    export_dir: str = "reports/out"


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration.

    Attributes:
        detection: Fish detection API settings
        backend: Backend store settings
        stats: Statistics export settings
        species_info_path: Species reference dataset file
        common_names: Extra English -> display name aliases (from common_names.json)
        debug: Debug mode flag
        log_level: Logging verbosity level
        log_dir: Directory for rotating log files, empty for stderr only
    """
    detection: DetectionApiConfig
    backend: BackendConfig
    stats: StatsConfig
    species_info_path: str = str(DEFAULT_CONFIG_DIR / "species_info.json")
    common_names: Dict[str, str] = field(default_factory=dict)
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = ""

    def __post_init__(self):
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level: {self.log_level}")


class ConfigLoader:
    """Configuration loader with validation and hierarchy.

    Implements the configuration loading strategy with proper precedence
    and deep merging of nested configuration dictionaries.
    """

    def __init__(self, config_dir: Path = DEFAULT_CONFIG_DIR):
        self.config_dir = Path(config_dir)

    def load(self, argv: List[str]) -> Tuple[AppConfig, List[str]]:
        """Load configuration with proper hierarchy: defaults → files → env → CLI.

        Args:
            argv: Command-line arguments to parse

        Returns:
            Tuple of (AppConfig instance, unknown CLI arguments)
        """
        config_dict = self._get_defaults()
        self._deep_update(config_dict, self._load_json_configs())
        self._deep_update(config_dict, self._load_env_overrides())
        cli_overrides, unknown_args = self._parse_cli_args(argv)
        self._deep_update(config_dict, cli_overrides)
        return self._build_config(config_dict), unknown_args

    def _get_defaults(self) -> Dict[str, Any]:
        return {
            "detection": {
                "base_url": "https://fishapi.nickot.is",
                "api_key": None,
                "top_k": 3,
                "timeout_s": 30.0,
                "max_retries": 2,
            },
            "backend": {
                "url": "",
                "service_key": "",
                "species_table": "fish_species",
                "insert_chunk_size": 200,
            },
            "stats": {
                "export_dir": "reports/out",
            },
            "species_info_path": str(self.config_dir / "species_info.json"),
            "debug": False,
            "log_level": "INFO",
            "log_dir": "",
        }

    def _load_json_configs(self) -> Dict[str, Any]:
        """Load optional JSON files from the config directory.

        ``settings.json`` may hold any section of the configuration;
        ``common_names.json`` holds resolver aliases. Missing files are skipped.
        """
        json_configs: Dict[str, Any] = {}

        settings = self._read_json(self.config_dir / "settings.json")
        if isinstance(settings, dict):
            json_configs.update(settings)

        common_names = self._read_json(self.config_dir / "common_names.json")
        json_configs["common_names"] = common_names if isinstance(common_names, dict) else {}
        return json_configs

    @staticmethod
    def _read_json(file_path: Path) -> Any:
        if not file_path.exists():
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load {file_path.name}: {e}")
            return None

    def _load_env_overrides(self) -> Dict[str, Any]:
        """Load configuration overrides from environment variables.

        Supported environment variables (first set one wins per setting):
        - FISH_API_URL / NEXT_PUBLIC_FISH_API_URL
        - FISH_API_KEY / NEXT_PUBLIC_FISH_API_KEY
        - FISH_API_TOPK
        - SUPABASE_URL / NEXT_PUBLIC_SUPABASE_URL
        - SUPABASE_SERVICE_ROLE_KEY / SUPABASE_SERVICE_KEY / NEXT_PUBLIC_SUPABASE_ANON_KEY
        - SPECIES_TABLE
        - SPECIES_INFO_PATH
        - DEBUG, LOG_LEVEL, LOG_DIR
        """
        overrides: Dict[str, Any] = {}

        api_url = self._env_first("FISH_API_URL", "NEXT_PUBLIC_FISH_API_URL")
        if api_url:
            overrides.setdefault("detection", {})["base_url"] = api_url.rstrip("/")
        api_key = self._env_first("FISH_API_KEY", "NEXT_PUBLIC_FISH_API_KEY")
        if api_key:
            overrides.setdefault("detection", {})["api_key"] = api_key
        top_k = os.getenv("FISH_API_TOPK")
        if top_k:
            overrides.setdefault("detection", {})["top_k"] = self._env_int("FISH_API_TOPK", top_k)

        backend_url = self._env_first("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL")
        if backend_url:
            overrides.setdefault("backend", {})["url"] = backend_url.rstrip("/")
        service_key = self._env_first(
            "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_SERVICE_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"
        )
        if service_key:
            overrides.setdefault("backend", {})["service_key"] = service_key
        table = os.getenv("SPECIES_TABLE")
        if table:
            overrides.setdefault("backend", {})["species_table"] = table

        species_info = os.getenv("SPECIES_INFO_PATH")
        if species_info:
            overrides["species_info_path"] = species_info

        if self._env_bool("DEBUG"):
            overrides["debug"] = True
        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            overrides["log_level"] = log_level.upper()
        log_dir = os.getenv("LOG_DIR")
        if log_dir:
            overrides["log_dir"] = log_dir

        return overrides

    def _parse_cli_args(self, argv: List[str]) -> Tuple[Dict[str, Any], List[str]]:
        """Parse the shared CLI options; script-specific options are returned as unknown."""
        parser = argparse.ArgumentParser(description="Fishdex", add_help=False)
        parser.add_argument("--topk", type=int, help="Number of detection candidates")
        parser.add_argument("--table", help="Backend species table")
        parser.add_argument("--debug", action="store_true", help="Enable debug mode")
        parser.add_argument("--log-level", choices=list(LOG_LEVELS), help="Set logging level")

        known, unknown = parser.parse_known_args(argv)

        overrides: Dict[str, Any] = {}
        if known.topk is not None:
            overrides.setdefault("detection", {})["top_k"] = known.topk
        if known.table:
            overrides.setdefault("backend", {})["species_table"] = known.table
        if known.debug:
            overrides["debug"] = True
            overrides.setdefault("log_level", "DEBUG")
        if known.log_level:
            overrides["log_level"] = known.log_level
        return overrides, unknown

    def _build_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Build and validate the final configuration object.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        try:
            detection = DetectionApiConfig(**config_dict.get("detection", {}))
            backend = BackendConfig(**config_dict.get("backend", {}))
            stats = StatsConfig(**config_dict.get("stats", {}))
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e

        return AppConfig(
            detection=detection,
            backend=backend,
            stats=stats,
            species_info_path=str(config_dict.get("species_info_path")),
            common_names=dict(config_dict.get("common_names") or {}),
            debug=bool(config_dict.get("debug", False)),
            log_level=str(config_dict.get("log_level", "INFO")).upper(),
            log_dir=str(config_dict.get("log_dir") or ""),
        )

    @staticmethod
    def _env_first(*names: str) -> Optional[str]:
        for name in names:
            value = os.getenv(name)
            if value:
                return value
        return None

    @staticmethod
    def _env_int(name: str, value: str) -> int:
        try:
            return int(value)
        except ValueError as e:
            raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e

    @staticmethod
    def _env_bool(name: str, default: bool = False) -> bool:
        """True for "1", "true", "yes", "y", "on"."""
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in {"1", "true", "yes", "y", "on"}

    @staticmethod
    def _deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Recursively update mapping 'target' with 'updates' without clobbering nested dicts."""
        for key, new_val in updates.items():
            if isinstance(new_val, dict) and isinstance(target.get(key), dict):
                ConfigLoader._deep_update(target[key], new_val)  # type: ignore[index]
            else:
                target[key] = new_val


def parse_app_args(argv: List[str]) -> Tuple[AppConfig, List[str]]:
    """Convenience wrapper: ``ConfigLoader().load(argv)``."""
    return ConfigLoader().load(argv)


__all__ = [
    "AppConfig",
    "DetectionApiConfig",
    "BackendConfig",
    "StatsConfig",
    "ConfigLoader",
    "parse_app_args",
]

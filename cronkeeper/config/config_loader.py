"""
Configuration Loader

Handles loading, parsing, and merging configuration from YAML files and
environment variables.

Author: Cronkeeper Project
License: MIT
"""

import logging
import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import load_dotenv

from .schema import Config
from ..utils.logger import setup_logging

DEFAULT_CONFIG_PATH = "config/cronkeeper.yaml"


def _env_bool(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


class ConfigLoader:
    """
    Configuration loader and manager.

    Loads configuration from YAML file, merges with environment variables
    and validates the structure.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_path: Path to the configuration file. If None, uses
                CRONKEEPER_CONFIG or the default location.
        """
        # Load environment variables from .env if present
        load_dotenv()

        self.config_path = config_path or os.getenv(
            "CRONKEEPER_CONFIG",
            DEFAULT_CONFIG_PATH
        )
        self._config: Optional[Config] = None

    def load(self) -> Config:
        """
        Load and validate configuration.

        Returns:
            Validated Config object

        Raises:
            ValueError: If YAML parsing or configuration validation fails
        """
        config_data = self._load_yaml()
        config_data = self._merge_env_vars(config_data)

        self._config = Config(**config_data)
        return self._config

    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load YAML configuration file.

        Returns:
            Dictionary with configuration data
        """
        config_file = Path(self.config_path)

        # If config doesn't exist, use defaults
        if not config_file.exists():
            return self._create_default_config()

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML config: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {config_file}")
        return data

    def _create_default_config(self) -> Dict[str, Any]:
        """
        Create default configuration structure.

        Returns:
            Default configuration dictionary
        """
        return {
            "logging": {
                "enabled": True,
                "level": "INFO",
                "to_file": True,
                "log_dir": "logs",
                "json_format": False
            },
            "scheduling": {
                "timezone": "UTC",
                "misfire_grace_time": 60
            }
        }

    def _merge_env_vars(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge environment variables into configuration.

        Environment variables override config file values.
        Naming convention: SECTION_KEY (e.g., LOG_LEVEL, SCHEDULER_TIMEZONE)

        Args:
            config_data: Configuration dictionary from file

        Returns:
            Merged configuration dictionary
        """
        # Logging settings
        if os.getenv("LOG_ENABLED"):
            config_data.setdefault("logging", {})["enabled"] = _env_bool("LOG_ENABLED")
        if os.getenv("LOG_LEVEL"):
            config_data.setdefault("logging", {})["level"] = os.getenv("LOG_LEVEL")
        if os.getenv("LOG_DIR"):
            config_data.setdefault("logging", {})["log_dir"] = os.getenv("LOG_DIR")
        if os.getenv("LOG_TO_FILE"):
            config_data.setdefault("logging", {})["to_file"] = _env_bool("LOG_TO_FILE")
        if os.getenv("LOG_JSON"):
            config_data.setdefault("logging", {})["json_format"] = _env_bool("LOG_JSON")

        # Scheduler settings
        if os.getenv("SCHEDULER_TIMEZONE"):
            config_data.setdefault("scheduling", {})["timezone"] = os.getenv("SCHEDULER_TIMEZONE")
        if os.getenv("SCHEDULER_MISFIRE_GRACE_TIME"):
            config_data.setdefault("scheduling", {})["misfire_grace_time"] = int(
                os.getenv("SCHEDULER_MISFIRE_GRACE_TIME")
            )

        return config_data

    def save(self, config: Config, path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Config object to save
            path: Path to save to (uses default if None)
        """
        save_path = Path(path or self.config_path)
        save_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = config.model_dump(mode="json")

        with open(save_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)

    def reload(self) -> Config:
        """
        Reload configuration from file.

        Returns:
            Reloaded Config object
        """
        return self.load()

    @property
    def config(self) -> Optional[Config]:
        """Get the current configuration object."""
        return self._config


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Convenience function to load configuration.

    Args:
        config_path: Optional path to config file

    Returns:
        Loaded and validated Config object
    """
    loader = ConfigLoader(config_path)
    return loader.load()


def setup_logging_from_config(config: Config) -> logging.Logger:
    """
    Apply the logging section of a configuration.

    Args:
        config: Loaded configuration

    Returns:
        Configured cronkeeper logger
    """
    log_cfg = config.logging
    return setup_logging(
        log_level=log_cfg.level.value,
        log_enabled=log_cfg.enabled,
        log_to_file=log_cfg.to_file,
        log_dir=log_cfg.log_dir,
        log_file_name=log_cfg.file_name,
        log_rotation_size=log_cfg.rotation_size,
        log_retention_count=log_cfg.retention_count,
        json_format=log_cfg.json_format
    )

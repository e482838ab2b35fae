"""
Cronkeeper Configuration Module

This module handles configuration loading, validation, and management for the
scheduler. It supports YAML-based configuration with environment variable
overrides.

Author: Cronkeeper Project
License: MIT
"""

from .schema import Config, LoggingConfig, SchedulingConfig, LogLevel
from .config_loader import ConfigLoader, load_config, setup_logging_from_config

__all__ = [
    'Config',
    'LoggingConfig',
    'SchedulingConfig',
    'LogLevel',
    'ConfigLoader',
    'load_config',
    'setup_logging_from_config',
]

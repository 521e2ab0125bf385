"""
================================================================================
UI Tools Common Utilities
================================================================================

This module provides shared configuration management and logging setup for
the robust UI helper layer.

Exports:
    - GlobalConfig: Singleton configuration manager
    - get_config: Convenience function to get configuration values
    - init_logger: Function to initialize loguru logger with standard settings
    - ensure_directory: Create a directory if it does not exist

Usage:
    from ui_tools.common import get_config, init_logger

    init_logger()
    timeout = float(get_config("ui.wait_timeout", 30))

================================================================================
"""

import os
import sys
from typing import Any, Dict, Optional

import yaml
from loguru import logger

# ============================================================
# Configuration Management
# ============================================================

# Environment variable -> dot-notation config key
ENV_MAPPING: Dict[str, str] = {
    "UI_BASE_URL": "ui.base_url",
    "UI_WAIT_TIMEOUT": "ui.wait_timeout",
    "UI_SETTLE_TIMEOUT": "ui.settle_timeout",
    "UI_PRE_CLICK_DELAY": "ui.pre_click_delay",
    "UI_POST_CLICK_DELAY": "ui.post_click_delay",
    "UI_ACTIVITY_PROBE": "ui.activity_probe",
    "UI_SNAPSHOT_DIR": "diagnostics.snapshot_dir",
    "BROWSER_TYPE": "browser.type",
    "BROWSER_HEADLESS": "browser.headless",
    "LOG_LEVEL": "logging.level",
    "LOG_FILE": "logging.file",
}


class GlobalConfig:
    """
    Singleton class to manage global configuration for the UI helpers.

    Loads settings from a YAML configuration file and environment variables.
    Environment variables take precedence over file-based configuration.
    """
    _instance: Optional["GlobalConfig"] = None
    _config: Dict[str, Any] = {}
    _initialized: bool = False

    def __new__(cls) -> "GlobalConfig":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._config = {}
        self._load_configs()
        self._initialized = True

    def _load_configs(self) -> None:
        """
        Loads configurations from YAML files and environment variables.
        """
        config_paths = [
            os.getenv("UI_CONFIG_FILE", ""),
            "config/config.yaml",
            os.path.join(os.path.dirname(__file__), "..", "..", "config", "config.yaml"),
        ]

        for config_path in config_paths:
            if config_path and os.path.exists(config_path):
                try:
                    with open(config_path, "r", encoding="utf-8") as f:
                        file_config = yaml.safe_load(f) or {}
                        self._config.update(file_config)
                    logger.debug(f"Loaded configuration from {config_path}")
                    break
                except yaml.YAMLError as e:
                    logger.warning(f"Failed to load config from {config_path}: {e}")

        for env_key, config_key in ENV_MAPPING.items():
            if env_key in os.environ:
                self._set_nested(config_key, os.environ[env_key])

    def _set_nested(self, key: str, value: Any) -> None:
        """
        Sets a nested configuration value using dot notation.
        """
        keys = key.split(".")
        current = self._config
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]
        current[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Retrieves a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "ui.wait_timeout")
            default: Default value if key is not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Sets a configuration value.

        Args:
            key: Configuration key (e.g., "ui.settle_timeout")
            value: Value to set
        """
        self._set_nested(key, value)

    def get_all(self) -> Dict[str, Any]:
        """
        Returns the entire configuration dictionary.
        """
        return self._config.copy()

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next access reloads from disk and env."""
        global _global_config
        cls._instance = None
        cls._initialized = False
        _global_config = None


# Global config instance
_global_config: Optional[GlobalConfig] = None


def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get a configuration value.

    Args:
        key: Configuration key using dot notation
        default: Default value if not found

    Returns:
        Configuration value or default

    Example:
        settle_timeout = float(get_config("ui.settle_timeout", 45))
    """
    global _global_config
    if _global_config is None:
        _global_config = GlobalConfig()
    return _global_config.get(key, default)


def set_config(key: str, value: Any) -> None:
    """
    Convenience function to set a configuration value.

    Args:
        key: Configuration key using dot notation
        value: Value to set
    """
    global _global_config
    if _global_config is None:
        _global_config = GlobalConfig()
    _global_config.set(key, value)


def get_bool_config(key: str, default: bool = False) -> bool:
    """Read a flag that may come from YAML (bool) or the environment (str)."""
    value = get_config(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


# ============================================================
# Logging Setup
# ============================================================

_logger_initialized = False


def init_logger(
    level: str = None,
    format_string: str = None,
    log_file: str = None
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to.

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/ui.log")
    """
    global _logger_initialized

    if _logger_initialized:
        return

    # Remove default handler
    logger.remove()

    level = (level or get_config("logging.level", "INFO")).upper()
    format_string = format_string or get_config(
        "logging.format",
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level>"
    )

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    log_file = log_file or get_config("logging.file")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            ensure_directory(log_dir)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


# ============================================================
# Common Utilities
# ============================================================

def ensure_directory(path: str) -> str:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    os.makedirs(path, exist_ok=True)
    return path


# Export public API
__all__ = [
    "GlobalConfig",
    "get_config",
    "set_config",
    "get_bool_config",
    "init_logger",
    "ensure_directory",
]

"""
Package Configuration - Centralized Settings
============================================

All configurable parameters in one place.
Supports environment variable overrides.

Usage:
    from iso_vin.config import get_config
    config = get_config()
    print(config.localization.locale)

    # Applications opt into the package's logging setup explicitly
    from iso_vin.config import configure_logging
    configure_logging()

Environment Variables:
    VIN_LOCALE=de
    VIN_WMI_RESOURCE_DIR=/path/to/tables
    VIN_LOG_LEVEL=DEBUG
    VIN_LOG_FILE=/tmp/iso_vin.log
"""

import os
import json
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


def _get_env_bool(key: str, default: bool) -> bool:
    """Get bool from environment variable."""
    value = os.environ.get(key)
    if value is not None:
        return value.lower() in ('true', '1', 'yes', 'on')
    return default


def _get_env_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


def _get_env_level(key: str, default: str) -> str:
    """Get a logging level name from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    if not isinstance(logging.getLevelName(value.upper()), int):
        logger.warning(f"Invalid log level for {key}: {value}, using default {default}")
        return default
    return value.upper()


@dataclass
class LocalizationConfig:
    """WMI name lookup configuration."""

    locale: str = field(
        default_factory=lambda: _get_env_str('VIN_LOCALE', 'en')
    )

    # Directory holding <locale>.yaml tables; None uses the bundled tables
    resource_dir: Optional[str] = field(
        default_factory=lambda: os.environ.get('VIN_WMI_RESOURCE_DIR')
    )

    # Keys missing from a non-English table are looked up in the English one
    fallback_to_base_locale: bool = field(
        default_factory=lambda: _get_env_bool('VIN_WMI_BASE_FALLBACK', True)
    )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = field(
        default_factory=lambda: _get_env_level('VIN_LOG_LEVEL', 'WARNING')
    )
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    date_format: str = '%Y-%m-%d %H:%M:%S'

    # File logging (optional)
    log_file: Optional[str] = field(
        default_factory=lambda: os.environ.get('VIN_LOG_FILE')
    )


@dataclass
class VINSettings:
    """Complete package configuration."""

    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    def save(self, path: Path):
        """Save configuration to JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> 'VINSettings':
        """Load configuration from JSON file."""
        with open(path) as f:
            data = json.load(f)

        config = cls()

        for section in ('localization', 'logging'):
            target = getattr(config, section)
            for key, value in data.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Ignoring unknown setting {section}.{key}")

        return config


# Global configuration instance (singleton pattern)
_config: Optional[VINSettings] = None


def get_config() -> VINSettings:
    """
    Get the global configuration instance.

    Creates a new instance on first call, returns cached instance thereafter.
    """
    global _config
    if _config is None:
        _config = VINSettings()
    return _config


def reset_config():
    """Reset configuration to defaults (useful for testing)."""
    global _config
    _config = None


def configure_logging(config: Optional[LoggingConfig] = None):
    """
    Configure root logging based on settings.

    Library code never calls this; applications that want the package's
    format and handlers call it once at startup.
    """
    if config is None:
        config = get_config().logging

    level = getattr(logging, config.level.upper(), logging.WARNING)

    handlers = [logging.StreamHandler()]

    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=level,
        format=config.format,
        datefmt=config.date_format,
        handlers=handlers,
    )

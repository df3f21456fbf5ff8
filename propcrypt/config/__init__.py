"""
propcrypt Configuration Module.

Provides centralized configuration with typed access to all settings.
Loads configuration from environment variables with sensible defaults, and
builds the encryptor property source from an optional properties file
overlaid by environment variables.

Copyright (c) 2025 propcrypt
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from propcrypt.encryption.encryptable import DEFAULT_VALUE_PREFIX, DEFAULT_VALUE_SUFFIX
from propcrypt.encryption.resolver import DEFAULT_PREFIX, PROPERTY_SUFFIXES

from .properties import load_properties_file, merge_sources, properties_from_env

logger = logging.getLogger(__name__)


def _get_bool(key: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


def _get_optional(key: str) -> Optional[str]:
    """Get value from environment variable, treating empty as unset."""
    value = os.getenv(key, "")
    return value or None


@dataclass
class EncryptorSettings:
    """Where encryptor properties come from and how encrypted values look."""
    prefix: str = DEFAULT_PREFIX
    properties_file: Optional[str] = None
    value_prefix: str = DEFAULT_VALUE_PREFIX
    value_suffix: str = DEFAULT_VALUE_SUFFIX

    def property_keys(self):
        """All encryptor property keys under the configured prefix."""
        return [f"{self.prefix}.{suffix}" for suffix in PROPERTY_SUFFIXES]


@dataclass
class LoggingConfig:
    """Logging configuration."""
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    json_logs: bool = False


class PropCryptConfig:
    """
    Centralized configuration for propcrypt.

    Loads all settings from environment variables with sensible defaults.
    """

    _instance: Optional['PropCryptConfig'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._load_config()

    def _load_config(self):
        """Load configuration from environment variables."""
        self.encryptor = EncryptorSettings(
            prefix=os.getenv("PROPCRYPT_PREFIX", DEFAULT_PREFIX),
            properties_file=_get_optional("PROPCRYPT_PROPERTIES_FILE"),
            value_prefix=os.getenv("PROPCRYPT_VALUE_PREFIX", DEFAULT_VALUE_PREFIX),
            value_suffix=os.getenv("PROPCRYPT_VALUE_SUFFIX", DEFAULT_VALUE_SUFFIX),
        )

        self.logging = LoggingConfig(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "%(asctime)s - %(levelname)s - %(name)s - %(message)s"),
            json_logs=_get_bool("LOG_JSON", False),
        )

        self._properties = None

        logger.info(
            f"Configuration loaded: prefix={self.encryptor.prefix}, "
            f"properties_file={self.encryptor.properties_file}"
        )

    @property
    def properties(self) -> Dict[str, Optional[str]]:
        """
        Encryptor property source, built on first access.

        Raises:
            FileNotFoundError: If the configured properties file does not exist
        """
        if self._properties is None:
            self._properties = build_property_source(self.encryptor)
        return self._properties

    def reload(self):
        """Reload configuration from environment variables."""
        self._initialized = False
        self.__init__()

    @classmethod
    def reset(cls):
        """Reset singleton instance (for testing)."""
        cls._instance = None


def build_property_source(
    settings: EncryptorSettings,
    environ=None,
) -> Dict[str, Optional[str]]:
    """
    Build the encryptor property source.

    Values from the properties file are overridden by environment variables.

    Raises:
        FileNotFoundError: If a configured properties file does not exist
    """
    file_properties = {}
    if settings.properties_file:
        file_properties = load_properties_file(settings.properties_file)
    env_properties = properties_from_env(settings.property_keys(), environ)
    return merge_sources(file_properties, env_properties)


def get_config() -> PropCryptConfig:
    """Get the singleton configuration instance."""
    return PropCryptConfig()


__all__ = [
    "EncryptorSettings",
    "LoggingConfig",
    "PropCryptConfig",
    "build_property_source",
    "get_config",
]

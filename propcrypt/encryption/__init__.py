"""
propcrypt String Encryption.

Resolves encryptor configuration from a property source and builds the
matching string encryptor.

Features:
- Password-based (PBE) encryption with a pooled, jasypt-compatible encryptor
- Asymmetric (RSA private key) encryption
- ENC(...) property value decryption

Copyright (c) 2025 propcrypt
"""

from typing import Optional

from .asymmetric_encryptor import AsymmetricStringEncryptor
from .base import BaseStringEncryptor
from .errors import (
    ConfigError,
    EncryptionOperationNotPossibleError,
    EncryptorError,
    EncryptorInitializationError,
    InvalidPropertyError,
    MissingCredentialsError,
    MissingRequiredError,
)
from .models import AsymmetricConfig, KeyFormat, PasswordBasedConfig, ResolvedConfig
from .pbe_encryptor import PooledPBEStringEncryptor
from .resolver import DEFAULT_PREFIX, EncryptorConfigResolver, PropertySource, get_with_default, resolve


def build_encryptor(config: ResolvedConfig) -> BaseStringEncryptor:
    """Build the string encryptor for a resolved configuration."""
    if isinstance(config, PasswordBasedConfig):
        return PooledPBEStringEncryptor(config)
    if isinstance(config, AsymmetricConfig):
        return AsymmetricStringEncryptor(config)
    raise TypeError(f"Unknown encryptor configuration: {type(config).__name__}")


def get_encryptor(
    properties: Optional[PropertySource] = None,
    prefix: Optional[str] = None,
) -> BaseStringEncryptor:
    """
    Get the appropriate encryptor based on configuration.

    Falls back to the global configuration for whichever of properties and
    prefix is not given.
    """
    if properties is None or prefix is None:
        from propcrypt.config import get_config
        config = get_config()
        if properties is None:
            properties = config.properties
        if prefix is None:
            prefix = config.encryptor.prefix
    return build_encryptor(resolve(properties, prefix))


__all__ = [
    "AsymmetricConfig",
    "AsymmetricStringEncryptor",
    "BaseStringEncryptor",
    "ConfigError",
    "DEFAULT_PREFIX",
    "EncryptionOperationNotPossibleError",
    "EncryptorConfigResolver",
    "EncryptorError",
    "EncryptorInitializationError",
    "InvalidPropertyError",
    "KeyFormat",
    "MissingCredentialsError",
    "MissingRequiredError",
    "PasswordBasedConfig",
    "PooledPBEStringEncryptor",
    "ResolvedConfig",
    "build_encryptor",
    "get_encryptor",
    "get_with_default",
    "resolve",
]

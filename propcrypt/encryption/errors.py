"""
Encryption Configuration Errors.

Copyright (c) 2025 propcrypt
"""

from typing import Optional


class ConfigError(Exception):
    """Base class for encryptor configuration errors."""


class MissingCredentialsError(ConfigError):
    """Neither password-based nor asymmetric credentials were provided."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.password_key = f"{prefix}.password"
        self.private_key_keys = (
            f"{prefix}.private-key-string",
            f"{prefix}.private-key-location",
        )
        super().__init__(
            f"either '{self.password_key}' or one of "
            f"['{self.private_key_keys[0]}', '{self.private_key_keys[1]}'] "
            f"must be provided for Password-based or Asymmetric encryption"
        )


class MissingRequiredError(ConfigError):
    """A required property for the selected encryption mode is missing."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Required Encryption configuration property missing: {key}")


class InvalidPropertyError(ConfigError):
    """A property value cannot be bound to its expected type."""

    def __init__(self, key: str, value: Optional[str], expected: str):
        self.key = key
        self.value = value
        super().__init__(
            f"Invalid value for encryption configuration property {key}: "
            f"{value!r} (expected {expected})"
        )


class EncryptorError(Exception):
    """Base class for errors raised by string encryptors."""


class EncryptorInitializationError(EncryptorError):
    """The encryptor could not be built from its configuration."""


class EncryptionOperationNotPossibleError(EncryptorError):
    """
    Encryption or decryption failed.

    Raised for malformed input, a wrong password or key, and corrupted data.
    The message never includes the underlying cause.
    """

    def __init__(self, message: str = "Encryption or decryption could not be performed"):
        super().__init__(message)

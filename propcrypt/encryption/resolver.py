"""
Encryptor Configuration Resolver.

Turns a flat property source into a resolved encryptor configuration:
selects the encryption mode, checks required properties and fills in
defaults for optional ones.

Copyright (c) 2025 propcrypt
"""

import logging
from typing import Mapping, Optional, Tuple, TypeVar, Union

from .errors import InvalidPropertyError, MissingCredentialsError, MissingRequiredError
from .models import (
    DEFAULT_ALGORITHM,
    DEFAULT_IV_GENERATOR,
    DEFAULT_KEY_OBTENTION_ITERATIONS,
    DEFAULT_POOL_SIZE,
    DEFAULT_SALT_GENERATOR,
    DEFAULT_STRING_OUTPUT_TYPE,
    AsymmetricConfig,
    KeyFormat,
    PasswordBasedConfig,
    ResolvedConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "jasypt.encryptor"

PropertySource = Mapping[str, Optional[str]]

T = TypeVar("T")

# Property key suffixes, relative to the configured prefix
PASSWORD = "password"
ALGORITHM = "algorithm"
KEY_OBTENTION_ITERATIONS = "key-obtention-iterations"
POOL_SIZE = "pool-size"
PROVIDER_NAME = "provider-name"
PROVIDER_CLASS_NAME = "provider-class-name"
SALT_GENERATOR_CLASSNAME = "salt-generator-classname"
IV_GENERATOR_CLASSNAME = "iv-generator-classname"
STRING_OUTPUT_TYPE = "string-output-type"
PRIVATE_KEY_STRING = "private-key-string"
PRIVATE_KEY_LOCATION = "private-key-location"
PRIVATE_KEY_FORMAT = "private-key-format"

PROPERTY_SUFFIXES = (
    PASSWORD,
    ALGORITHM,
    KEY_OBTENTION_ITERATIONS,
    POOL_SIZE,
    PROVIDER_NAME,
    PROVIDER_CLASS_NAME,
    SALT_GENERATOR_CLASSNAME,
    IV_GENERATOR_CLASSNAME,
    STRING_OUTPUT_TYPE,
    PRIVATE_KEY_STRING,
    PRIVATE_KEY_LOCATION,
    PRIVATE_KEY_FORMAT,
)


def is_set(value: Optional[str]) -> bool:
    """A property is set when it has a non-empty value."""
    return value is not None and value != ""


def get_with_default(source: PropertySource, key: str, default: T) -> Tuple[Union[str, T], bool]:
    """
    Look up an optional property.

    Args:
        source: Property source to read from
        key: Fully qualified property key
        default: Value to use when the key is not set

    Returns:
        (value, was_defaulted) tuple. The supplied value is returned as-is
        when the key is set.
    """
    value = source.get(key)
    if is_set(value):
        return value, False
    return default, True


class EncryptorConfigResolver:
    """
    Resolves a property source into a PasswordBasedConfig or AsymmetricConfig.

    Password-based encryption wins when both a password and a private key
    are configured. The resolver keeps no state between calls.
    """

    def __init__(self, properties: PropertySource, prefix: str = DEFAULT_PREFIX):
        self.properties = properties
        self.prefix = prefix

    def key(self, suffix: str) -> str:
        """Fully qualified property key for a suffix."""
        return f"{self.prefix}.{suffix}"

    def resolve(self) -> ResolvedConfig:
        """
        Resolve the configuration.

        Raises:
            MissingCredentialsError: No password and no private key configured
            MissingRequiredError: A required property of the selected mode is missing
            InvalidPropertyError: private-key-format is not DER or PEM
        """
        if self._is_pbe_config():
            return self._create_pbe_config()
        if self._is_asymmetric_config():
            return self._create_asymmetric_config()
        raise MissingCredentialsError(self.prefix)

    def _is_pbe_config(self) -> bool:
        return is_set(self.properties.get(self.key(PASSWORD)))

    def _is_asymmetric_config(self) -> bool:
        return (
            is_set(self.properties.get(self.key(PRIVATE_KEY_STRING)))
            or is_set(self.properties.get(self.key(PRIVATE_KEY_LOCATION)))
        )

    def _create_pbe_config(self) -> PasswordBasedConfig:
        return PasswordBasedConfig(
            password=self._get_required(PASSWORD),
            algorithm=self._get(ALGORITHM, DEFAULT_ALGORITHM),
            key_obtention_iterations=self._get(KEY_OBTENTION_ITERATIONS, DEFAULT_KEY_OBTENTION_ITERATIONS),
            pool_size=self._get(POOL_SIZE, DEFAULT_POOL_SIZE),
            provider_name=self._get(PROVIDER_NAME, None),
            provider_class_name=self._get(PROVIDER_CLASS_NAME, None),
            salt_generator_class_name=self._get(SALT_GENERATOR_CLASSNAME, DEFAULT_SALT_GENERATOR),
            iv_generator_class_name=self._get(IV_GENERATOR_CLASSNAME, DEFAULT_IV_GENERATOR),
            string_output_type=self._get(STRING_OUTPUT_TYPE, DEFAULT_STRING_OUTPUT_TYPE),
        )

    def _create_asymmetric_config(self) -> AsymmetricConfig:
        private_key = self._get(PRIVATE_KEY_STRING, None)
        private_key_location = self._get(PRIVATE_KEY_LOCATION, None)

        key_format = self._get(PRIVATE_KEY_FORMAT, KeyFormat.DER)
        if not isinstance(key_format, KeyFormat):
            try:
                key_format = KeyFormat.parse(key_format)
            except ValueError:
                raise InvalidPropertyError(
                    self.key(PRIVATE_KEY_FORMAT), key_format, "one of DER, PEM"
                ) from None

        return AsymmetricConfig(
            private_key=private_key,
            private_key_location=private_key_location,
            private_key_format=key_format,
        )

    def _get_required(self, suffix: str) -> str:
        key = self.key(suffix)
        value = self.properties.get(key)
        if not is_set(value):
            raise MissingRequiredError(key)
        return value

    def _get(self, suffix: str, default):
        key = self.key(suffix)
        value, was_defaulted = get_with_default(self.properties, key, default)
        if was_defaulted:
            logger.info(
                f"Encryptor config not found for property {key}, using default value: {default}",
                extra={"property_key": key, "default_value": default},
            )
        return value


def resolve(properties: PropertySource, prefix: str = DEFAULT_PREFIX) -> ResolvedConfig:
    """Resolve a property source into an encryptor configuration."""
    return EncryptorConfigResolver(properties, prefix).resolve()

"""
Encryptable Property Values.

Property values wrapped as ``ENC(...)`` hold ciphertext; everything else is
plain text and passes through untouched.

Copyright (c) 2025 propcrypt
"""

import logging
from typing import Dict, Mapping, Optional

from .base import BaseStringEncryptor

logger = logging.getLogger(__name__)

DEFAULT_VALUE_PREFIX = "ENC("
DEFAULT_VALUE_SUFFIX = ")"


def is_encrypted(
    value: Optional[str],
    prefix: str = DEFAULT_VALUE_PREFIX,
    suffix: str = DEFAULT_VALUE_SUFFIX,
) -> bool:
    """Check whether a property value is wrapped ciphertext."""
    if value is None:
        return False
    trimmed = value.strip()
    return (
        len(trimmed) >= len(prefix) + len(suffix)
        and trimmed.startswith(prefix)
        and trimmed.endswith(suffix)
    )


def unwrap(value: str, prefix: str = DEFAULT_VALUE_PREFIX, suffix: str = DEFAULT_VALUE_SUFFIX) -> str:
    """Strip the wrapper from a value; unwrapped values are returned stripped of whitespace."""
    trimmed = value.strip()
    if not is_encrypted(trimmed, prefix, suffix):
        return trimmed
    return trimmed[len(prefix):len(trimmed) - len(suffix)]


def wrap(value: str, prefix: str = DEFAULT_VALUE_PREFIX, suffix: str = DEFAULT_VALUE_SUFFIX) -> str:
    return f"{prefix}{value}{suffix}"


def decrypt_properties(
    properties: Mapping[str, Optional[str]],
    encryptor: BaseStringEncryptor,
    prefix: str = DEFAULT_VALUE_PREFIX,
    suffix: str = DEFAULT_VALUE_SUFFIX,
) -> Dict[str, Optional[str]]:
    """
    Decrypt every wrapped value of a property source.

    Args:
        properties: Property source to read
        encryptor: Encryptor used for wrapped values
        prefix: Wrapper prefix
        suffix: Wrapper suffix

    Returns:
        New dict with wrapped values decrypted and all others copied as-is

    Raises:
        EncryptionOperationNotPossibleError: If a wrapped value cannot be decrypted
    """
    decrypted = {}
    for key, value in properties.items():
        if is_encrypted(value, prefix, suffix):
            decrypted[key] = encryptor.decrypt(unwrap(value, prefix, suffix))
            logger.debug(f"Decrypted property {key}")
        else:
            decrypted[key] = value
    return decrypted

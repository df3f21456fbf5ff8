"""
Asymmetric String Encryption.

RSA (PKCS#1 v1.5) string encryptor configured with a private key, given
inline or as a file location, in DER or PEM format.

Copyright (c) 2025 propcrypt
"""

import base64
import binascii
import logging
from pathlib import Path

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .base import BaseStringEncryptor
from .errors import EncryptionOperationNotPossibleError, EncryptorInitializationError
from .models import AsymmetricConfig, KeyFormat

logger = logging.getLogger(__name__)

FILE_RESOURCE_PREFIX = "file:"


def _strip_pem(text: str) -> str:
    """Drop PEM armour lines, leaving the base64 body."""
    lines = [line.strip() for line in text.strip().splitlines()]
    return "".join(line for line in lines if line and not line.startswith("-----"))


def _resource_path(location: str) -> Path:
    if location.startswith(FILE_RESOURCE_PREFIX):
        location = location[len(FILE_RESOURCE_PREFIX):]
    return Path(location).expanduser()


def load_private_key_bytes(config: AsymmetricConfig) -> bytes:
    """
    Get DER-encoded PKCS#8 private key bytes for a config.

    The inline key takes precedence over the key location.
    """
    if config.private_key:
        body = config.private_key
        if config.private_key_format == KeyFormat.PEM:
            body = _strip_pem(body)
        try:
            return base64.b64decode("".join(body.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise EncryptorInitializationError(f"Invalid private key string: {e}") from e

    if config.private_key_location:
        path = _resource_path(config.private_key_location)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise EncryptorInitializationError(
                f"Cannot read private key from {config.private_key_location}: {e}"
            ) from e
        if config.private_key_format == KeyFormat.PEM:
            try:
                return base64.b64decode(_strip_pem(raw.decode("ascii")), validate=True)
            except (binascii.Error, ValueError) as e:
                raise EncryptorInitializationError(f"Invalid PEM private key file {path}: {e}") from e
        return raw

    raise EncryptorInitializationError("No private key or private key location configured")


class AsymmetricStringEncryptor(BaseStringEncryptor):
    """
    RSA string encryptor.

    Decrypts with the configured private key. Encrypts with the public key
    derived from it, so values can be produced for the same deployment.
    """

    def __init__(self, config: AsymmetricConfig):
        self._private_key = self._load_private_key(config)
        self._public_key = self._private_key.public_key()

    @staticmethod
    def _load_private_key(config: AsymmetricConfig) -> rsa.RSAPrivateKey:
        der = load_private_key_bytes(config)
        try:
            key = serialization.load_der_private_key(der, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise EncryptorInitializationError(f"Cannot parse private key: {e}") from e

        if not isinstance(key, rsa.RSAPrivateKey):
            raise EncryptorInitializationError(
                f"Unsupported private key type: {type(key).__name__} (expected RSA)"
            )

        logger.debug(f"Loaded RSA private key ({key.key_size} bits)")
        return key

    @property
    def key_size(self) -> int:
        return self._private_key.key_size

    def public_key_pem(self) -> str:
        """Public key in PEM (SubjectPublicKeyInfo) form."""
        return self._public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("ascii")

    def encrypt(self, message: str) -> str:
        try:
            encrypted = self._public_key.encrypt(message.encode("utf-8"), padding.PKCS1v15())
        except ValueError:
            # message longer than the key allows
            raise EncryptionOperationNotPossibleError(
                f"Message too long for a {self.key_size}-bit RSA key"
            ) from None
        return base64.b64encode(encrypted).decode("ascii")

    def decrypt(self, encrypted_message: str) -> str:
        try:
            data = base64.b64decode(encrypted_message.strip().encode("ascii"), validate=True)
            return self._private_key.decrypt(data, padding.PKCS1v15()).decode("utf-8")
        except ValueError:
            raise EncryptionOperationNotPossibleError() from None

"""
Password-Based String Encryption.

Jasypt-compatible PBE with HMAC-based PBKDF2 key derivation and AES-CBC.
Encrypted messages are laid out as salt + IV + ciphertext, then encoded
as base64 or hexadecimal text.

Copyright (c) 2025 propcrypt
"""

import base64
import binascii
import logging
import re
import secrets
from threading import Lock
from typing import Callable, Dict, NamedTuple

from cryptography.hazmat.primitives import hashes, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .base import BaseStringEncryptor
from .errors import EncryptionOperationNotPossibleError, EncryptorInitializationError
from .models import PasswordBasedConfig

logger = logging.getLogger(__name__)

# AES block size; jasypt sizes salt and IV to the cipher block
BLOCK_SIZE = 16
SALT_SIZE = BLOCK_SIZE
IV_SIZE = BLOCK_SIZE

STRING_OUTPUT_TYPE_BASE64 = "base64"
STRING_OUTPUT_TYPE_HEXADECIMAL = "hexadecimal"

_ALGORITHM_PATTERN = re.compile(r"^PBEWITHHMAC(SHA1|SHA224|SHA256|SHA384|SHA512)ANDAES_(128|256)$")

_HASHES = {
    "SHA1": hashes.SHA1,
    "SHA224": hashes.SHA224,
    "SHA256": hashes.SHA256,
    "SHA384": hashes.SHA384,
    "SHA512": hashes.SHA512,
}


class ByteGenerator(NamedTuple):
    """Salt or IV generator."""
    generate: Callable[[int], bytes]
    include_in_output: bool


SALT_GENERATORS: Dict[str, ByteGenerator] = {
    "org.jasypt.salt.RandomSaltGenerator": ByteGenerator(secrets.token_bytes, True),
    "org.jasypt.salt.ZeroSaltGenerator": ByteGenerator(bytes, False),
}

IV_GENERATORS: Dict[str, ByteGenerator] = {
    "org.jasypt.iv.RandomIvGenerator": ByteGenerator(secrets.token_bytes, True),
}


def _lookup_generator(registry: Dict[str, ByteGenerator], class_name: str, kind: str) -> ByteGenerator:
    try:
        return registry[class_name]
    except KeyError:
        supported = ", ".join(sorted(registry))
        raise EncryptorInitializationError(
            f"Unsupported {kind} generator: {class_name} (supported: {supported})"
        ) from None


def _parse_positive_int(value: str, name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise EncryptorInitializationError(f"{name} must be an integer, got {value!r}") from None
    if parsed <= 0:
        raise EncryptorInitializationError(f"{name} must be positive, got {parsed}")
    return parsed


def _normalize_output_type(output_type: str) -> str:
    normalized = output_type.strip().lower()
    if normalized not in (STRING_OUTPUT_TYPE_BASE64, STRING_OUTPUT_TYPE_HEXADECIMAL):
        raise EncryptorInitializationError(
            f"Unsupported string output type: {output_type} "
            f"(supported: {STRING_OUTPUT_TYPE_BASE64}, {STRING_OUTPUT_TYPE_HEXADECIMAL})"
        )
    return normalized


class StandardPBEStringEncryptor(BaseStringEncryptor):
    """
    Single PBE string encryptor.

    A fresh key is derived for every message from the password and that
    message's salt.
    """

    def __init__(
        self,
        password: str,
        algorithm: str,
        key_obtention_iterations: int,
        salt_generator: ByteGenerator,
        iv_generator: ByteGenerator,
        string_output_type: str = STRING_OUTPUT_TYPE_BASE64,
    ):
        match = _ALGORITHM_PATTERN.match(algorithm.strip().upper())
        if match is None:
            raise EncryptorInitializationError(
                f"Unsupported PBE algorithm: {algorithm} "
                f"(supported: PBEWITHHMAC<SHA1|SHA224|SHA256|SHA384|SHA512>ANDAES_<128|256>)"
            )

        self._password = password.encode("utf-8")
        self._hash = _HASHES[match.group(1)]
        self._key_length = int(match.group(2)) // 8
        self._iterations = key_obtention_iterations
        self._salt_generator = salt_generator
        self._iv_generator = iv_generator
        self._output_type = _normalize_output_type(string_output_type)

    def _derive_key(self, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=self._hash(),
            length=self._key_length,
            salt=salt,
            iterations=self._iterations,
        )
        return kdf.derive(self._password)

    def encrypt(self, message: str) -> str:
        salt = self._salt_generator.generate(SALT_SIZE)
        iv = self._iv_generator.generate(IV_SIZE)

        padder = padding.PKCS7(BLOCK_SIZE * 8).padder()
        padded = padder.update(message.encode("utf-8")) + padder.finalize()

        encryptor = Cipher(algorithms.AES(self._derive_key(salt)), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        result = ciphertext
        if self._iv_generator.include_in_output:
            result = iv + result
        if self._salt_generator.include_in_output:
            result = salt + result
        return self._encode(result)

    def decrypt(self, encrypted_message: str) -> str:
        data = self._decode(encrypted_message)

        if self._salt_generator.include_in_output:
            salt, data = data[:SALT_SIZE], data[SALT_SIZE:]
        else:
            salt = self._salt_generator.generate(SALT_SIZE)

        if self._iv_generator.include_in_output:
            iv, data = data[:IV_SIZE], data[IV_SIZE:]
        else:
            iv = self._iv_generator.generate(IV_SIZE)

        if len(iv) != IV_SIZE or not data or len(data) % BLOCK_SIZE:
            raise EncryptionOperationNotPossibleError()

        decryptor = Cipher(algorithms.AES(self._derive_key(salt)), modes.CBC(iv)).decryptor()
        padded = decryptor.update(data) + decryptor.finalize()

        try:
            unpadder = padding.PKCS7(BLOCK_SIZE * 8).unpadder()
            plain = unpadder.update(padded) + unpadder.finalize()
            return plain.decode("utf-8")
        except ValueError:
            # wrong password or corrupted data
            raise EncryptionOperationNotPossibleError() from None

    def _encode(self, data: bytes) -> str:
        if self._output_type == STRING_OUTPUT_TYPE_HEXADECIMAL:
            return data.hex().upper()
        return base64.b64encode(data).decode("ascii")

    def _decode(self, text: str) -> bytes:
        try:
            if self._output_type == STRING_OUTPUT_TYPE_HEXADECIMAL:
                return bytes.fromhex(text.strip())
            return base64.b64decode(text.strip().encode("ascii"), validate=True)
        except (binascii.Error, ValueError):
            raise EncryptionOperationNotPossibleError() from None


class PooledPBEStringEncryptor(BaseStringEncryptor):
    """
    Pool of PBE string encryptors built from a PasswordBasedConfig.

    Requests are spread round-robin over ``pool_size`` encryptors; safe to
    share between threads.
    """

    def __init__(self, config: PasswordBasedConfig):
        iterations = _parse_positive_int(config.key_obtention_iterations, "key-obtention-iterations")
        pool_size = _parse_positive_int(config.pool_size, "pool-size")
        salt_generator = _lookup_generator(SALT_GENERATORS, config.salt_generator_class_name, "salt")
        iv_generator = _lookup_generator(IV_GENERATORS, config.iv_generator_class_name, "IV")

        if config.provider_name or config.provider_class_name:
            logger.warning(
                f"Security provider settings are not supported and will be ignored "
                f"(provider-name={config.provider_name}, provider-class-name={config.provider_class_name})"
            )

        self._pool = [
            StandardPBEStringEncryptor(
                password=config.password,
                algorithm=config.algorithm,
                key_obtention_iterations=iterations,
                salt_generator=salt_generator,
                iv_generator=iv_generator,
                string_output_type=config.string_output_type,
            )
            for _ in range(pool_size)
        ]
        self._lock = Lock()
        self._next_index = 0

        logger.debug(f"PBE encryptor pool initialized: algorithm={config.algorithm}, size={pool_size}")

    @property
    def pool_size(self) -> int:
        return len(self._pool)

    def _next_encryptor(self) -> StandardPBEStringEncryptor:
        with self._lock:
            encryptor = self._pool[self._next_index]
            self._next_index = (self._next_index + 1) % len(self._pool)
        return encryptor

    def encrypt(self, message: str) -> str:
        return self._next_encryptor().encrypt(message)

    def decrypt(self, encrypted_message: str) -> str:
        return self._next_encryptor().decrypt(encrypted_message)

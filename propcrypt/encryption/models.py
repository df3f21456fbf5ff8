"""
Resolved Encryptor Configuration Models.

A resolution produces exactly one of two immutable variants, discriminated
on ``mode``:

- PasswordBasedConfig: parameters for a pooled PBE string encryptor
- AsymmetricConfig: private key material for an RSA string encryptor

Copyright (c) 2025 propcrypt
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_ALGORITHM = "PBEWITHHMACSHA512ANDAES_256"
DEFAULT_KEY_OBTENTION_ITERATIONS = "1000"
DEFAULT_POOL_SIZE = "1"
DEFAULT_SALT_GENERATOR = "org.jasypt.salt.RandomSaltGenerator"
DEFAULT_IV_GENERATOR = "org.jasypt.iv.RandomIvGenerator"
DEFAULT_STRING_OUTPUT_TYPE = "base64"


class KeyFormat(str, Enum):
    """Encoding of asymmetric private key material."""
    DER = "DER"
    PEM = "PEM"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "KeyFormat":
        """Parse a format name case-insensitively. Raises ValueError."""
        return cls(value.strip().upper())


class PasswordBasedConfig(BaseModel):
    """Password-based encryption (PBE) parameters."""
    model_config = ConfigDict(frozen=True)

    mode: Literal["password"] = "password"
    password: str = Field(..., min_length=1, repr=False)
    algorithm: str = DEFAULT_ALGORITHM
    key_obtention_iterations: str = DEFAULT_KEY_OBTENTION_ITERATIONS
    pool_size: str = DEFAULT_POOL_SIZE
    provider_name: Optional[str] = None
    provider_class_name: Optional[str] = None
    salt_generator_class_name: str = DEFAULT_SALT_GENERATOR
    iv_generator_class_name: str = DEFAULT_IV_GENERATOR
    string_output_type: str = DEFAULT_STRING_OUTPUT_TYPE


class AsymmetricConfig(BaseModel):
    """Asymmetric (private key) decryption parameters."""
    model_config = ConfigDict(frozen=True)

    mode: Literal["asymmetric"] = "asymmetric"
    private_key: Optional[str] = None
    private_key_location: Optional[str] = None
    private_key_format: KeyFormat = KeyFormat.DER


ResolvedConfig = Annotated[
    Union[PasswordBasedConfig, AsymmetricConfig],
    Field(discriminator="mode"),
]

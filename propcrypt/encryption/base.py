"""
Base String Encryptor Interface.

Copyright (c) 2025 propcrypt
"""

from abc import ABC, abstractmethod


class BaseStringEncryptor(ABC):
    """Base interface for string encryptor implementations."""

    @abstractmethod
    def encrypt(self, message: str) -> str:
        """
        Encrypt a message.

        Args:
            message: Plain text to encrypt

        Returns:
            Encrypted text in the encryptor's string output encoding
        """
        pass

    @abstractmethod
    def decrypt(self, encrypted_message: str) -> str:
        """
        Decrypt a message.

        Args:
            encrypted_message: Text as returned by encrypt()

        Returns:
            Decrypted plain text

        Raises:
            EncryptionOperationNotPossibleError: If the message cannot be decrypted
        """
        pass

    def is_enabled(self) -> bool:
        """Check if encryption is enabled."""
        return True

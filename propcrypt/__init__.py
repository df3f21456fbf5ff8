"""
propcrypt - configuration-driven string encryption.

Resolves encryptor properties (password-based or asymmetric) into a
string encryptor and decrypts ENC(...) property values.

Copyright (c) 2025 propcrypt
"""

__version__ = "0.1.0"

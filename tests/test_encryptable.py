"""
Tests for ENC(...) property value handling.
"""

import pytest

from propcrypt.encryption import PasswordBasedConfig, PooledPBEStringEncryptor
from propcrypt.encryption.encryptable import decrypt_properties, is_encrypted, unwrap, wrap
from propcrypt.encryption.errors import EncryptionOperationNotPossibleError


class TestWrapping:
    """Test detection and unwrapping of encrypted values."""

    @pytest.mark.parametrize("value", ["ENC(abc)", "  ENC(abc)  ", "ENC()"])
    def test_detects_wrapped(self, value):
        assert is_encrypted(value)

    @pytest.mark.parametrize("value", [None, "", "abc", "ENC(abc", "enc(abc)", "xENC(abc)", "ENC("])
    def test_ignores_plain(self, value):
        assert not is_encrypted(value)

    def test_unwrap(self):
        assert unwrap(" ENC(abc) ") == "abc"
        assert unwrap("abc") == "abc"

    def test_wrap(self):
        assert wrap("abc") == "ENC(abc)"
        assert unwrap(wrap("abc")) == "abc"

    def test_custom_markers(self):
        """Test custom prefix and suffix."""
        assert is_encrypted("{cipher}abc", prefix="{cipher}", suffix="")
        assert unwrap("{cipher}abc", prefix="{cipher}", suffix="") == "abc"
        assert wrap("abc", prefix="{cipher}", suffix="") == "{cipher}abc"
        assert not is_encrypted("ENC(abc)", prefix="{cipher}", suffix="")


class TestDecryptProperties:
    """Test decryption of a whole property source."""

    def setup_method(self):
        self.encryptor = PooledPBEStringEncryptor(PasswordBasedConfig(password="secret"))

    def test_only_wrapped_values_decrypted(self):
        """Test that plain values are copied unchanged."""
        properties = {
            "db.url": "jdbc:postgresql://localhost/app",
            "db.password": wrap(self.encryptor.encrypt("hunter2")),
            "db.pool": None,
        }
        decrypted = decrypt_properties(properties, self.encryptor)

        assert decrypted == {
            "db.url": "jdbc:postgresql://localhost/app",
            "db.password": "hunter2",
            "db.pool": None,
        }

    def test_source_not_modified(self):
        """Test that the input mapping is left untouched."""
        wrapped = wrap(self.encryptor.encrypt("hunter2"))
        properties = {"db.password": wrapped}
        decrypt_properties(properties, self.encryptor)
        assert properties == {"db.password": wrapped}

    def test_undecryptable_value_fails(self):
        """Test that a bad wrapped value raises."""
        with pytest.raises(EncryptionOperationNotPossibleError):
            decrypt_properties({"db.password": "ENC(not-valid)"}, self.encryptor)

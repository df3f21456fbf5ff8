"""
Tests for the propcrypt configuration module.

Copyright (c) 2025 propcrypt
"""

import os
import pytest
from unittest.mock import patch

from propcrypt.config import EncryptorSettings, PropCryptConfig, build_property_source, get_config
from propcrypt.config.properties import (
    env_var_name,
    load_properties_file,
    merge_sources,
    parse_properties,
    properties_from_env,
)


class TestPropertiesParsing:
    """Test .properties parsing."""

    def test_parse_basic(self):
        """Test key=value and key: value lines."""
        text = (
            "# encryptor settings\n"
            "jasypt.encryptor.password = secret\n"
            "! legacy comment\n"
            "\n"
            "jasypt.encryptor.pool-size: 4\n"
        )
        assert parse_properties(text) == {
            "jasypt.encryptor.password": "secret",
            "jasypt.encryptor.pool-size": "4",
        }

    def test_value_may_contain_separators(self):
        """Test that only the first separator splits key and value."""
        properties = parse_properties("db.url=jdbc:postgresql://localhost:5432/app?ssl=true\n")
        assert properties["db.url"] == "jdbc:postgresql://localhost:5432/app?ssl=true"

    def test_empty_value(self):
        """Test that an empty value is kept as an empty string."""
        assert parse_properties("jasypt.encryptor.password=\n") == {"jasypt.encryptor.password": ""}

    def test_malformed_lines_skipped(self):
        """Test that lines without a separator or key are ignored."""
        assert parse_properties("no separator here\n=value\nok=1\n") == {"ok": "1"}

    def test_later_duplicates_win(self):
        assert parse_properties("a=1\na=2\n") == {"a": "2"}

    def test_load_file(self, tmp_path):
        """Test loading from a file."""
        path = tmp_path / "app.properties"
        path.write_text("jasypt.encryptor.password=secret\n", encoding="utf-8")
        assert load_properties_file(path) == {"jasypt.encryptor.password": "secret"}

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_properties_file(tmp_path / "missing.properties")


class TestEnvironmentBinding:
    """Test relaxed binding of environment variables."""

    def test_env_var_name(self):
        assert env_var_name("jasypt.encryptor.pool-size") == "JASYPT_ENCRYPTOR_POOL_SIZE"
        assert env_var_name("jasypt.encryptor.salt-generator-classname") == (
            "JASYPT_ENCRYPTOR_SALT_GENERATOR_CLASSNAME"
        )

    def test_properties_from_env(self):
        """Test that only requested keys are collected."""
        environ = {"JASYPT_ENCRYPTOR_PASSWORD": "secret", "UNRELATED": "x"}
        found = properties_from_env(
            ["jasypt.encryptor.password", "jasypt.encryptor.pool-size"], environ
        )
        assert found == {"jasypt.encryptor.password": "secret"}

    def test_merge_sources_later_wins(self):
        assert merge_sources({"a": "1", "b": "1"}, {"b": "2"}) == {"a": "1", "b": "2"}

    def test_env_overrides_file(self, tmp_path):
        """Test that environment variables override properties file values."""
        path = tmp_path / "app.properties"
        path.write_text(
            "jasypt.encryptor.password=from-file\njasypt.encryptor.pool-size=2\n",
            encoding="utf-8",
        )
        settings = EncryptorSettings(properties_file=str(path))
        properties = build_property_source(settings, {"JASYPT_ENCRYPTOR_PASSWORD": "from-env"})

        assert properties == {
            "jasypt.encryptor.password": "from-env",
            "jasypt.encryptor.pool-size": "2",
        }

    def test_property_keys_follow_prefix(self):
        """Test that property keys use the configured prefix."""
        keys = EncryptorSettings(prefix="app.crypto").property_keys()
        assert "app.crypto.password" in keys
        assert "app.crypto.private-key-format" in keys
        assert all(key.startswith("app.crypto.") for key in keys)


class TestPropCryptConfig:
    """Test the unified configuration module."""

    def setup_method(self):
        """Reset singleton before each test."""
        PropCryptConfig.reset()

    def teardown_method(self):
        PropCryptConfig.reset()

    def test_config_singleton(self):
        """Test that config is a singleton."""
        assert get_config() is get_config()

    @patch.dict(os.environ, {}, clear=True)
    def test_config_default_values(self):
        """Test default configuration values."""
        config = get_config()

        assert config.encryptor.prefix == "jasypt.encryptor"
        assert config.encryptor.properties_file is None
        assert config.encryptor.value_prefix == "ENC("
        assert config.encryptor.value_suffix == ")"
        assert config.logging.log_level == "INFO"
        assert config.logging.json_logs is False
        assert config.properties == {}

    @patch.dict(os.environ, {
        "PROPCRYPT_PREFIX": "app.crypto",
        "APP_CRYPTO_PASSWORD": "secret",
        "JASYPT_ENCRYPTOR_PASSWORD": "ignored",
        "LOG_LEVEL": "DEBUG",
        "LOG_JSON": "true",
    })
    def test_config_loads_from_env(self):
        """Test configuration loads from environment variables."""
        config = get_config()

        assert config.encryptor.prefix == "app.crypto"
        assert config.properties["app.crypto.password"] == "secret"
        assert "jasypt.encryptor.password" not in config.properties
        assert config.logging.log_level == "DEBUG"
        assert config.logging.json_logs is True

    def test_config_reads_properties_file(self, tmp_path):
        """Test that the configured properties file is loaded."""
        path = tmp_path / "app.properties"
        path.write_text("jasypt.encryptor.private-key-location=/keys/k.der\n", encoding="utf-8")

        with patch.dict(os.environ, {"PROPCRYPT_PROPERTIES_FILE": str(path)}, clear=True):
            config = get_config()
            assert config.properties == {"jasypt.encryptor.private-key-location": "/keys/k.der"}

    def test_missing_properties_file_read_on_first_access(self, tmp_path):
        """Test that a missing properties file only fails when properties are read."""
        missing = tmp_path / "missing.properties"

        with patch.dict(os.environ, {"PROPCRYPT_PROPERTIES_FILE": str(missing)}, clear=True):
            config = get_config()
            assert config.encryptor.properties_file == str(missing)

            with pytest.raises(FileNotFoundError):
                config.properties

    def test_config_reload(self):
        """Test configuration reload."""
        config = get_config()

        with patch.dict(os.environ, {"JASYPT_ENCRYPTOR_POOL_SIZE": "9"}):
            config.reload()
            assert config.properties["jasypt.encryptor.pool-size"] == "9"

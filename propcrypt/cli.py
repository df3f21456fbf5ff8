#!/usr/bin/env python3
"""
propcrypt command line.

Encrypts and decrypts property values with the encryptor resolved from the
current configuration.

Examples:
    JASYPT_ENCRYPTOR_PASSWORD=secret propcrypt encrypt --wrap "db-password"
    propcrypt --properties app.properties decrypt-file app.properties
    propcrypt --set jasypt.encryptor.private-key-location=/keys/k.der show-config
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Dict, List, Optional

import structlog

from propcrypt.config import LoggingConfig, build_property_source, get_config
from propcrypt.config.properties import load_properties_file, merge_sources
from propcrypt.encryption import (
    ConfigError,
    EncryptorError,
    PasswordBasedConfig,
    build_encryptor,
    resolve,
)
from propcrypt.encryption.encryptable import decrypt_properties, unwrap, wrap

logger = structlog.get_logger(__name__)

MASK = "****"

EXIT_OK = 0
EXIT_ENCRYPTOR_ERROR = 1
EXIT_CONFIG_ERROR = 2


def setup_logging(config: LoggingConfig, level: Optional[str] = None) -> None:
    """Configure stdlib logging and route structlog through it."""
    log_level = getattr(logging, (level or config.log_level).upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=config.log_format, stream=sys.stderr)
    logging.getLogger("propcrypt").setLevel(log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if config.json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def parse_overrides(pairs: List[str]) -> Dict[str, str]:
    """Parse repeated KEY=VALUE arguments."""
    overrides = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got {pair!r}")
        overrides[key.strip()] = value
    return overrides


def masked_config(config) -> dict:
    """Resolved config as a JSON-ready dict with secrets masked."""
    data = config.model_dump(mode="json")
    secret_fields = ("password",) if isinstance(config, PasswordBasedConfig) else ("private_key",)
    for name in secret_fields:
        if data.get(name):
            data[name] = MASK
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="propcrypt",
        description="Encrypt and decrypt configuration property values",
    )
    parser.add_argument('--properties', '-p', help='Properties file to read encryptor settings from')
    parser.add_argument('--prefix', help='Encryptor property prefix (default: jasypt.encryptor)')
    parser.add_argument('--set', dest='overrides', action='append', default=[], metavar='KEY=VALUE',
                        help='Override a property (repeatable)')
    parser.add_argument('--log-level', help='Log level (default: LOG_LEVEL or INFO)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    encrypt_parser = subparsers.add_parser('encrypt', help='Encrypt a value')
    encrypt_parser.add_argument('value', help='Plain text value')
    encrypt_parser.add_argument('--wrap', action='store_true', help='Wrap the result as ENC(...)')

    decrypt_parser = subparsers.add_parser('decrypt', help='Decrypt a value')
    decrypt_parser.add_argument('value', help='Encrypted value, bare or wrapped as ENC(...)')

    subparsers.add_parser('show-config', help='Show the resolved encryptor configuration')

    decrypt_file_parser = subparsers.add_parser('decrypt-file', help='Decrypt ENC(...) values of a properties file')
    decrypt_file_parser.add_argument('file', help='Properties file')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config()
    setup_logging(config.logging, args.log_level)

    settings = config.encryptor
    prefix = args.prefix or settings.prefix

    try:
        overrides = parse_overrides(args.overrides)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    try:
        if args.properties or args.prefix:
            properties = build_property_source(replace(
                settings,
                prefix=prefix,
                properties_file=args.properties or settings.properties_file,
            ))
        else:
            properties = config.properties
    except OSError as e:
        print(f"Cannot read properties file: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    properties = merge_sources(properties, overrides)

    try:
        resolved = resolve(properties, prefix)

        if args.command == 'show-config':
            print(json.dumps(masked_config(resolved), indent=2))
            return EXIT_OK

        encryptor = build_encryptor(resolved)

        if args.command == 'encrypt':
            encrypted = encryptor.encrypt(args.value)
            if args.wrap:
                encrypted = wrap(encrypted, settings.value_prefix, settings.value_suffix)
            print(encrypted)
        elif args.command == 'decrypt':
            print(encryptor.decrypt(unwrap(args.value, settings.value_prefix, settings.value_suffix)))
        elif args.command == 'decrypt-file':
            decrypted = decrypt_properties(
                load_properties_file(args.file), encryptor, settings.value_prefix, settings.value_suffix
            )
            for key, value in decrypted.items():
                print(f"{key}={value}")
            logger.info("properties_decrypted", file=args.file, count=len(decrypted))

    except ConfigError as e:
        logger.debug("configuration_error", error=str(e))
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except EncryptorError as e:
        logger.debug("encryptor_error", error=str(e), command=args.command)
        print(f"Encryption error: {e}", file=sys.stderr)
        return EXIT_ENCRYPTOR_ERROR
    except OSError as e:
        print(f"Cannot read file: {e}", file=sys.stderr)
        return EXIT_ENCRYPTOR_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

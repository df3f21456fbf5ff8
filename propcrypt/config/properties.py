"""
Property Source Loading.

Reads ``.properties`` files and maps environment variables onto property
keys with relaxed binding (``jasypt.encryptor.pool-size`` is read from
``JASYPT_ENCRYPTOR_POOL_SIZE``).

Copyright (c) 2025 propcrypt
"""

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Union

logger = logging.getLogger(__name__)

COMMENT_CHARS = ("#", "!")


def env_var_name(key: str) -> str:
    """Environment variable name for a property key."""
    return key.upper().replace(".", "_").replace("-", "_")


def parse_properties(text: str) -> Dict[str, str]:
    """
    Parse ``.properties`` text.

    Supports ``key=value`` and ``key: value`` lines, ``#`` and ``!``
    comments and blank lines. Keys and values are trimmed; later
    duplicates win.
    """
    properties = {}
    for line_no, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_CHARS):
            continue

        separators = [i for i in (line.find("="), line.find(":")) if i != -1]
        if not separators:
            logger.warning(f"Ignoring malformed properties line {line_no}: no separator")
            continue

        index = min(separators)
        key = line[:index].strip()
        if not key:
            logger.warning(f"Ignoring malformed properties line {line_no}: empty key")
            continue
        properties[key] = line[index + 1:].strip()
    return properties


def load_properties_file(path: Union[str, Path]) -> Dict[str, str]:
    """
    Load a ``.properties`` file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    properties = parse_properties(path.read_text(encoding="utf-8"))
    logger.info(f"Loaded {len(properties)} properties from {path}")
    return properties


def properties_from_env(keys: Iterable[str], environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Collect the given property keys from environment variables."""
    if environ is None:
        environ = os.environ
    found = {}
    for key in keys:
        value = environ.get(env_var_name(key))
        if value is not None:
            found[key] = value
    return found


def merge_sources(*sources: Mapping[str, Optional[str]]) -> Dict[str, Optional[str]]:
    """Merge property sources; later sources override earlier ones."""
    merged = {}
    for source in sources:
        merged.update(source)
    return merged

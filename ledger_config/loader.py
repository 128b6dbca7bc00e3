"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads a YAML configuration set and parses it into the typed
``ledger_config.schema`` dataclasses.  Runtime callers go through
``ledger_config.get_active_config()``; this module is its internal
machinery and test tooling.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; no silent defaults for required fields.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Out-of-range values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import (
    AppConfig,
    DatabaseSettings,
    ListingSettings,
    LoggingSettings,
    ReportingSettings,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top-level YAML node is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML node must be a mapping")
    return data


def _positive(value: Any, name: str) -> int:
    number = int(value)
    if number < 1:
        raise ValueError(f"{name} must be >= 1, got {number}")
    return number


def parse_database(data: dict[str, Any]) -> DatabaseSettings:
    """Parse the ``database`` section.  ``url`` is required."""
    return DatabaseSettings(
        url=data["url"],
        echo=bool(data.get("echo", False)),
        pool_size=_positive(data.get("pool_size", 20), "pool_size"),
        max_overflow=int(data.get("max_overflow", 10)),
        pool_timeout=_positive(data.get("pool_timeout", 30), "pool_timeout"),
        pool_recycle=int(data.get("pool_recycle", 1800)),
    )


def parse_logging(data: dict[str, Any]) -> LoggingSettings:
    level = str(data.get("level", "INFO")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown log level {level!r}")
    return LoggingSettings(level=level)


def parse_reporting(data: dict[str, Any]) -> ReportingSettings:
    currency = str(data.get("default_currency", "USD"))
    if len(currency) != 3:
        raise ValueError("default_currency must be a 3-letter ISO 4217 code")
    precision = int(data.get("display_precision", 2))
    if precision < 0:
        raise ValueError("display_precision cannot be negative")
    return ReportingSettings(
        default_currency=currency,
        entity_name=str(data.get("entity_name", "Company")),
        display_precision=precision,
        thousands_separator=str(data.get("thousands_separator", ",")),
        include_inactive=bool(data.get("include_inactive", False)),
    )


def parse_listing(data: dict[str, Any]) -> ListingSettings:
    default_size = _positive(data.get("default_page_size", 12), "default_page_size")
    max_size = _positive(data.get("max_page_size", 100), "max_page_size")
    if default_size > max_size:
        raise ValueError("default_page_size exceeds max_page_size")
    return ListingSettings(default_page_size=default_size, max_page_size=max_size)


def parse_app_config(data: dict[str, Any], checksum: str = "") -> AppConfig:
    """
    Parse a whole configuration set.

    Required keys: ``name``, ``version``, ``database.url``.
    """
    return AppConfig(
        name=data["name"],
        version=int(data["version"]),
        database=parse_database(data["database"]),
        logging=parse_logging(data.get("logging") or {}),
        reporting=parse_reporting(data.get("reporting") or {}),
        listing=parse_listing(data.get("listing") or {}),
        checksum=checksum,
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()

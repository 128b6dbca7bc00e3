"""
Application configuration schema.

Frozen dataclasses that a YAML configuration set is parsed into by
``ledger_config.loader``.  ``AppConfig`` is the runtime artifact returned by
``ledger_config.get_active_config()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseSettings:
    """Engine parameters; pool settings are ignored for SQLite URLs."""

    url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class ReportingSettings:
    default_currency: str = "USD"
    entity_name: str = "Company"
    display_precision: int = 2
    thousands_separator: str = ","
    include_inactive: bool = False


@dataclass(frozen=True)
class ListingSettings:
    default_page_size: int = 12
    max_page_size: int = 100


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AppConfig:
    """A parsed configuration set."""

    name: str
    version: int
    database: DatabaseSettings
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    reporting: ReportingSettings = field(default_factory=ReportingSettings)
    listing: ListingSettings = field(default_factory=ListingSettings)
    checksum: str = ""

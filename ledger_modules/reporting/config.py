"""
Presentation settings for the profit & loss sheet.

Built from the ``reporting`` section of a configuration set by
``ledger_config.bridges.build_reporting_config``; tests construct it
directly.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Self

from ledger_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


@dataclass(frozen=True)
class ReportingConfig:
    """
    Currency, entity name and amount formatting used on every sheet.

    ``include_inactive`` keeps deactivated accounts on the sheet; they are
    hidden by default even when they still carry postings.
    """

    default_currency: str = "USD"
    entity_name: str = "Company"
    display_precision: int = 2  # no_cents forces 0
    thousands_separator: str = ","
    include_inactive: bool = False

    def __post_init__(self):
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if len(self.default_currency) != 3:
            raise ValueError("default_currency must be a 3-letter ISO 4217 code")
        if len(self.thousands_separator) > 1:
            raise ValueError("thousands_separator must be at most one character")

    @classmethod
    def with_defaults(cls) -> Self:
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Build from a plain mapping; unknown keys raise ``TypeError``."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise TypeError(f"Unknown reporting settings: {', '.join(unknown)}")
        config = cls(**data)
        logger.debug("reporting_config_loaded", extra={"keys": sorted(data)})
        return config

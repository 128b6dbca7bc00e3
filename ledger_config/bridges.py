"""
Config -> Kernel/Module Bridges.

Functions that convert an ``AppConfig`` into the inputs kernel and module
code accept.  They live here (the producer) because the kernel must NEVER
import ledger_config.

Usage:
    from ledger_config import get_active_config
    from ledger_config.bridges import build_listing_limits, init_engine_from_config

    config = get_active_config()
    init_engine_from_config(config)
    service = ItemCategoryService(session, listing_limits=build_listing_limits(config))
"""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from ledger_config.schema import AppConfig
from ledger_kernel.db.engine import init_engine_from_url
from ledger_kernel.logging_config import configure_logging
from ledger_kernel.selectors.dynamic_list import ListingLimits
from ledger_modules.reporting.config import ReportingConfig


def build_reporting_config(config: AppConfig) -> ReportingConfig:
    settings = config.reporting
    return ReportingConfig(
        default_currency=settings.default_currency,
        entity_name=settings.entity_name,
        display_precision=settings.display_precision,
        thousands_separator=settings.thousands_separator,
        include_inactive=settings.include_inactive,
    )


def build_listing_limits(config: AppConfig) -> ListingLimits:
    return ListingLimits(
        default_page_size=config.listing.default_page_size,
        max_page_size=config.listing.max_page_size,
    )


def init_engine_from_config(config: AppConfig) -> Engine:
    """Initialize the kernel engine from the ``database`` section."""
    db = config.database
    return init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_timeout=db.pool_timeout,
        pool_recycle=db.pool_recycle,
    )


def configure_logging_from_config(config: AppConfig) -> None:
    configure_logging(level=logging.getLevelName(config.logging.level))

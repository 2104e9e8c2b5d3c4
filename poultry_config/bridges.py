"""
Config -> Kernel Bridges.

Functions that turn a FarmConfig into kernel and service objects.  They
live here because the kernel must never import poultry_config.

Usage:
    from poultry_config.bridges import build_farm_service

    config = get_active_config()
    service = build_farm_service(config)
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import sessionmaker

from poultry_config.schema import FarmConfig
from poultry_kernel.db.engine import build_engine, create_tables
from poultry_kernel.domain.clock import Clock
from poultry_kernel.logging_config import configure_logging
from poultry_kernel.services.state_store import SqlStateStore, StateStore
from poultry_services.farm_service import FarmService


def apply_logging_config(config: FarmConfig) -> None:
    """Configure the poultry_kernel log hierarchy at the configured level."""
    configure_logging(level=logging.getLevelName(config.logging.level))


def build_state_store(
    config: FarmConfig,
    *,
    clock: Clock | None = None,
    database_url: str | None = None,
) -> SqlStateStore:
    """SQL store for the configured document, creating tables if needed."""
    engine = build_engine(
        database_url or config.storage.database_url,
        echo=config.storage.echo,
    )
    create_tables(engine)
    return SqlStateStore(
        sessionmaker(bind=engine, expire_on_commit=False),
        document_name=config.storage.document_name,
        clock=clock,
    )


def build_farm_service(
    config: FarmConfig,
    *,
    store: StateStore | None = None,
    clock: Clock | None = None,
) -> FarmService:
    """FarmService wired with the configured policy, price, alerts and store."""
    return FarmService(
        store if store is not None else build_state_store(config, clock=clock),
        clock=clock,
        underflow_policy=config.engine.underflow_policy,
        default_egg_price_per_peti=config.pricing.default_egg_price_per_peti,
        low_feed_stock_bags=config.alerts.low_feed_stock_bags,
        upcoming_vaccinations_limit=config.alerts.upcoming_vaccinations_limit,
    )

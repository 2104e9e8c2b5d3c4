"""
FarmConfig schema.

Frozen dataclasses that the loader builds from YAML.  Nothing here reads
files; ``poultry_config.loader`` does the parsing and validation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from poultry_kernel.domain.vocabulary import UnderflowPolicy


@dataclass(frozen=True)
class StorageConfig:
    """Where the state document lives."""

    database_url: str = "sqlite:///poultry_farm.db"
    document_name: str = "farm"
    echo: bool = False


@dataclass(frozen=True)
class EngineConfig:
    """Behaviour switches for the state engines."""

    underflow_policy: UnderflowPolicy = UnderflowPolicy.REJECT


@dataclass(frozen=True)
class PricingConfig:
    default_egg_price_per_peti: Decimal = Decimal("2500")


@dataclass(frozen=True)
class AlertConfig:
    """Dashboard thresholds."""

    low_feed_stock_bags: Decimal = Decimal("10")
    upcoming_vaccinations_limit: int = 5


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"


@dataclass(frozen=True)
class FarmConfig:
    """The runtime configuration artifact returned by get_active_config()."""

    farm_name: str
    storage: StorageConfig = field(default_factory=StorageConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    alerts: AlertConfig = field(default_factory=AlertConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    checksum: str = ""

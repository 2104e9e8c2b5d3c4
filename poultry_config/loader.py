"""
Configuration Loader (``poultry_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into the frozen
``poultry_config.schema`` dataclasses.  Runtime callers use
``poultry_config.get_active_config()`` instead of calling this directly.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; ``farm_name`` has no silent default.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  parsed source.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Non-mapping document or section  -> ``ValueError``.
* Out-of-range values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from poultry_config.schema import (
    AlertConfig,
    EngineConfig,
    FarmConfig,
    LoggingConfig,
    PricingConfig,
    StorageConfig,
)
from poultry_kernel.domain.vocabulary import UnderflowPolicy


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_decimal(value: Any, key: str) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number, got {value!r}")
    try:
        result = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"{key} must be finite, got {value!r}")
    return result


def parse_storage(data: dict[str, Any]) -> StorageConfig:
    defaults = StorageConfig()
    database_url = data.get("database_url", defaults.database_url)
    if not isinstance(database_url, str) or not database_url.strip():
        raise ValueError("storage.database_url must be a non-empty string")
    document_name = str(data.get("document_name", defaults.document_name)).strip()
    if not document_name:
        raise ValueError("storage.document_name must be a non-empty string")
    return StorageConfig(
        database_url=database_url,
        document_name=document_name,
        echo=bool(data.get("echo", defaults.echo)),
    )


def parse_engine(data: dict[str, Any]) -> EngineConfig:
    raw = data.get("underflow_policy", UnderflowPolicy.REJECT.value)
    try:
        policy = UnderflowPolicy(str(raw).lower())
    except ValueError as exc:
        allowed = ", ".join(p.value for p in UnderflowPolicy)
        raise ValueError(
            f"engine.underflow_policy must be one of {allowed}, got {raw!r}"
        ) from exc
    return EngineConfig(underflow_policy=policy)


def parse_pricing(data: dict[str, Any]) -> PricingConfig:
    price = parse_decimal(
        data.get("default_egg_price_per_peti", PricingConfig().default_egg_price_per_peti),
        "pricing.default_egg_price_per_peti",
    )
    if price <= 0:
        raise ValueError("pricing.default_egg_price_per_peti must be positive")
    return PricingConfig(default_egg_price_per_peti=price)


def parse_alerts(data: dict[str, Any]) -> AlertConfig:
    defaults = AlertConfig()
    threshold = parse_decimal(
        data.get("low_feed_stock_bags", defaults.low_feed_stock_bags),
        "alerts.low_feed_stock_bags",
    )
    if threshold < 0:
        raise ValueError("alerts.low_feed_stock_bags must not be negative")
    limit = data.get("upcoming_vaccinations_limit", defaults.upcoming_vaccinations_limit)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValueError(
            f"alerts.upcoming_vaccinations_limit must be a non-negative integer, got {limit!r}"
        )
    return AlertConfig(low_feed_stock_bags=threshold, upcoming_vaccinations_limit=limit)


def parse_logging(data: dict[str, Any]) -> LoggingConfig:
    level = str(data.get("level", LoggingConfig().level)).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"logging.level is not a logging level: {level!r}")
    return LoggingConfig(level=level)


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{key} must be a mapping, got {type(section).__name__}")
    return section


def parse_farm_config(data: dict[str, Any]) -> FarmConfig:
    """
    Parse a ``FarmConfig`` from a dict.

    Preconditions:
        - ``data`` contains at least ``farm_name``.
    Raises:
        KeyError: if ``farm_name`` is missing.
        ValueError: if ``data`` or a section is not a mapping, or any
            section holds an invalid value.
    """
    if not isinstance(data, dict):
        raise ValueError(
            f"configuration must be a mapping, got {type(data).__name__}"
        )
    farm_name = str(data["farm_name"]).strip()
    if not farm_name:
        raise ValueError("farm_name must be a non-empty string")
    return FarmConfig(
        farm_name=farm_name,
        storage=parse_storage(_section(data, "storage")),
        engine=parse_engine(_section(data, "engine")),
        pricing=parse_pricing(_section(data, "pricing")),
        alerts=parse_alerts(_section(data, "alerts")),
        logging=parse_logging(_section(data, "logging")),
        checksum=compute_checksum(data),
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()

"""
poultry_config -- single public entrypoint for farm configuration.

Responsibility:
    ``get_active_config()`` is the only way runtime code obtains
    configuration.  It reads YAML (the packaged ``defaults.yaml`` unless a
    path is given), validates it and returns a frozen ``FarmConfig``.

Architecture position:
    Configuration -- sits above ``poultry_kernel``.  The kernel never
    imports from this package; ``poultry_config.bridges`` turns a
    FarmConfig into kernel objects.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``KeyError`` / ``ValueError`` -- missing or invalid values.

Audit relevance:
    Every successful call emits a ``POULTRY_CONFIG_TRACE`` log entry with
    the farm name, checksum and the engine policy in force.
"""

from __future__ import annotations

import logging
from pathlib import Path

from poultry_config.loader import load_yaml_file, parse_farm_config
from poultry_config.schema import (
    AlertConfig,
    EngineConfig,
    FarmConfig,
    LoggingConfig,
    PricingConfig,
    StorageConfig,
)

_logger = logging.getLogger("poultry_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(config_path: Path | str | None = None) -> FarmConfig:
    """The only public configuration entrypoint.

    Args:
        config_path: YAML file to load.  Defaults to the packaged
            ``defaults.yaml``.

    Raises:
        FileNotFoundError: If the file does not exist.
        KeyError: If a required key is missing.
        ValueError: If a value fails validation.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = parse_farm_config(load_yaml_file(path))

    _logger.info(
        "POULTRY_CONFIG_TRACE",
        extra={
            "trace_type": "POULTRY_CONFIG_TRACE",
            "config_path": str(path),
            "farm_name": config.farm_name,
            "checksum": config.checksum,
            "document_name": config.storage.document_name,
            "underflow_policy": config.engine.underflow_policy.value,
        },
    )
    return config


__all__ = [
    "AlertConfig",
    "EngineConfig",
    "FarmConfig",
    "LoggingConfig",
    "PricingConfig",
    "StorageConfig",
    "get_active_config",
]

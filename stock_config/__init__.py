"""
stock_config -- single public entrypoint for stock configuration.

Responsibility:
    Provides the way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``StockConfig``.

Architecture position:
    Configuration -- YAML-driven.  This package sits above ``stock_kernel``
    and below ``stock_modules`` / ``scripts``.  The kernel MUST NEVER import
    from ``stock_config``; ``bridges`` translates configuration into kernel
    types.

Failure modes:
    - ``FileNotFoundError`` -- the configuration file does not exist.
    - ``KeyError`` / ``ValueError`` -- schema or structural failures.

Every successful ``get_active_config()`` call emits a ``stock_config_loaded``
log entry with the source path, checksum and location count.
"""

from __future__ import annotations

import logging
from pathlib import Path

from stock_config.loader import load_config
from stock_config.schema import StockConfig

_logger = logging.getLogger("stock_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "stock.yaml"


def get_active_config(path: Path | str | None = None) -> StockConfig:
    """
    Load and validate the stock configuration.

    Args:
        path: Override path to a YAML file.  Defaults to
            ``stock_config/defaults/stock.yaml``.
    """
    source = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    config = load_config(source)
    _logger.info(
        "stock_config_loaded",
        extra={
            "config_path": str(source),
            "checksum": config.checksum,
            "location_count": len(config.locations),
            "seed_user_count": len(config.seed_users),
            "seed_item_count": len(config.seed_items),
        },
    )
    return config


__all__ = ["DEFAULT_CONFIG_PATH", "StockConfig", "get_active_config"]

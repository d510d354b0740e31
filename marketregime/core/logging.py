"""
MarketRegime: Logging Setup

Console and file logging for the regime engine, the correlation monitor,
the dashboard backend and the operator scripts. Every module obtains its
logger through :func:`get_logger`, so all records land under the
``marketregime`` namespace and share one level setting.

Key responsibilities:
- Attach console and (optional) file handlers to the root logger once
  per process
- Hand out ``marketregime.*`` loggers, configuring logging on first use

Configuration:
- LOG_LEVEL: level for the root and ``marketregime`` loggers
- LOG_FILE: log file path; an empty value logs to the console only

External dependencies:
- logging: Python standard library logging framework

Thread safety: Thread-safe (handler setup happens once; the logging
module itself serialises emission)

Author: MarketRegime Team
Created: 2026-02-02
Last Modified: 2026-02-12
Status: Development
Version: v0.2.0
"""

# ============================================================================
# Imports
# ============================================================================

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from marketregime.core.config import MarketRegimeConfig, get_config

# ============================================================================
# Module setup
# ============================================================================

PACKAGE_LOGGER = "marketregime"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# ============================================================================
# Public API
# ============================================================================


def setup_logging(config: Optional[MarketRegimeConfig] = None) -> None:
    """Configure process-wide logging from ``config``.

    Does nothing when the root logger already has handlers, so repeated
    calls (one per imported module, plus app startup and each script's
    ``main``) never duplicate output. Under pytest the capture handlers
    count as configured logging.

    Args:
        config: Optional configuration object. If omitted, the global
            configuration will be loaded via :func:`get_config`.
    """

    if config is None:
        config = get_config()

    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(log_level)


def get_logger(name: str) -> logging.Logger:
    """Return the ``marketregime`` logger for ``name``.

    Module ``__name__`` values already carry the package prefix and are
    used as-is; any other name is nested under ``marketregime.``.
    """

    setup_logging()
    if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")

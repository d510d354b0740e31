"""
MarketRegime: Configuration Management

This module provides centralised configuration management for the
market regime engine. It loads configuration from environment variables
(optionally via a .env file), with strongly typed access via Pydantic
BaseSettings.

Key responsibilities:
- Load and validate configuration from environment variables
- Provide typed configuration objects for storage, logging and simulation
- Expose a cached global configuration accessor for convenience

External dependencies:
- pydantic: Data validation and settings management
- pydantic-settings: Environment variable integration for settings
- python-dotenv: Optional .env loading for local development

Database tables accessed:
- None (configuration only)

Thread safety: Thread-safe (configuration is immutable after initial load)

Author: MarketRegime Team
Created: 2026-02-02
Last Modified: 2026-02-09
Status: Development
Version: v0.2.0
"""

# ============================================================================
# Imports
# ============================================================================

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# ============================================================================
# Data Models
# ============================================================================


StoreBackend = Literal["memory", "file", "postgres"]


class DatabaseConfig(BaseModel):
    """Database connection configuration for the Postgres store backend.

    Attributes:
        host: Database host name or IP address.
        port: TCP port for the PostgreSQL instance.
        name: Database name.
        user: Database user for connections.
        password: Password for the database user.
        pool_size: Maximum number of connections in the pool.
    """

    host: str
    port: int
    name: str
    user: str
    password: str
    pool_size: int = 5


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (e.g. "INFO", "DEBUG").
        file: Path to the primary log file.
    """

    level: str = "INFO"
    file: str = "marketregime.log"


class SimulationConfig(BaseModel):
    """Parameters for the simulated correlation monitor.

    Attributes:
        days: Simulation horizon in trading days.
        window: Default rolling correlation window in trading days.
        seed: Optional seed for the random source. ``None`` produces fresh
            values on every refresh.
    """

    days: int = 250
    window: int = 60
    seed: Optional[int] = None


class MarketRegimeConfig(BaseSettings):
    """Main configuration loaded from environment variables.

    Environment variables use the following mapping by default:

    - LOG_LEVEL / LOG_FILE for logging
    - STORE_BACKEND / STORE_PATH for the key-value persistence port
    - RUNTIME_DB_* for the Postgres store backend
    - SIMULATION_DAYS / CORRELATION_WINDOW / RANDOM_SEED for simulation
    - ENVIRONMENT for environment name (development/staging/production)
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: str = Field(default="marketregime.log", alias="LOG_FILE")

    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Persistence
    store_backend: StoreBackend = Field(default="file", alias="STORE_BACKEND")
    store_path: str = Field(default="marketregime_store.json", alias="STORE_PATH")
    change_log_limit: int = Field(default=50, gt=0, alias="CHANGE_LOG_LIMIT")

    # Runtime DB (postgres backend only)
    runtime_db_host: str = Field(default="localhost", alias="RUNTIME_DB_HOST")
    runtime_db_port: int = Field(default=5432, alias="RUNTIME_DB_PORT")
    runtime_db_name: str = Field(default="marketregime", alias="RUNTIME_DB_NAME")
    runtime_db_user: str = Field(default="marketregime", alias="RUNTIME_DB_USER")
    runtime_db_password: str = Field(default="", alias="RUNTIME_DB_PASSWORD")

    # Simulation
    simulation_days: int = Field(default=250, gt=0, alias="SIMULATION_DAYS")
    correlation_window: int = Field(default=60, alias="CORRELATION_WINDOW")
    random_seed: Optional[int] = Field(default=None, alias="RANDOM_SEED")

    @field_validator("correlation_window")
    @classmethod
    def _check_window(cls, value: int) -> int:
        # WINDOWS lives in a leaf module so this import cannot cycle back here.
        from marketregime.core.types import WINDOWS

        if value not in WINDOWS:
            raise ValueError(f"CORRELATION_WINDOW must be one of {WINDOWS}, got {value}")
        return value

    @property
    def runtime_db(self) -> DatabaseConfig:
        """Return database configuration for the runtime DB."""

        return DatabaseConfig(
            host=self.runtime_db_host,
            port=self.runtime_db_port,
            name=self.runtime_db_name,
            user=self.runtime_db_user,
            password=self.runtime_db_password,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Return logging configuration."""

        return LoggingConfig(level=self.log_level, file=self.log_file)

    @property
    def simulation(self) -> SimulationConfig:
        """Return simulation configuration.

        Environment variables:
        - SIMULATION_DAYS
        - CORRELATION_WINDOW
        - RANDOM_SEED
        """

        return SimulationConfig(
            days=self.simulation_days,
            window=self.correlation_window,
            seed=self.random_seed,
        )


# ============================================================================
# Public API
# ============================================================================


def load_config(env_file: Optional[Path] = None) -> MarketRegimeConfig:
    """Load configuration.

    For local development this function will attempt to load a `.env` file
    from the current working directory if one is present. Environment
    variables always take precedence over values from `.env`.

    Args:
        env_file: Optional explicit path to a `.env` file. If omitted,
            the function will look for `.env` in the current working
            directory.

    Returns:
        A fully populated :class:`MarketRegimeConfig` instance.

    Raises:
        FileNotFoundError: If an explicit ``env_file`` is provided but
            does not exist.
    """

    if env_file is not None:
        if not env_file.exists():
            msg = f"Environment file not found: {env_file}"
            raise FileNotFoundError(msg)
        # An explicit env_file overrides existing values so tests and
        # local runs can reliably control configuration.
        load_dotenv(env_file, override=True)
    else:
        default_env = Path(".env")
        if default_env.exists():
            load_dotenv(default_env)

    return MarketRegimeConfig()  # type: ignore[call-arg]


_global_config: Optional[MarketRegimeConfig] = None


def get_config() -> MarketRegimeConfig:
    """Return the global configuration singleton.

    The configuration is loaded on first access and cached for subsequent
    calls.

    Returns:
        A cached :class:`MarketRegimeConfig` instance.
    """

    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config

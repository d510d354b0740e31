"""
MarketRegime: Tests for Configuration Management

Test suite for ``marketregime.core.config``. Covers:
- Default configuration values
- Environment variable overrides
- .env loading behaviour
"""

from __future__ import annotations

from pathlib import Path

import pytest

from marketregime.core.config import MarketRegimeConfig, get_config, load_config


class TestMarketRegimeConfig:
    """Tests for the MarketRegimeConfig settings model."""

    def test_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Default values should match sensible local-development defaults."""

        for var in ("STORE_BACKEND", "SIMULATION_DAYS", "CORRELATION_WINDOW", "RANDOM_SEED", "CHANGE_LOG_LIMIT"):
            monkeypatch.delenv(var, raising=False)

        config = MarketRegimeConfig()

        assert config.runtime_db_host == "localhost"
        assert config.runtime_db_port == 5432
        assert config.store_backend == "file"
        assert config.simulation_days == 250
        assert config.correlation_window == 60
        assert config.random_seed is None
        assert config.change_log_limit == 50

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Environment variables must override default values."""

        monkeypatch.setenv("STORE_BACKEND", "memory")
        monkeypatch.setenv("CORRELATION_WINDOW", "90")
        monkeypatch.setenv("RANDOM_SEED", "42")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        config = MarketRegimeConfig()

        assert config.store_backend == "memory"
        assert config.correlation_window == 90
        assert config.random_seed == 42
        assert config.log_level.upper() == "DEBUG"

    def test_invalid_store_backend_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORE_BACKEND", "redis")

        with pytest.raises(ValueError):
            MarketRegimeConfig()

    @pytest.mark.parametrize("value", ["0", "-1"])
    def test_non_positive_change_log_limit_rejected(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("CHANGE_LOG_LIMIT", value)

        with pytest.raises(ValueError):
            MarketRegimeConfig()

    def test_non_positive_simulation_days_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIMULATION_DAYS", "0")

        with pytest.raises(ValueError):
            MarketRegimeConfig()

    def test_unsupported_correlation_window_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Only the monitor's 30/60/90-day windows are accepted."""

        monkeypatch.setenv("CORRELATION_WINDOW", "45")

        with pytest.raises(ValueError):
            MarketRegimeConfig()

    def test_sub_views(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Helper properties should expose typed sub-configurations."""

        monkeypatch.setenv("SIMULATION_DAYS", "120")
        config = MarketRegimeConfig()

        runtime_db = config.runtime_db
        assert runtime_db.host == config.runtime_db_host
        assert runtime_db.port == config.runtime_db_port
        assert runtime_db.name == config.runtime_db_name

        assert config.simulation.days == 120
        assert config.simulation.window == config.correlation_window
        assert config.logging.file == config.log_file


class TestLoadConfig:
    """Tests for the top-level load_config function."""

    def test_load_from_explicit_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """An explicit env_file should be loaded when it exists."""

        monkeypatch.delenv("STORE_PATH", raising=False)
        monkeypatch.delenv("RUNTIME_DB_PORT", raising=False)
        env_path = tmp_path / ".env.test"
        env_path.write_text("STORE_PATH=from_env_file.json\nRUNTIME_DB_PORT=5440\n")

        config = load_config(env_file=env_path)

        assert config.store_path == "from_env_file.json"
        assert config.runtime_db_port == 5440

        # load_dotenv writes into os.environ; undo it for later tests.
        monkeypatch.delenv("STORE_PATH", raising=False)
        monkeypatch.delenv("RUNTIME_DB_PORT", raising=False)

    def test_missing_explicit_env_file_raises(self, tmp_path: Path) -> None:
        """A missing explicit env file should raise FileNotFoundError."""

        missing = tmp_path / "does_not_exist.env"
        with pytest.raises(FileNotFoundError):
            load_config(env_file=missing)


class TestGetConfigSingleton:
    """Tests for the get_config singleton accessor."""

    def test_get_config_returns_singleton(self) -> None:
        """get_config should always return the same instance within a process."""

        config_1 = get_config()
        config_2 = get_config()

        assert config_1 is config_2
        assert isinstance(config_1.store_path, str)

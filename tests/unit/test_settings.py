import pytest
from pydantic import ValidationError

from geokml.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings(_env_file=None)
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings(_env_file=None)
        assert s.db_port == 5432

    def test_default_worker_timings(self) -> None:
        s = Settings(_env_file=None)
        assert s.worker_poll_timeout_seconds == 0.5
        assert s.worker_error_backoff_seconds == 0.5

    def test_default_ws_user(self) -> None:
        s = Settings(_env_file=None)
        assert s.ws_default_user_id == "anonymous"


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings(_env_file=None)
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings(_env_file=None)
        assert s.db_host == "db.example.com"

    def test_loads_poll_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WORKER_POLL_TIMEOUT_SECONDS", "2.5")
        s = Settings(_env_file=None)
        assert s.worker_poll_timeout_seconds == 2.5


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_invalid_backoff_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WORKER_ERROR_BACKOFF_SECONDS", "soon")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

import pytest
from pydantic import ValidationError

from rag_ingestion.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_max_file_size_is_100_mib(self) -> None:
        s = Settings()
        assert s.max_file_size_bytes == 104_857_600

    def test_default_quarantine_bucket(self) -> None:
        s = Settings()
        assert s.quarantine_bucket == "rag-document-quarantine"

    def test_default_event_source(self) -> None:
        s = Settings()
        assert s.event_source == "rag.document-ingestion"

    def test_default_watch_bounds(self) -> None:
        s = Settings()
        assert s.watch_initial_delay_seconds == 3.0
        assert s.watch_max_attempts == 50
        assert s.watch_max_consecutive_errors == 3

    def test_default_stage_poll_interval(self) -> None:
        s = Settings()
        assert s.stage_poll_interval_seconds == 2.0


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_object_store_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OBJECT_STORE_BACKEND", "local")
        s = Settings()
        assert s.object_store_backend == "local"

    def test_loads_status_endpoint(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EMBEDDING_STATUS_ENDPOINT", "https://embed.internal")
        s = Settings()
        assert s.embedding_status_endpoint == "https://embed.internal"

    def test_loads_max_file_size(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_FILE_SIZE_BYTES", "1024")
        s = Settings()
        assert s.max_file_size_bytes == 1024


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_watch_attempts_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WATCH_MAX_ATTEMPTS", "abc")
        with pytest.raises(ValidationError):
            Settings()

"""Unit tests for configuration, the Supabase client, logging and passwords."""

import logging
from unittest.mock import MagicMock, patch

from jobtracker.core.security import hash_password, pwd_context


class TestSettings:
    """Settings loading via pydantic-settings."""

    def test_settings_loads_storage_fields(self) -> None:
        """Given env vars are set, settings picks them up."""
        env_overrides = {
            "STORAGE_PLATFORM": "cloud",
            "SUPABASE_URL": "https://test.supabase.co",
            "SUPABASE_KEY": "test-key-123",
            "SQLITE_PATH": "/tmp/tracker.db",
        }
        with patch.dict("os.environ", env_overrides, clear=False):
            from jobtracker.core.config import Settings

            s = Settings()
            assert s.STORAGE_PLATFORM == "cloud"
            assert s.SUPABASE_URL == "https://test.supabase.co"
            assert s.SUPABASE_KEY == "test-key-123"
            assert s.SQLITE_PATH == "/tmp/tracker.db"

    def test_settings_defaults(self) -> None:
        """Given no overrides, the embedded backend is selected."""
        with patch.dict("os.environ", {}, clear=True):
            from jobtracker.core.config import Settings

            s = Settings(_env_file=None)
            assert s.STORAGE_PLATFORM == "native"
            assert s.SQLITE_PATH == "jobtracker.db"
            assert s.KV_STORE_DIR == ".jobtracker"
            assert s.ALLOWED_ORIGINS == "*"
            assert s.LOG_LEVEL == "INFO"

    def test_settings_env_is_case_insensitive(self) -> None:
        with patch.dict("os.environ", {"storage_platform": "web"}, clear=False):
            from jobtracker.core.config import Settings

            assert Settings().STORAGE_PLATFORM == "web"


class TestSupabaseClient:
    """Supabase singleton client."""

    def test_get_supabase_returns_client(self) -> None:
        """Given valid settings, get_supabase returns a Client."""
        mock_client = MagicMock()
        with patch("jobtracker.db.supabase.create_client", return_value=mock_client):
            # Reset singleton
            import jobtracker.db.supabase as supa_mod

            supa_mod._client = None
            client = supa_mod.get_supabase()
            assert client is mock_client
            supa_mod._client = None

    def test_get_supabase_is_singleton(self) -> None:
        """Given multiple calls, get_supabase returns the same instance."""
        mock_client = MagicMock()
        with patch(
            "jobtracker.db.supabase.create_client", return_value=mock_client
        ) as mock_create:
            import jobtracker.db.supabase as supa_mod

            supa_mod._client = None
            first = supa_mod.get_supabase()
            second = supa_mod.get_supabase()
            assert first is second
            mock_create.assert_called_once()
            supa_mod._client = None


class TestLogging:
    """Structured logging configuration."""

    def test_setup_logging_configures_root_logger(self) -> None:
        """Given setup_logging is called, root logger has a handler."""
        from jobtracker.core.logging import setup_logging

        setup_logging()
        root = logging.getLogger()
        assert len(root.handlers) > 0
        handler = root.handlers[-1]
        assert handler.formatter is not None
        fmt = handler.formatter._fmt
        assert "%(levelname)" in fmt
        assert "%(asctime)" in fmt
        assert "%(name)" in fmt

    def test_setup_logging_quiets_third_party_loggers(self) -> None:
        from jobtracker.core.logging import setup_logging

        setup_logging()
        assert logging.getLogger("aiosqlite").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING


class TestPasswords:
    """bcrypt hashing through passlib."""

    def test_hash_is_not_plaintext(self) -> None:
        hashed = hash_password("s3cret")
        assert hashed != "s3cret"
        assert hashed.startswith("$2")

    def test_hash_matches_only_its_password(self) -> None:
        hashed = hash_password("s3cret")
        assert pwd_context.verify("s3cret", hashed)
        assert not pwd_context.verify("wrong", hashed)

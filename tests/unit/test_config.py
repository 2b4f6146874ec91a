"""Unit tests for config loading behavior."""

import os
import tempfile
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from src.config import Config
from src.config import env_bool
from src.models.settings import Settings


class TestEnvBool:
    def test_env_bool_parses_boolean_values(self):
        """Test that env_bool helper correctly parses boolean strings."""
        test_cases = [
            ("true", True),
            ("True", True),
            ("1", True),
            ("yes", True),
            ("on", True),
            ("false", False),
            ("0", False),
            ("no", False),
            ("", False),
        ]

        for value, expected in test_cases:
            with patch.dict(os.environ, {"TEST_BOOL": value}):
                assert env_bool("TEST_BOOL") == expected, f"Failed for value: {value}"

    def test_env_bool_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert env_bool("MISSING_BOOL", True) is True


class TestConfigDefaults:
    def test_config_has_required_fields(self):
        for field in (
            "DEBUG",
            "LOG_LEVEL",
            "SECRET_KEY",
            "DATABASE_URL",
            "MUTATION_LATENCY",
            "SESSION_IDLE_TTL",
            "WTF_CSRF_ENABLED",
        ):
            assert hasattr(Config, field), f"Config missing required field: {field}"

    def test_database_url_constructed_from_data_dir_and_name(self):
        assert Config.DATABASE_URL.startswith("sqlite+aiosqlite:///")
        assert Config.DATABASE_URL.endswith(f"{Config.DATABASE_NAME}.db")

    def test_mutation_latency_is_float(self):
        assert isinstance(Config.MUTATION_LATENCY, float)


class TestSettings:
    def test_defaults(self):
        settings = Settings.model_construct()

        assert settings.mutation_latency == 2.0
        assert settings.database_name == "todos"
        assert settings.log_level == "INFO"

    def test_from_env_file_parses_types(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            env_file = os.path.join(tmpdir, ".env")
            with open(env_file, "w") as f:
                f.write("MUTATION_LATENCY=0.5\n")
                f.write("DEBUG=yes\n")
                f.write("LOG_LEVEL=debug\n")

            settings = Settings.from_env_file(env_file)

        assert settings.mutation_latency == 0.5
        assert settings.debug is True
        assert settings.log_level == "DEBUG"

    def test_missing_env_file(self):
        with pytest.raises(FileNotFoundError):
            Settings.from_env_file("/nonexistent/.env")

        settings = Settings.from_env_file("/nonexistent/.env", validate=False)
        assert settings.debug is False

    def test_rejects_negative_latency(self):
        with pytest.raises(ValidationError):
            Settings(mutation_latency=-1)

    def test_rejects_negative_session_idle_ttl(self):
        assert Settings().session_idle_ttl == 3600.0
        with pytest.raises(ValidationError):
            Settings(session_idle_ttl=-5)

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

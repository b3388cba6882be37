"""Tests for AuracoreSettings."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from auracore.config import AuracoreSettings
from auracore.constants import DEFAULT_DATA_DIR, DEFAULT_DB_FILENAME


class TestAuracoreSettings:
    """Test settings loading from the environment."""

    def test_reads_prefixed_environment(self, tmp_path: Path) -> None:
        """Test that env_setup's AURACORE_* values are picked up."""
        settings = AuracoreSettings()

        assert settings.data_dir == tmp_path / "auracore-home"
        assert settings.db_filename == "auracore.db"
        assert settings.log_level == "DEBUG"

    def test_get_db_path(self, tmp_path: Path) -> None:
        settings = AuracoreSettings(data_dir=tmp_path / "store", db_filename="work.db")

        assert settings.get_db_path() == (tmp_path / "store" / "work.db").resolve()

    def test_get_db_path_expands_user(self) -> None:
        settings = AuracoreSettings(data_dir=Path("~/auracore-test"))

        path = settings.get_db_path()

        assert "~" not in str(path)
        assert path.is_absolute()

    def test_defaults_without_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("AURACORE_DATA_DIR", "AURACORE_DB_FILENAME", "AURACORE_LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)

        settings = AuracoreSettings(_env_file=None)

        assert settings.data_dir == DEFAULT_DATA_DIR
        assert settings.db_filename == DEFAULT_DB_FILENAME
        assert settings.log_level == "INFO"

    def test_env_is_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AURACORE_LOG_LEVEL", raising=False)
        monkeypatch.setenv("auracore_log_level", "WARNING")

        assert AuracoreSettings().log_level == "WARNING"

    def test_invalid_log_level_rejected(self) -> None:
        os.environ["AURACORE_LOG_LEVEL"] = "VERBOSE"

        with pytest.raises(ValidationError):
            AuracoreSettings()

    def test_lowercase_log_level_accepted(self) -> None:
        os.environ["AURACORE_LOG_LEVEL"] = "debug"

        assert AuracoreSettings().log_level == "DEBUG"

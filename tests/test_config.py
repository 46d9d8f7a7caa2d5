"""
Tests for settings and logging configuration
"""

import pytest
from pydantic import ValidationError

from cube_core import CubeSettings, LogSettings, Position, Over, First, get_settings, set_settings
from cube_core.config import LOG_LEVEL_ENV
from cube_core.log import configure_logging, disable_logging


class TestSettings:
    def test_defaults(self):
        settings = CubeSettings()
        assert settings.separator == "|"
        assert settings.melt_separator == "."
        assert settings.hash_base == 100
        assert settings.log.level == "WARNING"

    def test_load_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        path = tmp_path / "cube.yml"
        path.write_text("separator: ','\nhash_base: 10\nlog:\n  level: info\n")

        settings = CubeSettings.load(str(path))
        assert settings.separator == ","
        assert settings.hash_base == 10
        assert settings.log.level == "INFO"

    def test_env_overrides_log_level(self, monkeypatch):
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        assert CubeSettings.load().log.level == "DEBUG"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CubeSettings.load(str(tmp_path / "missing.yml"))

    def test_hash_base_must_be_positive(self):
        with pytest.raises(ValidationError):
            CubeSettings(hash_base=0)

    def test_set_settings_changes_separators(self):
        set_settings(CubeSettings(separator=","))
        assert get_settings().separator == ","
        assert Position(1, "a").to_short_string() == "1,a"


class TestLogging:
    def test_operations_log_when_enabled(self, capsys, matrix2d):
        configure_logging(LogSettings(level="DEBUG"))
        try:
            matrix2d.names(Over(First))
        finally:
            disable_logging()

        assert "names Over(First) on rank 2" in capsys.readouterr().err

    def test_silent_by_default(self, capsys, matrix2d):
        matrix2d.names(Over(First))
        assert "names" not in capsys.readouterr().err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

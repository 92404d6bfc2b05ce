"""Tests for application settings."""

from __future__ import annotations

from scriptdeck.config import AppSettings, HistorySettings, LoggingSettings, default_data_dir, load_settings, save_settings


class TestDefaultDataDir:
    def test_scriptdeck_home_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SCRIPTDECK_HOME", str(tmp_path / "sd"))
        assert default_data_dir() == tmp_path / "sd"

    def test_xdg_data_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SCRIPTDECK_HOME", raising=False)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
        monkeypatch.setattr("scriptdeck.config.sys.platform", "linux")
        monkeypatch.setattr("scriptdeck.config.os.name", "posix")
        assert default_data_dir() == tmp_path / "xdg" / "scriptdeck"


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings()
        assert settings.logging.level == "WARNING"
        assert settings.history.enabled is True
        assert settings.execution.shell == ""

    def test_document_paths(self, tmp_path):
        settings = AppSettings(data_dir=str(tmp_path))
        assert settings.config_file == tmp_path / "config.json"
        assert settings.commands_file == tmp_path / "commands.json"

    def test_save_and_load(self, tmp_path, monkeypatch):
        import scriptdeck.config as cfg_module

        monkeypatch.setattr(cfg_module, "SETTINGS_FILE", tmp_path / "settings.toml")
        monkeypatch.setattr(cfg_module, "DATA_DIR", tmp_path)

        settings = AppSettings(
            logging=LoggingSettings(level="INFO", file="/tmp/sd.log"),
            history=HistorySettings(enabled=False, db_path="~/h.db"),
        )
        settings.execution.shell = "bash -c"

        save_settings(settings)
        assert (tmp_path / "settings.toml").exists()

        loaded = load_settings()
        assert loaded.logging.level == "INFO"
        assert loaded.logging.file == "/tmp/sd.log"
        assert loaded.history.enabled is False
        assert loaded.history.db_path == "~/h.db"
        assert loaded.execution.shell == "bash -c"

    def test_env_overrides(self, tmp_path, monkeypatch):
        import scriptdeck.config as cfg_module

        monkeypatch.setattr(cfg_module, "SETTINGS_FILE", tmp_path / "missing.toml")
        monkeypatch.setenv("SCRIPTDECK_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("SCRIPTDECK_HISTORY_ENABLED", "no")
        monkeypatch.setenv("SCRIPTDECK_SHELL", "zsh -c")

        loaded = load_settings()
        assert loaded.logging.level == "DEBUG"
        assert loaded.history.enabled is False
        assert loaded.execution.shell == "zsh -c"

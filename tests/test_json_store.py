"""Tests for the JSON command and config stores."""

from __future__ import annotations

import json

import pytest

from scriptdeck.errors import NotFoundError, StorageError
from scriptdeck.storage.json_store import CommandStore, ConfigStore
from scriptdeck.storage.models import Command, Config


@pytest.fixture
def config_store(tmp_path):
    return ConfigStore(tmp_path / "config.json")


@pytest.fixture
def command_store(config_store, tmp_path):
    return CommandStore(config_store, tmp_path / "commands.json")


class TestConfigStore:
    def test_missing_file_gives_defaults_without_writing(self, config_store):
        config = config_store.load()
        assert config == Config()
        assert not config_store.path.exists()

    def test_save_and_load(self, tmp_path, config_store):
        config_store.save(Config(safe_mode=True, commands_path="~/cmds.json", accessibility_notice_dismissed=True))

        reloaded = ConfigStore(tmp_path / "config.json").load()
        assert reloaded.safe_mode is True
        assert reloaded.commands_path == "~/cmds.json"
        assert reloaded.accessibility_notice_dismissed is True

    def test_unknown_keys_survive_save(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"safe_mode": False, "window": {"w": 800}}))
        store = ConfigStore(path)

        config = store.load()
        config.safe_mode = True
        store.save(config)

        data = json.loads(path.read_text())
        assert data["safe_mode"] is True
        assert data["window"] == {"w": 800}

    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(StorageError):
            ConfigStore(path).load()

    def test_load_returns_copy(self, config_store):
        config = config_store.load()
        config.safe_mode = True
        assert config_store.load().safe_mode is False


class TestCommandStore:
    def test_missing_file_is_empty(self, command_store):
        assert command_store.list() == []

    def test_round_trip_preserves_order_and_absent_fields(self, command_store):
        commands = [
            Command(id="1", name="Test 1", script="echo 1"),
            Command(
                id="2",
                name="Test 2",
                script="echo 2",
                kill_script="pkill -f echo",
                shortcut="Ctrl+2",
                description="Description",
            ),
            Command(id="0", name="Test 0", script="echo 0", description=""),
        ]
        command_store.persist(commands)

        assert command_store.list() == commands
        raw = json.loads(command_store.path.read_text())
        assert "kill_script" not in raw[0]
        assert raw[2]["description"] == ""

    def test_persist_creates_parent_dirs(self, config_store, tmp_path):
        store = CommandStore(config_store, tmp_path / "a" / "b" / "commands.json")
        store.persist([Command(id="1", name="n", script="s")])
        assert store.path.exists()

    def test_persist_leaves_no_temp_files(self, command_store, tmp_path):
        command_store.persist([Command(id="1", name="n", script="s")])
        command_store.persist([Command(id="2", name="n", script="s")])
        assert [p.name for p in tmp_path.iterdir() if p.name.endswith(".tmp")] == []

    def test_failed_write_keeps_previous_data(self, command_store):
        command_store.persist([Command(id="1", name="n", script="s")])
        with pytest.raises(StorageError):
            command_store.persist([Command(id="2", name="n", script=object())])  # type: ignore[arg-type]
        assert [c.id for c in command_store.list()] == ["1"]

    def test_commands_path_override_expands_home(self, config_store, command_store, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        config_store.save(Config(commands_path="~/sync/commands.json"))

        assert command_store.path == tmp_path / "home" / "sync" / "commands.json"
        command_store.persist([Command(id="1", name="n", script="s")])
        assert (tmp_path / "home" / "sync" / "commands.json").exists()

    def test_ensure_directory(self, config_store, command_store, tmp_path):
        config_store.save(Config(commands_path=str(tmp_path / "nested" / "dir" / "commands.json")))
        path = command_store.ensure_directory()
        assert path.parent.is_dir()
        assert not path.exists()

    def test_not_a_list_raises(self, command_store):
        command_store.path.write_text(json.dumps({"id": "1"}))
        with pytest.raises(StorageError):
            command_store.list()

    def test_get(self, command_store):
        command_store.persist([Command(id="1", name="n", script="s")])
        assert command_store.get("1").name == "n"
        with pytest.raises(NotFoundError):
            command_store.get("missing")

    def test_string_safe_mode_in_file_raises(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"safe_mode": "false"}))
        with pytest.raises(StorageError):
            ConfigStore(path).load()

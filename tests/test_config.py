import json
from pathlib import Path

import pytest

from mailthread.config import Config
from mailthread.exceptions import ConfigError


class TestConfig:
    def test_config_creates_directories(self, temp_config_dir):
        Config(config_dir=temp_config_dir)

        assert (Path(temp_config_dir) / "state" / "logs").exists()
        assert not (Path(temp_config_dir) / "data").exists()
        assert not (Path(temp_config_dir) / "cache").exists()
        assert (Path(temp_config_dir) / "config.json").exists()

    def test_default_settings(self, test_config):
        mail = test_config.mail_settings
        assert mail["enable_conversation_view"] is True
        assert mail["enable_live_scroll"] is True
        assert mail["primary_folder_id"] == "inbox"
        assert test_config.settings["ui"]["indent"] == 2

    def test_save_and_load_config(self, temp_config_dir):
        config = Config(config_dir=temp_config_dir)
        config.settings["mail"]["primary_folder_id"] = "00AABB"
        config.save_config()

        config2 = Config(config_dir=temp_config_dir)
        assert config2.mail_settings["primary_folder_id"] == "00AABB"

    def test_invalid_json_is_backed_up(self, temp_config_dir):
        config_file = Path(temp_config_dir) / "config.json"
        config_file.write_text("{not json")

        config = Config(config_dir=temp_config_dir)

        assert config.mail_settings["primary_folder_label"] == "inbox"
        assert list(Path(temp_config_dir).glob("config.json.invalid_*"))

    def test_missing_section_is_backed_up(self, temp_config_dir):
        config_file = Path(temp_config_dir) / "config.json"
        config_file.write_text(json.dumps({"mail": {}}))

        config = Config(config_dir=temp_config_dir)

        assert "ui" in config.settings
        assert list(Path(temp_config_dir).glob("config.json.invalid_*"))

    def test_values_are_validated(self, temp_config_dir):
        config_file = Path(temp_config_dir) / "config.json"
        config_file.write_text(
            json.dumps(
                {
                    "mail": {"enable_live_scroll": "no"},
                    "ui": {"indent": 40},
                    "logging": {"level": "chatty"},
                }
            )
        )

        config = Config(config_dir=temp_config_dir)

        assert config.mail_settings["enable_live_scroll"] is False
        assert config.mail_settings["enable_conversation_view"] is True
        assert config.settings["ui"]["indent"] == 8
        assert config.settings["logging"]["level"] == "INFO"

    def test_restricted_directory(self):
        with pytest.raises(ConfigError):
            Config(config_dir="/etc")

    def test_log_dir_under_state(self, test_config, temp_config_dir):
        assert test_config.get_log_dir() == Path(temp_config_dir) / "state" / "logs"

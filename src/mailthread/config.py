# ABOUTME: Configuration management using XDG Base Directory specification
# ABOUTME: Handles the threading settings file and the state directory for logs
import copy
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from mailthread.exceptions import ConfigError

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

DEFAULT_SETTINGS: dict[str, Any] = {
    "mail": {
        "enable_conversation_view": True,
        "enable_live_scroll": True,  # threading needs continuous loading
        "primary_folder_id": "inbox",
        "primary_folder_label": "inbox",
    },
    "ui": {
        "indent": 2,  # spaces per depth level in the CLI table
        "show_counts": True,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}


class Config:
    """
    Configuration management for mailthread using XDG Base Directory specification.

    Directories (following XDG standard):
    - Config: $XDG_CONFIG_HOME/mailthread (default: ~/.config/mailthread)
    - State: $XDG_STATE_HOME/mailthread (default: ~/.local/state/mailthread)
    """

    def __init__(self, config_dir: str | None = None):
        if config_dir is None:
            xdg_config_home = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
            config_dir = os.path.join(xdg_config_home, 'mailthread')
            logger.info(f"Using XDG config directory: {config_dir}")

            xdg_state_home = os.environ.get('XDG_STATE_HOME', os.path.expanduser('~/.local/state'))
            self.state_dir = Path(xdg_state_home) / 'mailthread'
        else:
            # An explicit config_dir (e.g. in tests) keeps the state directory under it
            logger.info(f"Using custom config directory: {config_dir}")
            self.state_dir = Path(config_dir) / 'state'

        self.config_dir = Path(config_dir).resolve()

        restricted_dirs = ["/", "/etc", "/usr", "/bin", "/sbin", "/var", "/tmp"]
        if str(self.config_dir) in restricted_dirs:
            raise ConfigError(
                f"Cannot use system directory as config dir: {config_dir}",
                recovery_hint="Pass --config-dir or set MAILTHREAD_CONFIG_DIR to a private directory",
            )

        self._ensure_directories()
        self._load_config()

    def _ensure_directories(self):
        """Create necessary XDG directories"""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
            self.state_dir.mkdir(parents=True, exist_ok=True, mode=0o700)

            (self.state_dir / "logs").mkdir(exist_ok=True, mode=0o700)
        except OSError as e:
            logger.error(f"Failed to create directories: {e}")
            raise ConfigError(f"Cannot create config directories: {e}") from e

    def _validate_config_structure(self, settings: dict) -> bool:
        """Validate that loaded config has required structure."""
        required_keys = {
            "mail": dict,
            "ui": dict,
            "logging": dict,
        }

        if not isinstance(settings, dict):
            logger.error("Config root is not an object")
            return False

        for key, expected_type in required_keys.items():
            if key not in settings:
                logger.error(f"Config missing required key: {key}")
                return False
            if not isinstance(settings[key], expected_type):
                logger.error(f"Config key {key} has wrong type: {type(settings[key])}")
                return False

        return True

    def _backup_invalid(self, config_file: Path) -> Path:
        ts = datetime.now().strftime("%Y%m%d%H%M%S")
        backup_path = config_file.parent / f"config.json.invalid_{ts}"
        config_file.rename(backup_path)
        return backup_path

    def _load_config(self):
        """Load configuration with structure validation"""
        config_file = self.config_dir / "config.json"
        if not config_file.exists():
            self.settings = self._default_settings()
            self.save_config()
            return

        try:
            with open(config_file) as f:
                loaded_settings = json.load(f)
        except json.JSONDecodeError as e:
            backup_path = self._backup_invalid(config_file)
            logger.error(f"Invalid JSON in config file, backed up to {backup_path}: {e}")
            self.settings = self._default_settings()
            self.save_config()
            return

        if not self._validate_config_structure(loaded_settings):
            backup_path = self._backup_invalid(config_file)
            logger.error(f"Invalid config structure, backed up to {backup_path}")
            self.settings = self._default_settings()
            self.save_config()
            return

        self.settings = loaded_settings
        self._validate_settings()

    def _default_settings(self) -> dict[str, Any]:
        """Default configuration settings"""
        return copy.deepcopy(DEFAULT_SETTINGS)

    def _validate_settings(self):
        """Fill in missing values and coerce settings into acceptable ranges"""
        defaults = self._default_settings()
        for section, values in defaults.items():
            for key, value in values.items():
                self.settings[section].setdefault(key, value)

        mail_settings = self.settings["mail"]
        for flag in ("enable_conversation_view", "enable_live_scroll"):
            if not isinstance(mail_settings[flag], bool):
                logger.warning(f"mail.{flag} is not a boolean ({mail_settings[flag]!r}), coercing")
                mail_settings[flag] = str(mail_settings[flag]).strip().lower() in ("1", "true", "yes", "on")

        ui_settings = self.settings["ui"]
        try:
            indent = int(ui_settings["indent"])
        except (TypeError, ValueError):
            logger.warning(f"Invalid ui.indent {ui_settings['indent']!r}, using 2")
            indent = 2
        ui_settings["indent"] = min(max(0, indent), 8)

        logging_settings = self.settings["logging"]
        level = str(logging_settings.get("level") or "INFO").upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning(
                f"Invalid log level '{level}', defaulting to 'INFO'. "
                f"Valid options: {', '.join(VALID_LOG_LEVELS)}"
            )
            level = "INFO"
        logging_settings["level"] = level

    @property
    def mail_settings(self) -> dict[str, Any]:
        return self.settings["mail"]

    def save_config(self):
        """Save configuration to disk"""
        config_file = self.config_dir / "config.json"
        try:
            with open(config_file, "w") as f:
                json.dump(self.settings, f, indent=2, sort_keys=True)
            logger.debug("Configuration saved")
        except OSError as e:
            logger.error(f"Failed to save config: {e}")

    def get_log_dir(self) -> Path:
        return self.state_dir / "logs"


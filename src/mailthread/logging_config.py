# ABOUTME: Logging configuration setup for mailthread
# ABOUTME: Applies the config's logging section: console output, optional rotating log file
import logging
import logging.handlers
import sys
from pathlib import Path

from mailthread.config import Config

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(config: Config, debug: bool = False) -> logging.Logger:
    """
    Configure the mailthread logger from config.settings["logging"].

    Args:
        config: Loaded configuration; "level" sets the threshold and "file",
            when set, names a log file inside config.get_log_dir()
        debug: Force DEBUG regardless of the configured level

    Returns:
        The configured "mailthread" logger
    """
    log_settings = config.settings["logging"]
    level_name = "DEBUG" if debug else log_settings["level"]
    level = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger("mailthread")
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    log_file = log_settings.get("file")
    if log_file:
        # Only the file name is honoured, logs always land in the state dir
        file_path = config.get_log_dir() / Path(log_file).name
        file_handler = logging.handlers.RotatingFileHandler(
            file_path, maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    def handle_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception

    logger.debug(f"Logging initialized at {level_name} level")
    return logger

"""
Entry point for cratedui.

Sets up file logging (the terminal belongs to Textual while the app runs)
and starts the Textual application.

Logging:
  - RotatingFileHandler at the configured path or get_log_path()
  - level and rotation from the `logging` config section
"""

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from . import get_log_path
from .config import ConfigManager, get_config_manager

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(config: Optional[ConfigManager] = None) -> logging.Handler:
    """Install the rotating file handler on the root logger and return it."""
    config = config or get_config_manager()
    log_config = config.get_config().logging
    path = config.get_custom_log_path() or get_log_path()

    handler = RotatingFileHandler(
        path,
        maxBytes=int(log_config.max_size_mb) * 1024 * 1024,
        backupCount=int(log_config.backup_count),
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(getattr(logging, config.get_log_level(), logging.INFO))
    root.addHandler(handler)
    return handler


def main() -> None:
    config = get_config_manager()
    setup_logging(config)
    logging.getLogger(__name__).info("Starting cratedui")

    from .textual_app import run
    try:
        run(config)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()

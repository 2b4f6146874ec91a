import logging
import os
from typing import Dict

from quart.logging import default_handler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LoggingHelper:
    """Helper class for setting up logging.

    Log levels of individual loggers can be overridden using envvars, e.g.:
    SQLALCHEMY_ENGINE_LOG_LEVEL=INFO
    """

    def __init__(self, app=None):
        self._enabled_loggers: Dict[str, str] = {}
        self._handler = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Configure the root logger from the app's LOG_LEVEL setting.

        Both the application logger and library loggers propagate to a single
        console handler on the root logger.
        """
        log_level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
        numeric_level = getattr(logging, log_level, None)
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {log_level}")

        root_logger = logging.getLogger()
        root_logger.setLevel(numeric_level)

        # create_app may run more than once per process (tests)
        if not any(getattr(h, "_todo_console", False) for h in root_logger.handlers):
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            console_handler._todo_console = True
            root_logger.addHandler(console_handler)
            self._handler = console_handler

        app.logger.removeHandler(default_handler)
        app.logger.setLevel(numeric_level)

        self._configure_third_party_loggers(app)
        self._load_enabled_loggers(app)

        app.extensions["logging_helper"] = self
        app.logger.info(f"Logging initialised with level: {log_level}")

    def _configure_third_party_loggers(self, app):
        """Set third-party loggers to WARNING, leaving the app's own alone."""
        for name in list(logging.root.manager.loggerDict):
            if name == app.name or name.startswith(f"{app.name}."):
                continue
            logging.getLogger(name).setLevel(logging.WARNING)

    def _load_enabled_loggers(self, app):
        """Load explicitly configured loggers from environment."""
        for key, value in os.environ.items():
            if key.endswith("_LOG_LEVEL"):
                logger_name = key[:-10].lower().replace("_", ".")
                self.set_logger_level(app, logger_name, value)

    def set_logger_level(self, app, logger_name: str, level: str):
        """Set log level for a specific logger.

        Args:
            logger_name: Name of the logger
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        numeric_level = getattr(logging, level.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {level}")

        logging.getLogger(logger_name).setLevel(numeric_level)
        self._enabled_loggers[logger_name] = level
        app.logger.info(f"Set {logger_name} log level to {level}")

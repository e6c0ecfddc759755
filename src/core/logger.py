import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict
from .config import Config
from .exceptions import LoggerError

class Logger:
    """
    Attaches handlers to the package root logger for host applications.

    The library itself only logs through module loggers; an application
    opts in to output once at startup:

        config = Config()
        config.set("logging.level", "DEBUG")
        config.set("logging.console_output", True)
        Logger(config)

        async with Client(user_id, api_token, api_secret, config=config) as client:
            ...
    """

    _loggers: Dict[str, logging.Logger] = {}

    def __init__(self, config: Config):
        """Initialize logger with configuration"""
        self.config = config

        logger_name = self.config.get("logging.name", "src")
        if logger_name in self._loggers:
            self.logger = self._loggers[logger_name]
            for handler in self.logger.handlers[:]:
                self.logger.removeHandler(handler)
                handler.close()
        else:
            self.logger = logging.getLogger(logger_name)
            self._loggers[logger_name] = self.logger

        self.logger.setLevel(self._get_log_level())

        self.formatter = logging.Formatter(
            self.config.get("logging.format", '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )

        log_file = self.config.get("logging.file")
        if log_file:
            try:
                path = Path(log_file)
                if not path.parent.exists():
                    path.parent.mkdir(parents=True, exist_ok=True)

                handler = RotatingFileHandler(
                    str(path),
                    maxBytes=self.config.get("logging.max_size", 1024 * 1024),
                    backupCount=self.config.get("logging.backup_count", 3)
                )
                handler.setFormatter(self.formatter)
                self.logger.addHandler(handler)
            except OSError as e:
                raise LoggerError(f"Failed to setup log file: {str(e)}")

        if self.config.get("logging.console_output", False):
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(self.formatter)
            self.logger.addHandler(console_handler)

    def _get_log_level(self) -> int:
        """Convert string log level to logging constant"""
        level_name = str(self.config.get("logging.level", "INFO")).upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise LoggerError(f"Invalid log level: {level_name}")
        return level

    def _prepare_extra(self, extra: Dict[str, Any] = None) -> Dict[str, Any]:
        extra_context = {
            'method': '-',
            'path': '-'
        }
        if extra:
            extra_context.update(extra)
        return extra_context

    def _format(self, message: str, extra: Dict[str, Any]) -> str:
        if extra['method'] == '-' and extra['path'] == '-':
            return message
        return f"{message} [{extra['method']} {extra['path']}]"

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        extra = self._prepare_extra(kwargs.get('extra'))
        self.logger.log(level, self._format(message, extra), extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message"""
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message"""
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message"""
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message"""
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        """Log critical message"""
        self._log(logging.CRITICAL, message, **kwargs)

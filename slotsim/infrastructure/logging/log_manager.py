# slotsim/infrastructure/logging/log_manager.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Dict, Any, Union

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

DEFAULT_LOGGING_CONFIG = {
    'level': 'INFO',
    'console': True,
    'console_level': 'INFO',
    'file': {
        'enabled': False,
        'path': 'logs/slotsim.log',
        'level': 'DEBUG',
        'max_bytes': 10 * 1024 * 1024,  # 10 MB
        'backup_count': 5
    },
    'loggers': {
        'domain.machine': {'level': 'INFO'},
        'domain.session': {'level': 'INFO'},
        'application.simulation': {'level': 'INFO'},
        'infrastructure.rng': {'level': 'INFO'}
    }
}

_LEVELS = {
    'CRITICAL': logging.CRITICAL,
    'ERROR': logging.ERROR,
    'WARNING': logging.WARNING,
    'WARN': logging.WARNING,
    'INFO': logging.INFO,
    'DEBUG': logging.DEBUG,
    'NOTSET': logging.NOTSET
}


class LogManager:
    """
    Applies the 'logging' section of a simulation config to the root logger:
    console and rotating file handlers plus per-layer logger levels.
    """
    def __init__(self):
        self.root_logger = logging.getLogger()
        self.loggers = {}  # name -> configured logger
        self.handlers = {}  # 'console' / 'file' -> handler we installed
        self.initialized = False

    def initialize(self, config: Dict[str, Any]):
        """
        Install handlers and logger levels. Later calls are ignored until shutdown().

        Args:
            config: Logging section of a simulation config
        """
        if self.initialized:
            return

        base_level = self._get_log_level(config.get('level', 'INFO'))
        formatter = logging.Formatter(config.get('format', DEFAULT_FORMAT),
                                      config.get('date_format', DEFAULT_DATE_FORMAT))

        # Replace whatever handlers a previous basicConfig left behind
        self.root_logger.setLevel(base_level)
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)

        if config.get('console', True):
            self._install('console', logging.StreamHandler(sys.stdout),
                          config.get('console_level', base_level), formatter)

        file_config = config.get('file') or {}
        if file_config.get('enabled', False):
            path = file_config.get('path', DEFAULT_LOGGING_CONFIG['file']['path'])
            if os.path.dirname(path):
                os.makedirs(os.path.dirname(path), exist_ok=True)

            rotating = RotatingFileHandler(
                path,
                maxBytes=file_config.get('max_bytes', DEFAULT_LOGGING_CONFIG['file']['max_bytes']),
                backupCount=file_config.get('backup_count', DEFAULT_LOGGING_CONFIG['file']['backup_count'])
            )
            self._install('file', rotating, file_config.get('level', base_level), formatter)

        # 'domain' before 'domain.machine', so the more specific level wins
        logger_configs = config.get('loggers') or {}
        for name in sorted(logger_configs, key=lambda n: n.count('.')):
            settings = logger_configs[name] or {}
            logger = logging.getLogger(name)
            logger.setLevel(self._get_log_level(settings.get('level', base_level)))
            logger.propagate = settings.get('propagate', True)
            self.loggers[name] = logger

        self.root_logger.debug(
            f"Logging ready: level={logging.getLevelName(base_level)}, handlers={sorted(self.handlers)}, "
            f"loggers={sorted(self.loggers)}"
        )
        self.initialized = True

    def _install(self, key: str, handler: logging.Handler, level: Union[str, int], formatter: logging.Formatter):
        handler.setLevel(self._get_log_level(level))
        handler.setFormatter(formatter)
        self.root_logger.addHandler(handler)
        self.handlers[key] = handler

    def shutdown(self):
        """Detach and close the handlers installed by initialize()."""
        for handler in self.handlers.values():
            self.root_logger.removeHandler(handler)
            handler.close()
        self.handlers.clear()
        self.loggers.clear()
        self.initialized = False

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def _get_log_level(self, level_name: Union[str, int]) -> int:
        """Numeric level for a name or number; unknown names map to INFO."""
        if isinstance(level_name, int):
            return level_name
        return _LEVELS.get(str(level_name).upper(), logging.INFO)


# Shared by the CLI
log_manager = LogManager()


def initialize_logging(config: Dict[str, Any] = None) -> LogManager:
    """
    Initialize the shared log manager.

    Args:
        config: Logging section; DEFAULT_LOGGING_CONFIG when None

    Returns:
        The shared LogManager
    """
    log_manager.initialize(config if config is not None else DEFAULT_LOGGING_CONFIG)
    return log_manager

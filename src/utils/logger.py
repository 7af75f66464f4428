"""
Logger Utility Module
Provides centralized logging configuration for the Equipment Maintenance Prioritization System
"""

import logging
import logging.handlers
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any
from functools import wraps
import colorlog

from config.settings import settings

# Default configuration
DEFAULT_CONFIG = {
    'level': 'INFO',
    'format': '%(asctime)s - %(name)s - %(levelname)s - [run %(run_id)s] %(message)s',
    'file': 'logs/prioritization.log',
    'max_bytes': 10485760,  # 10MB
    'backup_count': 5,
    'enable_console': True,
    'enable_file': False,
    'enable_color': True,
}

# Thread-local storage for context
context = threading.local()


class ContextFilter(logging.Filter):
    """Add contextual information to log records"""

    def filter(self, record):
        """Add context data to log record"""
        record.run_id = getattr(context, 'run_id', 'N/A')

        if hasattr(context, 'extra'):
            for key, value in context.extra.items():
                setattr(record, key, value)

        return True


class LoggerManager:
    """Centralized logger management"""

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize logger manager"""
        if not hasattr(self, 'initialized'):
            self.initialized = True
            self.loggers = {}
            self.config = self._load_config()
            self.setup_logging()

    def _load_config(self) -> Dict[str, Any]:
        """Load logging configuration from settings"""
        config = DEFAULT_CONFIG.copy()
        logging_config = settings.get('logging', {}) or {}

        # Handle nested file config
        file_config = logging_config.get('file')
        if isinstance(file_config, dict):
            config['file'] = file_config.get('path', config['file'])
            config['max_bytes'] = file_config.get('max_bytes', config['max_bytes'])
            config['backup_count'] = file_config.get('backup_count', config['backup_count'])

        for key in ['level', 'enable_console', 'enable_file', 'enable_color']:
            if key in logging_config:
                config[key] = logging_config[key]

        config['level'] = str(config['level']).upper()
        return config

    def setup_logging(self):
        """Setup root logger configuration"""
        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, self.config['level']))

        # Remove handlers installed by a previous setup
        for handler in list(root_logger.handlers):
            if getattr(handler, '_prioritization_handler', False):
                root_logger.removeHandler(handler)
                handler.close()

        context_filter = ContextFilter()

        if self.config['enable_console']:
            console_handler = self._create_console_handler()
            console_handler.addFilter(context_filter)
            root_logger.addHandler(console_handler)

        if self.config['enable_file']:
            file_handler = self._create_file_handler()
            file_handler.addFilter(context_filter)
            root_logger.addHandler(file_handler)

    def _create_console_handler(self) -> logging.Handler:
        """Create console handler with optional color support"""
        console_handler = logging.StreamHandler(sys.stdout)

        if self.config['enable_color']:
            formatter = colorlog.ColoredFormatter(
                '%(log_color)s' + self.config['format'] + '%(reset)s',
                datefmt='%Y-%m-%d %H:%M:%S',
                log_colors={
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            )
        else:
            formatter = logging.Formatter(
                self.config['format'],
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        console_handler.setFormatter(formatter)
        console_handler.setLevel(getattr(logging, self.config['level']))
        console_handler._prioritization_handler = True

        return console_handler

    def _create_file_handler(self) -> logging.Handler:
        """Create rotating file handler"""
        log_file = Path(self.config['file'])
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=self.config['max_bytes'],
            backupCount=self.config['backup_count'],
            encoding='utf-8'
        )

        formatter = logging.Formatter(
            self.config['format'],
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        file_handler.setFormatter(formatter)
        file_handler.setLevel(getattr(logging, self.config['level']))
        file_handler._prioritization_handler = True

        return file_handler

    def get_logger(self, name: str) -> logging.Logger:
        """Get or create a logger instance"""
        if name not in self.loggers:
            self.loggers[name] = logging.getLogger(name)

        return self.loggers[name]

    def set_level(self, level: str, logger_name: Optional[str] = None):
        """Set logging level for specific logger or root"""
        level_obj = getattr(logging, level.upper())

        if logger_name:
            logging.getLogger(logger_name).setLevel(level_obj)
        else:
            root_logger = logging.getLogger()
            root_logger.setLevel(level_obj)
            for handler in root_logger.handlers:
                if getattr(handler, '_prioritization_handler', False):
                    handler.setLevel(level_obj)


def _manager() -> LoggerManager:
    return LoggerManager()


def get_logger(name: str = None) -> logging.Logger:
    """Get a logger instance

    The first call installs the console/file handlers configured in settings.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    if name is None:
        name = 'prioritization'

    return _manager().get_logger(name)


def set_level(level: str, logger_name: Optional[str] = None):
    """Set logging level

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Optional specific logger name
    """
    _manager().set_level(level, logger_name)


def set_run_id(run_id: str):
    """Set run ID for log correlation

    Args:
        run_id: Identifier of the current prioritization run
    """
    context.run_id = run_id


def clear_context():
    """Clear contextual information"""
    if hasattr(context, 'run_id'):
        del context.run_id
    if hasattr(context, 'extra'):
        context.extra.clear()


class LogContext:
    """Context manager for temporary log context"""

    def __init__(self, run_id: Optional[str] = None, **kwargs):
        """Initialize context manager

        Args:
            run_id: Run identifier to tag records with
            **kwargs: Extra context data to add
        """
        self.run_id = run_id
        self.context_data = kwargs
        self.previous_run_id = None
        self.previous_extra = None

    def __enter__(self):
        """Enter context"""
        self.previous_run_id = getattr(context, 'run_id', None)
        self.previous_extra = dict(getattr(context, 'extra', {}))
        if self.run_id is not None:
            context.run_id = self.run_id
        if self.context_data:
            if not hasattr(context, 'extra'):
                context.extra = {}
            context.extra.update(self.context_data)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context"""
        if self.previous_run_id is None:
            if hasattr(context, 'run_id'):
                del context.run_id
        else:
            context.run_id = self.previous_run_id
        context.extra = self.previous_extra
        return False


def log_execution_time(func):
    """Decorator to log function execution time

    Args:
        func: Function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        start_time = datetime.now()

        try:
            logger.debug(f"Starting {func.__name__}")
            result = func(*args, **kwargs)
            execution_time = (datetime.now() - start_time).total_seconds()
            logger.info(f"{func.__name__} completed in {execution_time:.3f} seconds")
            return result

        except Exception as e:
            execution_time = (datetime.now() - start_time).total_seconds()
            logger.error(f"{func.__name__} failed after {execution_time:.3f} seconds: {str(e)}")
            raise

    return wrapper

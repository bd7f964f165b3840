"""
Centralized logging for the EV charging scheduler

All package output goes through the ``ev_charging`` logger. Modules log via
the convenience functions below, passing their short module name so that
individual modules can be muted from ``ev_charging.config.logging_config``.
"""

import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from ev_charging.config.logging_config import (
    get_logging_config,
    is_detailed_logging_enabled,
    is_module_logging_enabled,
)

ROOT_LOGGER_NAME = 'ev_charging'

LOG_FORMATS = {
    'detailed': '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
    'simple': '%(levelname)s - %(message)s',
    'minimal': '%(message)s',
}


class ModuleFilter(logging.Filter):
    """Drops records from modules switched off in MODULE_LOGGING"""

    def filter(self, record: logging.LogRecord) -> bool:
        prefix = ROOT_LOGGER_NAME + '.'
        if not record.name.startswith(prefix):
            return True
        module = record.name[len(prefix):].split('.', 1)[0]
        return is_module_logging_enabled(module)


class EVChargingLogger:
    """
    Owns the handlers of the package logger

    Creating an instance replaces whatever handlers a previous instance
    installed, so the last configuration wins.
    """

    def __init__(self,
                 log_level: str = "INFO",
                 enable_console: bool = True,
                 enable_file: bool = False,
                 log_dir: str = "debug_logs",
                 log_format: str = "detailed"):
        """
        Args:
            log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
            enable_console: Write records to stdout
            enable_file: Write records to a timestamped file in log_dir
            log_dir: Directory for log files
            log_format: "detailed", "simple" or "minimal"
        """
        self.log_level = getattr(logging, log_level.upper())
        self.enable_console = enable_console
        self.enable_file = enable_file
        self.log_dir = log_dir
        self.log_format = log_format
        self.log_file: Optional[str] = None

        self.logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.logger.setLevel(self.log_level)
        self.logger.propagate = False
        self._replace_handlers(self._build_handlers())

    def _build_handlers(self) -> List[logging.Handler]:
        formatter = logging.Formatter(LOG_FORMATS.get(self.log_format, LOG_FORMATS['minimal']))
        handlers: List[logging.Handler] = []

        if self.enable_console:
            handlers.append(logging.StreamHandler(sys.stdout))

        if self.enable_file:
            os.makedirs(self.log_dir, exist_ok=True)
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            self.log_file = os.path.join(self.log_dir, f'ev_charging_{timestamp}.log')
            handlers.append(logging.FileHandler(self.log_file, encoding='utf-8'))

        for handler in handlers:
            handler.setLevel(self.log_level)
            handler.setFormatter(formatter)
            handler.addFilter(ModuleFilter())

        if not handlers:
            handlers.append(logging.NullHandler())
        return handlers

    def _replace_handlers(self, handlers: List[logging.Handler]) -> None:
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
        for handler in handlers:
            self.logger.addHandler(handler)

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Child logger for a module, e.g. get_logger('optimization')"""
        return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}') if name else self.logger

    def debug(self, message: str, module: Optional[str] = None):
        self.get_logger(module).debug(message)

    def info(self, message: str, module: Optional[str] = None):
        self.get_logger(module).info(message)

    def warning(self, message: str, module: Optional[str] = None):
        self.get_logger(module).warning(message)

    def error(self, message: str, module: Optional[str] = None):
        self.get_logger(module).error(message)

    def print_summary(self, title: str, data: Dict[str, Any]):
        """Print a boxed key/value summary to the console"""
        if not self.enable_console:
            return

        rule = '=' * 50
        lines = ['', rule, title, rule]
        for key, value in data.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 1000:
                lines.append(f"  {key}: {value:,}")
            else:
                lines.append(f"  {key}: {value}")
        lines.append(rule)
        print('\n'.join(lines))

    def get_status(self) -> Dict[str, Any]:
        return {
            'log_level': logging.getLevelName(self.log_level),
            'enable_console': self.enable_console,
            'enable_file': self.enable_file,
            'log_dir': self.log_dir,
            'log_format': self.log_format,
            'log_file': self.log_file,
        }


_global_logger: Optional[EVChargingLogger] = None


def setup_logger(**kwargs) -> EVChargingLogger:
    """Install a new global logger configuration"""
    global _global_logger
    _global_logger = EVChargingLogger(**kwargs)
    return _global_logger


def setup_logger_for_mode(mode: Optional[str] = None) -> EVChargingLogger:
    """Install the configuration of a named mode (PRODUCTION, DEBUG, ...)"""
    return setup_logger(**get_logging_config(mode))


def get_global_logger() -> EVChargingLogger:
    global _global_logger
    if _global_logger is None:
        _global_logger = EVChargingLogger()
    return _global_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return get_global_logger().get_logger(name)


def debug(message: str, module: Optional[str] = None):
    get_global_logger().debug(message, module)


def info(message: str, module: Optional[str] = None):
    get_global_logger().info(message, module)


def warning(message: str, module: Optional[str] = None):
    get_global_logger().warning(message, module)


def error(message: str, module: Optional[str] = None):
    get_global_logger().error(message, module)


def log_detailed(message: str, component: str, module: Optional[str] = None):
    """Per-step trace, emitted only while the component is switched on"""
    if is_detailed_logging_enabled(component):
        get_global_logger().debug(f"[{component}] {message}", module)


def print_summary(title: str, data: Dict[str, Any]):
    get_global_logger().print_summary(title, data)

"""
Logging modes and per-module switches for the EV charging scheduler
"""

# Each mode maps onto the keyword arguments of EVChargingLogger
LOGGING_MODES = {
    # warnings and errors only
    'PRODUCTION': {'log_level': 'WARNING', 'enable_console': True, 'enable_file': False, 'log_format': 'minimal'},
    # cycle-level progress on the console
    'DEVELOPMENT': {'log_level': 'INFO', 'enable_console': True, 'enable_file': False, 'log_format': 'simple'},
    # everything, mirrored to a log file
    'DEBUG': {'log_level': 'DEBUG', 'enable_console': True, 'enable_file': True, 'log_format': 'detailed'},
    'SILENT': {'log_level': 'CRITICAL', 'enable_console': False, 'enable_file': False, 'log_format': 'minimal'},
    # file only, keeps pytest output clean
    'TESTING': {'log_level': 'DEBUG', 'enable_console': False, 'enable_file': True, 'log_format': 'detailed'},
}

# Used when no mode is given; the CLI reads EV_CHARGING_LOG_MODE instead
DEFAULT_LOGGING_MODE = 'DEVELOPMENT'

LOG_DIR = "debug_logs"

# Modules set to False are muted regardless of level
MODULE_LOGGING = {
    'optimization': True,
    'q_learning': True,
    'forecasting': True,
    'fleet_service': True,
    'synthetic_fleet': True,
    'config_service': True,
    'cli': True,
}

# Per-step traces routed through log_detailed(); each one is very chatty
DETAILED_LOGGING_COMPONENTS = {
    'station_selection': False,   # every candidate station distance
    'window_search': False,       # every candidate start hour cost
    'q_updates': False,           # every Q-table update
}


def get_logging_config(mode: str = None) -> dict:
    """Logger settings for a mode name; unknown names fall back to the default mode"""
    name = (mode or DEFAULT_LOGGING_MODE).upper()
    settings = LOGGING_MODES.get(name, LOGGING_MODES[DEFAULT_LOGGING_MODE])
    return {**settings, 'log_dir': LOG_DIR}


def is_module_logging_enabled(module_name: str) -> bool:
    return MODULE_LOGGING.get(module_name, True)


def set_module_logging(module_name: str, enabled: bool):
    MODULE_LOGGING[module_name] = enabled


def is_detailed_logging_enabled(component: str) -> bool:
    return DETAILED_LOGGING_COMPONENTS.get(component, False)


def enable_detailed_logging(component: str):
    DETAILED_LOGGING_COMPONENTS[component] = True


def disable_detailed_logging(component: str):
    DETAILED_LOGGING_COMPONENTS[component] = False


__all__ = [
    'LOGGING_MODES',
    'DEFAULT_LOGGING_MODE',
    'LOG_DIR',
    'MODULE_LOGGING',
    'DETAILED_LOGGING_COMPONENTS',
    'get_logging_config',
    'is_module_logging_enabled',
    'set_module_logging',
    'is_detailed_logging_enabled',
    'enable_detailed_logging',
    'disable_detailed_logging',
]

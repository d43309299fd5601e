"""PathPattern Infrastructure Layer.

Services used by the pattern engine and the command line tool:
- ConfigManager: Hierarchical YAML/environment configuration
- Logger: Structured logging system
"""

from .config_manager import ConfigError
from .config_manager import ConfigManager as Config
from .config_manager import ConfigManager, ConfigSource, ConfigValue
from .logger import Logger, LogLevel, configure_loggers, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "configure_loggers",
    "get_logger",
    "set_global_logger",
    # ConfigManager exports
    "ConfigSource",
    "ConfigValue",
    "ConfigError",
    "ConfigManager",
    "Config",
]

# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging configuration for the tightly coupled filter

Modules log through logging.getLogger(__name__), so everything lives below
the "tcnav" logger. Clock jump recovery is reported at WARNING and
per-satellite residuals at TRACE.
"""

import copy
import logging
import sys
from enum import Enum
from typing import Optional, Union

ROOT_LOGGER = "tcnav"


class LogLevel(Enum):
    """Log levels for the system"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


# Add TRACE level to logging
logging.addLevelName(LogLevel.TRACE.value, "TRACE")


def trace(self, message, *args, **kwargs):
    """Add trace method to logger"""
    if self.isEnabledFor(LogLevel.TRACE.value):
        self._log(LogLevel.TRACE.value, message, args, **kwargs)


logging.Logger.trace = trace


def level_value(level: Union[str, int]) -> int:
    """Numeric log level from a name such as 'TRACE' or a number"""
    if isinstance(level, int):
        return level
    try:
        return LogLevel[level.upper()].value
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None


class ColoredFormatter(logging.Formatter):
    """Colored log formatter"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        # Other handlers share the record
        record = copy.copy(record)
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(name: str = ROOT_LOGGER,
                 level: Union[str, int] = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Setup logger with specified configuration

    Parameters:
    -----------
    name : str
        Logger name, "tcnav" covers every module of the package
    level : str or int
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Log file path (if None, no file logging)
    console : bool
        Enable console output

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    value = level_value(level)
    logger = logging.getLogger(name)
    logger.setLevel(value)
    logger.handlers = []

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(value)
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(value)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get logger by name, relative names are placed below "tcnav" """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class LogContext:
    """Context manager for temporary log level change

    Examples:
        >>> with LogContext(get_logger("fusion.tightly"), "DEBUG"):
        ...     corrector.correct(raw)
    """

    def __init__(self, logger: logging.Logger, level: Union[str, int]):
        self.logger = logger
        self.new_level = level_value(level)
        self.old_level = None

    def __enter__(self):
        self.old_level = self.logger.level
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.old_level)


def configure_logging(config: dict) -> logging.Logger:
    """
    Configure the package logger and per-module levels

    Parameters:
    -----------
    config : dict
        'level' for the package logger, optional 'log_file' and 'console'
        as in setup_logger(), and 'module_levels' mapping logger names
        such as 'tcnav.fusion.tightly' to levels

    Returns:
    --------
    logging.Logger
        The "tcnav" logger

    Example config:
    {
        'level': 'INFO',
        'log_file': 'tcnav.log',
        'module_levels': {
            'tcnav.fusion.tightly': 'DEBUG',
            'tcnav.gnss.solver': 'WARNING'
        }
    }
    """
    module_levels = {name: level_value(level)
                     for name, level in config.get('module_levels', {}).items()}
    root = setup_logger(ROOT_LOGGER,
                        config.get('level', "INFO"),
                        config.get('log_file'),
                        config.get('console', True))
    for name, value in module_levels.items():
        get_logger(name).setLevel(value)

    # Handler levels admit the most verbose module
    lowest = min([root.level, *module_levels.values()])
    for handler in root.handlers:
        handler.setLevel(lowest)
    return root

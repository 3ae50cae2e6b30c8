"""Shared utilities: logging setup."""

from .logging_config import setup_logging, get_logger, JsonFormatter, SimulationLogger

__all__ = [
    'setup_logging',
    'get_logger',
    'JsonFormatter',
    'SimulationLogger',
]

"""
Structured Logging for Simulation Runs
======================================

Provides consistent logging across the simulation package.

Usage:
    from simcormult.utils.logging_config import get_logger, SimulationLogger

    # Simple logging
    logger = get_logger(__name__)
    logger.info("Drawing latent utilities")

    # Structured simulation logging
    sim_log = SimulationLogger("rmult_bcl")
    sim_log.start(n_subjects=500, clsize=3, ncategories=4)
    sim_log.finished(responses)
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Optional
import json

import numpy as np


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

FORMATS = {
    "standard": "%(asctime)s | %(levelname)-8s | %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
    "json": None  # Handled by JsonFormatter
}


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    format_style: str = "standard"
) -> None:
    """
    Configure logging for the simcormult package.

    Library modules only create loggers; handlers are installed here, which
    the command-line entry point calls once.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for log output
        format_style: "standard", "detailed", or "json"
    """
    handlers = []

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    if format_style == "json":
        console_handler.setFormatter(JsonFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter(FORMATS.get(format_style, FORMATS["standard"]),
                              datefmt="%Y-%m-%d %H:%M:%S")
        )
    handlers.append(console_handler)

    # File handler (if specified)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter(FORMATS["detailed"], datefmt="%Y-%m-%d %H:%M:%S")
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module."""
    return logging.getLogger(name)


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "extra_data"):
            log_data["data"] = record.extra_data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


# =============================================================================
# SIMULATION LOGGER
# =============================================================================

class SimulationLogger:
    """
    Structured logger for one simulation call.

    Example:
        logger = SimulationLogger("rmult_bcl")
        logger.start(n_subjects=500, clsize=3, ncategories=4)
        logger.latent_path("norta")
        logger.finished(responses)
    """

    def __init__(self, name: str):
        self.name = name
        self.start_time: Optional[datetime] = None
        self._logger = get_logger(f"simcormult.simulation.{name}")

    def start(self, n_subjects: int, clsize: int, ncategories: int) -> None:
        """Log simulation start."""
        self.start_time = datetime.now()
        self._logger.info(
            f"Simulating {self.name}: R={n_subjects} subjects, "
            f"T={clsize} occasions, J={ncategories} categories"
        )

    def latent_path(self, path: str) -> None:
        """Log which latent-generation path is active ('norta' or 'external')."""
        self._logger.debug(f"{self.name}: latent utilities from {path} path")

    def finished(self, responses: np.ndarray) -> None:
        """Log completion with the overall response shares."""
        elapsed = (datetime.now() - self.start_time).total_seconds() if self.start_time else 0
        values, counts = np.unique(responses, return_counts=True)
        shares = " | ".join(
            f"{int(v)}: {c / responses.size:.1%}" for v, c in zip(values, counts)
        )
        self._logger.info(
            f"Finished {self.name} in {elapsed:.2f}s | "
            f"{responses.size:,} responses | shares {shares}",
            extra={"extra_data": {
                "n_subjects": int(responses.shape[0]),
                "clsize": int(responses.shape[1]),
                "elapsed_seconds": round(elapsed, 4),
                "shares": {int(v): c / responses.size for v, c in zip(values, counts)},
            }}
        )

    def failed(self, reason: str) -> None:
        """Log a rejected call."""
        self._logger.error(f"Failed: {self.name} | {reason}")

"""
Motor Monitor Utils - Logging & Diagnostics
===========================================

Logging setup and diagnostic helpers.

Features:
---------
1. Logging Setup
   - Console and rotating file handlers
   - Structured log format

2. Module Loggers
   - Consistent naming (one logger per module)

3. Diagnostic Logging
   - Status snapshots
   - Subscriber failures with context
   - Engine statistics summaries

Log Format:
-----------
[2026-10-19 12:30:45.123] [INFO    ] [engine.service] Message here
[TIMESTAMP] [LEVEL] [MODULE] Message

Example:
--------
>>> from utils import setup_logging, get_logger
>>>
>>> setup_logging("logs/", level="INFO", file_output=False)
>>> logger = get_logger(__name__)
>>> logger.info("Monitoring started")

Author: Motor Monitor Team
Date: October 19, 2026
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Dict, Any
from datetime import datetime


# Global logger instance
_loggers = {}


class StructuredFormatter(logging.Formatter):
    """Structured logging formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with structure.

        Args:
            record: Log record

        Returns:
            Formatted string
        """
        timestamp = datetime.fromtimestamp(record.created).strftime(
            "%Y-%m-%d %H:%M:%S.%f"
        )[:-3]

        message = (
            f"[{timestamp}] [{record.levelname:8}] "
            f"[{record.name}] {record.getMessage()}"
        )
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(log_dir: str = "logs",
                  level: str = "INFO",
                  console_output: bool = True,
                  file_output: bool = True) -> None:
    """
    Set up logging configuration.

    Args:
        log_dir: Directory for log files
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        console_output: Enable console output
        file_output: Enable file output

    Example:
        >>> setup_logging("logs/", level="DEBUG")
        >>> logger = get_logger(__name__)
        >>> logger.info("System started")
    """
    numeric_level = getattr(logging, level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    formatter = StructuredFormatter()

    if console_output:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if file_output:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"motor_monitor_{timestamp}.log"

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10*1024*1024,  # 10 MB
            backupCount=5,
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info(f"Logging configured: level={level}, dir={log_dir}")


def get_logger(name: str) -> logging.Logger:
    """
    Get logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def log_snapshot(snapshot, level: int = logging.DEBUG) -> None:
    """
    Log one status snapshot on a single line.

    Args:
        snapshot: MotorStatusSnapshot
        level: Logging level to emit at

    Example:
        >>> log_snapshot(service.get_current_status(), level=logging.INFO)
    """
    logger = get_logger(__name__)

    logger.log(
        level,
        f"{snapshot.status.name}: "
        f"cmd={snapshot.encoder_command}, "
        f"fb={snapshot.encoder_feedback}, "
        f"err={snapshot.position_error:+d}, "
        f"pos={snapshot.position:.2f}, "
        f"spd={snapshot.speed:.2f}, "
        f"trq={snapshot.torque:.1f}%"
    )


def log_statistics(stats: Dict[str, Any]) -> None:
    """
    Log statistics summary.

    Args:
        stats: Statistics dictionary

    Example:
        >>> log_statistics(service.stats.to_dict())
    """
    logger = get_logger(__name__)

    logger.info("=== Statistics Summary ===")
    for key, value in stats.items():
        if isinstance(value, float):
            logger.info(f"{key}: {value:.4f}")
        else:
            logger.info(f"{key}: {value}")


def log_error(error: Exception,
              context: str = "") -> None:
    """
    Log an error with context.

    Args:
        error: Exception that occurred
        context: Context information

    Example:
        >>> try:
        ...     callback(snapshot)
        ... except Exception as e:
        ...     log_error(e, context="Subscriber failed")
    """
    logger = get_logger(__name__)

    if context:
        logger.error(f"{context}: {error!r}")
    else:
        logger.error(f"Error: {error!r}")

    logger.debug("Traceback", exc_info=error)

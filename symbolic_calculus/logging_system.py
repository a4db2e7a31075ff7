"""
Logging System for Symbolic Calculus

Centralized logger with verbosity levels so that library code can trace
strategy attempts and numeric fallbacks without cluttering the terminal.
"""

import logging
import sys
from typing import Optional, Dict, Any
from enum import Enum
import time
from datetime import datetime


class LogLevel(Enum):
    """Enumeration of logging levels for symbolic calculus"""
    SILENT = 0      # No output except critical errors
    MINIMAL = 1     # Warnings and final results
    MODERATE = 2    # Key milestones
    DETAILED = 3    # Per-operation summaries
    VERBOSE = 4     # Strategy-level tracing


class CalculusLogger:
    """
    Centralized logger for symbolic calculus with context-aware formatting
    """

    def __init__(self, log_level: LogLevel = LogLevel.MODERATE,
                 log_to_file: bool = False, log_file_path: Optional[str] = None):
        self.log_level = log_level
        self.log_to_file = log_to_file
        self.start_time = time.time()

        self.logger = logging.getLogger('symbolic_calculus')
        self.logger.setLevel(logging.DEBUG)
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        if self.log_level != LogLevel.SILENT:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if log_to_file:
            if log_file_path is None:
                log_file_path = f"symbolic_calculus_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
            file_handler = logging.FileHandler(log_file_path)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _should_log(self, required_level: LogLevel) -> bool:
        return self.log_level.value >= required_level.value

    def critical(self, message: str):
        """Always logged unless silent"""
        if self.log_level != LogLevel.SILENT:
            self.logger.error(f"CRITICAL: {message}")

    def info(self, message: str, required_level: LogLevel = LogLevel.MINIMAL):
        if self._should_log(required_level):
            self.logger.info(message)

    def milestone(self, message: str):
        if self.log_level != LogLevel.SILENT:
            self.logger.info(f"MILESTONE: {message}")

    def warning(self, message: str):
        if self._should_log(LogLevel.MINIMAL):
            self.logger.warning(message)

    def debug(self, message: str):
        """Debug information - only in verbose mode"""
        if self._should_log(LogLevel.VERBOSE):
            self.logger.debug(f"DEBUG: {message}")

    def comparison_summary(self, results: Dict[str, Dict[str, Any]]):
        """Log a symbolic-versus-numeric comparison table"""
        if not self._should_log(LogLevel.DETAILED):
            return

        elapsed = time.time() - self.start_time
        self.logger.info("=" * 60)
        self.logger.info(f"SYMBOLIC VS NUMERIC ({elapsed:.1f}s since start):")
        self.logger.info("=" * 60)
        for operation, values in results.items():
            for key, value in values.items():
                label = f"{operation}.{key}"
                if isinstance(value, float):
                    self.logger.info(f"{label:.<30} {value:.10g}")
                else:
                    self.logger.info(f"{label:.<30} {value}")


# Global logger instance
_global_logger: Optional[CalculusLogger] = None


def get_logger() -> CalculusLogger:
    """Get or create the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = CalculusLogger()
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global logging level"""
    global _global_logger
    if _global_logger is None:
        _global_logger = CalculusLogger(log_level=level)
    else:
        _global_logger.log_level = level


def configure_logging(log_level: LogLevel = LogLevel.MODERATE,
                      log_to_file: bool = False,
                      log_file_path: Optional[str] = None) -> CalculusLogger:
    """Configure the global logging system"""
    global _global_logger
    _global_logger = CalculusLogger(
        log_level=log_level,
        log_to_file=log_to_file,
        log_file_path=log_file_path
    )
    return _global_logger


def log_info(message: str, level: LogLevel = LogLevel.MINIMAL):
    get_logger().info(message, level)


def log_milestone(message: str):
    get_logger().milestone(message)


def log_warning(message: str):
    get_logger().warning(message)


def log_debug(message: str):
    get_logger().debug(message)


def log_comparison_summary(results: Dict[str, Dict[str, Any]]):
    get_logger().comparison_summary(results)

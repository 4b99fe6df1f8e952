"""
System Reporter - Centralized logging for Sceau components.

Provides SystemReporter for file/console logging with verbose filtering.

Supports stdout logging for CLI use and optional file logging with
retention for long-running hosts.
"""

import logging
import os
import sys
import threading
import time
from typing import Optional

# Constants
LOG_RETENTION_DAYS = 1
LOG_CHECK_INTERVAL = 3600  # 1 hour


class SystemReporter:
    """
    Logger with verbose filtering.

    Supports both file-based logging (development) and stdout logging
    (CLI and containers).

    Verbose Levels:
        0 = Critical only (always visible)
        1 = Important messages (default)
        2 = Detailed information
        3 = Debug/verbose
    """

    def __init__(
        self,
        name: str = "sceau",
        log_dir: Optional[str] = None,
        level: int = logging.INFO,
        verbose: int = 1,
    ) -> None:
        """
        Initialize SystemReporter.

        Args:
            name: Logger name (used for filename if log_dir provided)
            log_dir: Directory for log files. If None, logs to stdout only.
                    Can be relative ("logs") or absolute ("/app/logs")
            level: Python logging level
            verbose: Verbosity filter (0-3)
        """
        self.name = name
        self.verbose = max(0, min(3, verbose))
        self.log_file: Optional[str] = None

        self._init_logger(name, log_dir, level)

    def _init_logger(
        self, name: str, log_dir: Optional[str], level: int
    ) -> None:
        """
        Initialize logger with file and/or console handlers.

        Args:
            name: Logger name
            log_dir: Log directory path (None = stdout only)
            level: Python logging level
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)
        self.logger.handlers.clear()
        self.logger.propagate = False

        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        # Always add console handler (stdout)
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if not log_dir:
            return

        log_dir = os.path.expanduser(log_dir)
        if os.path.isabs(log_dir):
            log_file = os.path.join(log_dir, f"{name}.log")
        else:
            log_file = os.path.join(os.getcwd(), log_dir, f"{name}.log")

        os.makedirs(os.path.dirname(log_file), exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)
        self.log_file = log_file

        retention_thread = threading.Thread(
            target=self._log_retention_worker,
            args=(log_file,),
            daemon=True,
        )
        retention_thread.start()

    def _log_retention_worker(self, log_file: str) -> None:
        """Background worker to rotate old log files."""
        while True:
            try:
                if os.path.exists(log_file):
                    mtime = os.path.getmtime(log_file)
                    age_days = (time.time() - mtime) / 86400

                    if age_days > LOG_RETENTION_DAYS:
                        os.remove(log_file)
                        self.logger.info(
                            f"[SystemReporter] Rotated log file (older than "
                            f"{LOG_RETENTION_DAYS} days): {log_file}"
                        )

            except OSError as e:
                print(f"⚠ Retention worker error: {e}", file=sys.stderr)

            time.sleep(LOG_CHECK_INTERVAL)

    def set_verbose(self, level: int) -> None:
        """Update verbosity level."""
        self.verbose = max(0, min(3, level))
        self.info(
            f"Verbosity set to {self.verbose}",
            context="SystemReporter",
            verbose_level=0,
        )

    def _should_log(self, verbose_level: int) -> bool:
        """Check if message should be logged."""
        return self.verbose >= verbose_level

    # Core logging methods
    def debug(
        self, msg: str, context: str = "system", verbose_level: int = 3
    ) -> None:
        """Log debug message."""
        if self._should_log(verbose_level):
            self.logger.debug(f"[{context}] {msg}")

    def info(
        self, msg: str, context: str = "system", verbose_level: int = 1
    ) -> None:
        """Log info message."""
        if self._should_log(verbose_level):
            self.logger.info(f"[{context}] {msg}")

    def warning(
        self, msg: str, context: str = "system", verbose_level: int = 1
    ) -> None:
        """Log warning message."""
        if self._should_log(verbose_level):
            self.logger.warning(f"[{context}] {msg}")

    def error(
        self, msg: str, context: str = "system", verbose_level: int = 0
    ) -> None:
        """Log error message."""
        if self._should_log(verbose_level):
            self.logger.error(f"[{context}] {msg}")

    def critical(
        self, msg: str, context: str = "system", verbose_level: int = 0
    ) -> None:
        """Log critical message."""
        if self._should_log(verbose_level):
            self.logger.critical(f"[{context}] {msg}")

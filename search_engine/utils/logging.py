"""
Logging configuration and utilities.

All modules log through the standard library; setup_logging wires the root
logger once for the CLI and the search server, with optional daily-rotated
log files cleaned up after the retention period.
"""

import logging
import logging.handlers
import sys
import time
from pathlib import Path
from typing import Optional
from datetime import datetime, timedelta
import threading
import schedule


_cleanup_thread: Optional[threading.Thread] = None
CLEANUP_JOB_TAG = "log-cleanup"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    retention_days: int = 7
) -> None:
    """
    Set up logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        retention_days: Number of days to retain rotated log files
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Rotate at midnight, keep one file per retained day
        file_handler = logging.handlers.TimedRotatingFileHandler(
            log_file,
            when='midnight',
            interval=1,
            backupCount=retention_days,
            encoding='utf-8'
        )
        file_handler.suffix = "%Y-%m-%d"

        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(threadName)s - %(funcName)s:%(lineno)d - %(message)s'
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

        _start_log_cleanup_scheduler(log_path.parent, retention_days)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Standard library logger
    """
    return logging.getLogger(name)


def _start_log_cleanup_scheduler(logs_dir: Path, retention_days: int) -> None:
    """Start the daily log cleanup job in a daemon thread."""
    global _cleanup_thread

    def cleanup_job():
        try:
            cleanup_old_logs(logs_dir, retention_days)
        except OSError as e:
            logging.getLogger(__name__).warning(f"Log cleanup failed: {e}")

    schedule.clear(CLEANUP_JOB_TAG)
    schedule.every().day.at("02:00").do(cleanup_job).tag(CLEANUP_JOB_TAG)

    if _cleanup_thread is not None and _cleanup_thread.is_alive():
        return

    def run_scheduler():
        while True:
            schedule.run_pending()
            time.sleep(60)

    _cleanup_thread = threading.Thread(target=run_scheduler, name="LogCleanup", daemon=True)
    _cleanup_thread.start()


def cleanup_old_logs(logs_dir: Path, retention_days: int = 7) -> int:
    """
    Delete log files older than the retention period.

    Args:
        logs_dir: Log directory
        retention_days: Number of days to keep

    Returns:
        Number of files removed
    """
    if not logs_dir.exists():
        return 0

    cleaned_count = 0
    cutoff_date = datetime.now() - timedelta(days=retention_days)

    for log_file in logs_dir.glob("*.log*"):
        if log_file.is_file():
            file_mtime = datetime.fromtimestamp(log_file.stat().st_mtime)

            if file_mtime < cutoff_date:
                log_file.unlink()
                cleaned_count += 1

    if cleaned_count > 0:
        logging.getLogger(__name__).info(f"Removed {cleaned_count} expired log files from {logs_dir}")

    return cleaned_count

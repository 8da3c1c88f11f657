"""
Logging configuration for the Funding Rate Alert Bot.

Features:
- Console output to stdout for foreground runs
- Rotating system and error logs
- Dedicated funding log with every fetched rate
- Automatic cleanup of old logs (keeps last 7 days)
"""
import glob
import logging
import logging.handlers
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Union

# Rotation settings
MAX_BYTES = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

# Cleanup settings
LOG_RETENTION_DAYS = 7

FUNDING_LOGGER = "funding"


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_level: str = "INFO", log_dir: Union[str, Path] = "logs") -> dict:
    """
    Configure logging with rotation and cleanup.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for log files, created if missing

    Returns:
        dict: Dictionary of named loggers ('system', 'funding')
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # Must run before the handlers below open their files
    deleted_count = cleanup_old_logs(log_path)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    system_handler = _rotating_handler(log_path / "system.log", level, formatter)
    errors_handler = _rotating_handler(log_path / "errors.log", logging.ERROR, formatter)
    funding_handler = _rotating_handler(log_path / "funding.log", logging.INFO, formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)
    root_logger.addHandler(system_handler)
    root_logger.addHandler(errors_handler)

    funding_logger = logging.getLogger(FUNDING_LOGGER)
    funding_logger.handlers.clear()
    funding_logger.addHandler(funding_handler)
    funding_logger.propagate = True  # Also log to root (console + system)

    root_logger.info("=" * 60)
    root_logger.info("Funding Rate Alert Bot logging initialized")
    root_logger.info(f"Log directory: {log_path.absolute()}")
    root_logger.info(f"Log level: {log_level}")
    if deleted_count > 0:
        root_logger.info(f"Cleaned up {deleted_count} old log files")
    root_logger.info("=" * 60)

    return {
        'system': root_logger,
        'funding': funding_logger,
    }


def cleanup_old_logs(log_dir: Union[str, Path] = "logs") -> int:
    """
    Delete log files older than LOG_RETENTION_DAYS.

    Returns:
        Number of files removed
    """
    log_path = Path(log_dir)
    cutoff_time = datetime.now() - timedelta(days=LOG_RETENTION_DAYS)
    deleted_count = 0

    for pattern in (log_path / "*.log", log_path / "*.log.*"):
        for log_file in glob.glob(str(pattern)):
            path = Path(log_file)
            try:
                if datetime.fromtimestamp(path.stat().st_mtime) < cutoff_time:
                    path.unlink()
                    deleted_count += 1
            except OSError as e:
                # Log error but continue cleanup
                logging.error(f"Error cleaning up {path}: {e}")

    return deleted_count


def log_funding_rate(symbol: str, rate: str, debug: bool = False):
    """Record a fetched funding rate in the dedicated funding log."""
    logger = logging.getLogger(FUNDING_LOGGER)
    suffix = " (debug)" if debug else ""
    logger.info(f"{symbol} FR: {rate}%{suffix}")

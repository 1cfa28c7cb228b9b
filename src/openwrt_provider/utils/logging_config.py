"""Logging configuration for the OpenWrt provider.

Provides configurable logging with:
- File-based logging with rotation
- Console output for real-time debugging
- A timing decorator for configure/read operations

Environment Variables:
    OPENWRT_PROVIDER_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    OPENWRT_PROVIDER_LOG_FILE: Path to log file (default: ~/.openwrt-provider/provider.log)
    OPENWRT_PROVIDER_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    OPENWRT_PROVIDER_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from openwrt_provider.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("read")
    async def read(self, config):
        ...
"""
import functools
import logging
import os
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("openwrt_provider.perf")

_HANDLER_MARK = "_openwrt_provider_handler"


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("OPENWRT_PROVIDER_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".openwrt-provider" / "provider.log"
    path_str = os.environ.get("OPENWRT_PROVIDER_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging() -> None:
    """Configure logging for the provider.

    Sets up:
    - Console handler (respects OPENWRT_PROVIDER_LOG_LEVEL)
    - File handler with rotation (DEBUG level - captures everything)

    Calling it again replaces the handlers installed by a previous call.
    """
    log_level = get_log_level()
    log_file = get_log_file()
    max_size_mb = int(os.environ.get("OPENWRT_PROVIDER_LOG_MAX_SIZE", "10"))
    backup_count = int(os.environ.get("OPENWRT_PROVIDER_LOG_BACKUPS", "5"))

    log_file.parent.mkdir(parents=True, exist_ok=True)

    main_format = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(name)-40s | %(levelname)-7s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(main_format)

    root_logger = logging.getLogger("openwrt_provider")
    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()

    for handler in (console_handler, file_handler):
        setattr(handler, _HANDLER_MARK, True)
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter

    root_logger.info(f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}")


def timed(operation: str, label: Optional[str] = None):
    """Decorator to log execution time of coroutines.

    Args:
        operation: Name of the operation (e.g., "configure", "read")
        label: Optional subject label (inferred from ``self.type_name`` if omitted)
    """
    def _label(args: tuple) -> str:
        if label is not None:
            return label
        if args and hasattr(args[0], "type_name"):
            return str(args[0].type_name)
        return "N/A"

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            subject = _label(args)
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000  # ms
                perf_logger.info(f"{operation:12s} | {subject:28s} | {elapsed:8.2f}ms | OK")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.warning(
                    f"{operation:12s} | {subject:28s} | {elapsed:8.2f}ms | FAIL: {e}"
                )
                raise

        return wrapper

    return decorator

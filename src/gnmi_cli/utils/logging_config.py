"""Logging configuration for the gNMI client.

Provides configurable logging with:
- Console output on stderr, so stdout carries only RPC results
- Optional file-based logging with rotation
- Performance timing decorators for each RPC

Environment Variables:
    GNMI_CLI_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: WARNING)
    GNMI_CLI_LOG_FILE: Path to log file (default: no file logging)
    GNMI_CLI_LOG_MAX_SIZE: Max log file size in MB (default: 10)
    GNMI_CLI_LOG_BACKUPS: Number of backup files to keep (default: 5)

Usage:
    from gnmi_cli.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("get")
    async def get(self, paths):
        ...

    # Or use context manager for sections:
    async with timed_section("dial", target="switch1:6030"):
        ...
"""
import functools
import logging
import os
import time
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Any

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("gnmi_cli.perf")
main_logger = logging.getLogger("gnmi_cli")

LOG_FORMAT = "%(asctime)s.%(msecs)03d | %(name)-28s | %(levelname)-7s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("GNMI_CLI_LOG_LEVEL", "WARNING").upper()
    return getattr(logging, level_str, logging.WARNING)


def get_log_file() -> Optional[Path]:
    """Get log file path from environment, if file logging is wanted."""
    path_str = os.environ.get("GNMI_CLI_LOG_FILE")
    return Path(path_str) if path_str else None


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler on stderr (WARNING+ by default, DEBUG when verbose)
    - File handler with rotation when GNMI_CLI_LOG_FILE is set
    - Performance logger routed to the same handlers
    """
    log_level = logging.DEBUG if verbose else get_log_level()
    log_file = get_log_file()

    main_format = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # Console handler - stderr, respects configured level
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)

    root_logger = main_logger
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        max_size_mb = int(os.environ.get("GNMI_CLI_LOG_MAX_SIZE", "10"))
        backup_count = int(os.environ.get("GNMI_CLI_LOG_BACKUPS", "5"))

        # Create log directory if needed
        log_file.parent.mkdir(parents=True, exist_ok=True)

        # File handler - captures DEBUG and above (everything)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(main_format)
        root_logger.addHandler(file_handler)

    # gnmi_cli.perf propagates to gnmi_cli
    perf_logger.setLevel(logging.DEBUG)

    root_logger.debug(
        f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file}"
    )


def _target_of(args: tuple) -> Optional[str]:
    """Target name from a bound method's self, if it has one."""
    if not args:
        return None
    client = getattr(args[0], "client", args[0])
    return getattr(client, "target", None)


def timed(operation: str, target: Optional[str] = None):
    """Decorator to log execution time of a coroutine.

    Args:
        operation: Name of the operation (e.g., "get", "set", "dial")
        target: Optional target address (can also be inferred from
            self.target or self.client.target)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            tgt = target or _target_of(args)
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000  # ms
                perf_logger.debug(
                    f"{operation:12s} | {tgt or 'N/A':21s} | {elapsed:8.2f}ms | OK"
                )
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.debug(
                    f"{operation:12s} | {tgt or 'N/A':21s} | {elapsed:8.2f}ms | FAIL: {e}"
                )
                raise

        return wrapper

    return decorator


@asynccontextmanager
async def timed_section(operation: str, target: Optional[str] = None, **extra):
    """Async context manager for timing code sections.

    Usage:
        async with timed_section("dial", target="switch1:6030", tls=True):
            await channel.channel_ready()
    """
    start = time.perf_counter()
    extra_str = " | ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""

    try:
        yield
        elapsed = (time.perf_counter() - start) * 1000
        msg = f"{operation:12s} | {target or 'N/A':21s} | {elapsed:8.2f}ms | OK"
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.debug(msg)
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        msg = f"{operation:12s} | {target or 'N/A':21s} | {elapsed:8.2f}ms | FAIL: {e}"
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.debug(msg)
        raise

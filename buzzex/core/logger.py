"""
Logging System Module

The library modules only call get_logger(); an application embedding the
client calls setup_logging() once to choose between JSON output (prod) and
a readable line format (dev).
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pythonjsonlogger import jsonlogger

JSON_FIELDS = '%(timestamp)s %(level)s %(name)s %(message)s'


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and call-site fields"""

    def __init__(self, *args, local_tz=None, **kwargs):
        kwargs.setdefault("json_ensure_ascii", False)
        kwargs.setdefault("json_default", str)
        super().__init__(*args, **kwargs)
        self.local_tz = local_tz or timezone.utc

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        if not log_record.get('timestamp'):
            created = datetime.fromtimestamp(record.created, tz=timezone.utc)
            log_record['timestamp'] = created.astimezone(self.local_tz).isoformat()

        log_record['level'] = (log_record.get('level') or record.levelname).upper()
        log_record['module'] = record.module
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno


class LineFormatter(logging.Formatter):
    """
    One line per record: ``time | LEVEL | message | logger:function:line``.

    With ``color=True`` the level column gets an ANSI colour (console use).
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt='%(message)s', local_tz=None, color=False):
        super().__init__(fmt)
        self.local_tz = local_tz or timezone.utc
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        ts = created.astimezone(self.local_tz).strftime("%Y-%m-%d %H:%M:%S")

        level = f"{record.levelname:<7}"
        if self.color and record.levelname in self.COLORS:
            level = f"{self.COLORS[record.levelname]}{level}{self.RESET}"

        location = f"{record.name}:{record.funcName}:{record.lineno}"
        return f"{ts} | {level} | {super().format(record)} | {location}"


def _resolve_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    environment: str = "dev",
    timezone_name: str = "UTC"
) -> None:
    """
    Configure the root logger.

    Replaces any handlers already on the root logger. The console gets JSON
    in ``prod`` and coloured lines otherwise; ``log_file`` adds a file that
    rolls over at midnight UTC (JSON in ``prod``, plain lines otherwise).

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional)
        environment: Environment (dev/test/prod)
        timezone_name: IANA timezone for timestamps, UTC when unknown
    """
    local_tz = _resolve_timezone(timezone_name)
    level = getattr(logging, log_level.upper(), logging.INFO)
    as_json = environment == "prod"

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    if as_json:
        console_handler.setFormatter(CustomJsonFormatter(JSON_FIELDS, local_tz=local_tz))
    else:
        console_handler.setFormatter(LineFormatter(local_tz=local_tz, color=True))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

        # Rotated files are suffixed with the date, e.g. buzzex.log.2026-10-19
        file_handler = logging.handlers.TimedRotatingFileHandler(
            filename=log_file,
            when="midnight",
            backupCount=0,
            utc=True,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        file_handler.setLevel(level)
        if as_json:
            file_handler.setFormatter(CustomJsonFormatter(JSON_FIELDS, local_tz=local_tz))
        else:
            file_handler.setFormatter(LineFormatter(local_tz=local_tz))
        root_logger.addHandler(file_handler)

    # aiohttp and asyncio are noisy at DEBUG
    for name in ('aiohttp', 'aiohttp.access', 'asyncio'):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a module, typically ``get_logger(__name__)``"""
    return logging.getLogger(name)

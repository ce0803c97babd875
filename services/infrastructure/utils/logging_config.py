"""
Logging configuration for SKU Studio API.

Handles:
- Console output through a handler that survives closed streams
- Optional log file that starts a new timestamped file per period
- Unified formatter shared with Uvicorn
- Quieting of httpx/httpcore unless HTTP_DEBUG is set
"""

import glob
import logging
import os
import re
import sys
import time
from logging.handlers import BaseRotatingHandler
from typing import List, Literal, Optional

from config.settings import config

LOG_DIR = "logs"
LOG_FILE = "app.log"
ROTATION_HOURS = 72
BACKUP_COUNT = 10

_CLOSED_STREAM_PHRASES = (
    "closed file", "i/o operation", "bad file descriptor",
    "operation on closed", "stream is closed"
)


def _is_closed_stream_error(error: Exception) -> bool:
    text = str(error).lower()
    return any(phrase in text for phrase in _CLOSED_STREAM_PHRASES)


def _is_stream_usable(stream) -> bool:
    """True when ``stream`` exists, is open and writable."""
    if stream is None:
        return False
    try:
        return not getattr(stream, 'closed', False) and hasattr(stream, 'write')
    except (AttributeError, ValueError, OSError):
        return False


class SafeStreamHandler(logging.StreamHandler):
    """StreamHandler that drops records once its stream is closed."""

    def emit(self, record):
        if not _is_stream_usable(self.stream):
            return
        try:
            super().emit(record)
        except (ValueError, OSError) as error:
            if not _is_closed_stream_error(error):
                raise


class TimestampedRotatingFileHandler(BaseRotatingHandler):
    """
    Writes to ``<base>.<period start>.log`` and moves to a new file each period.

    Periods are aligned to the epoch, so every worker process writes to the
    same file. Only the newest ``backup_count`` files are kept.
    Example: logs/app.2025-01-15_00-00-00.log
    """

    def __init__(self, base_filename: str, interval_hours: int = ROTATION_HOURS,
                 backup_count: int = BACKUP_COUNT, encoding: str = 'utf-8'):
        self.base_filename = base_filename
        self.interval_seconds = interval_hours * 3600
        self.backup_count = backup_count
        self.period_start = self._current_period_start()

        log_dir = os.path.dirname(base_filename)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        super().__init__(self._filename_for(self.period_start), 'a', encoding=encoding, delay=False)

    def _current_period_start(self) -> int:
        now = int(time.time())
        return now - now % self.interval_seconds

    def _stem(self) -> str:
        stem = self.base_filename
        return stem[:-4] if stem.endswith('.log') else stem

    def _filename_for(self, period_start: int) -> str:
        stamp = time.strftime('%Y-%m-%d_%H-%M-%S', time.localtime(period_start))
        return f"{self._stem()}.{stamp}.log"

    def shouldRollover(self, record):  # pylint: disable=invalid-name
        del record
        return time.time() >= self.period_start + self.interval_seconds

    def doRollover(self):  # pylint: disable=invalid-name
        if self.stream:
            self.stream.close()
        self.period_start = self._current_period_start()
        self.baseFilename = os.path.abspath(self._filename_for(self.period_start))
        self.stream = self._open()
        self.remove_expired_files()

    def emit(self, record):
        """Emit a record, reopening the file once if its stream was closed."""
        try:
            super().emit(record)
        except (ValueError, OSError) as error:
            if not _is_closed_stream_error(error):
                raise
            try:
                self.stream = self._open()
                super().emit(record)
            except (ValueError, OSError):
                return

    def remove_expired_files(self) -> List[str]:
        """Delete all but the newest ``backup_count`` period files; returns removed paths."""
        files = sorted(glob.glob(f"{glob.escape(self._stem())}.*.log"), key=os.path.getmtime)
        expired = files[:-self.backup_count] if len(files) > self.backup_count else []
        removed = []
        for path in expired:
            try:
                os.remove(path)
                removed.append(path)
            except OSError:
                continue
        return removed


class UnifiedFormatter(logging.Formatter):
    """
    ``[HH:MM:SS] LEVEL | SRC  | [pid] message`` with ANSI colours.

    Also used by Uvicorn through LOGGING_CONFIG, which passes ``use_colors``.
    """

    RESET = '\033[0m'

    LEVELS = {
        'DEBUG': ('DEBUG', '\033[36m'),
        'INFO': ('INFO', '\033[32m'),
        'WARNING': ('WARN', '\033[33m'),
        'ERROR': ('ERROR', '\033[31m'),
        'CRITICAL': ('CRIT', '\033[1m\033[35m'),
    }

    # Logger name prefix -> source tag, first match wins
    SOURCE_TAGS = (
        ('routers', 'API'),
        ('uvicorn', 'SRVR'),
        ('clients', 'CLIE'),
        ('services.security', 'SECU'),
        ('services', 'SERV'),
        ('config', 'CONF'),
        ('httpx', 'HTTP'),
        ('httpcore', 'HTTP'),
    )

    def __init__(self, fmt=None, datefmt=None, style: Literal['%', '{', '$'] = '%', validate=True, **_kwargs):
        super().__init__(fmt=fmt, datefmt=datefmt, style=style, validate=validate)

    @classmethod
    def source_tag(cls, name: str) -> str:
        if name in ('__main__', 'main'):
            return 'MAIN'
        for prefix, tag in cls.SOURCE_TAGS:
            if name.startswith(prefix):
                return tag
        return name[:4].upper()

    def format(self, record):
        label, color = self.LEVELS.get(record.levelname, (record.levelname, ''))
        message = re.sub(r' +', ' ', record.getMessage().lstrip())
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return (
            f"[{self.formatTime(record, '%H:%M:%S')}] {color}{label.ljust(5)}{self.RESET} | "
            f"{self.source_tag(record.name).ljust(4)} | [{os.getpid()}] {message}"
        )


class UvicornInvalidRequestFilter(logging.Filter):
    """Downgrade Uvicorn's 'Invalid HTTP request' warnings (scanners, stray TLS handshakes) to DEBUG."""

    def filter(self, record):
        if record.levelno == logging.WARNING and 'invalid http request' in record.getMessage().lower():
            record.levelno = logging.DEBUG
            record.levelname = 'DEBUG'
        return True


def _build_handlers(formatter: logging.Formatter) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if _is_stream_usable(sys.stdout):
        console_handler = SafeStreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if config.log_to_file:
        file_handler: Optional[logging.Handler] = None
        try:
            file_handler = TimestampedRotatingFileHandler(os.path.join(LOG_DIR, LOG_FILE))
        except OSError as error:
            sys.stderr.write(f"File logging disabled: {error}\n")
        if file_handler is not None:
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)

    return handlers or [logging.NullHandler()]


def setup_logging():
    """
    Configure all logging for the application.

    Root and package loggers follow LOG_LEVEL; Uvicorn's loggers are routed
    through the same handlers; httpx/httpcore/h2 stay at WARNING unless
    HTTP_DEBUG is set.
    """
    handlers = _build_handlers(UnifiedFormatter())
    log_level = getattr(logging, config.log_level, logging.INFO)

    logging.basicConfig(level=log_level, handlers=handlers, force=True)
    for package in ('services', 'clients', 'routers', 'config'):
        logging.getLogger(package).setLevel(log_level)

    for name in ('uvicorn', 'uvicorn.error'):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = list(handlers)
        uvicorn_logger.addFilter(UvicornInvalidRequestFilter())
        uvicorn_logger.propagate = False

    http_debug = os.getenv('HTTP_DEBUG', '').lower() in ('1', 'true', 'yes')
    for name in ('httpx', 'httpcore', 'hpack', 'h2'):
        logging.getLogger(name).setLevel(logging.DEBUG if http_debug else logging.WARNING)

    logger = logging.getLogger(__name__)
    if os.getenv('UVICORN_WORKER_ID') is None:
        logger.debug("Logging initialized: %s", config.log_level)
    return logger

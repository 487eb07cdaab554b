"""
Logging Utilities
=================
One named logger per area of the service. Each writes to its own rotating
file and to the console, and everything at INFO or above is also kept in an
in-memory buffer that the ``/logs`` endpoint serves.
"""
import os
import re
import logging
from collections import deque
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import List, Dict, Optional
from comment_translator.config import config

ANSI_PATTERN = re.compile(r'\033\[[0-9;]*m')

# attribute on AppLogger -> (logger name suffix, log file)
_AREAS = {
    'app_logger': ('app', 'app.log'),
    'translation_logger': ('translation', 'translations.log'),
    'api_logger': ('api', 'api.log'),
    'db_logger': ('database', 'database.log'),
}


class LogBuffer(logging.Handler):
    """Bounded, numbered history of recent log entries.

    Works both as a logging handler and as a direct sink for ``debug_print``.
    Entry ids grow monotonically so clients can poll with ``since``.
    """

    def __init__(self, max_size: int = None):
        super().__init__(level=logging.INFO)
        self.entries = deque(maxlen=max_size or config.logging.log_buffer_size)
        self.last_id = 0

    def add(self, level: str, source: str, message: str) -> Dict:
        with self.lock:
            self.last_id += 1
            entry = {
                'id': self.last_id,
                'timestamp': datetime.now().strftime('%H:%M:%S.%f')[:-3],
                'level': level,
                'source': source,
                'message': ANSI_PATTERN.sub('', message),
            }
            self.entries.append(entry)
            return entry

    def emit(self, record: logging.LogRecord) -> None:
        source = getattr(record, 'source', None) or record.name.rsplit('.', 1)[-1].upper()
        self.add(record.levelname, source, record.getMessage())

    def get_all(self) -> List[Dict]:
        with self.lock:
            return list(self.entries)

    def get_since(self, since_id: int) -> List[Dict]:
        with self.lock:
            return [e for e in self.entries if e['id'] > since_id]

    def clear(self):
        with self.lock:
            self.entries.clear()
            self.last_id = 0


log_buffer = LogBuffer()


class ANSIStripFormatter(logging.Formatter):
    """File formatter; color codes are dropped unless configured otherwise."""

    def format(self, record):
        text = super().format(record)
        if config.logging.strip_ansi_in_files:
            text = ANSI_PATTERN.sub('', text)
        return text


class AppLogger:
    """The service's loggers, sharing one log directory and the log buffer."""

    def __init__(self, log_dir: str = None):
        self.log_dir = log_dir or config.paths.log_folder
        os.makedirs(self.log_dir, exist_ok=True)
        self.level = logging.DEBUG if config.logging.verbose_debug else logging.INFO

        for attr, (area, filename) in _AREAS.items():
            setattr(self, attr, self._configure(f'comment_translator.{area}', filename))

    def _configure(self, name: str, filename: str) -> logging.Logger:
        logger = logging.getLogger(name)
        logger.setLevel(self.level)
        if logger.handlers:
            return logger

        to_file = RotatingFileHandler(
            os.path.join(self.log_dir, filename),
            maxBytes=config.logging.log_file_max_bytes,
            backupCount=config.logging.log_file_backup_count,
            encoding='utf-8'
        )
        to_file.setFormatter(ANSIStripFormatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

        to_console = logging.StreamHandler()
        to_console.setLevel(self.level)
        to_console.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S'))

        for handler in (to_file, to_console, log_buffer):
            logger.addHandler(handler)
        return logger


_logger_instance: Optional[AppLogger] = None


def get_logger() -> AppLogger:
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = AppLogger()
    return _logger_instance


def debug_print(message: str, level: str = 'INFO', source: str = 'DEBUG'):
    """
    Trace a step of a cycle.

    The message always lands in the log buffer, tagged with ``source``
    (CYCLE, LLM, DICT, ...). It is echoed to stdout, colors included, only
    when verbose debugging is on.
    """
    log_buffer.add(level, source, message)
    if config.logging.verbose_debug:
        print(message)

"""
Logging configuration for the DealerHub API.

JSON lines in production (one object per record, picked up by the platform
log drain), a compact coloured format on a developer terminal.

Structured fields are passed through ``extra={'context': {...}}``.
"""

import os
import sys
import json
import logging
from datetime import datetime, timezone
from typing import Optional


def _context_of(record: logging.LogRecord) -> dict:
    context = getattr(record, 'context', None)
    return context if isinstance(context, dict) else {}


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'line': record.lineno,
        }
        log_entry.update(_context_of(record))

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable formatter for local runs."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, '')
        reset = self.RESET if color else ''

        timestamp = datetime.now().strftime('%H:%M:%S')
        base = f'{color}[{timestamp}] {record.levelname:8}{reset} {record.name:28} {record.getMessage()}'

        context = _context_of(record)
        if context:
            base = f'{base} | ' + ' '.join(f'{k}={v}' for k, v in context.items())

        if record.exc_info:
            base = f'{base}\n{self.formatException(record.exc_info)}'
        return base


def setup_logging(
    level: str = 'INFO',
    json_format: Optional[bool] = None,
    logger_name: str = 'dealerhub'
) -> logging.Logger:
    """Configure and return the application logger.

    Args:
        level: Log level name.
        json_format: Force JSON output. Auto-detected when None: JSON under
            gunicorn or when PRODUCTION=true.
        logger_name: Root of the logger tree to configure.
    """
    if json_format is None:
        json_format = os.environ.get('PRODUCTION', '').lower() == 'true' or \
                      'gunicorn' in os.environ.get('SERVER_SOFTWARE', '')

    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Re-running setup (tests, reloader) must not stack handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logger.level)
    handler.setFormatter(JSONFormatter() if json_format else DevelopmentFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = 'dealerhub') -> logging.Logger:
    return logging.getLogger(name)

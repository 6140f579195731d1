#!/usr/bin/env python3
# -*-coding: utf-8-*-
"""
Logging setup for BL2 Patcher

Console output goes to stderr so stdout stays free for reports. A rotating
log file is added when a log directory is configured. Either handler can
emit structured JSON instead of plain text.
"""

import logging
import logging.handlers
import os
import sys
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any, TextIO
from functools import lru_cache

ROOT_LOGGER_NAME = "bl2patch"
LOG_FILE_NAME = "bl2patch.log"
JSON_ENV_VAR = "BL2PATCH_LOG_JSON"

# =====================================================================================================
# Formatters
# =====================================================================================================

class FastFormatter(logging.Formatter):
    """Level-specific plain text formatter with optional ANSI colors."""

    def __init__(self, enable_colors: bool = False):
        super().__init__()
        self.enable_colors = enable_colors

        # Pre-compiled format strings
        self._formats = {
            logging.CRITICAL: "[{asctime}] CRITICAL [{name}] {message}",
            logging.ERROR: "[{asctime}] ERROR   [{name}] {message}",
            logging.WARNING: "[{asctime}] WARNING [{name}] {message}",
            logging.INFO: "[{asctime}] INFO    {message}",
            logging.DEBUG: "[{asctime}] DEBUG   {name}:{lineno} - {message}"
        }
        self._formatters = {
            level: logging.Formatter(fmt, style='{', datefmt='%H:%M:%S')
            for level, fmt in self._formats.items()
        }

        self.colors = {
            logging.CRITICAL: '\033[91m',  # Red
            logging.ERROR: '\033[91m',     # Red
            logging.WARNING: '\033[93m',   # Yellow
            logging.INFO: '\033[92m',      # Green
            logging.DEBUG: '\033[94m',     # Blue
        } if enable_colors else {}

    def format(self, record):
        formatter = self._formatters.get(record.levelno, self._formatters[logging.INFO])
        text = formatter.format(record)
        color = self.colors.get(record.levelno)
        if color:
            return f"{color}{text}\033[0m"
        return text


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter (optional)."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "pathname": record.pathname,
            "lineno": record.lineno,
            "process": record.process,
        }
        error = getattr(record, "error", None)
        if isinstance(error, dict):
            payload["error"] = error
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

# =====================================================================================================
# Main Setup Function
# =====================================================================================================

def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    enable_console_logging: bool = True,
    max_log_size: str = "10MB",
    backup_count: int = 3,
    structured_json: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> Dict[str, Any]:
    """Configure the ``bl2patch`` logger hierarchy.

    Returns a dict with the configured handlers and the log directory (None
    when file logging is off).
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    use_json = structured_json if structured_json is not None else _env_bool(JSON_ENV_VAR)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(numeric_level)
    root_logger.propagate = False

    # Clear Existing Handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    handlers = {}

    if enable_console_logging:
        console_stream = stream or sys.stderr
        console_handler = logging.StreamHandler(console_stream)
        console_handler.setLevel(numeric_level)

        enable_colors = (hasattr(console_stream, 'isatty') and
                         console_stream.isatty() and
                         os.environ.get('TERM') != 'dumb')

        console_handler.setFormatter(JsonFormatter() if use_json else FastFormatter(enable_colors=enable_colors))
        root_logger.addHandler(console_handler)
        handlers['console'] = console_handler

    log_dir_path = None
    if log_dir:
        log_dir_path = Path(log_dir)
        log_dir_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            str(log_dir_path / LOG_FILE_NAME),
            maxBytes=_parse_size_string(max_log_size),
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JsonFormatter() if use_json else FastFormatter())
        root_logger.addHandler(file_handler)
        handlers['file'] = file_handler

    root_logger.debug("Logging initialized (level=%s, file=%s, json=%s)", log_level, log_dir_path, use_json)

    return {
        'logger': root_logger,
        'handlers': handlers,
        'log_dir': log_dir_path
    }

# =====================================================================================================
# Utility functions
# =====================================================================================================

def _parse_size_string(size_str: str) -> int:
    """Parse size string into bytes."""
    size_str = size_str.upper().strip()

    multipliers = {
        'KB': 1024,
        'MB': 1024 ** 2,
        'GB': 1024 ** 3,
        'B': 1,
    }

    for suffix, multiplier in multipliers.items():
        if size_str.endswith(suffix):
            try:
                number = float(size_str[:-len(suffix)].strip())
                return int(number * multiplier)
            except ValueError:
                continue

    # Plain number means bytes
    try:
        return int(float(size_str))
    except ValueError:
        pass

    return 10 * 1024 * 1024  # Default 10MB

@lru_cache(maxsize=32)
def get_logger(name: str) -> logging.Logger:
    """Get cached logger instance."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

def cleanup_logging():
    """Close and detach all handlers of the ``bl2patch`` logger."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    get_logger.cache_clear()

"""
Structured logging for Lektor components.

Each component (session, model, history, web, ...) writes to a single
append-only JSONL file under {storage_root}/logs/. Files are created lazily
on the first record, so read-only commands leave no empty logs behind.

USAGE:
  with create_logger('cli', 'session', log_dir=root / 'logs') as logger:
      logger.info('Explanation ready', mode='explanation', kept=3, dropped=1)
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


CONTEXT_FIELDS = (
    'mode',
    'sentence_index',
    'kept',
    'dropped',
    'entry_id',
    'model',
    'tokens',
    'cost_usd',
    'duration_seconds',
    'error',
)


class FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every emit for real-time log visibility."""
    def emit(self, record):
        super().emit(record)
        self.flush()


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now().astimezone().isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if hasattr(record, 'session_id'):
            log_data['session_id'] = record.session_id
        if hasattr(record, 'component'):
            log_data['component'] = record.component

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Console format: [12:00:01] WARNING [session] message"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime('%H:%M:%S')
        parts = [f"[{timestamp}]", record.levelname]
        if hasattr(record, 'component'):
            parts.append(f"[{record.component}]")
        parts.append(record.getMessage())
        if hasattr(record, 'error'):
            parts.append(f"({record.error})")
        return ' '.join(parts)


class TutorLogger:
    """Logger that writes to a single append-only JSONL file per component.

    File handlers are created lazily on first log message to avoid
    creating empty log files when nothing is logged. Extra keyword
    arguments on each call become fields of the JSON record.
    """
    def __init__(
        self,
        session_id: str,
        component: str,
        log_dir: Optional[Path] = None,
        console_output: bool = False,
        json_output: bool = True,
        level: str = "INFO",
        filename: str = None
    ):
        self.session_id = session_id
        self.component = component
        self.log_dir = Path(log_dir) if log_dir is not None else None
        self.console_output = console_output
        self.json_output = json_output and log_dir is not None
        self.level = level
        self.filename = filename or f"{component}.jsonl"

        self._logger = None
        self._initialized = False
        self.log_file = None

    def _ensure_initialized(self):
        if self._initialized:
            return

        logger_name = f"lektor.{self.session_id}.{self.component}.{id(self)}"
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(getattr(logging, self.level.upper()))
        self._logger.propagate = False

        if self.console_output:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setFormatter(HumanFormatter())
            self._logger.addHandler(console_handler)

        if self.json_output:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            json_file = self.log_dir / self.filename
            json_handler = FlushingFileHandler(json_file, mode='a', encoding='utf-8')
            json_handler.setFormatter(JSONFormatter())
            self._logger.addHandler(json_handler)
            self.log_file = json_file

        if not self._logger.handlers:
            self._logger.addHandler(logging.NullHandler())

        self._initialized = True

    @property
    def logger(self):
        """Get the underlying logger, initializing if needed."""
        self._ensure_initialized()
        return self._logger

    def _log(self, level: str, message: str, **kwargs):
        reserved_params = {}
        for param in ['exc_info', 'stack_info', 'stacklevel', 'extra']:
            if param in kwargs:
                reserved_params[param] = kwargs.pop(param)

        extra = {
            'session_id': self.session_id,
            'component': self.component,
            **kwargs
        }
        if 'extra' in reserved_params:
            extra.update(reserved_params.pop('extra'))

        self.logger.log(
            getattr(logging, level.upper()),
            message,
            extra=extra,
            **reserved_params
        )

    def debug(self, message: str, **kwargs):
        self._log('DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log('WARNING', message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log('ERROR', message, **kwargs)

    def child(self, component: str) -> "TutorLogger":
        """Logger for another component sharing this logger's settings."""
        return TutorLogger(
            self.session_id,
            component,
            log_dir=self.log_dir,
            console_output=self.console_output,
            json_output=self.json_output,
            level=self.level,
        )

    def close(self):
        if self._initialized and self._logger:
            for handler in self._logger.handlers[:]:
                handler.close()
                self._logger.removeHandler(handler)
            self._initialized = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def create_logger(session_id: str, component: str, **kwargs) -> TutorLogger:
    return TutorLogger(session_id, component, **kwargs)


def null_logger(component: str) -> TutorLogger:
    """Handler-less logger used when a caller does not supply one."""
    return TutorLogger("default", component, log_dir=None, console_output=False, json_output=False)

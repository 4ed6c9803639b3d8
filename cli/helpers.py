import sys
import uuid
from dataclasses import dataclass
from typing import Optional

from infra.config import get_config, get_storage_root
from infra.logger import TutorLogger, create_logger
from infra.storage import HistoryStore
from tutor.model import TutorModel
from tutor.session import SessionError, TutorSession


@dataclass
class Runtime:
    logger: TutorLogger
    history: Optional[HistoryStore]
    session: TutorSession


def make_logger(component: str, verbose: bool = False) -> TutorLogger:
    return create_logger(
        uuid.uuid4().hex[:8],
        component,
        log_dir=get_storage_root() / "logs",
        console_output=verbose,
        level="DEBUG" if verbose else "INFO",
    )


def build_runtime(args, component: str = "cli") -> Runtime:
    """Session wired to the configured provider and the history store."""
    logger = make_logger(component, verbose=getattr(args, 'verbose', False))

    try:
        model = TutorModel.from_config(getattr(args, 'provider', None), logger=logger.child("model"))
    except ValueError as e:
        print(f"✗ {e}")
        sys.exit(1)

    history = None
    if not getattr(args, 'no_save', False):
        history = HistoryStore(get_storage_root(), logger=logger.child("history"))

    session = TutorSession(model, history=history, logger=logger.child("session"))
    return Runtime(logger=logger, history=history, session=session)


def open_history(args=None) -> HistoryStore:
    logger = make_logger("history", verbose=getattr(args, 'verbose', False))
    return HistoryStore(get_storage_root(), logger=logger)


def page_size() -> int:
    return get_config().defaults.history_page_size


def report_error(error: Optional[SessionError]):
    """Print a session failure and exit non-zero."""
    if error is None:
        return
    if error.kind == SessionError.CREDENTIAL_MISSING:
        print(f"🔑 {error.message}")
    else:
        print(f"✗ {error.message}")
    sys.exit(1)


def read_text(value: Optional[str]) -> str:
    if value is None or value == '-':
        return sys.stdin.read()
    return value


__all__ = [
    'Runtime',
    'build_runtime',
    'make_logger',
    'open_history',
    'page_size',
    'report_error',
    'read_text',
]

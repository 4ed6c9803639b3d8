"""
Clipboard capture events, processed strictly one at a time.

The host (a global-shortcut listener, a pipe, the CLI) calls deliver() with
the captured text and the mode the shortcut stands for. A single worker
thread feeds events to the handler in arrival order.
"""

import queue
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from infra.logger import TutorLogger, null_logger
from tutor.session import MODES


@dataclass(frozen=True)
class CaptureEvent:
    text: str
    mode: str


_STOP = object()


class CaptureDispatcher:
    def __init__(
        self,
        handler: Callable[[str, str], object],
        hide_window: Optional[Callable[[], None]] = None,
        logger: Optional[TutorLogger] = None,
    ):
        self.handler = handler
        self.hide_window = hide_window
        self.logger = logger or null_logger("capture")
        self._queue: "queue.Queue" = queue.Queue()
        self._worker: Optional[threading.Thread] = None

    def deliver(self, text: str, mode: str):
        if mode not in MODES:
            raise ValueError(f"Unknown capture mode '{mode}'. Expected one of: {', '.join(MODES)}")
        self._queue.put(CaptureEvent(text, mode))
        self.logger.debug("Capture queued", mode=mode)

    def start(self) -> "CaptureDispatcher":
        if self._worker is None or not self._worker.is_alive():
            self._worker = threading.Thread(target=self._run, name="capture-worker", daemon=True)
            self._worker.start()
        return self

    def stop(self):
        """Finish queued events, then end the worker."""
        self._queue.put(_STOP)

    def join(self, timeout: Optional[float] = None):
        if self._worker is not None:
            self._worker.join(timeout)

    def drain(self):
        self._queue.join()

    def hide(self):
        if self.hide_window is not None:
            self.hide_window()

    def _run(self):
        while True:
            event = self._queue.get()
            try:
                if event is _STOP:
                    return
                self.logger.info("Processing capture", mode=event.mode)
                self.handler(event.text, event.mode)
            except Exception as e:
                self.logger.error("Capture handler failed", mode=event.mode, error=f"{type(e).__name__}: {e}")
            finally:
                self._queue.task_done()

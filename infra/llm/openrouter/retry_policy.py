import time
import uuid
import random
import requests
from typing import Callable, Dict, Any, TypeVar, Optional

from infra.logger import TutorLogger, null_logger

from .errors import MalformedResponseError

T = TypeVar('T')

RETRYABLE_STATUS = (413, 422, 429)
NONCE_STATUS = (413, 422)


class RetryPolicy:
    def __init__(
        self,
        logger: Optional[TutorLogger] = None,
        max_retries: int = 3,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.logger = logger or null_logger("llm")
        self.max_retries = max_retries
        self.sleep = sleep

    @property
    def attempts(self) -> int:
        return max(1, self.max_retries)

    def _delay(self) -> float:
        return 2.0 + random.uniform(-1.5, 1.5)

    def execute_with_retry(
        self,
        fn: Callable[[], T],
        payload: Dict[str, Any]
    ) -> T:
        model = payload.get('model', 'unknown')

        for attempt in range(self.attempts):
            is_last = attempt >= self.attempts - 1
            try:
                result = fn()

                if attempt > 0:
                    self.logger.debug(
                        f"Request succeeded after {attempt+1} attempts",
                        model=model,
                    )

                return result

            except MalformedResponseError as e:
                if is_last:
                    self.logger.debug("Malformed response on final attempt, raising", model=model, error=str(e))
                    raise
                delay = self._delay()
                self.logger.debug(
                    f"Malformed response, retrying in {delay:.1f}s",
                    model=model,
                    error=str(e),
                )
                self.sleep(delay)

            except requests.exceptions.HTTPError as e:
                status_code = e.response.status_code if e.response is not None else 0

                if not self._should_retry(status_code, attempt):
                    self.logger.debug(
                        f"HTTP {status_code} not retryable, raising",
                        model=model,
                        error=str(e),
                    )
                    raise

                if status_code in NONCE_STATUS:
                    self._inject_nonce(payload, status_code, attempt)

                delay = self._delay()
                self.logger.debug(
                    f"HTTP {status_code} error, retrying in {delay:.1f}s",
                    model=model,
                    error=str(e),
                )
                self.sleep(delay)

            except requests.exceptions.Timeout:
                if is_last:
                    self.logger.debug("Request timeout on final attempt, raising", model=model)
                    raise
                delay = self._delay()
                self.logger.debug(f"Request timeout, retrying in {delay:.1f}s", model=model)
                self.sleep(delay)

    def _should_retry(self, status: int, attempt: int) -> bool:
        if attempt >= self.attempts - 1:
            return False

        if status >= 500:
            return True

        return status in RETRYABLE_STATUS

    def _inject_nonce(self, payload: Dict[str, Any], status_code: int, attempt: int):
        """Append a unique marker to the last text user message."""
        nonce = uuid.uuid4().hex[:16]

        messages = payload.get('messages', [])

        for msg in reversed(messages):
            if msg.get('role') == 'user' and isinstance(msg.get('content'), str):
                msg['content'] = f"{msg['content']}\n<!-- retry_{attempt}_id: {nonce} -->"
                self.logger.debug(
                    f"Injected nonce after HTTP {status_code}",
                    model=payload.get('model', 'unknown'),
                )
                return

"""Lifecycle owner for the single shared recognition engine.

The engine is created lazily on first use under a lock, so concurrent
first callers trigger exactly one ``load()``. Every recognition runs on a
single dedicated worker thread; callers queue behind it and wait with a
bounded timeout. ``shutdown()`` is idempotent and terminal.
"""

import threading
from collections.abc import Callable
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from enum import Enum

from docarchive.logging.logger import Log
from docarchive.recognition.base import BaseRecognizer
from docarchive.recognition.exceptions import (
    EngineUnavailableError,
    RecognitionTimeoutError,
)


class EngineState(str, Enum):
    NEW = "new"
    READY = "ready"
    SHUT_DOWN = "shut_down"


class RecognitionEngine:
    """Owns one recognizer instance and serializes access to it."""

    def __init__(
        self,
        recognizer_factory: Callable[[], BaseRecognizer],
        *,
        timeout_seconds: float = 60.0,
    ) -> None:
        self._recognizer_factory = recognizer_factory
        self._timeout_seconds = timeout_seconds
        self._lock = threading.Lock()
        self._state = EngineState.NEW
        self._recognizer: BaseRecognizer | None = None
        self._executor: ThreadPoolExecutor | None = None

    @property
    def state(self) -> EngineState:
        return self._state

    def initialize(self) -> None:
        """Bring the engine up if needed. Safe to call from many threads.

        Raises:
            EngineUnavailableError: if the engine is shut down or ``load()``
                fails. A failed load leaves the engine uninitialized, so a
                later call may try again.
        """
        with self._lock:
            self._ensure_ready_locked()

    def recognize(self, raster_bytes: bytes, timeout_seconds: float | None = None) -> str:
        """Recognize text in a raster image on the engine's worker thread.

        Raises:
            EngineUnavailableError: if the engine is shut down, fails to
                initialize, or is shut down while the call is queued.
            RecognitionTimeoutError: if the result is not ready in time.
            RecognitionError: if the recognizer itself fails.
        """
        timeout = self._timeout_seconds if timeout_seconds is None else timeout_seconds
        with self._lock:
            executor, recognizer = self._ensure_ready_locked()
            future: Future[str] = executor.submit(recognizer.recognize, raster_bytes, timeout)

        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError as exc:
            future.cancel()
            raise RecognitionTimeoutError(
                f"recognition did not finish within {timeout}s"
            ) from exc
        except CancelledError as exc:
            raise EngineUnavailableError("engine was shut down while request was queued") from exc

    def shutdown(self) -> None:
        """Release the engine. Idempotent; later ``recognize`` calls fail fast."""
        with self._lock:
            if self._state is EngineState.SHUT_DOWN:
                return
            previous_state = self._state
            self._state = EngineState.SHUT_DOWN
            executor, self._executor = self._executor, None
            recognizer, self._recognizer = self._recognizer, None

        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)
        if recognizer is not None:
            try:
                recognizer.close()
            except Exception as exc:
                Log.warning(f"Recognizer close failed: {exc}")
        if previous_state is EngineState.READY:
            Log.info("Recognition engine shut down")

    def _ensure_ready_locked(self) -> tuple[ThreadPoolExecutor, BaseRecognizer]:
        if self._state is EngineState.SHUT_DOWN:
            raise EngineUnavailableError("recognition engine has been shut down")
        if self._executor is not None and self._recognizer is not None:
            return self._executor, self._recognizer

        Log.info("Initializing recognition engine")
        try:
            recognizer = self._recognizer_factory()
            recognizer.load()
        except Exception as exc:
            raise EngineUnavailableError(f"recognition engine failed to initialize: {exc}") from exc

        self._recognizer = recognizer
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="recognition")
        self._state = EngineState.READY
        Log.info("Recognition engine ready")
        return self._executor, recognizer

import time
from collections.abc import Callable

from docarchive.pipeline.exceptions import PipelineTimeoutError


class Deadline:
    """Per-request time budget shared by every external call of one run."""

    def __init__(
        self,
        seconds: float | None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._expires_at = None if seconds is None else clock() + seconds

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return self._expires_at - self._clock()

    def budget(self, limit: float) -> float:
        """Timeout for the next call: its own limit, capped by what is left.

        Raises:
            PipelineTimeoutError: if the deadline has already passed.
        """
        remaining = self.remaining()
        if remaining is None:
            return limit
        if remaining <= 0:
            raise PipelineTimeoutError("pipeline deadline elapsed")
        return min(limit, remaining)

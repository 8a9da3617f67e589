import pytest

from docarchive.pipeline.deadline import Deadline
from docarchive.pipeline.exceptions import PipelineTimeoutError


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestDeadline:
    def test_unbounded_deadline_keeps_limit(self) -> None:
        deadline = Deadline(None)
        assert deadline.remaining() is None
        assert deadline.budget(60.0) == 60.0

    def test_budget_capped_by_remaining_time(self) -> None:
        clock = _Clock()
        deadline = Deadline(10.0, clock=clock)
        clock.now += 4.0
        assert deadline.budget(60.0) == pytest.approx(6.0)
        assert deadline.budget(2.0) == 2.0

    def test_elapsed_deadline_raises(self) -> None:
        clock = _Clock()
        deadline = Deadline(5.0, clock=clock)
        clock.now += 5.0
        with pytest.raises(PipelineTimeoutError):
            deadline.budget(60.0)

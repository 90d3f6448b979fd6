from __future__ import annotations

import threading

import pytest

from servicebus_client import OperationCancelled, OperationTimeout, retry


class _FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def test_retry_returns_first_truthy_result() -> None:
    clock = _FakeClock()
    results = iter([None, {"body": "x"}])
    out = retry(60, lambda: next(results), sleep=clock.sleep, clock=clock)
    assert out == {"body": "x"}
    assert clock.sleeps == [5.0]


def test_retry_does_not_wait_when_first_call_succeeds() -> None:
    clock = _FakeClock()
    assert retry(60, lambda: "done", sleep=clock.sleep, clock=clock) == "done"
    assert clock.sleeps == []


def test_retry_times_out_with_last_output() -> None:
    clock = _FakeClock()
    calls = []

    def op():
        calls.append(1)
        return []

    with pytest.raises(OperationTimeout) as exc_info:
        retry(1, op, sleep=clock.sleep, clock=clock)
    assert exc_info.value.output == []
    # one poll interval of overshoot past the deadline at most
    assert clock.now <= 1 + 5.0
    assert len(calls) == 2


def test_retry_uses_custom_interval() -> None:
    clock = _FakeClock()
    with pytest.raises(OperationTimeout):
        retry(3, lambda: None, interval_s=1.0, sleep=clock.sleep, clock=clock)
    assert clock.sleeps == [1.0, 1.0, 1.0]


def test_retry_does_not_swallow_operation_errors() -> None:
    clock = _FakeClock()
    calls = []

    def op():
        calls.append(1)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        retry(60, op, sleep=clock.sleep, clock=clock)
    assert len(calls) == 1


def test_retry_honours_cancel_event() -> None:
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(OperationCancelled) as exc_info:
        retry(60, lambda: 0, cancel=cancel)
    assert exc_info.value.output == 0


def test_retry_times_out_in_real_time() -> None:
    with pytest.raises(OperationTimeout):
        retry(0.05, lambda: None, interval_s=0.01)

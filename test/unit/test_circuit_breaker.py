from __future__ import annotations

from chatwoot_cli.adapters.chatwoot.circuit_breaker import CircuitBreaker


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_opens_after_threshold_consecutive_failures() -> None:
    breaker = CircuitBreaker(threshold=3, reset_seconds=10, clock=_Clock())
    assert breaker.record_failure() is False
    assert breaker.record_failure() is False
    assert not breaker.is_open()
    assert breaker.record_failure() is True
    assert breaker.is_open()
    assert breaker.failures == 3


def test_success_closes_and_clears_failures() -> None:
    breaker = CircuitBreaker(threshold=2, clock=_Clock())
    breaker.record_failure()
    breaker.record_success()
    breaker.record_failure()
    assert not breaker.is_open()
    assert breaker.failures == 1


def test_half_open_after_reset_time_then_success_closes() -> None:
    clock = _Clock()
    breaker = CircuitBreaker(threshold=1, reset_seconds=30, clock=clock)
    breaker.record_failure()
    assert breaker.is_open()

    clock.now += 29.9
    assert breaker.is_open()

    clock.now += 0.5
    assert not breaker.is_open()  # half-open: probe allowed

    breaker.record_success()
    assert not breaker.is_open()
    assert breaker.failures == 0


def test_failed_probe_reopens_and_restarts_timer() -> None:
    clock = _Clock()
    breaker = CircuitBreaker(threshold=1, reset_seconds=30, clock=clock)
    breaker.record_failure()
    clock.now += 31
    assert not breaker.is_open()

    assert breaker.record_failure() is True
    assert breaker.is_open()
    clock.now += 10
    assert breaker.is_open()


def test_reset_clears_state() -> None:
    breaker = CircuitBreaker(threshold=1, clock=_Clock())
    breaker.record_failure()
    assert breaker.is_open()
    breaker.reset()
    assert not breaker.is_open()
    assert breaker.failures == 0


def test_non_positive_settings_fall_back_to_defaults() -> None:
    breaker = CircuitBreaker(threshold=0, reset_seconds=0, clock=_Clock())
    for _ in range(4):
        breaker.record_failure()
    assert not breaker.is_open()
    breaker.record_failure()
    assert breaker.is_open()

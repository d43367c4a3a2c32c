import threading
from datetime import timedelta

import pytest

from wardflow.application.services.quota_governor import QuotaGovernor


def test_admits_until_limit_reached(governor):
    for _ in range(5):
        assert governor.try_acquire() is True

    assert governor.try_acquire() is False
    status = governor.status()
    assert status.used == 5
    assert status.remaining == 0
    assert status.is_limit_reached is True
    assert status.percentage_used == 100


def test_release_refunds_a_reservation(governor):
    for _ in range(5):
        governor.try_acquire()

    governor.release()

    assert governor.status().used == 4
    assert governor.try_acquire() is True
    assert governor.try_acquire() is False


def test_release_never_goes_below_zero(governor):
    governor.release()

    assert governor.status().used == 0


def test_counter_resets_once_window_has_elapsed(governor, clock):
    for _ in range(5):
        governor.try_acquire()
    assert governor.try_acquire() is False

    clock.advance(hours=24)

    assert governor.try_acquire() is True
    status = governor.status()
    assert status.used == 1
    assert status.last_reset == clock.now
    assert status.hours_until_reset == 24.0


def test_window_is_measured_from_last_reset(governor, clock):
    clock.advance(hours=23, minutes=59)
    governor.try_acquire()

    assert governor.status().used == 1
    clock.advance(minutes=1)
    assert governor.status().used == 0


def test_status_is_read_only(governor, clock):
    governor.try_acquire()
    first_reset = governor.status().last_reset
    clock.advance(hours=25)

    status = governor.status()

    # reported as fresh, but the stored window is untouched until the next acquire
    assert status.used == 0
    assert status.hours_until_reset == 0.0
    assert status.last_reset == first_reset


def test_record_exhaustion_forces_denial_until_reset(governor, clock):
    governor.try_acquire()
    governor.record_exhaustion()

    assert governor.try_acquire() is False
    assert governor.status().used == 5

    clock.advance(hours=24)
    assert governor.try_acquire() is True


def test_repeated_exhaustion_reports_stay_at_limit(governor):
    governor.record_exhaustion()
    governor.record_exhaustion()

    status = governor.status()
    assert status.used == status.limit
    assert status.remaining == 0


def test_status_rounds_reported_values(clock):
    governor = QuotaGovernor(1500, clock=clock)
    for _ in range(7):
        governor.try_acquire()
    clock.advance(hours=1, minutes=20)

    status = governor.status()

    assert status.percentage_used == 0
    assert status.remaining == 1493
    assert status.hours_until_reset == 22.7
    assert status.to_dict()["limit"] == 1500


def test_limit_reached_example(clock):
    governor = QuotaGovernor(1500, clock=clock)
    for _ in range(1500):
        governor.try_acquire()

    assert governor.try_acquire() is False


def test_custom_reset_window(clock):
    governor = QuotaGovernor(1, reset_window=timedelta(hours=1), clock=clock)
    governor.try_acquire()
    assert governor.try_acquire() is False

    clock.advance(hours=1)
    assert governor.try_acquire() is True


def test_rejects_non_positive_limit(clock):
    with pytest.raises(ValueError):
        QuotaGovernor(0, clock=clock)


def test_concurrent_successes_are_never_lost(clock):
    governor = QuotaGovernor(10_000, clock=clock)

    def worker():
        for _ in range(500):
            governor.try_acquire()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert governor.status().used == 4000


def test_concurrent_reservations_never_exceed_limit(clock):
    governor = QuotaGovernor(1000, clock=clock)
    granted = []

    def worker():
        granted.extend(governor.try_acquire() for _ in range(500))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert granted.count(True) == 1000
    assert governor.status().used == 1000

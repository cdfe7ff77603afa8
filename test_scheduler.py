#!/usr/bin/env python
"""Scheduler timing and teardown on a real thread pool (short intervals)."""

import threading
import time

import pytest

from latency_visualizer.errors import SchedulerExhaustedError, SchedulerShutdownError
from latency_visualizer.monitor import HostMonitor
from latency_visualizer.registry import MonitorRegistry
from latency_visualizer.scheduler import Scheduler, next_fire_time


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_next_fire_time_on_schedule():
    assert next_fire_time(10.0, 1.0, 10.4) == 11.0


def test_next_fire_time_skips_missed_ticks():
    # Run started at 10.0 and finished at 13.5: 11, 12 and 13 are skipped.
    assert next_fire_time(10.0, 1.0, 13.5) == 14.0
    assert next_fire_time(10.0, 1.0, 11.0) == 12.0


def test_first_run_is_immediate_and_repeats():
    scheduler = Scheduler(workers=2)
    started = time.monotonic()
    first = []
    calls = []

    def job():
        if not first:
            first.append(time.monotonic() - started)
        calls.append(1)

    try:
        scheduler.schedule_at_fixed_rate(job, 0.05)
        assert wait_until(lambda: len(calls) >= 3)
        assert first[0] < 0.5
    finally:
        scheduler.shutdown()


def test_task_never_overlaps_itself():
    scheduler = Scheduler(workers=4)
    active = []
    overlaps = []
    runs = []
    lock = threading.Lock()

    def slow_job():
        with lock:
            if active:
                overlaps.append(1)
            active.append(1)
        time.sleep(0.08)
        with lock:
            active.pop()
            runs.append(1)

    try:
        scheduler.schedule_at_fixed_rate(slow_job, 0.02)
        assert wait_until(lambda: len(runs) >= 4)
    finally:
        scheduler.shutdown()
    assert not overlaps


def test_cancel_stops_future_runs():
    scheduler = Scheduler(workers=1)
    calls = []
    try:
        task = scheduler.schedule_at_fixed_rate(lambda: calls.append(1), 0.02)
        assert wait_until(lambda: len(calls) >= 2)
        task.cancel()
        time.sleep(0.1)
        seen = len(calls)
        time.sleep(0.1)
        assert len(calls) == seen
        assert scheduler.active_tasks == 0
    finally:
        scheduler.shutdown()


def test_failing_task_keeps_running():
    scheduler = Scheduler(workers=1)
    calls = []

    def broken():
        calls.append(1)
        raise RuntimeError("boom")

    try:
        scheduler.schedule_at_fixed_rate(broken, 0.02)
        assert wait_until(lambda: len(calls) >= 3)
    finally:
        scheduler.shutdown()


def test_max_tasks_limit():
    scheduler = Scheduler(workers=1, max_tasks=2)
    try:
        scheduler.schedule_at_fixed_rate(lambda: None, 10.0, initial_delay=10.0)
        task = scheduler.schedule_at_fixed_rate(lambda: None, 10.0, initial_delay=10.0)
        with pytest.raises(SchedulerExhaustedError):
            scheduler.schedule_at_fixed_rate(lambda: None, 10.0)

        task.cancel()
        scheduler.schedule_at_fixed_rate(lambda: None, 10.0, initial_delay=10.0)
    finally:
        scheduler.shutdown()


def test_shutdown_is_idempotent_and_final():
    scheduler = Scheduler(workers=1)
    scheduler.schedule_at_fixed_rate(lambda: None, 0.05)
    scheduler.shutdown()
    scheduler.shutdown()

    assert scheduler.is_shutdown
    with pytest.raises(SchedulerShutdownError):
        scheduler.schedule_at_fixed_rate(lambda: None, 0.05)


def test_shutdown_does_not_wait_for_slow_probe():
    release = threading.Event()
    entered = threading.Event()

    def hanging_prober(host, timeout_ms):
        entered.set()
        release.wait(5)
        return 1.0

    registry = MonitorRegistry(prober=hanging_prober, interval=0.05, workers=1)
    monitor = registry.add("slow.example")
    try:
        assert entered.wait(2)
        started = time.monotonic()
        registry.shutdown_all()
        assert time.monotonic() - started < 1.0
    finally:
        release.set()

    # The late reply lands after stop() and is dropped.
    time.sleep(0.05)
    assert len(monitor.sample_snapshot()) == 0


def test_monitors_sample_in_parallel():
    registry = MonitorRegistry(prober=lambda host, timeout_ms: 3.0, interval=0.02, workers=2)
    try:
        monitors = [registry.add(h) for h in ("a.example", "b.example", "c.example")]
        assert wait_until(lambda: all(len(m.sample_snapshot()) >= 3 for m in monitors))
        assert all(isinstance(m, HostMonitor) for m in monitors)
        assert all(m.last_known_good() == 3.0 for m in monitors)
    finally:
        registry.shutdown_all()

import pytest


class FakeTask:
    def __init__(self, fn, interval, name):
        self.fn = fn
        self.interval = interval
        self.name = name
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Records scheduled tasks; tests fire ticks by hand with `tick()`."""

    def __init__(self, error=None):
        self.tasks = []
        self.error = error
        self.shutdown_calls = 0

    def schedule_at_fixed_rate(self, fn, interval, initial_delay=0.0, name=None):
        if self.error is not None:
            raise self.error
        task = FakeTask(fn, interval, name)
        self.tasks.append(task)
        return task

    def tick(self):
        for task in self.tasks:
            if not task.cancelled:
                task.fn()

    def shutdown(self):
        self.shutdown_calls += 1


class ScriptedProber:
    """Returns queued readings in order, then GAP forever."""

    def __init__(self, *readings):
        self.readings = list(readings)
        self.calls = []

    def __call__(self, host, timeout_ms):
        self.calls.append((host, timeout_ms))
        if not self.readings:
            return None
        reading = self.readings.pop(0)
        if isinstance(reading, Exception):
            raise reading
        return reading


@pytest.fixture
def scheduler():
    return FakeScheduler()

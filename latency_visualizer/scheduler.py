"""Periodic tasks on a shared, bounded worker pool.

A single dispatcher thread keeps a heap of due times and hands each due task
to a ``ThreadPoolExecutor``. A task is put back on the heap only after its run
has finished, so one task never runs concurrently with itself. Ticks missed
while a run overran its interval are skipped, not queued.
"""

import heapq
import itertools
import logging
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from .constants import DEFAULT_MAX_TASKS, DEFAULT_WORKERS
from .errors import SchedulerExhaustedError, SchedulerShutdownError

logger = logging.getLogger(__name__)


def next_fire_time(due: float, interval: float, now: float) -> float:
    """Next point on the fixed-rate grid ``due + k*interval`` that is after `now`."""
    next_due = due + interval
    if next_due > now:
        return next_due
    missed = math.floor((now - due) / interval)
    return due + (missed + 1) * interval


class PeriodicTask:
    def __init__(self, scheduler, fn, interval, name=None):
        self._scheduler = scheduler
        self.fn = fn
        self.interval = float(interval)
        self.name = name or getattr(fn, "__name__", "task")
        self.runs = 0
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        if self._cancelled.is_set():
            return
        self._cancelled.set()
        self._scheduler._discard(self)

    def __repr__(self):
        state = "cancelled" if self.cancelled else "active"
        return f"<PeriodicTask {self.name} every {self.interval}s {state}>"


class Scheduler:
    def __init__(self, workers: int = DEFAULT_WORKERS, max_tasks: int = DEFAULT_MAX_TASKS, clock=time.monotonic):
        if workers <= 0:
            raise ValueError("workers must be positive")
        self.workers = workers
        self.max_tasks = max_tasks
        self._clock = clock
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="probe")
        self._cond = threading.Condition()
        self._heap = []
        self._seq = itertools.count()
        self._tasks = set()
        self._shutdown = False
        self._dispatcher = None

    @property
    def is_shutdown(self) -> bool:
        with self._cond:
            return self._shutdown

    @property
    def active_tasks(self) -> int:
        with self._cond:
            return len(self._tasks)

    def schedule_at_fixed_rate(self, fn, interval: float, initial_delay: float = 0.0, name=None) -> PeriodicTask:
        if interval <= 0:
            raise ValueError("interval must be positive")

        with self._cond:
            if self._shutdown:
                raise SchedulerShutdownError("scheduler has been shut down")
            if len(self._tasks) >= self.max_tasks:
                raise SchedulerExhaustedError(
                    f"worker pool is at its limit of {self.max_tasks} periodic tasks"
                )

            task = PeriodicTask(self, fn, interval, name)
            self._tasks.add(task)
            self._push(self._clock() + max(0.0, initial_delay), task)
            self._ensure_dispatcher()
            return task

    def shutdown(self) -> None:
        with self._cond:
            if self._shutdown:
                return
            self._shutdown = True
            tasks = list(self._tasks)
            self._tasks.clear()
            self._heap.clear()
            self._cond.notify_all()
            dispatcher = self._dispatcher

        for task in tasks:
            task._cancelled.set()

        if dispatcher is not None and dispatcher is not threading.current_thread():
            dispatcher.join()

        # In-flight probes are not waited for; their results are dropped by
        # their cancelled monitors.
        self._executor.shutdown(wait=False, cancel_futures=True)
        logger.debug("scheduler shut down (%d tasks cancelled)", len(tasks))

    # ---- internals ----

    def _push(self, due, task):
        heapq.heappush(self._heap, (due, next(self._seq), task))
        self._cond.notify()

    def _discard(self, task):
        with self._cond:
            self._tasks.discard(task)
            self._cond.notify()

    def _ensure_dispatcher(self):
        if self._dispatcher is None:
            self._dispatcher = threading.Thread(
                target=self._dispatch_loop, name="scheduler-dispatch", daemon=True
            )
            self._dispatcher.start()

    def _dispatch_loop(self):
        with self._cond:
            while not self._shutdown:
                if not self._heap:
                    self._cond.wait()
                    continue

                due, _, task = self._heap[0]
                if task.cancelled:
                    heapq.heappop(self._heap)
                    continue

                delay = due - self._clock()
                if delay > 0:
                    self._cond.wait(delay)
                    continue

                heapq.heappop(self._heap)
                try:
                    self._executor.submit(self._run, task, due)
                except RuntimeError:
                    logger.error("worker pool refused %s; stopping dispatch", task.name)
                    return

    def _run(self, task, due):
        try:
            if not task.cancelled:
                task.fn()
        except Exception:
            logger.exception("periodic task %s failed", task.name)
        finally:
            task.runs += 1
            self._reschedule(task, due)

    def _reschedule(self, task, due):
        with self._cond:
            if self._shutdown or task.cancelled:
                return
            self._push(next_fire_time(due, task.interval, self._clock()), task)

import logging
import threading
from collections import OrderedDict
from typing import NamedTuple, Optional

from .constants import (
    DEFAULT_CAPACITY,
    DEFAULT_INTERVAL_S,
    DEFAULT_MAX_TASKS,
    DEFAULT_TIMEOUT_MS,
    DEFAULT_WORKERS,
)
from .errors import MonitorStartError, RegistryShutdownError, SchedulerError
from .monitor import HostMonitor
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


class HostStatus(NamedTuple):
    identity: str
    last_known_good: Optional[float]


def normalize_host(host) -> str:
    return (host or "").strip()


def host_key(host) -> str:
    return normalize_host(host).casefold()


class MonitorRegistry:
    """Ordered set of host monitors sharing one worker pool.

    Hosts are unique case-insensitively and keep insertion order, which is
    also the chart's colour and legend order. The pool is created with the
    registry and torn down once by `shutdown_all()`.
    """

    def __init__(
        self,
        prober=None,
        capacity=DEFAULT_CAPACITY,
        interval=DEFAULT_INTERVAL_S,
        timeout_ms=DEFAULT_TIMEOUT_MS,
        workers=DEFAULT_WORKERS,
        max_tasks=DEFAULT_MAX_TASKS,
        scheduler=None,
    ):
        self.prober = prober
        self.capacity = capacity
        self.interval = interval
        self.timeout_ms = timeout_ms
        self.scheduler = scheduler or Scheduler(workers=workers, max_tasks=max_tasks)
        self._monitors = OrderedDict()
        self._lock = threading.RLock()
        self._shutdown = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown_all()

    def __len__(self):
        with self._lock:
            return len(self._monitors)

    def __contains__(self, host):
        with self._lock:
            return host_key(host) in self._monitors

    @property
    def is_shutdown(self):
        return self._shutdown

    def get(self, host):
        with self._lock:
            return self._monitors.get(host_key(host))

    def add(self, host) -> HostMonitor:
        """Start monitoring `host`; returns the existing monitor for duplicates."""
        name = normalize_host(host)
        if not name:
            raise ValueError("host must not be blank")
        key = name.casefold()

        with self._lock:
            if self._shutdown:
                raise RegistryShutdownError("registry has been shut down")

            existing = self._monitors.get(key)
            if existing is not None:
                return existing

            monitor = HostMonitor(
                name,
                self.scheduler,
                prober=self.prober,
                capacity=self.capacity,
                interval=self.interval,
                timeout_ms=self.timeout_ms,
            )
            try:
                monitor.start()
            except SchedulerError as exc:
                logger.error("cannot monitor %s: %s", name, exc)
                raise MonitorStartError(name, str(exc)) from exc

            self._monitors[key] = monitor
        logger.info("added host %s", name)
        return monitor

    def remove(self, host) -> Optional[HostMonitor]:
        """Stop and forget `host`. The returned monitor stays readable."""
        with self._lock:
            if isinstance(host, HostMonitor):
                key = host_key(host.host)
                # A stale monitor must not evict its re-added replacement.
                if self._monitors.get(key) is not host:
                    return None
            else:
                key = host_key(host)
            monitor = self._monitors.pop(key, None)
        if monitor is None:
            return None
        monitor.stop()
        logger.info("removed host %s", monitor.host)
        return monitor

    def list(self):
        with self._lock:
            return list(self._monitors.values())

    def shutdown_all(self) -> None:
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
            monitors = list(self._monitors.values())

        for monitor in monitors:
            monitor.stop()
        self.scheduler.shutdown()
        logger.info("shut down %d monitor(s)", len(monitors))

    # Host mutation boundary for the UI layer.

    def add_host(self, host):
        return self.add(host)

    def remove_host(self, host):
        return self.remove(host)

    def list_hosts(self):
        return [HostStatus(m.host, m.last_known_good()) for m in self.list()]

import logging
import threading

from . import ping
from .buffer import SampleBuffer
from .constants import DEFAULT_CAPACITY, DEFAULT_INTERVAL_S, DEFAULT_TIMEOUT_MS
from .ping import GAP, as_latency, is_gap

logger = logging.getLogger(__name__)


def format_latency(value):
    return "N/A" if value is None else f"{value:.1f} ms"


class HostMonitor:
    """Pings one host on a fixed interval and keeps its rolling history.

    `prober` is any callable ``(host, timeout_ms) -> float | GAP``; it defaults
    to the system ping. Samples are only written while the monitor is running:
    once `stop()` returns the buffer no longer changes, but stays readable.
    """

    def __init__(
        self,
        host,
        scheduler,
        prober=None,
        capacity=DEFAULT_CAPACITY,
        interval=DEFAULT_INTERVAL_S,
        timeout_ms=DEFAULT_TIMEOUT_MS,
    ):
        self.host = host
        self.interval = interval
        self.timeout_ms = timeout_ms
        self._scheduler = scheduler
        self._prober = prober or ping.probe
        self._buffer = SampleBuffer(capacity)
        self._last_known = None
        self._task = None
        self._running = False
        self._state_lock = threading.Lock()

    @property
    def capacity(self):
        return self._buffer.capacity

    @property
    def running(self):
        return self._running

    def start(self):
        """Begin probing, first probe immediately. No-op if already running.

        Raises SchedulerError if the worker pool cannot take the task.
        """
        with self._state_lock:
            if self._running:
                return
            self._task = self._scheduler.schedule_at_fixed_rate(
                self._tick, self.interval, name=f"ping {self.host}"
            )
            self._running = True
        logger.info("monitoring %s every %.1fs", self.host, self.interval)

    def stop(self):
        with self._state_lock:
            if not self._running:
                return
            self._running = False
            task, self._task = self._task, None
        if task is not None:
            task.cancel()
        logger.info("stopped monitoring %s", self.host)

    def sample_snapshot(self):
        return self._buffer.snapshot()

    def last_known_good(self):
        return self._last_known

    def display_label(self):
        return f"{self.host} (last: {format_latency(self._last_known)})"

    def list_label(self):
        last = self._last_known
        return f"{self.host} (N/A)" if last is None else f"{self.host} ({last:.1f} ms)"

    def _tick(self):
        try:
            rtt = as_latency(self._prober(self.host, self.timeout_ms))
        except Exception as e:
            logger.debug("probe of %s raised %r", self.host, e)
            rtt = GAP

        with self._state_lock:
            # stop() may have won the race while the probe was in flight.
            if not self._running:
                return
            self._buffer.push(rtt)
            if is_gap(rtt):
                logger.debug("no reply from %s", self.host)
            else:
                self._last_known = float(rtt)

    def __repr__(self):
        state = "running" if self._running else "stopped"
        return f"<HostMonitor {self.host} {state}>"

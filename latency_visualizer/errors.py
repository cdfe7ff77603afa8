"""Exception hierarchy.

Probe failures are not part of it: they never raise, they become gaps.
"""


class LatencyVisualizerError(Exception):
    pass


class SchedulerError(LatencyVisualizerError):
    """The shared worker pool could not accept periodic work."""


class SchedulerShutdownError(SchedulerError):
    pass


class SchedulerExhaustedError(SchedulerError):
    pass


class MonitorStartError(SchedulerError):
    """A host monitor could not be scheduled when it was added."""

    def __init__(self, host, reason=None):
        self.host = host
        message = f"could not start monitor for {host!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RegistryShutdownError(LatencyVisualizerError):
    pass

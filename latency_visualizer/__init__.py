"""Real-time multi-host ping latency charts."""

from .buffer import SampleBuffer
from .monitor import HostMonitor
from .ping import GAP, is_gap, probe
from .projection import ChartFrame, ChartProjector
from .registry import HostStatus, MonitorRegistry
from .scheduler import Scheduler

__version__ = "0.1.0"

__all__ = [
    "GAP",
    "ChartFrame",
    "ChartProjector",
    "HostMonitor",
    "HostStatus",
    "MonitorRegistry",
    "SampleBuffer",
    "Scheduler",
    "is_gap",
    "probe",
]

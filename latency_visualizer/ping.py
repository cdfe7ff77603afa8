import logging
import math
import re
import subprocess
import sys

from .constants import DEFAULT_TIMEOUT_MS

logger = logging.getLogger(__name__)

# No reading for this tick (timeout, unreachable host, unparsable output).
GAP = None

_TIME_PATTERNS = (
    re.compile(r"time[=<]\s*([0-9]+\.?[0-9]*)"),
    re.compile(r"time=\s*([0-9]+\.[0-9]+)\s*ms"),
)


def is_gap(value):
    return value is None or (isinstance(value, float) and math.isnan(value))


def as_latency(value):
    """A usable latency in ms, or GAP for anything negative, non-finite or non-numeric."""
    if is_gap(value):
        return GAP
    try:
        value = float(value)
    except (TypeError, ValueError):
        return GAP
    if not math.isfinite(value) or value < 0:
        return GAP
    return value


def ping_command(host, timeout_ms, platform=None):
    platform = platform or sys.platform
    if platform.startswith("win"):
        return ["ping", "-n", "1", "-w", str(timeout_ms), host]
    seconds = max(1, (timeout_ms + 999) // 1000)
    return ["ping", "-c", "1", "-W", str(seconds), host]


def parse_ping_output(output):
    """Extract the round-trip time in ms from `ping` output, or GAP."""
    for pattern in _TIME_PATTERNS:
        match = pattern.search(output)
        if match:
            return float(match.group(1))
    return GAP


def probe(host, timeout_ms=DEFAULT_TIMEOUT_MS):
    """Ping `host` once. Never raises: every failure mode collapses to GAP."""
    try:
        result = subprocess.run(
            ping_command(host, timeout_ms),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=(timeout_ms + 2000) / 1000.0,
        )
    except subprocess.TimeoutExpired:
        logger.debug("ping %s timed out", host)
        return GAP
    except (OSError, ValueError) as e:
        logger.debug("ping %s failed: %s", host, e)
        return GAP
    return parse_ping_output(result.stdout or "")

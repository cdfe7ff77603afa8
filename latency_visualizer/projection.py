"""Turn per-host sample histories into chart geometry.

Everything here is plain data: no Qt, no pyqtgraph. The frame's vertical
coordinate ``fraction`` is measured from the top of the plot area, so 0 is
the top of the axis (labelled with the scale) and 1 is the bottom (0 ms).
Lower latency therefore sits lower on the chart, as on the axis labels.
"""

import math
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .constants import (
    DEFAULT_CAPACITY,
    DEFAULT_SCALE_FLOOR_MS,
    GRIDLINE_COUNT,
    PLOT_MARGINS,
    SCALE_STEP_MS,
)
from .monitor import format_latency


class PlotPoint(NamedTuple):
    slot: int
    fraction: float
    # True for the first point after a gap: do not connect it to the previous one.
    is_gap_break: bool


class Gridline(NamedTuple):
    fraction: float
    value: float

    @property
    def label(self):
        return f"{self.value:.0f} ms"


class SeriesProjection(NamedTuple):
    host: str
    label: str
    last_known_good: Optional[float]
    points: List[PlotPoint]

    def segments(self) -> List[List[PlotPoint]]:
        """Runs of points that may be joined by line segments."""
        out = []
        for point in self.points:
            if point.is_gap_break or not out:
                out.append([])
            out[-1].append(point)
        return out


class ChartFrame(NamedTuple):
    scale: float
    capacity: int
    gridlines: List[Gridline]
    series: List[SeriesProjection]


def plottable(samples) -> np.ndarray:
    """Float copy of `samples` with negative and non-finite readings turned into gaps."""
    samples = np.array(samples, dtype=float)
    with np.errstate(invalid="ignore"):
        samples[~np.isfinite(samples) | (samples < 0)] = np.nan
    return samples


def choose_scale(snapshots, floor=DEFAULT_SCALE_FLOOR_MS, step=SCALE_STEP_MS) -> float:
    """Largest non-gap sample, floored at `floor`, rounded up to a multiple of `step`."""
    observed_max = float(floor)
    for samples in snapshots:
        samples = plottable(samples)
        if samples.size and not np.all(np.isnan(samples)):
            observed_max = max(observed_max, float(np.nanmax(samples)))
    return math.ceil(observed_max / step) * step


def gridlines(scale, count=GRIDLINE_COUNT) -> List[Gridline]:
    return [Gridline(i / count, scale * (1 - i / count)) for i in range(count)]


def value_fractions(samples, scale) -> np.ndarray:
    """min(1, v / scale) per sample; NaN stays NaN."""
    return np.minimum(1.0, np.asarray(samples, dtype=float) / scale)


def project_series(samples, scale, capacity) -> List[PlotPoint]:
    samples = plottable(samples)
    n = len(samples)
    if n > capacity:
        raise ValueError(f"{n} samples do not fit in {capacity} slots")

    start = capacity - n
    offsets = 1.0 - value_fractions(samples, scale)

    points = []
    after_gap = False
    for i in range(n):
        if np.isnan(samples[i]):
            after_gap = True
            continue
        points.append(PlotPoint(start + i, float(offsets[i]), after_gap))
        after_gap = False
    return points


class ChartProjector:
    def __init__(self, capacity=DEFAULT_CAPACITY, scale_floor=DEFAULT_SCALE_FLOOR_MS):
        self.capacity = capacity
        self.scale_floor = scale_floor

    def project(self, monitors) -> ChartFrame:
        monitors = list(monitors)
        # One snapshot per monitor so scale and geometry agree.
        snapshots = [m.sample_snapshot() for m in monitors]
        scale = choose_scale(snapshots, floor=self.scale_floor)

        series = []
        for monitor, samples in zip(monitors, snapshots):
            series.append(
                SeriesProjection(
                    host=monitor.host,
                    label=monitor.display_label(),
                    last_known_good=monitor.last_known_good(),
                    points=project_series(samples, scale, self.capacity),
                )
            )
        return ChartFrame(scale, self.capacity, gridlines(scale), series)


class PixelSeries(NamedTuple):
    host: str
    label: str
    lines: List[Tuple[int, int, int, int]]


class PixelFrame(NamedTuple):
    plot_rect: Tuple[int, int, int, int]
    ticks: List[Tuple[int, str]]
    series: List[PixelSeries]


def to_pixels(frame: ChartFrame, width: int, height: int, margins=PLOT_MARGINS) -> Optional[PixelFrame]:
    """Lay a frame out on a ``width`` x ``height`` canvas.

    Returns None when the margins leave no room to plot.
    """
    left, right, top, bottom = margins
    plot_w = width - left - right
    plot_h = height - top - bottom
    if plot_w <= 0 or plot_h <= 0:
        return None

    ticks = [(top + int(plot_h * g.fraction), g.label) for g in frame.gridlines]
    ticks.append((top + plot_h, Gridline(1.0, 0.0).label))

    x_step = plot_w / max(1, frame.capacity - 1)
    series = []
    for s in frame.series:
        lines = []
        for segment in s.segments():
            coords = [
                (left + int(p.slot * x_step), top + int(p.fraction * plot_h))
                for p in segment
            ]
            lines.extend(a + b for a, b in zip(coords, coords[1:]))
        series.append(PixelSeries(s.host, s.label, lines))

    return PixelFrame((left, top, plot_w, plot_h), ticks, series)


__all__ = [
    "ChartFrame",
    "ChartProjector",
    "Gridline",
    "PixelFrame",
    "PixelSeries",
    "PlotPoint",
    "SeriesProjection",
    "choose_scale",
    "format_latency",
    "gridlines",
    "project_series",
    "to_pixels",
    "plottable",
    "value_fractions",
]

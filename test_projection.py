#!/usr/bin/env python
"""Chart projection: scale choice, right alignment, gap breaks, axis direction."""

import numpy as np
import pytest

from conftest import FakeScheduler, ScriptedProber
from latency_visualizer.monitor import HostMonitor
from latency_visualizer.ping import GAP
from latency_visualizer.projection import (
    ChartProjector,
    choose_scale,
    gridlines,
    project_series,
    to_pixels,
)


def make_monitor(host, readings, capacity):
    scheduler = FakeScheduler()
    monitor = HostMonitor(host, scheduler, prober=ScriptedProber(*readings), capacity=capacity)
    monitor.start()
    for _ in readings:
        scheduler.tick()
    return monitor


def test_scale_has_floor_of_100():
    assert choose_scale([]) == 100
    assert choose_scale([np.array([])]) == 100
    assert choose_scale([np.array([3.0, 42.0])]) == 100
    assert choose_scale([np.array([np.nan, np.nan])]) == 100


def test_scale_rounds_up_to_multiple_of_ten():
    assert choose_scale([np.array([100.0])]) == 100
    assert choose_scale([np.array([100.1])]) == 110
    assert choose_scale([np.array([12.0]), np.array([np.nan, 257.3])]) == 260


def test_scale_is_monotonic():
    samples = [5.0, 88.0, 140.0]
    previous = choose_scale([np.array(samples)])
    for extra in [141.0, 199.9, 200.0, 730.5]:
        samples.append(extra)
        scale = choose_scale([np.array(samples)])
        assert scale >= previous
        assert scale >= 100
        assert scale % 10 == 0
        previous = scale


def test_gridlines():
    lines = gridlines(150)
    assert [g.fraction for g in lines] == pytest.approx([0.0, 0.2, 0.4, 0.6, 0.8])
    assert [g.value for g in lines] == pytest.approx([150, 120, 90, 60, 30])
    assert lines[0].label == "150 ms"


def test_short_history_is_right_aligned():
    capacity = 120
    new_host = make_monitor("new.example", [10.0, 11.0, 12.0], capacity)
    old_host = make_monitor("old.example", [20.0] * capacity, capacity)

    frame = ChartProjector(capacity=capacity).project([new_host, old_host])
    new_series, old_series = frame.series

    assert [p.slot for p in new_series.points] == [117, 118, 119]
    assert old_series.points[0].slot == 0
    assert old_series.points[-1].slot == new_series.points[-1].slot == 119


def test_gap_splits_line_into_two_segments():
    points = project_series([10.0, np.nan, 20.0], scale=100, capacity=3)

    assert [p.slot for p in points] == [0, 2]
    assert points[1].is_gap_break

    frame = ChartProjector(capacity=3).project([make_monitor("h", [10.0, GAP, 20.0], 3)])
    segments = frame.series[0].segments()
    assert [[p.slot for p in seg] for seg in segments] == [[0], [2]]


def test_values_above_scale_are_clipped_to_the_top():
    points = project_series([500.0], scale=100, capacity=1)
    assert points[0].fraction == 0.0


def test_too_many_samples_is_an_error():
    with pytest.raises(ValueError):
        project_series([1.0, 2.0], scale=100, capacity=1)


def test_literal_scenario():
    """capacity=5: [20, Gap, 150, 150, 150] on a 150 ms scale.

    Fractions are measured from the top of the plot: 150 ms sits at the top
    (0.0, labelled "150 ms") and 20 ms near the bottom (1 - 20/150).
    """
    monitor = make_monitor("scenario", [20.0, GAP, 150.0, 150.0, 150.0], capacity=5)
    assert monitor.last_known_good() == 150.0

    frame = ChartProjector(capacity=5).project([monitor])
    assert frame.scale == 150

    points = frame.series[0].points
    assert [p.slot for p in points] == [0, 2, 3, 4]
    assert points[0].fraction == pytest.approx(1 - 20 / 150)
    assert points[0].fraction == pytest.approx(0.8667, abs=1e-4)
    assert [p.fraction for p in points[1:]] == [0.0, 0.0, 0.0]
    assert [p.is_gap_break for p in points] == [False, True, False, False]
    assert frame.series[0].label == "scenario (last: 150.0 ms)"
    assert frame.gridlines[0].value == 150


def test_to_pixels_matches_frame():
    monitor = make_monitor("scenario", [20.0, GAP, 150.0, 150.0, 150.0], capacity=5)
    frame = ChartProjector(capacity=5).project([monitor])

    # 100 x 150 plot area inside the default margins
    pixels = to_pixels(frame, width=180, height=210)
    assert pixels.plot_rect == (60, 20, 100, 150)
    assert [y for y, _ in pixels.ticks] == [20, 50, 80, 110, 140, 170]
    assert pixels.ticks[0][1] == "150 ms"
    assert pixels.ticks[-1][1] == "0 ms"
    # The lone 20 ms point before the gap draws no line.
    assert pixels.series[0].lines == [(110, 20, 135, 20), (135, 20, 160, 20)]


def test_to_pixels_without_room():
    frame = ChartProjector(capacity=5).project([])
    assert to_pixels(frame, width=50, height=50) is None


def test_project_accepts_a_generator():
    a = make_monitor("a.example", [10.0, 20.0], capacity=5)
    b = make_monitor("b.example", [130.0], capacity=5)

    frame = ChartProjector(capacity=5).project(m for m in [a, b])

    assert [s.host for s in frame.series] == ["a.example", "b.example"]
    assert frame.scale == 130
    assert [p.slot for p in frame.series[1].points] == [4]


def test_negative_and_infinite_values_are_gaps():
    points = project_series([-5.0, 10.0, np.inf, 20.0], scale=100, capacity=4)

    assert [p.slot for p in points] == [1, 3]
    assert all(0.0 <= p.fraction <= 1.0 for p in points)
    assert [p.is_gap_break for p in points] == [True, True]
    assert choose_scale([[np.inf, -np.inf, 42.0]]) == 100
    assert choose_scale([[-500.0, 230.0]]) == 230


if __name__ == "__main__":
    test_literal_scenario()
    print("literal scenario OK")

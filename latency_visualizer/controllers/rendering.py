import numpy as np
import pyqtgraph as pg

from ..constants import PING_COLORS


def series_xy(series, scale):
    """x/y arrays for one projected series, NaN-separated at gaps.

    pyqtgraph's y axis grows upwards, so the top-down fraction is turned back
    into milliseconds (clipped at the scale).
    """
    xs = []
    ys = []
    for point in series.points:
        if point.is_gap_break and xs:
            xs.append(np.nan)
            ys.append(np.nan)
        xs.append(point.slot)
        ys.append((1.0 - point.fraction) * scale)
    return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)


def update_ping_curves(window):
    """Recreate one curve + legend entry per monitored host."""
    from ..plot_items import setup_legend

    old_legend = getattr(window, "ping_legend", None)
    if old_legend is not None and old_legend.scene() is not None:
        old_legend.setParentItem(None)
        old_legend.scene().removeItem(old_legend)

    for curve in window.ping_curves:
        window.ping_plot.removeItem(curve)
    window.ping_curves.clear()

    window.ping_legend = setup_legend(window.ping_plot)

    for i, monitor in enumerate(window.registry.list()):
        color = PING_COLORS[i % len(PING_COLORS)]
        curve = window.ping_plot.plot(
            pen=pg.mkPen(color, width=2),
            antialias=window.antialias_default,
            connect="finite",
        )
        window.ping_curves.append(curve)
        window.ping_legend.addItem(curve, monitor.display_label())


def draw_chart(window):
    monitors = window.registry.list()
    if len(monitors) != len(window.ping_curves):
        update_ping_curves(window)

    frame = window.projector.project(monitors)

    left_axis = window.ping_plot.getAxis("left")
    ticks = [(g.value, g.label) for g in frame.gridlines] + [(0.0, "0 ms")]
    left_axis.setTicks([ticks])
    window.ping_plot.setYRange(0, frame.scale, padding=0)
    window.ping_plot.setXRange(0, frame.capacity - 1, padding=0)

    for curve, series in zip(window.ping_curves, frame.series):
        xs, ys = series_xy(series, frame.scale)
        curve.setData(xs, ys, connect="finite")
    window.ping_legend.set_labels([s.label for s in frame.series])

    window.refresh_host_labels()
    return frame

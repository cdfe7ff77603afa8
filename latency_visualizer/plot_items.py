import pyqtgraph as pg

DARK_LEGEND = ((50, 50, 50, 200), (200, 200, 200))
LIGHT_LEGEND = ((255, 255, 255, 200), (0, 0, 0))


def legend_theme(background):
    """(brush rgba, text rgb) readable on the given pyqtgraph background."""
    if isinstance(background, (tuple, list)) and len(background) >= 3:
        dark = sum(background[:3]) / 3 < 128
    else:
        dark = background in ("k", "black")
    return DARK_LEGEND if dark else LIGHT_LEGEND


class HostLegend(pg.LegendItem):
    """Legend with one "host (last: …)" row per curve, relabelled each frame."""

    def set_labels(self, labels):
        for (_, label), text in zip(self.items, labels):
            if label.text != text:
                label.setText(text)


def setup_legend(plot, offset=(10, 10)):
    legend = HostLegend(offset=offset)
    legend.setParentItem(plot.getPlotItem().vb)
    legend.anchor((0, 0), (0, 0), offset=offset)

    brush, text = legend_theme(pg.getConfigOption("background"))
    legend.setBrush(pg.mkBrush(*brush))
    legend.setLabelTextColor(text)
    legend.setPen(pg.mkPen(None))

    return legend


class SlotAxisItem(pg.AxisItem):
    """Bottom axis showing seconds before now instead of slot indices."""

    def __init__(self, capacity, interval, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.capacity = capacity
        self.interval = interval

    def tickStrings(self, values, scale, spacing):
        out = []
        for v in values:
            ago = (self.capacity - 1 - v) * self.interval
            out.append("now" if ago <= 0 else f"-{ago:.0f}s")
        return out

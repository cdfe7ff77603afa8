import logging

import pyqtgraph as pg
from PyQt5.QtCore import QTimer
from PyQt5.QtWidgets import QHBoxLayout, QMainWindow, QMessageBox, QWidget

from .. import constants
from ..controllers import rendering
from ..errors import MonitorStartError
from ..plot_items import SlotAxisItem, setup_legend
from ..projection import ChartProjector
from ..widgets.host_panel import build_host_panel, is_valid_host, refresh_host_list

logger = logging.getLogger(__name__)


class LatencyVisualizer(QMainWindow):
    def __init__(self, registry, antialias_default: bool, refresh_interval=constants.DEFAULT_REFRESH_INTERVAL_MS):
        super().__init__()
        self.registry = registry
        self.antialias_default = antialias_default
        self.projector = ChartProjector(capacity=registry.capacity)

        self.setWindowTitle("Network Latency Visualizer")
        self.setGeometry(100, 100, 1000, 600)

        central = QWidget()
        self.setCentralWidget(central)
        layout = QHBoxLayout(central)

        layout.addWidget(build_host_panel(self))

        bottom_axis = SlotAxisItem(registry.capacity, registry.interval, orientation="bottom")
        self.ping_plot = pg.PlotWidget(axisItems={"bottom": bottom_axis})
        self.ping_plot.setMenuEnabled(False)
        self.ping_plot.setLabel("left", "ms")
        self.ping_plot.setTitle("Ping", anchor="w")
        self.ping_plot.showGrid(x=False, y=True, alpha=0.15)
        self.ping_plot.setMouseEnabled(x=False, y=False)
        self.ping_plot.hideButtons()
        self.ping_legend = setup_legend(self.ping_plot)
        self.ping_curves = []
        layout.addWidget(self.ping_plot, stretch=1)

        rendering.update_ping_curves(self)
        self.draw_chart()

        self.timer = QTimer()
        self.timer.timeout.connect(self.draw_chart)
        self.timer.start(refresh_interval)

    # ---- Hosts ----

    def refresh_host_labels(self):
        refresh_host_list(self)

    def add_host(self):
        host = self.host_entry.text().strip()
        if not host:
            return
        if not is_valid_host(host):
            logger.warning("ignoring invalid host %r", host)
            return
        try:
            self.registry.add_host(host)
        except MonitorStartError as e:
            QMessageBox.warning(self, "Cannot add host", str(e))
            return
        self.host_entry.clear()
        rendering.update_ping_curves(self)
        self.draw_chart()

    def remove_selected_host(self):
        row = self.host_list.currentRow()
        monitors = self.registry.list()
        if 0 <= row < len(monitors):
            self.registry.remove_host(monitors[row])
            rendering.update_ping_curves(self)
            self.draw_chart()

    # ---- Rendering ----

    def draw_chart(self):
        return rendering.draw_chart(self)

    def closeEvent(self, event):
        self.timer.stop()
        self.registry.shutdown_all()
        super().closeEvent(event)

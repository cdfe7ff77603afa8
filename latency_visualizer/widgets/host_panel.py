import re

from PyQt5.QtWidgets import (
    QAbstractItemView,
    QLabel,
    QLineEdit,
    QListWidget,
    QPushButton,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

HOST_PATTERN = re.compile(
    r"^[\d]{1,3}\.[\d]{1,3}\.[\d]{1,3}\.[\d]{1,3}$|^[a-zA-Z0-9][a-zA-Z0-9.\-:]*$"
)

NOTES = "Notes:\n- Uses system ping\n- Timeouts show as gaps\n- Add hosts to start pinging"


def is_valid_host(host):
    return bool(HOST_PATTERN.match(host))


def build_host_panel(window):
    """Left-hand panel: host entry, add/remove buttons, host list, notes."""

    panel = QWidget()
    panel.setFixedWidth(260)
    layout = QVBoxLayout(panel)

    layout.addWidget(QLabel("Add host (hostname or IP):"))

    window.host_entry = QLineEdit()
    window.host_entry.setPlaceholderText("type IP or domain")
    window.host_entry.returnPressed.connect(window.add_host)
    layout.addWidget(window.host_entry)

    add_btn = QPushButton("Add Host")
    add_btn.clicked.connect(window.add_host)
    layout.addWidget(add_btn)
    layout.addSpacing(8)

    remove_btn = QPushButton("Remove Selected")
    remove_btn.clicked.connect(window.remove_selected_host)
    layout.addWidget(remove_btn)
    layout.addSpacing(12)

    window.host_list = QListWidget()
    window.host_list.setSelectionMode(QAbstractItemView.SingleSelection)
    layout.addWidget(window.host_list, stretch=1)

    info = QTextEdit()
    info.setReadOnly(True)
    info.setPlainText(NOTES)
    info.setFixedHeight(90)
    layout.addWidget(info)

    return panel


def refresh_host_list(window):
    """Sync list rows with the registry, keeping the current selection."""
    monitors = window.registry.list()
    selected = window.host_list.currentRow()

    if window.host_list.count() != len(monitors):
        window.host_list.clear()
        window.host_list.addItems([m.list_label() for m in monitors])
        if 0 <= selected < len(monitors):
            window.host_list.setCurrentRow(selected)
        return

    for row, monitor in enumerate(monitors):
        window.host_list.item(row).setText(monitor.list_label())

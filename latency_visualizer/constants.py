# Sample history (slots on the chart's time axis)
DEFAULT_CAPACITY = 120

# Probing
DEFAULT_INTERVAL_S = 1.0
DEFAULT_TIMEOUT_MS = 2000

# Shared worker pool
DEFAULT_WORKERS = 4
DEFAULT_MAX_TASKS = 256

# Chart
DEFAULT_SCALE_FLOOR_MS = 100
SCALE_STEP_MS = 10
GRIDLINE_COUNT = 5
DEFAULT_REFRESH_INTERVAL_MS = 800

# Plot area margins in pixels (left, right, top, bottom)
PLOT_MARGINS = (60, 20, 20, 40)

PING_COLORS = [
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
]

LOG_LEVEL_ENV = "LATENCY_VISUALIZER_LOG_LEVEL"

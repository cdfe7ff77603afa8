import argparse
import logging
import sys

from . import constants
from .errors import MonitorStartError
from .logging_utils import configure_logging
from .registry import MonitorRegistry

logger = logging.getLogger(__name__)


def positive(cast):
    """argparse `type=` that only accepts values greater than zero."""

    def parse(text):
        try:
            value = cast(text)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid number: {text!r}")
        if not value > 0:
            raise argparse.ArgumentTypeError(f"must be greater than zero, got {text}")
        return value

    parse.__name__ = cast.__name__
    return parse


def build_parser():
    parser = argparse.ArgumentParser(
        description="Plot round-trip latency to a set of hosts in real time."
    )
    parser.add_argument("hosts", nargs="*", help="Hosts to start pinging (hostname or IP).")
    parser.add_argument(
        "--interval",
        type=positive(float),
        default=constants.DEFAULT_INTERVAL_S,
        help="Seconds between pings of one host (default: %(default)s).",
    )
    parser.add_argument(
        "--timeout",
        type=positive(int),
        default=constants.DEFAULT_TIMEOUT_MS,
        help="Ping timeout in milliseconds (default: %(default)s).",
    )
    parser.add_argument(
        "--capacity",
        type=positive(int),
        default=constants.DEFAULT_CAPACITY,
        help="Samples kept per host (default: %(default)s).",
    )
    parser.add_argument(
        "--workers",
        type=positive(int),
        default=constants.DEFAULT_WORKERS,
        help="Concurrent pings across all hosts (default: %(default)s).",
    )
    parser.add_argument(
        "--refresh",
        type=positive(int),
        default=constants.DEFAULT_REFRESH_INTERVAL_MS,
        help="Chart refresh interval in milliseconds (default: %(default)s).",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO).")
    parser.add_argument(
        "--no-gpu",
        action="store_true",
        help="Disable OpenGL/GPU acceleration (force CPU rendering).",
    )
    return parser


def create_registry(args):
    registry = MonitorRegistry(
        capacity=args.capacity,
        interval=args.interval,
        timeout_ms=args.timeout,
        workers=args.workers,
    )
    for host in args.hosts:
        if not host.strip():
            continue
        try:
            registry.add(host)
        except MonitorStartError as e:
            logger.error("%s", e)
    return registry


def main(argv=None):
    parser = build_parser()
    args, qt_args = parser.parse_known_args(argv if argv is not None else sys.argv[1:])
    configure_logging(args.log_level)

    from PyQt5.QtWidgets import QApplication

    from .gpu import configure_pyqtgraph
    from .windows.main_window import LatencyVisualizer

    app = QApplication([sys.argv[0], *qt_args])
    antialias_default = configure_pyqtgraph(force_no_gpu=args.no_gpu)

    registry = create_registry(args)
    window = LatencyVisualizer(registry, antialias_default, refresh_interval=args.refresh)
    window.show()

    app.aboutToQuit.connect(registry.shutdown_all)
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()

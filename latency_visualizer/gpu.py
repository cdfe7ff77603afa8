import logging

import pyqtgraph as pg

try:
    from OpenGL import GL  # noqa: F401

    OPENGL_AVAILABLE = True
except ImportError:
    OPENGL_AVAILABLE = False

logger = logging.getLogger(__name__)


def _detect_dark_mode():
    from PyQt5.QtGui import QPalette
    from PyQt5.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        return False
    return app.palette().color(QPalette.Window).lightness() < 128


def configure_pyqtgraph(force_no_gpu: bool = False, dark_mode: bool = None):
    """Set global pyqtgraph options; returns whether curves get antialiasing."""
    if dark_mode is None:
        dark_mode = _detect_dark_mode()

    if dark_mode:
        pg.setConfigOption("background", (30, 30, 30))
        pg.setConfigOption("foreground", (200, 200, 200))
    else:
        pg.setConfigOption("background", "w")
        pg.setConfigOption("foreground", "k")

    use_gl = OPENGL_AVAILABLE and not force_no_gpu
    pg.setConfigOption("useOpenGL", use_gl)
    pg.setConfigOptions(antialias=use_gl)

    if use_gl:
        logger.info("OpenGL acceleration enabled")
    elif force_no_gpu:
        logger.info("OpenGL disabled by --no-gpu")
    else:
        logger.info("PyOpenGL not installed, using CPU rendering")

    return use_gl

# -*- coding: utf-8 -*-
"""Desktop host for the neural sphere."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Optional, Sequence


def _handle_qt_import_error(exc: ImportError) -> NoReturn:
    """Exit with a helpful message when the Qt bindings cannot be imported."""

    details = str(exc)
    message_lines = [
        "Unable to start NeuroSphere: importing PyQt5 failed.",
        "Check that PyQt5 is installed and that the required OpenGL libraries are available.",
    ]
    if "libGL.so.1" in details:
        message_lines.append(
            "Hint: the system library libGL.so.1 is missing. Install the matching Mesa/OpenGL packages."
        )
    message_lines.append(f"Original error: {details}")
    raise SystemExit("\n".join(message_lines)) from exc


try:
    from PyQt5 import QtCore, QtGui, QtWidgets
    from PyQt5.QtCore import Qt
    from PyQt5.QtGui import QSurfaceFormat
except ImportError as exc:  # pragma: no cover - environment dependent
    _handle_qt_import_error(exc)

from .config import DARK_THEME, LIGHT_THEME
from .logging_config import setup_logging
from .view.theme import ThemeStore
from .view.view_widget import NeuroSphereWidget

logger = logging.getLogger(__name__)


class ViewWindow(QtWidgets.QMainWindow):
    """Main window: hosts the sphere and owns the theme preference."""

    def __init__(
        self,
        theme_store: ThemeStore,
        screen: Optional[QtGui.QScreen] = None,
        force_backend: Optional[str] = None,
    ):
        super().__init__(None)
        self.setWindowTitle("NeuroSphere")
        self.theme_store = theme_store
        self.view = NeuroSphereWidget(self, force_backend=force_backend, theme_source=theme_store.current)
        self.view.set_transparent(False)

        w = QtWidgets.QWidget()
        w.setMouseTracking(True)
        lay = QtWidgets.QVBoxLayout(w)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.view)
        self.setCentralWidget(w)
        self.setMouseTracking(True)

        if screen is not None:
            self._apply_screen_geometry(screen)
        QtWidgets.QShortcut(Qt.Key_Escape, self, activated=self.close)
        QtWidgets.QShortcut(QtGui.QKeySequence("Ctrl+T"), self, activated=self.toggle_theme)
        self.theme_store.themeChanged.connect(self._on_theme_changed)
        self._on_theme_changed(self.theme_store.current())

    def _apply_screen_geometry(self, screen: QtGui.QScreen) -> None:
        geometry = screen.availableGeometry()
        width = int(geometry.width() * 0.8)
        height = int(geometry.height() * 0.8)
        left = geometry.left() + (geometry.width() - width) // 2
        top = geometry.top() + (geometry.height() - height) // 2
        self.setGeometry(left, top, width, height)

    def toggle_theme(self) -> str:
        return self.theme_store.toggle()

    def _on_theme_changed(self, theme: str) -> None:
        self.setWindowTitle(f"NeuroSphere ({theme})")

    def showEvent(self, event: QtGui.QShowEvent) -> None:  # type: ignore[override]
        super().showEvent(event)
        # Start once the window is laid out, like a page "load" event
        if not self.view.loop.running:
            QtCore.QTimer.singleShot(0, self.view.start)

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self.view.stop()
        super().closeEvent(event)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="neurosphere", description="Rotating neural sphere viewer.")
    parser.add_argument("--theme", choices=[LIGHT_THEME, DARK_THEME], help="theme for this session (not persisted)")
    parser.add_argument("--backend", choices=["auto", "opengl", "raster"], default="auto")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--log-file", help="also write logs to this file")
    return parser


def _install_excepthook() -> None:
    """Route exceptions escaping Qt slots to the log instead of losing them."""

    def _log_unhandled(exc_type, exc_value, exc_tb):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))

    sys.excepthook = _log_unhandled


def main(argv: Optional[Sequence[str]] = None, headless: bool = False) -> int:
    """Start the application and return the exit code.

    When ``headless`` is True only the arguments are parsed and logging is set
    up; no Qt objects are created. Useful for tests and import-time checks.
    """

    args = _build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO, args.log_file)
    if headless:
        return 0

    _install_excepthook()
    fmt = QSurfaceFormat()
    fmt.setAlphaBufferSize(8)
    QSurfaceFormat.setDefaultFormat(fmt)
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_EnableHighDpiScaling, True)
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_UseHighDpiPixmaps, True)
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv[:1])

    store = ThemeStore()
    if args.theme:
        store.set(args.theme, persist=False)
    backend = None if args.backend == "auto" else args.backend
    window = ViewWindow(store, QtGui.QGuiApplication.primaryScreen(), force_backend=backend)
    window.show()
    logger.info("Viewer running (%s backend, %s theme)", getattr(window.view, "backend_name", "?"), store.current())
    return app.exec_()


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()

"""Qt widgets hosting the neural sphere.

Two backends share the same behaviour through :class:`_ViewWidgetBase`:

* ``_OpenGLViewWidget`` paints through a ``QOpenGLWidget`` when the system can
  create a GL context.
* ``_RasterViewWidget`` is a plain ``QWidget`` fallback.

Use :func:`NeuroSphereWidget` to get the best available one.  Both expose
``start()``/``stop()`` and the ``engine``, ``surface`` and ``loop`` they drive.
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5 import QtCore, QtGui, QtWidgets

from ..config import forced_backend
from .engine import Frame, SphereEngine
from .loop import AnimationLoop, FrameClock, QtFrameClock
from .renderer import SphereRenderer
from .surface import SurfaceController
from .theme import ThemeSource

__all__ = ["NeuroSphereWidget"]

logger = logging.getLogger(__name__)


def _load_gl_functions() -> Optional[object]:
    """Return initialised ``QOpenGLFunctions`` for the current context, or ``None``.

    Without them the GL widget still paints through ``QPainter``; it only
    loses the explicit transparent clear before each frame.
    """

    factory = getattr(QtGui, "QOpenGLFunctions", None)
    if factory is None:
        logger.warning("QOpenGLFunctions missing from PyQt5.QtGui; clearing through QPainter only")
        return None
    try:
        functions = factory()
        functions.initializeOpenGLFunctions()
    except Exception:  # pragma: no cover - depends on bindings and GL state
        logger.warning("Could not initialise OpenGL functions; clearing through QPainter only", exc_info=True)
        return None
    return functions


class _ViewWidgetBase:
    """Common behaviour shared by both the OpenGL and raster backends."""

    def _init_view_widget(
        self,
        theme_source: Optional[ThemeSource] = None,
        clock: Optional[FrameClock] = None,
        engine: Optional[SphereEngine] = None,
    ) -> None:
        self.setAttribute(QtCore.Qt.WA_NoSystemBackground, True)
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground, True)
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent, False)
        self.setAutoFillBackground(False)
        # Pointer moves must reach the app-wide filter without a pressed button
        self.setMouseTracking(True)
        self._transparent = True
        self.engine = engine if engine is not None else SphereEngine()
        self.surface = SurfaceController(self, parent=self)
        self.renderer = SphereRenderer()
        self.loop = AnimationLoop(
            self.engine,
            self.surface,
            theme_source=theme_source,
            clock=clock if clock is not None else QtFrameClock(parent=self),
        )
        self.loop.add_listener(self._on_frame)

    # ------------------------------------------------------------------ API
    def start(self) -> bool:
        return self.loop.start()

    def stop(self) -> None:
        self.loop.stop()

    def set_theme_source(self, theme_source: Optional[ThemeSource]) -> None:
        self.loop.theme_source = theme_source

    def set_transparent(self, enabled: bool) -> None:
        self._transparent = bool(enabled)
        self.setAttribute(QtCore.Qt.WA_NoSystemBackground, enabled)
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground, enabled)
        self.setAutoFillBackground(not enabled)
        self.update()

    # ------------------------------------------------------------------ Rendering helpers
    def _on_frame(self, frame: Frame) -> None:
        del frame
        self.update()

    def _render_with_painter(self, painter: QtGui.QPainter) -> None:
        self.renderer.paint(painter, self.loop.last_frame, QtCore.QRectF(self.rect()), self._transparent)


class _OpenGLViewWidget(QtWidgets.QOpenGLWidget, _ViewWidgetBase):
    """OpenGL-backed renderer when the system can create a GL context."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, **kwargs) -> None:
        QtWidgets.QOpenGLWidget.__init__(self, parent)
        self._gl: Optional[object] = None
        self._init_view_widget(**kwargs)

    def initializeGL(self) -> None:  # pragma: no cover - requires GUI context
        self._gl = _load_gl_functions()
        self._apply_clear_color()

    def resizeGL(self, width: int, height: int) -> None:  # pragma: no cover - requires GUI context
        del width, height

    def _apply_clear_color(self) -> None:
        if self._gl is None:
            return
        alpha = 0.0 if self._transparent else 1.0
        self._gl.glClearColor(0.0, 0.0, 0.0, alpha)

    def set_transparent(self, enabled: bool) -> None:  # pragma: no cover - trivial wrapper
        super().set_transparent(enabled)
        self._apply_clear_color()

    def paintGL(self) -> None:  # pragma: no cover - requires GUI context
        if self._gl is not None:
            # GL_COLOR_BUFFER_BIT
            self._gl.glClear(0x00004000)
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()


class _RasterViewWidget(QtWidgets.QWidget, _ViewWidgetBase):
    """Fallback renderer using the traditional raster ``QWidget`` backend."""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, **kwargs) -> None:
        QtWidgets.QWidget.__init__(self, parent)
        self._init_view_widget(**kwargs)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        del event
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()


def _should_use_opengl(force_backend: Optional[str]) -> bool:
    if force_backend == "raster":
        return False
    if force_backend == "opengl":
        return True
    env_backend = forced_backend()
    if env_backend is not None:
        return env_backend == "opengl"
    return hasattr(QtWidgets, "QOpenGLWidget")


def NeuroSphereWidget(
    parent: Optional[QtWidgets.QWidget] = None,
    *,
    force_backend: Optional[str] = None,
    theme_source: Optional[ThemeSource] = None,
    clock: Optional[FrameClock] = None,
    engine: Optional[SphereEngine] = None,
) -> QtWidgets.QWidget:
    """Factory returning the best available sphere widget.

    Parameters
    ----------
    parent:
        Parent widget used by Qt for ownership.
    force_backend:
        ``"opengl"`` forces the OpenGL widget while ``"raster"`` selects the
        pure QWidget implementation.  ``None`` or ``"auto"`` defers to the
        ``NEUROSPHERE_FORCE_BACKEND`` environment variable, then to OpenGL
        when the binding provides it.
    theme_source:
        Callable polled once per frame for the light/dark flag.
    clock:
        Frame clock; defaults to a ``QTimer`` based clock owned by the widget.
    engine:
        Pre-built engine, mainly useful to inject a seeded pool.
    """

    kwargs = dict(theme_source=theme_source, clock=clock, engine=engine)
    if _should_use_opengl(force_backend):
        try:
            widget = _OpenGLViewWidget(parent, **kwargs)
            setattr(widget, "backend_name", "opengl")
            setattr(widget, "uses_opengl", True)
            return widget
        except Exception as exc:
            logger.warning("Unable to initialise OpenGL backend (%r). Using raster widget instead.", exc)
    widget = _RasterViewWidget(parent, **kwargs)
    setattr(widget, "backend_name", "raster")
    setattr(widget, "uses_opengl", False)
    return widget

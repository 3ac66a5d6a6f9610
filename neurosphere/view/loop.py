"""Frame driver for the neural sphere.

The loop follows the "request the next frame from inside this frame" pattern
of a browser animation, with the scheduling primitive behind a small clock
interface. :class:`QtFrameClock` fires from the Qt event loop;
:class:`ManualFrameClock` lets callers (tests, the capture tool) run an exact
number of frames.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, List, Optional

from PyQt5 import QtCore

from ..config import FRAME_INTERVAL_MS
from .engine import Frame, SphereEngine
from .surface import SurfaceController
from .theme import ThemeSource, resolve_theme

__all__ = ["AnimationLoop", "FrameClock", "LoopState", "ManualFrameClock", "QtFrameClock"]

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]
FrameListener = Callable[[Frame], None]


class LoopState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class FrameClock:
    """Schedules a single callback for the next frame."""

    def schedule(self, callback: FrameCallback) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError


class QtFrameClock(FrameClock):
    def __init__(self, interval_ms: int = FRAME_INTERVAL_MS, parent: Optional[QtCore.QObject] = None) -> None:
        self._timer = QtCore.QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(0, int(interval_ms)))
        self._timer.timeout.connect(self._fire)
        self._callback: Optional[FrameCallback] = None

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def schedule(self, callback: FrameCallback) -> None:
        self._callback = callback
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class ManualFrameClock(FrameClock):
    """Clock advanced explicitly, one pending callback at a time."""

    def __init__(self) -> None:
        self.pending: Optional[FrameCallback] = None

    def schedule(self, callback: FrameCallback) -> None:
        self.pending = callback

    def cancel(self) -> None:
        self.pending = None

    def advance(self, frames: int = 1) -> int:
        """Run up to ``frames`` frames and return how many actually ran."""

        ran = 0
        for _ in range(max(0, frames)):
            callback, self.pending = self.pending, None
            if callback is None:
                break
            callback()
            ran += 1
        return ran


class AnimationLoop:
    """Idle -> Running -> Stopped driver tying surface, engine and listeners.

    Each frame snapshots the surface and the theme into a
    :class:`~neurosphere.view.surface.ViewState`, lets the engine rotate and
    project the pool, hands the resulting :class:`Frame` to the listeners and
    schedules the next frame.
    """

    def __init__(
        self,
        engine: SphereEngine,
        surface: SurfaceController,
        theme_source: Optional[ThemeSource] = None,
        clock: Optional[FrameClock] = None,
    ) -> None:
        self.engine = engine
        self.surface = surface
        self.theme_source = theme_source
        self.clock = clock if clock is not None else QtFrameClock()
        self.state = LoopState.IDLE
        self.last_frame: Optional[Frame] = None
        self._listeners: List[FrameListener] = []

    @property
    def running(self) -> bool:
        return self.state is LoopState.RUNNING

    def add_listener(self, listener: FrameListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FrameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self) -> bool:
        """Size the surface, build the pool and schedule the first frame.

        Returns ``False`` without raising when there is nothing to draw on.
        """

        if self.running:
            return True
        if not self.surface.available:
            logger.warning("No drawing surface available; neural sphere not started")
            return False
        self.surface.resize()
        if not self.engine.populated:
            self.engine.populate()
        self.surface.attach()
        self.state = LoopState.RUNNING
        logger.info(
            "Animation started on a %dx%d surface with %d points",
            self.surface.width,
            self.surface.height,
            len(self.engine.points),
        )
        self.clock.schedule(self._on_frame)
        return True

    def stop(self) -> None:
        if not self.running:
            return
        self.clock.cancel()
        self.surface.detach()
        self.state = LoopState.STOPPED
        logger.info("Animation stopped after %d frames", self.engine.frame_count)

    def current_theme(self) -> str:
        if self.theme_source is None:
            return resolve_theme(None)
        return resolve_theme(self.theme_source())

    def tick(self) -> Frame:
        """Compute one frame immediately and notify the listeners."""

        view = self.surface.view_state(self.current_theme())
        frame = self.engine.step(view)
        self.last_frame = frame
        for listener in list(self._listeners):
            listener(frame)
        return frame

    def _on_frame(self) -> None:
        if not self.running:
            return
        try:
            self.tick()
        except Exception:
            # A bad frame is dropped; the animation carries on with the next one
            logger.exception("Frame %d failed", self.engine.frame_count + 1)
        if self.running:
            self.clock.schedule(self._on_frame)

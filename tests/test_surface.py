"""Tests for surface sizing and pointer tracking."""
import pytest
from PyQt5 import QtCore, QtGui, QtWidgets

from neurosphere.config import POINTER_SCALE
from neurosphere.view.engine import SphereEngine
from neurosphere.view.surface import SurfaceController, ViewState


class TestResize:
    def test_resize_reads_container(self, container):
        surface = SurfaceController(container)
        assert surface.resize() == (400, 400)
        assert (surface.width, surface.height) == (400, 400)

    def test_resize_emits_signal_once_per_change(self, container):
        surface = SurfaceController(container)
        seen = []
        surface.resized.connect(lambda w, h: seen.append((w, h)))
        surface.resize()
        surface.resize()
        container.w = 1000
        surface.resize()
        assert seen == [(400, 400), (1000, 400)]

    def test_negative_sizes_clamp_to_zero(self, container):
        container.w = -5
        surface = SurfaceController(container)
        surface.resize()
        assert surface.width == 0
        assert not surface.has_area

    def test_missing_container(self):
        surface = SurfaceController(None)
        assert not surface.available
        assert surface.resize() == (0, 0)

    def test_resize_recentres_projection_without_moving_points(self, container, two_points):
        surface = SurfaceController(container)
        surface.resize()
        engine = SphereEngine(rotation_speed=0.0)
        engine.populate(two_points)
        before = engine.step(surface.view_state())
        coords = [(p.x, p.y, p.z) for p in engine.points]

        container.w, container.h = 1000, 600
        surface.resize()
        after = engine.step(surface.view_state())

        assert [(p.x, p.y, p.z) for p in engine.points] == coords
        mid_before = ((before.points[0].sx + before.points[1].sx) / 2, before.points[0].sy)
        mid_after = ((after.points[0].sx + after.points[1].sx) / 2, after.points[0].sy)
        assert mid_before == (200.0, 200.0)
        assert mid_after == (500.0, 300.0)


class TestPointer:
    def test_offset_relative_to_centre(self, container):
        surface = SurfaceController(container)
        surface.resize()
        surface.pointer_moved(300.0, 100.0)
        assert surface.mouse_x == pytest.approx(100 * POINTER_SCALE)
        assert surface.mouse_y == pytest.approx(-100 * POINTER_SCALE)

    def test_centre_gives_zero_bias(self, container):
        surface = SurfaceController(container)
        surface.resize()
        surface.pointer_moved(200.0, 200.0)
        assert (surface.mouse_x, surface.mouse_y) == (0.0, 0.0)

    def test_bias_holds_last_value(self, container):
        surface = SurfaceController(container)
        surface.resize()
        surface.pointer_moved(0.0, 0.0)
        first = surface.view_state()
        second = surface.view_state()
        assert first.mouse_x == second.mouse_x == pytest.approx(-200 * POINTER_SCALE)

    def test_view_state_snapshot_is_frozen(self, container):
        surface = SurfaceController(container)
        surface.resize()
        state = surface.view_state("dark")
        assert state == ViewState(400, 400, 0.0, 0.0, "dark")
        surface.pointer_moved(0.0, 0.0)
        assert state.mouse_x == 0.0
        with pytest.raises(Exception):
            state.width = 10


class TestQtWiring:
    def test_resize_event_updates_size(self, qapp):
        widget = QtWidgets.QWidget()
        widget.resize(320, 240)
        surface = SurfaceController(widget)
        surface.resize()
        surface.attach()
        try:
            widget.resize(640, 480)
            event = QtGui.QResizeEvent(QtCore.QSize(640, 480), QtCore.QSize(320, 240))
            surface.eventFilter(widget, event)
            assert (surface.width, surface.height) == (640, 480)
        finally:
            surface.detach()

    def test_mouse_move_maps_into_widget(self, qapp):
        widget = QtWidgets.QWidget()
        widget.resize(200, 100)
        surface = SurfaceController(widget)
        surface.resize()
        global_pos = widget.mapToGlobal(QtCore.QPoint(150, 50))
        event = QtGui.QMouseEvent(
            QtCore.QEvent.MouseMove,
            QtCore.QPointF(150, 50),
            QtCore.QPointF(global_pos),
            QtCore.Qt.NoButton,
            QtCore.Qt.NoButton,
            QtCore.Qt.NoModifier,
        )
        assert surface.eventFilter(widget, event) is False
        assert surface.mouse_x == pytest.approx(50 * POINTER_SCALE)
        assert surface.mouse_y == pytest.approx(0.0)

    def test_attach_detach_idempotent(self, qapp, container):
        surface = SurfaceController(container)
        surface.attach()
        surface.attach()
        surface.detach()
        surface.detach()

"""Tests for the animation loop driven by a manual frame clock."""
import random

import pytest

from neurosphere.config import PARTICLE_COUNT, SPHERE_RADIUS
from neurosphere.view.engine import SphereEngine
from neurosphere.view.geometry import Point3D
from neurosphere.view.loop import AnimationLoop, LoopState, ManualFrameClock, QtFrameClock
from neurosphere.view.surface import SurfaceController


@pytest.fixture
def clock():
    return ManualFrameClock()


@pytest.fixture
def loop(container, clock):
    engine = SphereEngine(rng=random.Random(0))
    return AnimationLoop(engine, SurfaceController(container), clock=clock)


class TestLifecycle:
    def test_starts_idle(self, loop):
        assert loop.state is LoopState.IDLE
        assert not loop.engine.populated

    def test_start_populates_and_schedules(self, loop, clock):
        assert loop.start() is True
        assert loop.state is LoopState.RUNNING
        assert len(loop.engine.points) == PARTICLE_COUNT
        assert (loop.surface.width, loop.surface.height) == (400, 400)
        assert clock.pending is not None

    def test_start_twice_keeps_pool(self, loop):
        loop.start()
        pool = list(loop.engine.points)
        loop.start()
        assert loop.engine.points == pool

    def test_runs_exact_number_of_frames(self, loop, clock):
        frames = []
        loop.add_listener(frames.append)
        loop.start()
        assert clock.advance(5) == 5
        assert len(frames) == 5
        assert loop.engine.frame_count == 5
        assert loop.last_frame is frames[-1]

    def test_stop_cancels_pending_frame(self, loop, clock):
        loop.start()
        clock.advance(2)
        loop.stop()
        assert loop.state is LoopState.STOPPED
        assert clock.pending is None
        assert clock.advance(3) == 0
        assert loop.engine.frame_count == 2

    def test_stop_before_start_is_noop(self, loop):
        loop.stop()
        assert loop.state is LoopState.IDLE

    def test_missing_surface_does_not_raise(self, clock):
        loop = AnimationLoop(SphereEngine(), SurfaceController(None), clock=clock)
        assert loop.start() is False
        assert loop.state is LoopState.IDLE
        assert clock.pending is None

    def test_removed_listener_not_called(self, loop, clock):
        frames = []
        loop.add_listener(frames.append)
        loop.remove_listener(frames.append)
        loop.start()
        clock.advance(1)
        assert frames == []


class TestFrames:
    def test_points_stay_on_sphere_while_running(self, loop, clock):
        loop.start()
        loop.surface.pointer_moved(390.0, 10.0)
        clock.advance(100)
        for p in loop.engine.points:
            assert p.norm() == pytest.approx(SPHERE_RADIUS, rel=1e-9)

    def test_base_speed_spins_without_pointer(self, container, clock):
        engine = SphereEngine()
        engine.populate([Point3D(100.0, 0.0, 0.0)])
        loop = AnimationLoop(engine, SurfaceController(container), clock=clock)
        loop.start()
        clock.advance(1)
        assert engine.points[0].x != 100.0

    def test_pointer_bias_adds_to_rotation(self, container, clock):
        still = SphereEngine(rotation_speed=0.0)
        still.populate([Point3D(100.0, 0.0, 0.0)])
        loop = AnimationLoop(still, SurfaceController(container), clock=clock)
        loop.start()
        clock.advance(1)
        assert (still.points[0].x, still.points[0].y, still.points[0].z) == (100.0, 0.0, 0.0)
        loop.surface.pointer_moved(400.0, 200.0)
        clock.advance(1)
        assert still.points[0].z > 0.0

    def test_zero_area_skips_but_keeps_scheduling(self, container, clock):
        container.w = 0
        engine = SphereEngine(rng=random.Random(1))
        loop = AnimationLoop(engine, SurfaceController(container), clock=clock)
        loop.start()
        before = [p.copy() for p in engine.points]
        assert clock.advance(3) == 3
        assert loop.last_frame.empty
        assert engine.points == before
        assert clock.pending is not None

        container.w = 400
        loop.surface.resize()
        clock.advance(1)
        assert not loop.last_frame.empty
        assert len(loop.last_frame.points) == PARTICLE_COUNT

    def test_listener_error_still_reschedules(self, loop, clock):
        def boom(frame):
            raise RuntimeError("listener failed")

        loop.add_listener(boom)
        loop.start()
        assert clock.advance(3) == 3
        assert loop.running
        assert clock.pending is not None
        assert loop.engine.frame_count == 3

    def test_point_behind_focal_plane_does_not_stop_loop(self, container, clock, caplog):
        engine = SphereEngine(rotation_speed=0.0)
        engine.populate([Point3D(0.0, 0.0, 50.0), Point3D(0.0, 0.0, -400.0)])
        loop = AnimationLoop(engine, SurfaceController(container), clock=clock)
        loop.start()
        with caplog.at_level("ERROR", logger="neurosphere.view.loop"):
            assert clock.advance(2) == 2
        assert loop.state is LoopState.RUNNING
        assert clock.pending is not None
        assert loop.last_frame is None
        assert any(rec.exc_info and rec.exc_info[0] is ValueError for rec in caplog.records)

    def test_strict_dark_flag_from_theme_source(self, container, clock):
        loop = AnimationLoop(SphereEngine(), SurfaceController(container), theme_source=lambda: "DARK", clock=clock)
        loop.start()
        clock.advance(1)
        assert loop.last_frame.node_rgb == (26, 26, 26)


class TestClocks:
    def test_manual_clock_without_pending(self):
        assert ManualFrameClock().advance(4) == 0

    def test_qt_clock_cancel(self, qapp):
        calls = []
        clock = QtFrameClock(interval_ms=5)
        assert clock.interval_ms == 5
        clock.schedule(lambda: calls.append(1))
        clock.cancel()
        clock._fire()
        assert calls == []

    def test_qt_clock_fires_once(self, qapp):
        calls = []
        clock = QtFrameClock(interval_ms=0)
        clock.schedule(lambda: calls.append(1))
        clock._fire()
        clock._fire()
        assert calls == [1]

"""
Tests for the win overlay, the board and snapshot widgets, and QtScheduler,
run on the offscreen Qt platform.
"""

import os
import threading

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt6.QtWidgets")
QtTest = pytest.importorskip("PyQt6.QtTest")

from warden.core.config import AppConfig
from warden.core.feedback import TileState
from warden.gui.overlays import WinOverlay
from warden.gui.qt_scheduler import QtScheduler
from warden.gui.widgets import BoardWidget, SnapshotWidget
from warden.utils.timing import ManualScheduler
from warden.vision.judgment import MSG_INITIALIZING, Snapshot
from warden.vision.particles import ParticleField


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


def gray_image():
    return np.full((480, 640, 3), 90, dtype=np.uint8)


class StubSequence:
    """Judgment sequence returning a fixed snapshot, optionally after a gate."""

    def __init__(self, snapshot, gate=None):
        self._snapshot = snapshot
        self._gate = gate
        self.cancelled = False
        self.releases = 0

    def run(self, report=lambda message: None):
        report(MSG_INITIALIZING)
        if self._gate is not None:
            self._gate.wait(5.0)
        return self._snapshot

    def placeholder(self):
        return Snapshot(image=np.zeros((480, 640, 3), dtype=np.uint8), placeholder=True)

    def cancel(self):
        self.cancelled = True

    def release(self):
        self.releases += 1


class RecordingSound:
    def __init__(self):
        self.clicks = 0

    def play_click(self):
        self.clicks += 1


def deliver(qapp, overlay):
    """Let the judgment worker finish and deliver its queued signals."""
    overlay.wait_for_workers(5000)
    qapp.processEvents()


@pytest.fixture
def scheduler():
    return ManualScheduler()


def make_overlay(scheduler, sequence, sound=None):
    overlay = WinOverlay(AppConfig(), scheduler, lambda: sequence, sound)
    dismissed = []
    overlay.finished.connect(lambda: dismissed.append(True))
    return overlay, dismissed


class TestWinOverlay:
    """Tests for WinOverlay."""

    def test_real_snapshot_starts_confetti(self, qapp, scheduler):
        snapshot = Snapshot(image=gray_image(), placeholder=False, face_detected=True)
        sound = RecordingSound()
        overlay, _ = make_overlay(scheduler, StubSequence(snapshot), sound)

        overlay.begin()
        deliver(qapp, overlay)

        assert overlay.snapshot is snapshot
        assert overlay.snapshot_widget.animating
        assert sound.clicks == 1

        overlay.teardown()
        assert not overlay.snapshot_widget.animating

    def test_placeholder_snapshot_has_no_confetti(self, qapp, scheduler):
        placeholder = Snapshot(image=gray_image(), placeholder=True)
        sound = RecordingSound()
        overlay, _ = make_overlay(scheduler, StubSequence(placeholder), sound)

        overlay.begin()
        deliver(qapp, overlay)

        assert overlay.snapshot is placeholder
        assert not overlay.snapshot_widget.animating
        assert sound.clicks == 1
        overlay.teardown()

    def test_dismiss_counts_from_snapshot(self, qapp, scheduler):
        """Test that the 20 s dismiss starts when the snapshot is shown."""
        snapshot = Snapshot(image=gray_image(), placeholder=False)
        overlay, dismissed = make_overlay(scheduler, StubSequence(snapshot))

        overlay.begin()
        scheduler.advance(3.0)
        deliver(qapp, overlay)

        scheduler.advance(19.9)
        assert dismissed == []

        scheduler.advance(0.2)
        assert dismissed == [True]
        overlay.teardown()

    def test_late_result_after_timeout_releases_camera(self, qapp, scheduler):
        """Test that a capture finishing after the placeholder is shown is dropped and released."""
        gate = threading.Event()
        late = Snapshot(image=gray_image(), placeholder=False)
        sequence = StubSequence(late, gate=gate)
        overlay, _ = make_overlay(scheduler, sequence)

        overlay.begin()
        scheduler.advance(15.0)

        assert sequence.cancelled
        assert overlay.snapshot.placeholder
        assert sequence.releases == 0

        gate.set()
        deliver(qapp, overlay)

        assert overlay.snapshot.placeholder
        assert sequence.releases == 1
        assert not overlay.snapshot_widget.animating
        overlay.teardown()

    def test_status_line_follows_worker(self, qapp, scheduler):
        gate = threading.Event()
        overlay, _ = make_overlay(scheduler, StubSequence(Snapshot(gray_image(), False), gate=gate))

        overlay.begin()
        QtTest.QTest.qWait(50)

        assert overlay.status_text == MSG_INITIALIZING
        gate.set()
        deliver(qapp, overlay)
        overlay.teardown()


class TestSnapshotWidget:
    """Tests for SnapshotWidget."""

    def test_confetti_stops_when_field_empties(self, qapp):
        widget = SnapshotWidget(320, 240, frame_interval_ms=16)
        finished = []
        widget.animation_finished.connect(lambda: finished.append(True))
        widget.set_snapshot(gray_image())

        widget.start_confetti(ParticleField(320, 240, count=0))
        assert widget.animating

        widget._on_frame()

        assert not widget.animating
        assert finished == [True]

    def test_paints_snapshot_and_particles(self, qapp):
        widget = SnapshotWidget(320, 240)
        widget.set_snapshot(gray_image())
        widget.start_confetti(ParticleField(640, 480, count=20))

        image = widget.grab().toImage()

        assert not image.isNull()
        widget.stop_confetti()


class TestBoardWidget:
    """Tests for BoardWidget."""

    def test_rows_follow_game_state(self, qapp):
        board = BoardWidget(rows=5, columns=5)

        board.update_board(["CRATE"], "CR", "CRANE")

        assert [board.tile_text(0, c) for c in range(5)] == list("CRATE")
        assert board.tile_state(0, 0) == TileState.EXACT
        assert board.tile_state(0, 3) == TileState.ABSENT
        assert board.tile_state(0, 4) == TileState.EXACT
        assert board.tile_text(1, 1) == "R"
        assert board.tile_state(1, 1) == TileState.PENDING
        assert board.tile_text(1, 2) == ""
        assert board.tile_state(1, 2) == TileState.EMPTY
        assert board.tile_state(4, 4) == TileState.EMPTY


class TestQtScheduler:
    """Tests for QtScheduler."""

    def test_fires_on_event_loop(self, qapp):
        scheduler = QtScheduler()
        calls = []

        task = scheduler.call_later(0.01, lambda: calls.append("fired"))
        QtTest.QTest.qWait(100)

        assert calls == ["fired"]
        assert task.fired

    def test_cancelled_task_never_fires(self, qapp):
        scheduler = QtScheduler()
        calls = []

        task = scheduler.call_later(0.01, lambda: calls.append("fired"))
        task.cancel()
        QtTest.QTest.qWait(100)

        assert calls == []
        assert task.cancelled

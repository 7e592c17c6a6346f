"""
Full-window overlays shown when a round ends.

Both overlays are long-lived widgets: begin() starts a round's overlay,
teardown() cancels its timers and workers, and finished fires when the
overlay dismisses itself.

Threading model:
- Main thread: widgets, timers, particle animation
- Worker threads: judgment capture (camera + face mesh), insult request
- Communication: Qt signals/slots tagged with a round number so results
  from an abandoned round are dropped
"""

from typing import Callable, List, Optional

from PyQt6.QtWidgets import QLabel, QVBoxLayout, QWidget
from PyQt6.QtCore import QThread, Qt, pyqtSignal

from warden.core.config import AppConfig
from warden.gui.sound import SoundPlayer
from warden.gui.widgets import SnapshotWidget, image_label
from warden.services.insult import PENDING_MESSAGE, InsultClient
from warden.utils.timing import ScheduledTask, Scheduler
from warden.vision.judgment import JudgmentSequence, Snapshot
from warden.vision.particles import ParticleField
from warden.utils.logger import get_logger

logger = get_logger(__name__)


STICKER_STYLE = (
    "font-size: 40pt; font-weight: bold; color: white; padding: 6px 24px;"
    "border-radius: 8px; background-color: {color};"
)


class JudgmentWorker(QThread):
    """Runs a JudgmentSequence off the GUI thread."""

    status_changed = pyqtSignal(int, str)
    snapshot_ready = pyqtSignal(int, object)

    def __init__(self, round_id: int, sequence: JudgmentSequence, parent=None):
        super().__init__(parent)
        self._round_id = round_id
        self._sequence = sequence

    def run(self):
        try:
            snapshot = self._sequence.run(lambda msg: self.status_changed.emit(self._round_id, msg))
        except Exception as e:
            logger.error(f"Setup failed: {e}")
            snapshot = self._sequence.placeholder()

        self.snapshot_ready.emit(self._round_id, snapshot)


class InsultWorker(QThread):
    """Fetches one insult off the GUI thread."""

    insult_ready = pyqtSignal(int, str)

    def __init__(self, round_id: int, client: InsultClient, parent=None):
        super().__init__(parent)
        self._round_id = round_id
        self._client = client

    def run(self):
        self.insult_ready.emit(self._round_id, self._client.fetch_insult())


class _Overlay(QWidget):
    """Shared round bookkeeping for the two overlays."""

    finished = pyqtSignal()

    def __init__(self, config: AppConfig, scheduler: Scheduler, parent=None):
        super().__init__(parent)
        self._config = config
        self._scheduler = scheduler
        self._round_id = 0
        self._tasks: List[ScheduledTask] = []
        self._workers: List[QThread] = []
        self.setStyleSheet("background-color: #121213;")

    def _schedule(self, delay: float, callback: Callable[[], None], name: str) -> ScheduledTask:
        task = self._scheduler.call_later(delay, callback, name)
        self._tasks.append(task)
        return task

    def _start_worker(self, worker: QThread):
        # Workers stay referenced until they finish, even after teardown
        self._workers.append(worker)
        worker.finished.connect(lambda: self._forget_worker(worker))
        worker.start()

    def _forget_worker(self, worker: QThread):
        if worker in self._workers:
            self._workers.remove(worker)
        worker.deleteLater()

    def _is_current(self, round_id: int) -> bool:
        return round_id == self._round_id

    def _dismiss(self):
        logger.info(f"{type(self).__name__} dismissed")
        self.finished.emit()

    def teardown(self):
        """Cancel pending timers and invalidate the running round."""
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()
        self._round_id += 1

    def wait_for_workers(self, timeout_ms: int):
        """Wait for running workers (used at application exit)."""
        for worker in list(self._workers):
            worker.wait(timeout_ms)


class WinOverlay(_Overlay):
    """
    Webcam judgment for a winning round.

    Shows status lines while the capture runs, then the snapshot with a
    WINNER sticker and confetti. Dismisses itself after the configured
    time once the snapshot is shown.
    """

    def __init__(
        self,
        config: AppConfig,
        scheduler: Scheduler,
        sequence_factory: Callable[[], JudgmentSequence],
        sound: Optional[SoundPlayer] = None,
        parent=None,
    ):
        super().__init__(config, scheduler, parent)
        self._sequence_factory = sequence_factory
        self._sound = sound
        self._sequence: Optional[JudgmentSequence] = None
        self._worker: Optional[JudgmentWorker] = None
        self._snapshot: Optional[Snapshot] = None

        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._message_label = QLabel("Initializing...")
        self._message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._message_label.setStyleSheet("color: #ddd; font-size: 16pt;")
        layout.addWidget(self._message_label)

        self._snapshot_widget = SnapshotWidget(
            config.ui.canvas_width,
            config.ui.canvas_height,
            config.overlay.frame_interval_ms,
        )
        self._snapshot_widget.animation_finished.connect(self._on_confetti_finished)
        self._snapshot_widget.setVisible(False)
        layout.addWidget(self._snapshot_widget, alignment=Qt.AlignmentFlag.AlignCenter)

        self._sticker = QLabel("WINNER")
        self._sticker.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._sticker.setStyleSheet(STICKER_STYLE.format(color="#538d4e"))
        self._sticker.setVisible(False)
        layout.addWidget(self._sticker, alignment=Qt.AlignmentFlag.AlignCenter)

    def begin(self):
        """Start the judgment sequence for a new round."""
        self.teardown()
        round_id = self._round_id

        self._snapshot = None
        self._message_label.setText("Initializing...")
        self._message_label.setVisible(True)
        self._snapshot_widget.setVisible(False)
        self._snapshot_widget.set_snapshot(None)
        self._sticker.setVisible(False)

        self._sequence = self._sequence_factory()
        self._worker = JudgmentWorker(round_id, self._sequence, self)
        self._worker.status_changed.connect(self._on_status)
        self._worker.snapshot_ready.connect(self._on_snapshot_ready)
        self._start_worker(self._worker)

        self._schedule(
            self._config.overlay.setup_timeout_seconds,
            self._on_setup_timeout,
            "judgment setup timeout",
        )

    def _on_status(self, round_id: int, message: str):
        if self._is_current(round_id) and self._snapshot is None:
            self._message_label.setText(message)

    def _on_snapshot_ready(self, round_id: int, snapshot: Snapshot):
        if not self._is_current(round_id):
            return

        if self._snapshot is not None:
            # Placeholder already up after the setup timeout; the late capture
            # may have left the camera open
            logger.info("Late judgment result discarded, releasing camera")
            if self._sequence is not None:
                self._sequence.release()
            return

        self._show_snapshot(snapshot)

    def _on_confetti_finished(self):
        logger.debug("Confetti finished")

    def _on_setup_timeout(self):
        if self._snapshot is not None:
            return

        logger.warning("Judgment setup timed out, using placeholder")
        if self._sequence is not None:
            self._sequence.cancel()
            self._show_snapshot(self._sequence.placeholder())

    def _show_snapshot(self, snapshot: Snapshot):
        self._snapshot = snapshot

        self._message_label.setVisible(False)
        self._snapshot_widget.set_snapshot(snapshot.image)
        self._snapshot_widget.setVisible(True)
        self._sticker.setVisible(True)

        if self._sound is not None:
            self._sound.play_click()

        if not snapshot.placeholder:
            self._snapshot_widget.start_confetti(
                ParticleField(
                    self._config.ui.canvas_width,
                    self._config.ui.canvas_height,
                    self._config.overlay.particle_count,
                )
            )

        self._schedule(self._config.overlay.dismiss_seconds, self._dismiss, "winner dismiss")

    def teardown(self):
        """
        Stop timers and the animation, then release the camera.

        Waiting for a capture still in progress is bounded by the cleanup
        timeout; the sequence is cancelled so a late camera is closed by
        the worker itself.
        """
        super().teardown()
        self._snapshot_widget.stop_confetti()

        if self._sequence is not None:
            self._sequence.cancel()

        if self._worker is not None and self._worker.isRunning():
            timeout_ms = int(self._config.overlay.cleanup_timeout_seconds * 1000)
            if not self._worker.wait(timeout_ms):
                logger.warning("Camera cleanup timed out, continuing")

        if self._sequence is not None:
            self._sequence.release()
            self._sequence = None

        self._worker = None

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    @property
    def snapshot_widget(self) -> SnapshotWidget:
        return self._snapshot_widget

    @property
    def status_text(self) -> str:
        return self._message_label.text()


class LossOverlay(_Overlay):
    """
    Loser screen: donkey, pointing finger, LOSER sticker and an insult.

    The insult arrives asynchronously; the overlay dismisses itself on a
    fixed timer whether or not it has arrived.
    """

    def __init__(
        self,
        config: AppConfig,
        scheduler: Scheduler,
        insult_client: InsultClient,
        parent=None,
    ):
        super().__init__(config, scheduler, parent)
        self._insult_client = insult_client

        assets = config.assets
        layout = QVBoxLayout(self)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout.addWidget(image_label(assets.path(assets.loser_image), "You are a donkey."))
        layout.addWidget(image_label(assets.path(assets.pointing_image), "The Warden points at you."))

        sticker = QLabel("LOSER")
        sticker.setAlignment(Qt.AlignmentFlag.AlignCenter)
        sticker.setStyleSheet(STICKER_STYLE.format(color="#c0392b"))
        layout.addWidget(sticker, alignment=Qt.AlignmentFlag.AlignCenter)

        self._insult_label = QLabel("")
        self._insult_label.setWordWrap(True)
        self._insult_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._insult_label.setStyleSheet(
            "color: white; font-size: 14pt; background-color: #2b2b2e;"
            "border-radius: 6px; padding: 10px;"
        )
        layout.addWidget(self._insult_label)

    def begin(self):
        """Show the loser screen and request an insult."""
        self.teardown()
        round_id = self._round_id

        self._insult_label.setText(PENDING_MESSAGE)

        worker = InsultWorker(round_id, self._insult_client, self)
        worker.insult_ready.connect(self._on_insult_ready)
        self._start_worker(worker)

        self._schedule(self._config.overlay.dismiss_seconds, self._dismiss, "loser dismiss")

    def _on_insult_ready(self, round_id: int, text: str):
        if self._is_current(round_id):
            self._insult_label.setText(text)

    @property
    def insult_text(self) -> str:
        return self._insult_label.text()

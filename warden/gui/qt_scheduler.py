"""
Scheduler backed by single-shot QTimers.
"""

from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer

from warden.utils.timing import ScheduledTask, Scheduler


class _QtScheduledTask(ScheduledTask):
    """Task whose cancel() also stops its timer."""

    def __init__(self, callback: Callable[[], None], deadline: float, name: str, timer: QTimer):
        super().__init__(callback, deadline, name)
        self._timer = timer

    def cancel(self):
        super().cancel()
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None

    def fire(self):
        super().fire()
        if self._timer is not None:
            self._timer.deleteLater()
            self._timer = None


class QtScheduler(Scheduler):
    """Runs callbacks on the Qt event loop."""

    def __init__(self, parent: Optional[QObject] = None):
        self._parent = parent

    def call_later(self, delay: float, callback: Callable[[], None], name: str = "") -> ScheduledTask:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        task = _QtScheduledTask(callback, self.now() + delay, name, timer)
        timer.timeout.connect(task.fire)
        timer.start(max(0, int(delay * 1000)))
        return task

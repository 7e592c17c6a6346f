"""
The shell hosting the game window.

Receives the bridge signals and runs the ambush loop on a worker thread.

Threading model:
- Main thread: Qt event loop, window show/hide
- Worker thread: ambush timing (sleeps, cleanup wait)
- Communication: Qt signals/slots, threading.Event for cleanup
"""

from typing import Optional

from PyQt6.QtCore import QObject, QThread, Qt, pyqtSignal
from PyQt6.QtWidgets import QApplication, QWidget

from warden.core.config import AmbushConfig
from warden.host.ambush import AmbushLoop
from warden.vision.registry import CameraRegistry
from warden.utils.logger import get_logger

logger = get_logger(__name__)


class AmbushWorker(QThread):
    """
    Worker thread running the ambush loop.

    NEVER touches the window directly; emits ambush instead.
    """

    ambush = pyqtSignal()

    def __init__(self, loop: AmbushLoop, parent=None):
        super().__init__(parent)
        self._loop = loop

    def run(self):
        logger.info("Ambush worker started")
        self._loop.run(self.ambush.emit)
        logger.info("Ambush worker stopped")

    def stop(self):
        """Stop the loop; the thread exits at its next wait."""
        self._loop.stop()


class WardenShell(QObject):
    """
    Owns the main window's lifecycle.

    Implements the HostShell interface used by HostBridge.
    """

    def __init__(
        self,
        config: AmbushConfig,
        registry: CameraRegistry,
        loop: Optional[AmbushLoop] = None,
        parent=None,
    ):
        """
        Initialize shell.

        Args:
            config: Ambush timing
            registry: Cameras force-stopped on exit
            loop: Ambush loop (built from config if omitted)
            parent: Parent QObject
        """
        super().__init__(parent)
        self._config = config
        self._registry = registry
        self._loop = loop or AmbushLoop(config)
        self._window: Optional[QWidget] = None
        self._worker: Optional[AmbushWorker] = None
        self._exiting = False

    def attach(self, window: QWidget):
        """Attach the window the shell hides and shows."""
        self._window = window

    def start(self):
        """Start the ambush loop if enabled."""
        if not self._config.enabled:
            logger.info("Ambush disabled")
            return

        self._worker = AmbushWorker(self._loop)
        self._worker.ambush.connect(self._on_ambush)
        self._worker.start()

    def _on_ambush(self):
        """Show the window on top, centered and focused."""
        if self._window is None or self._exiting:
            return

        window = self._window
        window.setWindowFlag(Qt.WindowType.WindowStaysOnTopHint, True)
        window.show()

        screen = window.screen() or QApplication.primaryScreen()
        if screen is not None:
            geometry = window.frameGeometry()
            geometry.moveCenter(screen.availableGeometry().center())
            window.move(geometry.topLeft())

        window.raise_()
        window.activateWindow()

    # HostShell interface

    def camera_cleanup_complete(self):
        """Record that the UI has released its cameras."""
        self._loop.cleanup_done.set()
        logger.info("Received camera cleanup confirmation")

    def hide_window(self):
        """Hide the main window until the next ambush."""
        if self._window is None:
            raise RuntimeError("No window attached")
        self._window.hide()
        logger.info("Window hidden")

    def exit_app(self):
        """Stop everything and quit the application."""
        logger.info("Exit requested")
        self._exiting = True
        self.shutdown()

        app = QApplication.instance()
        if app is not None:
            app.quit()

    def shutdown(self, wait_ms: int = 2000):
        """Stop the ambush loop and force-stop cameras."""
        if self._worker is not None:
            self._worker.stop()
            self._worker.wait(wait_ms)
            self._worker = None

        self._registry.stop_all()

    @property
    def exiting(self) -> bool:
        return self._exiting

"""
Main application window.

Pages: loading -> game board -> winner/loser overlay -> back to the board.
The window is frameless, stays on top and cannot be closed by the user;
the only way out is the Exit App button.
"""

from typing import Callable, Optional

from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)
from PyQt6.QtCore import Qt

from warden.core.config import AppConfig
from warden.core.game import SubmitResult, WordleGame
from warden.core.state import RoundOutcome
from warden.core.words import load_word_list
from warden.gui.overlays import LossOverlay, WinOverlay
from warden.gui.qt_scheduler import QtScheduler
from warden.gui.sound import SoundPlayer
from warden.gui.widgets import BoardWidget, image_label
from warden.host.bridge import HostBridge
from warden.services.insult import InsultClient
from warden.utils.timing import ScheduledTask, Scheduler
from warden.vision.judgment import JudgmentSequence
from warden.vision.registry import CameraRegistry
from warden.utils.logger import get_logger

logger = get_logger(__name__)


KEY_NAMES = {
    Qt.Key.Key_Return: "ENTER",
    Qt.Key.Key_Enter: "ENTER",
    Qt.Key.Key_Backspace: "BACKSPACE",
}


class MainWindow(QMainWindow):
    """The Warden's single window."""

    def __init__(
        self,
        config: AppConfig,
        registry: CameraRegistry,
        bridge: HostBridge,
        insult_client: Optional[InsultClient] = None,
        sound: Optional[SoundPlayer] = None,
        scheduler: Optional[Scheduler] = None,
        sequence_factory: Optional[Callable[[], JudgmentSequence]] = None,
    ):
        """
        Initialize main window.

        Args:
            config: Application configuration
            registry: Open cameras, force-stopped on every close path
            bridge: Calls into the shell
            insult_client: Source of loser insults
            sound: Audio player (silent if None)
            scheduler: Timer source (Qt timers if None)
            sequence_factory: Builds the judgment capture for each win
        """
        super().__init__()

        self._config = config
        self._registry = registry
        self._bridge = bridge
        self._sound = sound
        self._scheduler = scheduler or QtScheduler(self)
        self._insult_client = insult_client or InsultClient(config.insult)
        self._sequence_factory = sequence_factory or self._default_sequence

        self._game: Optional[WordleGame] = None
        self._message_task: Optional[ScheduledTask] = None
        self._active_overlay = None
        self._allow_close = False

        self._init_ui()

    def _default_sequence(self) -> JudgmentSequence:
        assets = self._config.assets
        return JudgmentSequence(
            self._config.camera,
            self._config.overlay,
            self._registry,
            placeholder_path=assets.path(assets.placeholder_image),
        )

    def _init_ui(self):
        """Initialize UI components."""
        ui = self._config.ui
        self.setWindowTitle(ui.window_title)
        self.setFixedSize(ui.window_width, ui.window_height)

        flags = Qt.WindowType.Window
        if ui.frameless:
            flags |= Qt.WindowType.FramelessWindowHint
        if ui.always_on_top:
            flags |= Qt.WindowType.WindowStaysOnTopHint
        self.setWindowFlags(flags)
        self.setStyleSheet("QMainWindow { background-color: #121213; }")

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        self._loading_page = self._create_loading_page()
        self._game_page = self._create_game_page()

        self._win_overlay = WinOverlay(self._config, self._scheduler, self._sequence_factory, self._sound)
        self._win_overlay.finished.connect(self._close_warden)

        self._loss_overlay = LossOverlay(self._config, self._scheduler, self._insult_client)
        self._loss_overlay.finished.connect(self._close_warden)

        for page in (self._loading_page, self._game_page, self._win_overlay, self._loss_overlay):
            self._stack.addWidget(page)

        self._stack.setCurrentWidget(self._loading_page)

    def _create_loading_page(self) -> QWidget:
        page = QWidget()
        layout = QVBoxLayout(page)
        label = QLabel("Warden is loading his dictionary...")
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label.setStyleSheet("color: #ddd; font-size: 14pt;")
        layout.addWidget(label)
        return page

    def _create_game_page(self) -> QWidget:
        """Title, exit button, board and message line."""
        ui = self._config.ui
        assets = self._config.assets

        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(ui.content_margin, ui.content_margin, ui.content_margin, ui.content_margin)

        header = QHBoxLayout()
        header.addStretch()
        self._exit_btn = QPushButton("Exit App")
        self._exit_btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self._exit_btn.setStyleSheet(
            "QPushButton { padding: 5px 10px; border: none; background: #ff5555;"
            "color: white; border-radius: 5px; }"
        )
        self._exit_btn.clicked.connect(self._on_exit_clicked)
        header.addWidget(self._exit_btn)
        layout.addLayout(header)

        title = image_label(assets.path(assets.title_image), "THE WARDEN")
        if title.pixmap() is None or title.pixmap().isNull():
            title.setStyleSheet("color: #c0392b; font-size: 32pt; font-weight: bold;")
        layout.addWidget(title)

        subtitle = QLabel("Your focus is forfeit. Solve the puzzle.")
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
        subtitle.setStyleSheet("color: #bbb; font-size: 12pt;")
        layout.addWidget(subtitle)

        self._board = BoardWidget(
            rows=self._config.game.max_guesses,
            columns=self._config.game.word_length,
            tile_size=ui.tile_size,
            spacing=ui.tile_spacing,
        )
        layout.addWidget(self._board, alignment=Qt.AlignmentFlag.AlignCenter)

        self._message_label = QLabel("")
        self._message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._message_label.setStyleSheet("color: #ffcc00; font-size: 12pt; font-weight: bold;")
        layout.addWidget(self._message_label)

        layout.addStretch()
        return page

    def load_words(self):
        """Load the word list and start the first round."""
        words = load_word_list(
            self._config.assets.word_list_path,
            self._config.game.fallback_words,
            self._config.game.word_length,
        )
        self.start_game(WordleGame(
            words,
            word_length=self._config.game.word_length,
            max_guesses=self._config.game.max_guesses,
        ))

    def start_game(self, game: WordleGame):
        """Begin playing with a ready game."""
        self._game = game
        self._game.start()
        self._stack.setCurrentWidget(self._game_page)
        self._refresh()

    # Input

    def keyPressEvent(self, event):
        """Route keyboard input to the game while the board is showing."""
        if self._game is None or self._stack.currentWidget() is not self._game_page:
            super().keyPressEvent(event)
            return

        key = KEY_NAMES.get(event.key())
        if key is None:
            text = event.text()
            if len(text) != 1 or not text.isalpha():
                super().keyPressEvent(event)
                return
            key = text

        self.handle_key(key)

    def handle_key(self, key: str):
        """Apply a key name to the game and update the screen."""
        if self._game is None:
            return

        result = self._game.handle_key(key)
        self._refresh()

        if result is not None:
            self._on_submit(result)

    def _on_submit(self, result: SubmitResult):
        if not result.accepted:
            if result.message:
                self._show_message(result.message)
            return

        if result.outcome == RoundOutcome.WON:
            self._enter_overlay(self._win_overlay)
            if self._sound is not None:
                self._sound.play_win()
        elif result.outcome == RoundOutcome.LOST:
            self._enter_overlay(self._loss_overlay)
            if self._sound is not None:
                self._sound.play_lose()

    def _show_message(self, message: str):
        """Show a validation message that clears itself."""
        if self._message_task is not None:
            self._message_task.cancel()

        self._message_label.setText(message)
        self._message_task = self._scheduler.call_later(
            self._config.game.message_seconds, self._clear_message, "clear message"
        )

    def _clear_message(self):
        if self._game is not None:
            self._game.clear_message()
        self._message_label.setText("")
        self._message_task = None

    def _refresh(self):
        if self._game is None:
            return
        self._board.update_board(self._game.guesses, self._game.current_guess, self._game.solution)
        self._message_label.setText(self._game.message or "")

    # Round end

    def _enter_overlay(self, overlay):
        if self._message_task is not None:
            self._message_task.cancel()
            self._message_task = None

        self._active_overlay = overlay
        self._stack.setCurrentWidget(overlay)
        overlay.begin()

    def _close_warden(self):
        """
        Close sequence after an overlay finishes.

        Cameras are released before the shell hears that cleanup is done.
        The round is reset no matter what the shell calls return.
        """
        logger.info("Initiating window close sequence")
        try:
            if self._active_overlay is not None:
                self._active_overlay.teardown()
            self._registry.stop_all()

            hidden = self._bridge.hide_window()
            cleaned = self._bridge.camera_cleanup_complete()
            if not (hidden.ok and cleaned.ok):
                logger.error("Normal close failed, forcing camera cleanup")
                self._registry.stop_all()
        finally:
            self._reset_round()

    def _reset_round(self):
        self._active_overlay = None
        if self._game is not None:
            self._game.reset()
            self._stack.setCurrentWidget(self._game_page)
        self._refresh()

    def _on_exit_clicked(self):
        result = self._bridge.exit_app()
        if not result.ok:
            logger.error(f"Exit failed: {result.error}")

    # Teardown

    def allow_close(self):
        """Let the next close event through (application exit)."""
        self._allow_close = True

    def shutdown(self):
        """Tear down overlays and force-stop cameras."""
        for overlay in (self._win_overlay, self._loss_overlay):
            overlay.teardown()
            overlay.wait_for_workers(int(self._config.overlay.cleanup_timeout_seconds * 1000))
        self._registry.stop_all()
        if self._sound is not None:
            self._sound.close()

    def closeEvent(self, event):
        """Only application exit may close the window; cameras stop either way."""
        self._registry.stop_all()

        if self._allow_close:
            logger.info("Application closing")
            event.accept()
        else:
            logger.info("Close request ignored")
            event.ignore()

    # Properties

    @property
    def game(self) -> Optional[WordleGame]:
        return self._game

    @property
    def current_page(self) -> QWidget:
        return self._stack.currentWidget()

    @property
    def win_overlay(self) -> WinOverlay:
        return self._win_overlay

    @property
    def loss_overlay(self) -> LossOverlay:
        return self._loss_overlay

    @property
    def game_page(self) -> QWidget:
        return self._game_page

    @property
    def message_text(self) -> str:
        return self._message_label.text()

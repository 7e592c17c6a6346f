"""
Round-end audio and the shutter click.

Playback problems are logged only; a silent round is still a round.
"""

import tempfile
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer, QSoundEffect

from warden.core.config import AssetConfig, OverlayConfig
from warden.utils.audio import synthesize_click, write_wav
from warden.utils.logger import get_logger

logger = get_logger(__name__)


class SoundPlayer(QObject):
    """Plays the win/lose clips and the synthesized click."""

    def __init__(self, assets: AssetConfig, overlay: OverlayConfig, parent=None):
        super().__init__(parent)
        self._assets = assets

        self._audio_output = QAudioOutput(self)
        self._player = QMediaPlayer(self)
        self._player.setAudioOutput(self._audio_output)
        self._player.errorOccurred.connect(self._on_player_error)

        self._tmp_dir = tempfile.TemporaryDirectory(prefix="warden-")
        self._click: Optional[QSoundEffect] = None
        try:
            samples = synthesize_click(overlay.click_frequency_hz, overlay.click_duration_seconds)
            click_path = write_wav(Path(self._tmp_dir.name) / "click.wav", samples)
            self._click = QSoundEffect(self)
            self._click.setSource(QUrl.fromLocalFile(str(click_path)))
        except OSError as e:
            logger.error(f"Could not prepare click sound: {e}")

    def _play_clip(self, relative: str):
        path = self._assets.path(relative)
        if not path.is_file():
            logger.error(f"Audio clip missing: {path}")
            return

        self._player.stop()
        self._player.setSource(QUrl.fromLocalFile(str(path)))
        self._player.play()

    def play_win(self):
        self._play_clip(self._assets.win_sound)

    def play_lose(self):
        self._play_clip(self._assets.lose_sound)

    def play_click(self):
        """Play the shutter click."""
        if self._click is None:
            return
        self._click.play()

    def _on_player_error(self, error, message: str):
        logger.error(f"Audio error: {message}")

    def close(self):
        """Stop playback and remove the temporary click file."""
        self._player.stop()
        self._tmp_dir.cleanup()

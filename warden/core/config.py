"""
Configuration management for The Warden.

All application configuration with sensible defaults.
Uses dataclasses for type safety and validation.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
import os
from pathlib import Path

from warden.core.words import FALLBACK_WORDS


@dataclass
class CameraConfig:
    """Camera capture configuration."""

    camera_index: int = 0  # Default camera
    frame_width: int = 640
    frame_height: int = 480
    target_fps: int = 30
    warmup_frames: int = 5  # Frames to skip after camera init
    first_frame_attempts: int = 30  # Reads allowed before giving up on the first frame


@dataclass
class GameConfig:
    """Puzzle rules."""

    word_length: int = 5
    max_guesses: int = 5

    # Transient validation message lifetime (seconds)
    message_seconds: float = 2.0

    # Used when the word list asset cannot be loaded
    fallback_words: Tuple[str, ...] = FALLBACK_WORDS


@dataclass
class OverlayConfig:
    """Win/loss overlay timing."""

    # Overlay self-dismisses this long after it has something to show
    dismiss_seconds: float = 20.0

    # Force the placeholder if no snapshot arrived by then
    setup_timeout_seconds: float = 15.0

    # Pause between loading the face model and taking the snapshot
    judgment_delay_seconds: float = 2.0

    # Upper bound on waiting for camera teardown
    cleanup_timeout_seconds: float = 1.0

    # Falling particles
    particle_count: int = 100
    frame_interval_ms: int = 16  # ~60 fps

    # Click tone
    click_frequency_hz: float = 1000.0
    click_duration_seconds: float = 0.05


@dataclass
class InsultConfig:
    """Generated insult (Gemini generateContent) configuration."""

    api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("WARDEN_GEMINI_API_KEY") or None
    )
    model: str = field(
        default_factory=lambda: os.getenv(
            "WARDEN_GEMINI_MODEL", "gemini-2.5-flash-preview-05-20"
        )
    )
    endpoint: str = "https://generativelanguage.googleapis.com/v1beta/models"
    timeout_seconds: float = 15.0


@dataclass
class AmbushConfig:
    """Controls when the hidden window pops back up."""

    enabled: bool = True

    # Random sleep before each ambush, [min, max) seconds
    min_sleep_seconds: int = 10
    max_sleep_seconds: int = 20

    # How long to wait for the camera cleanup signal before proceeding anyway
    cleanup_wait_seconds: float = 8.0
    poll_interval_seconds: float = 0.1


@dataclass
class AssetConfig:
    """Static asset locations."""

    assets_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("WARDEN_ASSETS_DIR", Path(__file__).resolve().parent.parent / "assets")
        )
    )

    word_list_filename: str = "solutions.json"
    title_image: str = "images/warden-title.png"
    loser_image: str = "images/donkey.png"
    pointing_image: str = "images/pointing-finger.png"
    placeholder_image: str = "images/winner-placeholder.jpg"
    win_sound: str = "sounds/win.mp3"
    lose_sound: str = "sounds/lose.mp3"

    def __post_init__(self):
        self.assets_dir = Path(self.assets_dir)

    def path(self, relative: str) -> Path:
        """Resolve an asset path relative to the assets directory."""
        return self.assets_dir / relative

    @property
    def word_list_path(self) -> Path:
        """Get full path to the word list."""
        return self.assets_dir / self.word_list_filename


@dataclass
class UIConfig:
    """User interface configuration."""

    window_title: str = "The Warden"
    window_width: int = 720
    window_height: int = 640

    # Frameless, on top, not closable by the user
    always_on_top: bool = True
    frameless: bool = True

    tile_size: int = 62
    tile_spacing: int = 6

    # Snapshot / animation canvas size
    canvas_width: int = 640
    canvas_height: int = 480

    content_margin: int = 15


@dataclass
class AppConfig:
    """Main application configuration."""

    camera: CameraConfig = field(default_factory=CameraConfig)
    game: GameConfig = field(default_factory=GameConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)
    insult: InsultConfig = field(default_factory=InsultConfig)
    ambush: AmbushConfig = field(default_factory=AmbushConfig)
    assets: AssetConfig = field(default_factory=AssetConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # Application version
    version: str = "0.1.0"

    # Log level from environment or default to WARNING
    log_level: str = field(
        default_factory=lambda: os.getenv("WARDEN_LOG_LEVEL", "WARNING")
    )

    # Optional log file (off by default)
    log_file: Optional[Path] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """Validate configuration parameters."""
        if self.game.word_length < 1:
            raise ValueError("word_length must be positive")

        if self.game.max_guesses < 1:
            raise ValueError("max_guesses must be positive")

        for word in self.game.fallback_words:
            if len(word) != self.game.word_length or not word.isalpha():
                raise ValueError(f"Invalid fallback word: {word!r}")

        if self.overlay.dismiss_seconds <= 0:
            raise ValueError("dismiss_seconds must be positive")

        if self.overlay.cleanup_timeout_seconds < 0:
            raise ValueError("cleanup_timeout_seconds must be non-negative")

        if self.overlay.particle_count < 0:
            raise ValueError("particle_count must be non-negative")

        if not 0 < self.ambush.min_sleep_seconds < self.ambush.max_sleep_seconds:
            raise ValueError("ambush sleep range must satisfy 0 < min < max")

        if self.camera.target_fps < 1 or self.camera.target_fps > 60:
            raise ValueError("target_fps must be between 1 and 60")


def get_default_config() -> AppConfig:
    """
    Get default application configuration.

    Returns:
        AppConfig instance with default values
    """
    return AppConfig()

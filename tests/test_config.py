"""
Tests for configuration defaults and validation.
"""

from pathlib import Path

import pytest

from warden.core.config import (
    AmbushConfig,
    AppConfig,
    AssetConfig,
    GameConfig,
    InsultConfig,
    OverlayConfig,
    get_default_config,
)


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        config = get_default_config()

        assert config.game.word_length == 5
        assert config.game.max_guesses == 5
        assert config.overlay.dismiss_seconds == 20.0
        assert config.overlay.cleanup_timeout_seconds == 1.0
        assert config.camera.frame_width == 640
        assert config.camera.frame_height == 480

    def test_invalid_fallback_word(self):
        with pytest.raises(ValueError, match="Invalid fallback word"):
            AppConfig(game=GameConfig(fallback_words=("TOOLONG",)))

    def test_invalid_ambush_range(self):
        with pytest.raises(ValueError, match="ambush sleep range"):
            AppConfig(ambush=AmbushConfig(min_sleep_seconds=20, max_sleep_seconds=10))

    def test_invalid_dismiss(self):
        with pytest.raises(ValueError, match="dismiss_seconds"):
            AppConfig(overlay=OverlayConfig(dismiss_seconds=0))

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("WARDEN_LOG_LEVEL", "DEBUG")

        assert AppConfig().log_level == "DEBUG"


class TestInsultConfig:
    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("WARDEN_GEMINI_API_KEY", "secret")

        assert InsultConfig().api_key == "secret"

    def test_empty_env_key_is_none(self, monkeypatch):
        monkeypatch.setenv("WARDEN_GEMINI_API_KEY", "")

        assert InsultConfig().api_key is None


class TestAssetConfig:
    def test_assets_dir_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("WARDEN_ASSETS_DIR", str(tmp_path))

        config = AssetConfig()

        assert config.assets_dir == tmp_path
        assert config.word_list_path == tmp_path / "solutions.json"

    def test_path_joins_relative(self, tmp_path):
        config = AssetConfig(assets_dir=tmp_path)

        assert config.path("sounds/win.mp3") == Path(tmp_path) / "sounds" / "win.mp3"

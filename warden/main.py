"""
The Warden - a word puzzle that ambushes you.

Main entry point.

Usage:
    python -m warden.main
"""

import sys
from PyQt6.QtCore import QTimer
from PyQt6.QtWidgets import QApplication

from warden.core.config import get_default_config
from warden.gui.main_window import MainWindow
from warden.gui.sound import SoundPlayer
from warden.host.bridge import HostBridge
from warden.host.shell import WardenShell
from warden.services.insult import InsultClient
from warden.vision.registry import CameraRegistry
from warden.utils.logger import setup_logger, quiet_libraries, get_logger


def main():
    """Main entry point."""

    config = get_default_config()

    setup_logger(
        name="warden",
        level=config.log_level,
        log_file=config.log_file,
    )
    quiet_libraries()

    logger = get_logger(__name__)
    logger.info("=" * 60)
    logger.info("The Warden Starting")
    logger.info(f"Version: {config.version}")
    logger.info("=" * 60)

    app = QApplication(sys.argv)
    app.setApplicationName("The Warden")
    app.setApplicationVersion(config.version)
    # The window hides between rounds; that must not end the app
    app.setQuitOnLastWindowClosed(False)

    registry = CameraRegistry()
    shell = WardenShell(config.ambush, registry)
    sound = SoundPlayer(config.assets, config.overlay)

    window = MainWindow(
        config,
        registry,
        HostBridge(shell),
        insult_client=InsultClient(config.insult),
        sound=sound,
    )
    shell.attach(window)

    def on_quit():
        window.allow_close()
        window.shutdown()
        shell.shutdown()

    app.aboutToQuit.connect(on_quit)

    window.show()
    QTimer.singleShot(0, window.load_words)
    shell.start()

    logger.info("Application window created")

    exit_code = app.exec()

    logger.info("Application exiting")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())

"""
Calls from the game UI into the enclosing shell.

Three one-way signals. Each call returns a BridgeResult instead of raising;
failures are logged and never retried.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

from warden.utils.logger import get_logger

logger = get_logger(__name__)


class HostShell(Protocol):
    """What the shell must provide to the bridge."""

    def camera_cleanup_complete(self) -> None: ...

    def hide_window(self) -> None: ...

    def exit_app(self) -> None: ...


@dataclass
class BridgeResult:
    """Outcome of one bridge call."""

    command: str
    ok: bool
    error: Optional[str] = None


class HostBridge:
    """Fire-and-forget access to the shell."""

    def __init__(self, shell: Optional[HostShell]):
        """
        Initialize bridge.

        Args:
            shell: The shell receiving signals (None makes every call fail)
        """
        self._shell = shell

    def _invoke(self, command: str) -> BridgeResult:
        if self._shell is None:
            logger.error(f"Host call {command} failed: no shell attached")
            return BridgeResult(command, ok=False, error="no shell attached")

        try:
            getattr(self._shell, command)()
        except Exception as e:
            logger.error(f"Host call {command} failed: {e}")
            return BridgeResult(command, ok=False, error=str(e))

        logger.debug(f"Host call {command} delivered")
        return BridgeResult(command, ok=True)

    def camera_cleanup_complete(self) -> BridgeResult:
        """Tell the shell that every camera has been released."""
        return self._invoke("camera_cleanup_complete")

    def hide_window(self) -> BridgeResult:
        """Ask the shell to hide the main window."""
        return self._invoke("hide_window")

    def exit_app(self) -> BridgeResult:
        """Ask the shell to quit the application."""
        return self._invoke("exit_app")

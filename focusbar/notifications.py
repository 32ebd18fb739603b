"""Notification and alarm sound support."""

import logging
import platform
import subprocess
import sys
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

CHIME_COUNT = 3
MACOS_CHIME = "/System/Library/Sounds/Glass.aiff"
LINUX_CHIME = "/usr/share/sounds/freedesktop/stereo/complete.oga"


def _send_bell() -> None:
    """Send terminal bell."""
    sys.stdout.write("\a")
    sys.stdout.flush()


def _run(args: list) -> bool:
    """Run a helper command, returning False if it could not be run."""
    try:
        result = subprocess.run(args, capture_output=True, timeout=5)
    except (subprocess.SubprocessError, FileNotFoundError, OSError) as exc:
        logger.warning("Command %s failed: %s", args[0], exc)
        return False
    return result.returncode == 0


def _send_macos_notification(title: str, message: str, silent: bool) -> bool:
    """Send macOS notification via osascript."""
    script = f'display notification "{message}" with title "{title}"'
    if not silent:
        script += ' sound name "Glass"'
    return _run(["osascript", "-e", script])


def _send_linux_notification(title: str, message: str, silent: bool) -> bool:
    """Send Linux notification via notify-send."""
    args = ["notify-send", "--app-name=focusbar"]
    if silent:
        args.append("--hint=boolean:suppress-sound:true")
    return _run(args + [title, message])


def play_chime(system: str, bell: Callable[[], None] = _send_bell) -> None:
    """Play the alarm chime CHIME_COUNT times, ringing ``bell`` when no player works."""
    for _ in range(CHIME_COUNT):
        if system == "Darwin":
            played = _run(["afplay", "-v", "5", MACOS_CHIME])
        elif system == "Linux":
            played = _run(["paplay", LINUX_CHIME])
        else:
            played = False
        if not played:
            bell()


def notify(title: str, message: str, sound: bool = True, bell: Callable[[], None] = _send_bell) -> None:
    """Play the alarm (if enabled) and show a native notification.

    Fails silently if native notifications are not available.

    Args:
        title: Notification title.
        message: Notification message.
        sound: Whether to play the chime. The notification is silent otherwise.
        bell: Fallback when no sound player is available.
    """
    system = platform.system()
    if sound:
        play_chime(system, bell)

    if system == "Darwin":
        _send_macos_notification(title, message, silent=not sound)
    elif system == "Linux":
        _send_linux_notification(title, message, silent=not sound)
    # Windows and other platforms: chime only


class Notifier:
    """Fire-and-forget notification sink.

    Each call runs on a daemon thread so slow helpers never hold up the
    caller. Errors are logged. Pass ``bell`` when stdout is not the
    terminal, e.g. while a textual app is running.
    """

    def __init__(self, background: bool = True, bell: Optional[Callable[[], None]] = None):
        self.background = background
        self.bell = bell or _send_bell

    def notify(self, title: str, message: str, sound: bool = True) -> None:
        if not self.background:
            self._deliver(title, message, sound)
            return
        threading.Thread(
            target=self._deliver,
            args=(title, message, sound),
            name="focusbar-notify",
            daemon=True,
        ).start()

    def _deliver(self, title: str, message: str, sound: bool) -> None:
        try:
            notify(title, message, sound=sound, bell=self.bell)
        except Exception:
            logger.exception("Notification %r failed", title)

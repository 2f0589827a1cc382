"""
Desktop notifications for finished or failed builds.
"""
import subprocess
import sys

import logger as log

APP_NAME = "mvnflow"


def _command(title: str, message: str) -> list[str]:
    if sys.platform == "darwin":
        script = f"display notification {_applescript(message)} with title {_applescript(title)}"
        return ["osascript", "-e", script]
    return ["notify-send", "--app-name", APP_NAME, title, message]


def _applescript(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def send(title: str, message: str) -> bool:
    """Show a desktop notification; returns False when no notifier is available."""
    try:
        r = subprocess.run(_command(title, message), capture_output=True, check=False)
    except FileNotFoundError:
        log.info("No desktop notifier available – notification skipped.")
        return False
    return r.returncode == 0

"""Hands tracks to the Spotify desktop app on macOS via AppleScript."""

import subprocess
import sys


class PlayerError(Exception):
    """The Spotify desktop app could not be asked to play a track."""


def is_supported_platform() -> bool:
    return sys.platform == "darwin"


def build_play_script(uri: str) -> str:
    escaped = uri.replace("\\", "\\\\").replace('"', '\\"')
    return f'tell application "Spotify" to play track "{escaped}"'


def open_spotify_link(uri: str) -> subprocess.Popen:
    """Start osascript to play `uri` in Spotify. Does not wait for it to finish."""
    cmd = ["osascript", "-e", build_play_script(uri)]
    try:
        return subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError as e:
        raise PlayerError(f"Failed to launch osascript: {e}") from e

"""Helpers for Spotify web URLs (https://open.spotify.com/...)."""

SPOTIFY_WEB_URL = "https://open.spotify.com/"


def is_spotify_web_url(ref: str) -> bool:
    return str(ref or "").startswith(SPOTIFY_WEB_URL)


def extract_resource_id(ref: str) -> str:
    """Return the last path segment of a URL without its query string.

    >>> extract_resource_id("https://open.spotify.com/playlist/PID?si=abc")
    'PID'
    """

    last = str(ref or "").split("/")[-1]
    return last.split("?")[0]


def to_spotify_uri(ref: str) -> str:
    """Convert a Spotify web URL into a URI the desktop app can play.

    https://open.spotify.com/track/xxx?si=yyy -> spotify:track:xxx:play

    Anything that does not look like a Spotify web URL is returned unchanged.
    """

    if not is_spotify_web_url(ref):
        return ref

    parts = ref[len(SPOTIFY_WEB_URL):].split("/")
    if len(parts) < 2:
        return ref

    resource_type = parts[0]
    resource_id = parts[1].split("?")[0]
    return f"spotify:{resource_type}:{resource_id}:play"

from typing import Optional


class SpotifyError(Exception):
    """Base class for every Spotify client failure."""


class ValidationError(SpotifyError):
    """A playlist or track reference is malformed or not a Spotify web URL."""


class AuthError(SpotifyError):
    """No usable access token could be obtained, or the API keeps rejecting it."""


class NetworkError(SpotifyError):
    """Transport failure, unexpected HTTP status, or an undecodable response body."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

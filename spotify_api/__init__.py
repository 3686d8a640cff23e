"""Spotify Web API integration (Client Credentials).

Only app-level access is used: public playlists and track metadata.
"""

from .auth import SpotifyClientCredentialsAuth
from .client import SpotifyClient
from .errors import AuthError, NetworkError, SpotifyError, ValidationError
from .models import PlaylistPage, TrackInfo
from .token_manager import TokenInfo, TokenManager
from .urls import to_spotify_uri

__all__ = [
    "AuthError",
    "NetworkError",
    "PlaylistPage",
    "SpotifyClient",
    "SpotifyClientCredentialsAuth",
    "SpotifyError",
    "TokenInfo",
    "TokenManager",
    "TrackInfo",
    "ValidationError",
    "to_spotify_uri",
]

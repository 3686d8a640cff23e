from .spotify_desktop import PlayerError, is_supported_platform, open_spotify_link

__all__ = ["PlayerError", "is_supported_platform", "open_spotify_link"]

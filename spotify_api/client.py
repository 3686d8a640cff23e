import logging
from typing import Any, Dict, List, Optional

import httpx

from .auth import DEFAULT_TIMEOUT, SpotifyClientCredentialsAuth
from .errors import AuthError, NetworkError, ValidationError
from .models import PlaylistPage, TrackInfo
from .token_manager import TokenInfo, TokenManager
from .urls import extract_resource_id, is_spotify_web_url, to_spotify_uri

logger = logging.getLogger(__name__)

SPOTIFY_API_BASE_URL = "https://api.spotify.com/v1"

# Spotify's maximum page size for playlist items.
PLAYLIST_PAGE_SIZE = 100


class SpotifyClient:
    """Thin Spotify Web API client using an app-level (client credentials) token.

    Design goals:
    - Fetch a token lazily and reuse it for every call
    - On 401, drop the token, fetch a new one and retry the request once
    - No other retries: every failure is raised to the caller
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
        token_manager: Optional[TokenManager] = None,
    ):
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)
        self.token_manager = token_manager or TokenManager()
        self.auth = SpotifyClientCredentialsAuth(
            client_id,
            client_secret,
            timeout=timeout,
            http_client=self._http,
        )

    def close(self) -> None:
        if self._owns_http_client:
            self._http.close()

    def __enter__(self) -> "SpotifyClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -----------------
    # Token management
    # -----------------

    def fetch_access_token(self) -> TokenInfo:
        """Request a new token and store it. The stored token is untouched on failure."""

        token = self.auth.fetch_access_token()
        self.token_manager.set(token)
        return token

    def ensure_token(self) -> TokenInfo:
        token = self.token_manager.get()
        if token is None:
            token = self.fetch_access_token()
        return token

    def invalidate_token(self) -> None:
        self.token_manager.invalidate()

    # -----------------
    # HTTP helpers
    # -----------------

    def request_json(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a Spotify Web API path and return the parsed JSON object.

        A 401 answer means the token expired server-side: it is refreshed once
        and the request repeated. A second 401 raises AuthError.
        """

        url = f"{SPOTIFY_API_BASE_URL}{path}"
        refreshed = False

        while True:
            token = self.ensure_token()
            try:
                resp = self._http.get(
                    url,
                    params=params,
                    headers={
                        "Authorization": token.authorization_header(),
                        "Accept": "application/json",
                    },
                )
            except httpx.HTTPError as e:
                raise NetworkError(f"Spotify API request failed: {e}") from e

            if resp.status_code == 401:
                if refreshed:
                    raise AuthError(f"Spotify API rejected a freshly issued token: {resp.text}")
                logger.info("Spotify token rejected (HTTP 401); fetching a new one")
                self.invalidate_token()
                self.fetch_access_token()
                refreshed = True
                continue

            if resp.status_code >= 400:
                raise NetworkError(
                    f"Spotify API error {resp.status_code}: {resp.text}",
                    status_code=resp.status_code,
                )

            try:
                payload = resp.json()
            except ValueError as e:
                raise NetworkError(
                    f"Spotify API response was not JSON (status {resp.status_code}): {resp.text}",
                    status_code=resp.status_code,
                ) from e

            if not isinstance(payload, dict):
                raise NetworkError(f"Spotify API response was not an object: {payload}", status_code=resp.status_code)

            return payload

    # -----------------
    # Reference parsing
    # -----------------

    @staticmethod
    def get_playlist_id(playlist_url: str) -> str:
        return extract_resource_id(playlist_url)

    @staticmethod
    def get_track_id(track_url: str) -> str:
        return extract_resource_id(track_url)

    @staticmethod
    def to_spotify_uri(track_url: str) -> str:
        return to_spotify_uri(track_url)

    # -----------------
    # Endpoints
    # -----------------

    def playlist_items(self, playlist_id: str, *, limit: int = PLAYLIST_PAGE_SIZE, offset: int = 0) -> PlaylistPage:
        payload = self.request_json(
            f"/playlists/{playlist_id}/tracks",
            params={"limit": limit, "offset": offset},
        )
        return PlaylistPage.from_payload(payload)

    def get_playlist_tracks(self, playlist_url: str) -> List[str]:
        """Return the Spotify web URLs of every track in a playlist, in playlist order.

        Pages are requested sequentially until the number of items returned
        by the server (parsed or not) reaches the declared total.
        """

        if not is_spotify_web_url(playlist_url):
            raise ValidationError(f"Invalid Spotify URL format: {playlist_url!r}")

        playlist_id = self.get_playlist_id(playlist_url)
        if not playlist_id:
            raise ValidationError(f"Invalid playlist ID in URL: {playlist_url!r}")

        track_urls: List[str] = []
        seen = 0
        offset = 0

        while True:
            page = self.playlist_items(playlist_id, limit=PLAYLIST_PAGE_SIZE, offset=offset)
            track_urls.extend(page.track_urls)
            seen += page.raw_count

            skipped = page.raw_count - len(page.track_urls)
            if skipped:
                logger.debug("Skipped %d unplayable items at offset %d", skipped, offset)

            if seen >= page.total or page.raw_count == 0:
                break

            offset += PLAYLIST_PAGE_SIZE

        logger.debug("Playlist %s: %d tracks (%d items declared)", playlist_id, len(track_urls), seen)
        return track_urls

    def get_track_info(self, track_url: str) -> TrackInfo:
        """Fetch name, artists and release year for a track (best effort)."""

        track_id = self.get_track_id(track_url)
        if not track_id:
            raise ValidationError(f"Invalid track ID in URL: {track_url!r}")

        payload = self.request_json(f"/tracks/{track_id}")
        return TrackInfo.from_payload(payload)

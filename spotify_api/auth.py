import logging
from typing import Any, Dict, Optional

import httpx

from .errors import AuthError
from .token_manager import TokenInfo

logger = logging.getLogger(__name__)

SPOTIFY_ACCOUNTS_BASE_URL = "https://accounts.spotify.com"
SPOTIFY_TOKEN_URL = f"{SPOTIFY_ACCOUNTS_BASE_URL}/api/token"

DEFAULT_TIMEOUT = 45.0


def check_spotify_credentials(config: Dict[str, Any]) -> Dict[str, Any]:
    """Validate the client-credentials config fields and return a structured status dict."""

    config = config or {}
    client_id = str(config.get("spotify_client_id", "")).strip()
    client_secret = str(config.get("spotify_client_secret", "")).strip()

    missing = []
    if not client_id:
        missing.append("SPOTIFY_CLIENT_ID")
    if not client_secret:
        missing.append("SPOTIFY_CLIENT_SECRET")

    if missing:
        return {
            "ok": False,
            "client_id": client_id,
            "missing": missing,
            "message": (
                f"Missing Spotify credentials: {', '.join(missing)}.\n"
                "Set them as environment variables or as spotify_client_id / spotify_client_secret in config.json."
            ),
        }

    return {
        "ok": True,
        "client_id": client_id,
        "missing": [],
        "message": "Spotify credentials look OK.",
    }


class SpotifyClientCredentialsAuth:
    """Spotify OAuth Client Credentials flow (app-level token, no user login)."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self._http_client = http_client

    def fetch_access_token(self) -> TokenInfo:
        """Exchange the client id/secret for a new access token.

        Raises AuthError when the request fails, the body is not a JSON
        object, or it carries no access_token.
        """

        payload = self._post_form(SPOTIFY_TOKEN_URL, {"grant_type": "client_credentials"})
        token = TokenInfo.from_spotify_token_response(payload)
        if not token.access_token:
            raise AuthError("Spotify token response did not contain an access_token")

        logger.debug("Obtained Spotify access token (expires_in=%s)", token.expires_in)
        return token

    def _post_form(self, url: str, form: Dict[str, Any]) -> Dict[str, Any]:
        data = {k: str(v) for k, v in (form or {}).items() if v is not None}
        auth = httpx.BasicAuth(self.client_id, self.client_secret)
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        try:
            if self._http_client is not None:
                resp = self._http_client.post(url, data=data, headers=headers, auth=auth)
            else:
                with httpx.Client(timeout=self.timeout, follow_redirects=False) as client:
                    resp = client.post(url, data=data, headers=headers, auth=auth)
        except httpx.HTTPError as e:
            raise AuthError(f"Spotify token request failed: {e}") from e

        if resp.status_code >= 400:
            raise AuthError(f"Spotify token request failed (HTTP {resp.status_code}): {resp.text}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise AuthError(f"Spotify token response was not JSON: {resp.text}") from e

        if not isinstance(payload, dict):
            raise AuthError(f"Spotify token response was not an object: {payload}")

        return payload

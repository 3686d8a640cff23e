from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TokenInfo:
    """Access token returned by the Spotify accounts service."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: Optional[int] = None

    @staticmethod
    def from_spotify_token_response(payload: Dict[str, Any]) -> "TokenInfo":
        """Convert Spotify token response JSON into TokenInfo.

        Spotify returns:
        - access_token
        - token_type ("Bearer")
        - expires_in (seconds)

        expires_in is kept for display only; expiry is detected when the API
        answers 401.
        """

        expires_in = payload.get("expires_in")
        try:
            expires_in = int(expires_in) if expires_in is not None else None
        except (TypeError, ValueError):
            expires_in = None

        return TokenInfo(
            access_token=str(payload.get("access_token") or ""),
            token_type=str(payload.get("token_type") or "Bearer"),
            expires_in=expires_in,
        )

    def authorization_header(self) -> str:
        # Spotify sends "Bearer" but some proxies lowercase it.
        token_type = "Bearer" if self.token_type.lower() == "bearer" else self.token_type
        return f"{token_type} {self.access_token}"


class TokenManager:
    """Holds the current access token for the lifetime of the process."""

    def __init__(self):
        self._token: Optional[TokenInfo] = None

    def has_token(self) -> bool:
        return self._token is not None

    def get(self) -> Optional[TokenInfo]:
        return self._token

    def set(self, token: TokenInfo) -> None:
        self._token = token

    def invalidate(self) -> None:
        self._token = None

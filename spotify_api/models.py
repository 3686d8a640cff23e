"""Typed views over the Spotify Web API responses this app reads.

Missing or malformed fields never raise; each falls back to an empty value:

- PlaylistPage.total: 0 (also for non-numeric or non-finite values)
- PlaylistPage.track_urls: items without track.external_urls.spotify are skipped
- TrackInfo.name / TrackInfo.year: ""
- TrackInfo.artists: [] (artists without a string name are skipped)
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class PlaylistPage:
    """One page of GET /playlists/{id}/tracks."""

    total: int
    raw_count: int
    track_urls: List[str] = field(default_factory=list)

    @staticmethod
    def from_payload(payload: Dict[str, Any]) -> "PlaylistPage":
        payload = _as_dict(payload)

        total = payload.get("total")
        if isinstance(total, bool) or not isinstance(total, (int, float)) or not math.isfinite(total):
            total = 0

        items = payload.get("items")
        if not isinstance(items, list):
            items = []

        urls: List[str] = []
        for item in items:
            track = _as_dict(_as_dict(item).get("track"))
            url = _as_dict(track.get("external_urls")).get("spotify")
            if isinstance(url, str) and url:
                urls.append(url)
            else:
                # Local files and removed tracks come back without a public URL.
                logger.debug("Skipping playlist item without a Spotify URL: %r", item)

        return PlaylistPage(total=int(total), raw_count=len(items), track_urls=urls)


@dataclass(frozen=True)
class TrackInfo:
    """Display metadata for a single track."""

    name: str = ""
    artists: List[str] = field(default_factory=list)
    year: str = ""

    @staticmethod
    def from_payload(payload: Dict[str, Any]) -> "TrackInfo":
        payload = _as_dict(payload)

        name = payload.get("name")
        if not isinstance(name, str):
            name = ""

        artists: List[str] = []
        raw_artists = payload.get("artists")
        if isinstance(raw_artists, list):
            for artist in raw_artists:
                artist_name = _as_dict(artist).get("name")
                if isinstance(artist_name, str):
                    artists.append(artist_name)

        release_date = _as_dict(payload.get("album")).get("release_date")
        year = release_date[:4] if isinstance(release_date, str) else ""

        return TrackInfo(name=name, artists=artists, year=year)

    def display(self) -> str:
        return f"{self.name} by {', '.join(self.artists)} ({self.year})"

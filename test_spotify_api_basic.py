import base64
import json
import os
import sys
import unittest

import httpx

# Ensure local imports work when running this file directly.
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
if THIS_DIR not in sys.path:
    sys.path.insert(0, THIS_DIR)

from spotify_api.auth import SPOTIFY_TOKEN_URL, SpotifyClientCredentialsAuth, check_spotify_credentials
from spotify_api.client import SpotifyClient
from spotify_api.errors import AuthError, NetworkError, ValidationError
from spotify_api.models import PlaylistPage, TrackInfo
from spotify_api.token_manager import TokenInfo, TokenManager
from spotify_api.urls import extract_resource_id, is_spotify_web_url, to_spotify_uri


def _token_handler(body, status_code=200, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if isinstance(body, (dict, list)):
            return httpx.Response(status_code, json=body)
        return httpx.Response(status_code, text=body)

    return handler


class TestSpotifyUrls(unittest.TestCase):
    def test_to_spotify_uri_strips_query(self):
        self.assertEqual(
            to_spotify_uri("https://open.spotify.com/track/abc123?si=xyz"),
            "spotify:track:abc123:play",
        )

    def test_to_spotify_uri_keeps_resource_type(self):
        self.assertEqual(
            to_spotify_uri("https://open.spotify.com/episode/ep1"),
            "spotify:episode:ep1:play",
        )

    def test_to_spotify_uri_passes_through_other_refs(self):
        for ref in ("spotify:track:abc", "https://example.com/track/abc", "", "https://open.spotify.com/track"):
            self.assertEqual(to_spotify_uri(ref), ref)

    def test_extract_resource_id_strips_query(self):
        self.assertEqual(extract_resource_id("https://service/playlists/PID?foo=bar"), "PID")
        self.assertEqual(extract_resource_id("https://open.spotify.com/playlist/PID"), "PID")
        self.assertEqual(extract_resource_id("https://open.spotify.com/playlist/"), "")

    def test_is_spotify_web_url(self):
        self.assertTrue(is_spotify_web_url("https://open.spotify.com/playlist/x"))
        self.assertFalse(is_spotify_web_url("http://open.spotify.com/playlist/x"))
        self.assertFalse(is_spotify_web_url(None))


class TestSpotifyAuth(unittest.TestCase):
    def test_fetch_access_token_posts_client_credentials(self):
        calls = []
        http = httpx.Client(transport=httpx.MockTransport(
            _token_handler({"access_token": "tok", "token_type": "Bearer", "expires_in": 3600}, calls=calls)
        ))
        auth = SpotifyClientCredentialsAuth("id", "secret", http_client=http)

        token = auth.fetch_access_token()

        self.assertEqual(token.access_token, "tok")
        self.assertEqual(token.expires_in, 3600)
        self.assertEqual(len(calls), 1)
        request = calls[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(str(request.url), SPOTIFY_TOKEN_URL)
        self.assertEqual(request.content, b"grant_type=client_credentials")
        expected = base64.b64encode(b"id:secret").decode("ascii")
        self.assertEqual(request.headers["Authorization"], f"Basic {expected}")

    def test_missing_access_token_raises_auth_error(self):
        http = httpx.Client(transport=httpx.MockTransport(_token_handler({"token_type": "Bearer"})))
        auth = SpotifyClientCredentialsAuth("id", "secret", http_client=http)
        with self.assertRaises(AuthError):
            auth.fetch_access_token()

    def test_non_json_body_raises_auth_error(self):
        http = httpx.Client(transport=httpx.MockTransport(_token_handler("<html>oops</html>")))
        auth = SpotifyClientCredentialsAuth("id", "secret", http_client=http)
        with self.assertRaises(AuthError):
            auth.fetch_access_token()

    def test_invalid_utf8_body_raises_auth_error(self):
        def handler(request):
            return httpx.Response(200, content=b"{\xff\xff}")

        http = httpx.Client(transport=httpx.MockTransport(handler))
        client = SpotifyClient("id", "secret", http_client=http)
        with self.assertRaises(AuthError):
            client.fetch_access_token()
        self.assertFalse(client.token_manager.has_token())

    def test_http_error_status_raises_auth_error(self):
        http = httpx.Client(transport=httpx.MockTransport(_token_handler({"error": "invalid_client"}, status_code=400)))
        auth = SpotifyClientCredentialsAuth("id", "secret", http_client=http)
        with self.assertRaises(AuthError):
            auth.fetch_access_token()

    def test_transport_failure_raises_auth_error(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        http = httpx.Client(transport=httpx.MockTransport(handler))
        auth = SpotifyClientCredentialsAuth("id", "secret", http_client=http)
        with self.assertRaises(AuthError):
            auth.fetch_access_token()

    def test_client_keeps_existing_token_when_refresh_fails(self):
        http = httpx.Client(transport=httpx.MockTransport(_token_handler({"nope": True})))
        manager = TokenManager()
        manager.set(TokenInfo(access_token="old"))
        client = SpotifyClient("id", "secret", http_client=http, token_manager=manager)

        with self.assertRaises(AuthError):
            client.fetch_access_token()
        self.assertEqual(manager.get().access_token, "old")

    def test_client_without_token_stays_empty_when_fetch_fails(self):
        http = httpx.Client(transport=httpx.MockTransport(_token_handler({})))
        client = SpotifyClient("id", "secret", http_client=http)

        with self.assertRaises(AuthError):
            client.fetch_access_token()
        self.assertFalse(client.token_manager.has_token())

    def test_check_spotify_credentials(self):
        status = check_spotify_credentials({"spotify_client_id": "id", "spotify_client_secret": ""})
        self.assertFalse(status["ok"])
        self.assertEqual(status["missing"], ["SPOTIFY_CLIENT_SECRET"])

        status = check_spotify_credentials({"spotify_client_id": "id", "spotify_client_secret": "s"})
        self.assertTrue(status["ok"])


class TestSpotifyTokenManager(unittest.TestCase):
    def test_set_get_invalidate(self):
        tm = TokenManager()
        self.assertIsNone(tm.get())

        tm.set(TokenInfo(access_token="at"))
        self.assertTrue(tm.has_token())
        self.assertEqual(tm.get().authorization_header(), "Bearer at")

        tm.invalidate()
        self.assertFalse(tm.has_token())

    def test_token_from_response_defaults(self):
        token = TokenInfo.from_spotify_token_response({"access_token": "x", "token_type": "bearer", "expires_in": "oops"})
        self.assertEqual(token.access_token, "x")
        self.assertIsNone(token.expires_in)
        self.assertEqual(token.authorization_header(), "Bearer x")


class TestSpotifyModels(unittest.TestCase):
    def test_track_info_from_full_payload(self):
        sample = {
            "id": "123",
            "name": "Song",
            "artists": [{"name": "A"}, {"name": "B"}],
            "album": {"name": "Album", "release_date": "2020-01-01"},
            "external_urls": {"spotify": "https://open.spotify.com/track/123"},
        }

        info = TrackInfo.from_payload(sample)
        self.assertEqual(info.name, "Song")
        self.assertEqual(info.artists, ["A", "B"])
        self.assertEqual(info.year, "2020")
        self.assertEqual(info.display(), "Song by A, B (2020)")

    def test_track_info_degrades_gracefully(self):
        info = TrackInfo.from_payload({"artists": [{"id": "no-name"}, "junk", {"name": "C"}], "album": None})
        self.assertEqual(info.name, "")
        self.assertEqual(info.artists, ["C"])
        self.assertEqual(info.year, "")

        self.assertEqual(TrackInfo.from_payload({"album": {"release_date": "1999"}}).year, "1999")
        self.assertEqual(TrackInfo.from_payload({}), TrackInfo())

    def test_playlist_page_skips_items_without_url(self):
        page = PlaylistPage.from_payload(
            {
                "total": 4,
                "items": [
                    {"track": {"external_urls": {"spotify": "https://open.spotify.com/track/a"}}},
                    {"track": None},
                    {"track": {"external_urls": {}}},
                    {"track": {"external_urls": {"spotify": "https://open.spotify.com/track/b"}}},
                ],
            }
        )
        self.assertEqual(page.total, 4)
        self.assertEqual(page.raw_count, 4)
        self.assertEqual(page.track_urls, ["https://open.spotify.com/track/a", "https://open.spotify.com/track/b"])

    def test_playlist_page_non_finite_total(self):
        for total in (float("nan"), float("inf"), "250", None):
            page = PlaylistPage.from_payload({"total": total, "items": []})
            self.assertEqual(page.total, 0)

        self.assertEqual(PlaylistPage.from_payload(json.loads('{"total": NaN, "items": []}')).total, 0)
        self.assertEqual(PlaylistPage.from_payload({"total": 250.0}).total, 250)

    def test_playlist_page_missing_fields(self):
        page = PlaylistPage.from_payload({"items": "bogus"})
        self.assertEqual(page.total, 0)
        self.assertEqual(page.raw_count, 0)
        self.assertEqual(page.track_urls, [])


class TestSpotifyTrackInfo(unittest.TestCase):
    def _client(self, handler):
        return SpotifyClient("id", "secret", http_client=httpx.Client(transport=httpx.MockTransport(handler)))

    def test_get_track_info_fetches_token_lazily_and_decodes(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.host == "accounts.spotify.com":
                return httpx.Response(200, json={"access_token": "tok"})
            return httpx.Response(
                200,
                json={"name": "Song", "artists": [{"name": "A"}], "album": {"release_date": "2011-05-02"}},
            )

        client = self._client(handler)
        info = client.get_track_info("https://open.spotify.com/track/abc123?si=xyz")

        self.assertEqual(info, TrackInfo(name="Song", artists=["A"], year="2011"))
        self.assertEqual(len(requests), 2)
        self.assertEqual(requests[1].url.path, "/v1/tracks/abc123")
        self.assertEqual(requests[1].headers["Authorization"], "Bearer tok")

        client.get_track_info("https://open.spotify.com/track/def")
        # Token reused.
        self.assertEqual(len(requests), 3)

    def test_get_track_info_non_json_raises_network_error(self):
        def handler(request):
            if request.url.host == "accounts.spotify.com":
                return httpx.Response(200, json={"access_token": "tok"})
            return httpx.Response(200, text="not json")

        with self.assertRaises(NetworkError):
            self._client(handler).get_track_info("https://open.spotify.com/track/abc")

    def test_get_track_info_invalid_utf8_raises_network_error(self):
        def handler(request):
            if request.url.host == "accounts.spotify.com":
                return httpx.Response(200, json={"access_token": "tok"})
            return httpx.Response(200, content=b"\xff\xfe\xfa garbage")

        with self.assertRaises(NetworkError):
            self._client(handler).get_track_info("https://open.spotify.com/track/abc")

    def test_get_track_info_http_error_carries_status(self):
        def handler(request):
            if request.url.host == "accounts.spotify.com":
                return httpx.Response(200, json={"access_token": "tok"})
            return httpx.Response(404, json={"error": {"status": 404, "message": "Not found"}})

        with self.assertRaises(NetworkError) as ctx:
            self._client(handler).get_track_info("https://open.spotify.com/track/abc")
        self.assertEqual(ctx.exception.status_code, 404)

    def test_get_track_info_empty_id_raises_validation_error(self):
        def handler(request):
            raise AssertionError("no request expected")

        with self.assertRaises(ValidationError):
            self._client(handler).get_track_info("https://open.spotify.com/track/")

    def test_expired_token_is_refreshed_once(self):
        tokens = iter(["stale", "fresh"])
        seen_auth = []

        def handler(request):
            if request.url.host == "accounts.spotify.com":
                return httpx.Response(200, json={"access_token": next(tokens)})
            seen_auth.append(request.headers["Authorization"])
            if request.headers["Authorization"] == "Bearer stale":
                return httpx.Response(401, json={"error": {"status": 401, "message": "The access token expired"}})
            return httpx.Response(200, json={"name": "Song"})

        client = self._client(handler)
        info = client.get_track_info("https://open.spotify.com/track/abc")

        self.assertEqual(info.name, "Song")
        self.assertEqual(seen_auth, ["Bearer stale", "Bearer fresh"])
        self.assertEqual(client.token_manager.get().access_token, "fresh")

    def test_repeated_401_raises_auth_error(self):
        api_calls = []

        def handler(request):
            if request.url.host == "accounts.spotify.com":
                return httpx.Response(200, json={"access_token": "tok"})
            api_calls.append(request)
            return httpx.Response(401, text=json.dumps({"error": "nope"}))

        with self.assertRaises(AuthError):
            self._client(handler).get_track_info("https://open.spotify.com/track/abc")
        self.assertEqual(len(api_calls), 2)


if __name__ == "__main__":
    unittest.main(verbosity=2)

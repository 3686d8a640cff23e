import json
import sys

from config import load_config, validate_config
from menus.shuffle_menu import prompt_playlist_url, shuffle_menu
from player.spotify_desktop import is_supported_platform
from shuffle.session import ShuffleSession
from spotify_api.auth import check_spotify_credentials
from spotify_api.client import SpotifyClient
from spotify_api.errors import SpotifyError
from utils.logger import setup_logging, log_error, log_success


def main() -> int:
    setup_logging()

    if not is_supported_platform():
        log_error("This program only works on macOS")
        return 1

    try:
        config = load_config()
    except json.JSONDecodeError as e:
        log_error(f"Config file contains invalid JSON: {e}")
        return 1
    except Exception as e:
        log_error(f"Error loading config: {e}")
        return 1

    is_valid, errors = validate_config(config)
    if not is_valid:
        for error in errors:
            log_error(error)
        return 1

    setup_logging(config["log_level"], config.get("log_file") or None)

    creds = check_spotify_credentials(config)
    if not creds["ok"]:
        log_error(creds["message"])
        return 1

    playlist_url = prompt_playlist_url()
    if not playlist_url:
        log_error("No playlist URL provided")
        return 1

    with SpotifyClient(
        config["spotify_client_id"],
        config["spotify_client_secret"],
        timeout=float(config["http_timeout"]),
    ) as client:
        try:
            tracks = client.get_playlist_tracks(playlist_url)
        except SpotifyError as e:
            log_error(f"Error getting playlist tracks: {e}")
            return 1

        if not tracks:
            log_error("No tracks found in the playlist")
            return 1

        log_success(f"This playlist has {len(tracks)} songs")
        shuffle_menu(client, ShuffleSession(tracks))

    return 0


if __name__ == "__main__":
    sys.exit(main())

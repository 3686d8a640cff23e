from typing import Callable, Optional

import questionary

from player.spotify_desktop import PlayerError, open_spotify_link
from shuffle.session import EmptyError, ShuffleSession
from spotify_api.client import SpotifyClient
from spotify_api.errors import SpotifyError
from utils.logger import log_error, log_info, log_warning

PLAY_CHOICE = "Play a random song"
SHOW_INFO_CHOICE = "Show song info"
EXIT_CHOICE = "Exit"


def prompt_playlist_url() -> Optional[str]:
    """Ask for the playlist URL. Returns None when nothing was entered."""
    answer = questionary.text("Enter Spotify playlist URL:").ask()
    answer = (answer or "").strip()
    return answer or None


def shuffle_menu(
    client: SpotifyClient,
    session: ShuffleSession,
    *,
    play: Callable[[str], object] = open_spotify_link,
) -> int:
    """
    Play random tracks from the session until the user exits or none remain.
    Returns the number of tracks handed to the player.
    """
    played = 0

    while True:
        choice = questionary.select(
            "🎲 Shuffle — What would you like to do?",
            choices=[PLAY_CHOICE, EXIT_CHOICE],
        ).ask()

        if choice != PLAY_CHOICE:
            log_info("Goodbye!")
            return played

        try:
            track_url = session.draw_next()
        except EmptyError:
            log_info("No more songs to play!")
            return played

        log_info(f"---- Song {session.played_count} of {session.total} ----")

        try:
            track_info = client.get_track_info(track_url)
        except SpotifyError as e:
            log_error(f"Failed to get track info: {e}")
            continue

        uri = client.to_spotify_uri(track_url)
        try:
            play(uri)
        except PlayerError as e:
            log_error(f"Failed to open Spotify: {e}")
            continue
        played += 1

        choice = questionary.select(
            "Song is playing. Reveal it?",
            choices=[SHOW_INFO_CHOICE, EXIT_CHOICE],
        ).ask()

        if choice != SHOW_INFO_CHOICE:
            log_info("Goodbye!")
            return played

        log_info(f"\nNow playing: {track_info.display()}\n")

        if not session.has_next():
            log_warning("That was the last song in the playlist.")

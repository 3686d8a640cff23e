import secrets
from typing import Callable, FrozenSet, Iterable, List, Set, Tuple


class EmptyError(Exception):
    """Raised when every track in the session has already been played."""


class ShuffleSession:
    """Draws tracks at random without ever repeating one.

    Draws come from a cryptographically strong source (secrets.randbelow).
    Unplayed positions live in a pool; a draw picks a random slot and
    swap-removes it, so every draw is O(1) regardless of how many tracks
    were already played. A track listed twice in the playlist is only
    played once.
    """

    def __init__(self, tracks: Iterable[str], *, randbelow: Callable[[int], int] = secrets.randbelow):
        self._tracks: Tuple[str, ...] = tuple(tracks)
        self._randbelow = randbelow
        self._pool: List[int] = list(range(len(self._tracks)))
        self._played: Set[str] = set()
        self._remaining = len(set(self._tracks))

    @property
    def tracks(self) -> Tuple[str, ...]:
        return self._tracks

    @property
    def total(self) -> int:
        return len(self._tracks)

    @property
    def remaining(self) -> int:
        """Number of distinct tracks not played yet."""
        return self._remaining

    @property
    def played(self) -> FrozenSet[str]:
        return frozenset(self._played)

    @property
    def played_count(self) -> int:
        return len(self._played)

    def has_next(self) -> bool:
        return self._remaining > 0

    def draw_next(self) -> str:
        if self._remaining == 0:
            raise EmptyError("No more songs to play")

        while self._pool:
            slot = self._randbelow(len(self._pool))
            index = self._pool[slot]
            self._pool[slot] = self._pool[-1]
            self._pool.pop()

            track = self._tracks[index]
            if track in self._played:
                continue

            self._played.add(track)
            self._remaining -= 1
            return track

        # remaining > 0 guarantees an unplayed track is still pooled.
        raise EmptyError("No more songs to play")

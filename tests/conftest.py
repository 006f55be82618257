# tests/conftest.py
"""In-memory stand-in for an MPD server: a song database plus a play queue."""

from typing import Dict, List, Optional

import pytest

from mpdshuffle.shuffle.models import Song


class FakeMPD:
    def __init__(self):
        self.db: List[Song] = []
        self.queue: List[str] = []
        self.state = "stop"
        self.current: Optional[int] = None
        self.played: List[int] = []
        # each idle() call pops the next batch of events; running out acts like Ctrl-C
        self.events: List[List[str]] = []
        self.on_idle = None

    # library
    def songs(self):
        for song in self.db:
            yield song

    def lookup(self, uri: str) -> Optional[Song]:
        for song in self.db:
            if song.uri == uri:
                return song
        return None

    # queue
    def status(self) -> Dict[str, str]:
        st = {"playlistlength": str(len(self.queue)), "state": self.state}
        if self.current is not None:
            st["song"] = str(self.current)
        return st

    def add(self, uri: str) -> None:
        self.queue.append(uri)

    def play(self, position: Optional[int] = None) -> None:
        self.current = 0 if position is None else position
        self.state = "play"
        self.played.append(self.current)

    def idle(self, *subsystems: str) -> List[str]:
        if self.on_idle is not None:
            self.on_idle()
        if not self.events:
            raise KeyboardInterrupt
        return self.events.pop(0)

    # connection
    def connect(self):
        return self

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        pass

    # helpers for tests
    def finish_queue(self):
        """Simulate MPD playing past the last song."""
        self.current = None
        self.state = "stop"


@pytest.fixture
def fake_mpd():
    return FakeMPD()


# mpdshuffle/server/client.py
import logging
from typing import Iterator, List, Optional

import mpd

from mpdshuffle.core.settings import Settings
from mpdshuffle.shuffle.models import Song

logger = logging.getLogger(__name__)


class MPDError(RuntimeError):
    """Connection, authentication or protocol failure talking to MPD."""


class MPDConnection:
    """
    Wrapper around python-mpd2's MPDClient.
    Serves as the library collaborator for the loaders (songs / lookup)
    and gives the player the few queue commands it needs.
    """

    def __init__(self, settings: Settings, client: Optional[mpd.MPDClient] = None):
        self.settings = settings
        self._client = client if client is not None else mpd.MPDClient()
        self._connected = False

    # connection --------------------------------------------------------
    def connect(self) -> "MPDConnection":
        s = self.settings
        self._client.timeout = s.timeout
        # idle blocks until something happens, don't time it out
        self._client.idletimeout = None
        try:
            self._client.connect(s.host, s.port)
        except (OSError, mpd.MPDError) as exc:
            raise MPDError(f"could not connect to MPD at {s.host}:{s.port}: {exc}") from exc
        self._connected = True

        if s.password:
            try:
                self._client.password(s.password)
            except mpd.CommandError as exc:
                self.close()
                raise MPDError(f"MPD rejected the password: {exc}") from exc
            except (OSError, mpd.MPDError) as exc:
                self.close()
                raise MPDError(f"connection to MPD lost while authenticating: {exc}") from exc
        logger.info("connected to MPD %s at %s:%s", self._client.mpd_version, s.host, s.port)
        return self

    def close(self) -> None:
        if not self._connected:
            return
        self._connected = False
        try:
            self._client.close()
        except (OSError, mpd.MPDError):
            pass  # already gone, nothing to tell the server
        self._client.disconnect()

    def __enter__(self):
        return self.connect()

    def __exit__(self, *exc):
        self.close()

    def _call(self, command: str, *args):
        try:
            return getattr(self._client, command)(*args)
        except (OSError, mpd.MPDError) as exc:
            raise MPDError(f"MPD command {command!r} failed: {exc}") from exc

    # library -----------------------------------------------------------
    def songs(self) -> Iterator[Song]:
        """
        Every song in the database. Walks the top-level directories one at a
        time so a big library isn't pulled in a single response.
        """
        for entry in self._call("lsinfo"):
            if "file" in entry:
                yield Song.from_mpd(entry)
            elif "directory" in entry:
                for sub in self._call("listallinfo", entry["directory"]):
                    if "file" in sub:
                        yield Song.from_mpd(sub)

    def lookup(self, uri: str) -> Optional[Song]:
        found = self._call("find", "file", uri)
        if not found:
            return None
        return Song.from_mpd(found[0])

    # queue -------------------------------------------------------------
    def status(self) -> dict:
        return self._call("status")

    def add(self, uri: str) -> None:
        self._call("add", uri)

    def play(self, position: Optional[int] = None) -> None:
        if position is None:
            self._call("play")
        else:
            self._call("play", position)

    def idle(self, *subsystems: str) -> List[str]:
        return self._call("idle", *subsystems)

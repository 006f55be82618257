# mpdshuffle/player/player.py
"""
Playback loop that keeps MPD's queue fed from a ShuffleChain.

Design goals:
- Never let MPD run out of songs: whenever the queue ends (or the number of
  songs after the current one drops below queue_buffer) pick more.
- React to MPD instead of polling: block in `idle` on the database,
  playlist and player subsystems.
- On a database update, rebuild the chain through the `reload` callback.
- `--only N` is just enqueue(N) without the loop.
"""

from __future__ import annotations
import logging
from typing import Callable, List, Optional, Protocol

from mpdshuffle.shuffle.chain import ShuffleChain

logger = logging.getLogger(__name__)


class Queue(Protocol):
    """The slice of the MPD connection the player talks to."""

    def status(self) -> dict: ...

    def add(self, uri: str) -> None: ...

    def play(self, position: Optional[int] = None) -> None: ...

    def idle(self, *subsystems: str) -> List[str]: ...


class Player:
    """
    Usage:
      p = Player(conn, chain, queue_buffer=2)
      p.run()  # blocks until stop() or a connection error
    """

    IDLE_SUBSYSTEMS = ("database", "playlist", "player")

    def __init__(
        self,
        queue: Queue,
        chain: ShuffleChain,
        *,
        queue_buffer: int = 0,
        play_on_startup: bool = True,
        reload: Optional[Callable[[], None]] = None,
    ):
        self.queue = queue
        self.chain = chain
        self.queue_buffer = max(0, int(queue_buffer))
        self.play_on_startup = play_on_startup
        self.reload = reload
        self._running = False

    # -------------------------
    # public control API
    # -------------------------
    def enqueue(self, count: int) -> List[str]:
        """Append `count` picks to the MPD queue and return them."""
        added = []
        for _ in range(count):
            uri = self.chain.pick()
            self.queue.add(uri)
            logger.info("queued %s", uri)
            added.append(uri)
        return added

    def try_enqueue(self, start: bool = False) -> int:
        """
        Top up the queue if needed. Returns how many songs were added.
        `start` marks the first call, where play_on_startup decides whether
        a stopped MPD gets started.
        """
        status = self.queue.status()
        length = int(status.get("playlistlength", 0))

        # no "song" key: empty queue, or playback ran past the last song
        ended = "song" not in status
        if ended:
            need = self.queue_buffer + 1
        else:
            after_current = length - int(status["song"]) - 1
            need = self.queue_buffer - after_current
        if need <= 0:
            return 0

        if len(self.chain) == 0:
            logger.warning("no songs to pick from, leaving the queue alone")
            return 0

        self.enqueue(need)
        if ended and (self.play_on_startup or not start):
            self.queue.play(length)
        return need

    def run(self):
        """Feed the queue until stop() is called."""
        self._running = True
        self.try_enqueue(start=True)

        while self._running:
            events = self.queue.idle(*self.IDLE_SUBSYSTEMS)
            logger.debug("idle events: %s", events)

            if "database" in events and self.reload is not None:
                logger.info("MPD database changed, reloading songs")
                self.reload()
                logger.info("reloaded %d songs", len(self.chain))

            self.try_enqueue()

    def stop(self):
        self._running = False

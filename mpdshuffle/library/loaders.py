# mpdshuffle/library/loaders.py
"""
Loaders fill a ShuffleChain from one source.

- FileLoader:      URIs from a stream, trusted, no filtering
- MPDLoader:       every song in the MPD library that passes the rules
- CheckFileLoader: URIs from a stream, kept only if MPD still has them
                   and they pass the rules

Loaders never hold on to the chain and never remove from it. If a source
fails half way, whatever was added so far stays in the chain and
LoaderError is raised.
"""

from __future__ import annotations
import logging
from typing import IO, Callable, Iterable, Iterator, List, Optional, Protocol, Sequence

from mpdshuffle.shuffle.chain import ShuffleChain
from mpdshuffle.shuffle.models import Song
from mpdshuffle.shuffle.rules import Rule, ruleset_accepts

logger = logging.getLogger(__name__)


class LoaderError(RuntimeError):
    """Reading the source failed (I/O or library query), as opposed to an empty source."""


class Library(Protocol):
    """What loaders need from the music library."""

    def songs(self) -> Iterator[Song]:
        """Lazily yield every song in the library."""
        ...

    def lookup(self, uri: str) -> Optional[Song]:
        """Return the song for `uri`, or None if the library doesn't have it."""
        ...


class Loader(Protocol):
    def load(self, chain: ShuffleChain) -> None:
        ...


def read_uris(stream: IO) -> Iterator[str]:
    """
    Yield one URI per non-empty line of `stream` (bytes or text).
    Read/decode failures are re-raised as LoaderError.
    """
    lines = iter(stream)
    lineno = 0
    while True:
        try:
            line = next(lines)
        except StopIteration:
            return
        except (OSError, ValueError) as exc:
            raise LoaderError(f"failed reading input after line {lineno}: {exc}") from exc
        lineno += 1

        if isinstance(line, bytes):
            try:
                line = line.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise LoaderError(f"line {lineno} is not valid UTF-8") from exc

        uri = line.rstrip("\r\n")
        if uri:
            yield uri


class FileLoader:
    def __init__(self, stream: IO):
        self.stream = stream

    def load(self, chain: ShuffleChain) -> None:
        added = 0
        for uri in read_uris(self.stream):
            chain.add(uri)
            added += 1
        logger.info("file loader: added %d songs", added)


class MPDLoader:
    def __init__(self, library: Library, rules: Sequence[Rule] = ()):
        self.library = library
        self.rules: List[Rule] = list(rules)

    def load(self, chain: ShuffleChain) -> None:
        added = skipped = 0
        for song in _guard(self.library.songs, "enumerating library"):
            if ruleset_accepts(self.rules, song):
                chain.add(song.uri)
                added += 1
            else:
                skipped += 1
        logger.info("library loader: added %d songs, %d excluded by rules", added, skipped)


class CheckFileLoader:
    """
    Like FileLoader, but every URI is looked up in the library first.
    Costs one query per line; meant for lists that may be stale.
    """

    def __init__(self, library: Library, rules: Sequence[Rule], stream: IO):
        self.library = library
        self.rules: List[Rule] = list(rules)
        self.stream = stream

    def load(self, chain: ShuffleChain) -> None:
        added = missing = excluded = 0
        for uri in read_uris(self.stream):
            try:
                song = self.library.lookup(uri)
            except LoaderError:
                raise
            except Exception as exc:
                raise LoaderError(f"library lookup failed for {uri!r}: {exc}") from exc

            if song is None:
                logger.debug("skipping %s: not in library", uri)
                missing += 1
                continue
            if not ruleset_accepts(self.rules, song):
                logger.debug("skipping %s: excluded by rules", uri)
                excluded += 1
                continue
            chain.add(song.uri)
            added += 1
        logger.info(
            "checked file loader: added %d songs, %d not in library, %d excluded by rules",
            added, missing, excluded,
        )


# -------------------------
# small helpers
# -------------------------
def _guard(songs: Callable[[], Iterable[Song]], what: str) -> Iterator[Song]:
    """Call the collaborator and re-raise any failure, up front or mid-iteration, as LoaderError."""
    try:
        it = iter(songs())
    except Exception as exc:
        raise LoaderError(f"{what} failed: {exc}") from exc
    while True:
        try:
            song = next(it)
        except StopIteration:
            return
        except LoaderError:
            raise
        except Exception as exc:
            raise LoaderError(f"{what} failed: {exc}") from exc
        yield song

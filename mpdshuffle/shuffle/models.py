# mpdshuffle/shuffle/models.py
"""
Simple models used by the rules, loaders and the MPD wrapper.

python-mpd2 hands back songs as plain dicts, e.g.
  {"file": "a/b.flac", "artist": "X", "title": "Y", "duration": "181.3", ...}
Multi-valued tags come back as lists. This module provides a small Song
dataclass that keeps what the rules need:
- uri, and a tags mapping from the Tag enum to a single string value
It intentionally keeps a light footprint, no ORM or Pydantic model needed.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from mpdshuffle.core.settings import ConfigError


class Tag(str, Enum):
    """MPD tag kinds a rule can match on."""
    ARTIST = "artist"
    ALBUM = "album"
    ALBUMARTIST = "albumartist"
    TITLE = "title"
    TRACK = "track"
    NAME = "name"
    GENRE = "genre"
    DATE = "date"
    COMPOSER = "composer"
    PERFORMER = "performer"
    COMMENT = "comment"
    DISC = "disc"

    @classmethod
    def parse(cls, name: Union[str, "Tag"]) -> "Tag":
        if isinstance(name, Tag):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ConfigError(f"unknown tag {name!r} (valid tags: {valid})") from None


@dataclass
class Song:
    """
    Minimal representation of a library song.
    A tag kind the song doesn't carry is simply missing from `tags`.
    """
    uri: str
    tags: Dict[Tag, str] = field(default_factory=dict)

    def tag(self, kind: Tag) -> Optional[str]:
        return self.tags.get(kind)

    # factory methods -----------------------------------------------------
    @classmethod
    def from_mpd(cls, entry: Mapping[str, Any]) -> "Song":
        """
        Build a Song from a listallinfo/find response dict.
        Keys are matched case-insensitively; multi-valued tags keep the first value.
        """
        uri = entry.get("file")
        if not uri:
            raise ValueError("MPD entry has no 'file' key")

        tags: Dict[Tag, str] = {}
        for key, value in entry.items():
            try:
                kind = Tag(key.lower())
            except ValueError:
                continue  # duration, last-modified, format...
            if isinstance(value, (list, tuple)):
                if not value:
                    continue
                value = value[0]
            tags[kind] = str(value)
        return cls(uri=uri, tags=tags)

    @classmethod
    def with_tags(cls, uri: str, tags: Optional[Mapping[Union[str, Tag], str]] = None) -> "Song":
        """Convenience constructor taking tag names or Tag members as keys."""
        return cls(uri=uri, tags={Tag.parse(k): v for k, v in (tags or {}).items()})

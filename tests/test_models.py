# tests/test_models.py
import pytest

from mpdshuffle.core.settings import ConfigError
from mpdshuffle.shuffle.models import Song, Tag

SAMPLE_ENTRY = {
    "file": "Low/2001 - Things We Lost in the Fire/01 Sunflower.flac",
    "last-modified": "2021-03-01T10:00:00Z",
    "duration": "275.120",
    "Artist": "Low",
    "album": "Things We Lost in the Fire",
    "title": "Sunflower",
    "genre": ["Slowcore", "Indie Rock"],
    "track": "1",
}


def test_from_mpd():
    s = Song.from_mpd(SAMPLE_ENTRY)
    assert s.uri == SAMPLE_ENTRY["file"]
    assert s.tag(Tag.ARTIST) == "Low"
    assert s.tag(Tag.TITLE) == "Sunflower"
    assert s.tag(Tag.TRACK) == "1"
    # multi-valued tags keep their first value
    assert s.tag(Tag.GENRE) == "Slowcore"
    assert s.tag(Tag.COMPOSER) is None
    # non-tag keys are dropped
    assert set(s.tags) == {Tag.ARTIST, Tag.ALBUM, Tag.TITLE, Tag.GENRE, Tag.TRACK}


def test_from_mpd_requires_file():
    with pytest.raises(ValueError):
        Song.from_mpd({"directory": "Low"})


def test_tag_parse():
    assert Tag.parse("AlbumArtist") == Tag.ALBUMARTIST
    assert Tag.parse(Tag.DATE) is Tag.DATE
    with pytest.raises(ConfigError):
        Tag.parse("bpm")


def test_with_tags():
    s = Song.with_tags("x.ogg", {"artist": "A", Tag.ALBUM: "B"})
    assert s.tags == {Tag.ARTIST: "A", Tag.ALBUM: "B"}

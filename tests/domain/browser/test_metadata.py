"""Tests for track metadata extraction and display helpers."""

import pytest

from folder_player.domain.browser.exceptions import MetadataReadError
from folder_player.domain.browser.metadata import (
    _parse_int,
    build_track,
    extract_metadata_from_filename,
    extract_track_metadata,
    get_tag_value,
    read_track,
)
from folder_player.domain.browser.models import (
    TrackFile,
    TrackMetadata,
    format_duration,
    get_display_name,
)


class TestFilenameFallback:
    def test_artist_title_split(self):
        meta = extract_metadata_from_filename("/music/Daft Punk - Aerodynamic.mp3")
        assert meta.artist == "Daft Punk"
        assert meta.title == "Aerodynamic"
        assert meta.format == ".mp3"

    def test_plain_name(self):
        meta = extract_metadata_from_filename("/music/Intro.FLAC")
        assert meta.artist is None
        assert meta.title == "Intro"
        assert meta.format == ".flac"

    def test_unparseable_file_falls_back(self, tmp_path):
        path = tmp_path / "Artist - Song.mp3"
        path.write_bytes(b"definitely not audio")

        meta = extract_track_metadata(str(path))
        assert meta.title == "Song"
        assert meta.artist == "Artist"


class TestTagHelpers:
    def test_get_tag_value_tries_names_in_order(self):
        tags = {"title": ["Vorbis Title"], "TIT2": []}
        assert get_tag_value(tags, ["TIT2", "title"]) == "Vorbis Title"

    def test_get_tag_value_mp4_track_tuple(self):
        assert get_tag_value({"trkn": [(3, 12)]}, ["trkn"]) == "3"

    def test_get_tag_value_missing(self):
        assert get_tag_value({}, ["TIT2"]) is None

    @pytest.mark.parametrize(
        "value,expected",
        [("2021-05-01", 2021), ("3/12", 3), ("7", 7), ("", None), (None, None), ("x", None)],
    )
    def test_parse_int(self, value, expected):
        assert _parse_int(value) == expected


class TestBuildTrack:
    def test_build_track_loads_metadata(self, tmp_path):
        path = tmp_path / "Song.mp3"
        path.write_bytes(b"abc")

        track = build_track(str(path))
        assert track.is_metadata_loaded
        assert track.size == 3
        assert track.name == "Song.mp3"
        assert track.metadata.title == "Song"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(MetadataReadError) as exc_info:
            build_track(str(tmp_path / "gone.mp3"))
        assert exc_info.value.path.endswith("gone.mp3")

    def test_directory_raises(self, tmp_path):
        with pytest.raises(MetadataReadError):
            build_track(str(tmp_path))

    @pytest.mark.anyio
    async def test_read_track(self, tmp_path):
        path = tmp_path / "A - B.mp3"
        path.write_bytes(b"")

        track = await read_track(str(path))
        assert track.path == str(path)
        assert track.metadata.artist == "A"

    @pytest.mark.anyio
    async def test_read_track_failure(self, tmp_path):
        with pytest.raises(MetadataReadError):
            await read_track(str(tmp_path / "gone.mp3"))


class TestDisplay:
    def test_display_name_prefers_tags(self):
        track = TrackFile(
            path="/m/01.mp3", name="01.mp3", metadata=TrackMetadata(title="T", artist="A")
        )
        assert get_display_name(track) == "A - T"
        assert get_display_name(track, show_file_name=True) == "01.mp3"

    def test_display_name_without_metadata(self):
        assert get_display_name(TrackFile(path="/m/01.mp3", name="01.mp3")) == "01.mp3"

    def test_format_duration(self):
        assert format_duration(125.7) == "02:05"
        assert format_duration(None) == "--:--"

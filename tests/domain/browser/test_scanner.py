"""Tests for directory listing."""

from pathlib import Path

import pytest

from folder_player.domain.browser.exceptions import DirectoryUnavailableError
from folder_player.domain.browser.scanner import is_supported_format, list_directory

FORMATS = [".mp3", ".flac"]


@pytest.fixture
def music_dir(tmp_path):
    (tmp_path / "b-side").mkdir()
    (tmp_path / "A-side").mkdir()
    (tmp_path / ".hidden").mkdir()
    (tmp_path / "track2.MP3").write_bytes(b"x" * 10)
    (tmp_path / "Track1.flac").write_bytes(b"")
    (tmp_path / ".secret.mp3").write_bytes(b"")
    (tmp_path / "cover.jpg").write_bytes(b"")
    return tmp_path


def test_lists_directories_and_supported_files(music_dir):
    listing = list_directory(str(music_dir), FORMATS)

    assert [Path(d).name for d in listing.directories] == ["A-side", "b-side"]
    assert [f.name for f in listing.files] == ["Track1.flac", "track2.MP3"]
    assert listing.path == str(music_dir)


def test_descriptors_start_unloaded(music_dir):
    listing = list_directory(str(music_dir), FORMATS)
    track = listing.files[1]

    assert track.size == 10
    assert track.modified is not None
    assert track.metadata is None
    assert not track.is_metadata_loaded
    assert not track.is_played_in_shuffle


def test_missing_directory_raises(tmp_path):
    with pytest.raises(DirectoryUnavailableError) as exc_info:
        list_directory(str(tmp_path / "nope"), FORMATS)
    assert exc_info.value.directory.endswith("nope")


def test_file_instead_of_directory_raises(music_dir):
    with pytest.raises(DirectoryUnavailableError):
        list_directory(str(music_dir / "cover.jpg"), FORMATS)


def test_is_supported_format_ignores_case():
    assert is_supported_format(Path("a.FLAC"), FORMATS)
    assert not is_supported_format(Path("a.ogg"), FORMATS)

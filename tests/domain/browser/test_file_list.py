"""Tests for the browsable file list."""

import pytest

from conftest import TRACK_PATHS
from folder_player.domain.browser.exceptions import DirectoryUnavailableError
from folder_player.domain.browser.file_list import FileBrowser
from folder_player.domain.browser.models import TrackMetadata, track_from_path

A, B, C = TRACK_PATHS


class TestLookup:
    def test_find_and_index(self, browser):
        assert browser.find(B).path == B
        assert browser.index_of(C) == 2
        assert browser.find("/nope.mp3") is None
        assert browser.index_of("/nope.mp3") is None
        assert len(browser) == 3

    def test_files_keep_order(self, browser):
        assert [f.path for f in browser.files] == TRACK_PATHS

    def test_duplicate_paths_dropped(self, reader):
        browser = FileBrowser([".mp3"], read_metadata=reader)
        browser.replace_files([track_from_path(A), track_from_path(A), track_from_path(B)])

        assert [f.path for f in browser.files] == [A, B]


class TestShuffleFlags:
    def test_set_played_in_shuffle(self, browser):
        assert browser.set_played_in_shuffle(B, True) is True
        assert browser.find(B).is_played_in_shuffle
        assert not browser.find(A).is_played_in_shuffle

    def test_set_played_for_unknown_path_is_noop(self, browser):
        before = browser.files
        assert browser.set_played_in_shuffle("/gone.mp3", True) is False
        assert browser.files == before

    def test_reset_shuffle(self, browser):
        browser.set_played_in_shuffle(A, True)
        browser.set_played_in_shuffle(C, True)
        browser.reset_shuffle()

        assert not any(f.is_played_in_shuffle for f in browser.files)

    def test_files_is_a_snapshot(self, browser):
        """Callers cannot change the listing through the returned sequence."""
        snapshot = browser.files
        browser.set_played_in_shuffle(A, True)

        assert not snapshot[0].is_played_in_shuffle
        assert browser.files[0].is_played_in_shuffle


class TestContents:
    def test_replace_bumps_generation_and_clears_selection(self, browser):
        browser.set_selection([A, B])
        generation = browser.generation

        browser.replace_files([track_from_path("/other/D.mp3")], ["/other/sub"])

        assert browser.generation == generation + 1
        assert browser.selected_entries == ()
        assert browser.directories == ("/other/sub",)

    def test_selection_ignores_unknown_paths(self, browser):
        browser.set_selection([A, "/nope.mp3", C])
        assert browser.selected_entries == (A, C)

    def test_toggles(self, browser):
        browser.toggle_show_file_name()
        assert browser.show_file_name is True
        browser.select_directory("/music/sub")
        assert browser.selected_directory == "/music/sub"

    def test_open_directory(self, tmp_path, reader):
        (tmp_path / "album").mkdir()
        (tmp_path / "01.mp3").write_bytes(b"")
        (tmp_path / "notes.txt").write_text("x")

        browser = FileBrowser([".mp3"], read_metadata=reader)
        browser.open_directory(str(tmp_path), "album", "..")

        assert browser.current_path == str(tmp_path)
        assert [f.name for f in browser.files] == ["01.mp3"]
        assert browser.directories == (str(tmp_path / "album"),)
        assert browser.is_scroll_required
        browser.scrolled()
        assert not browser.is_scroll_required

    def test_open_missing_directory_keeps_listing(self, browser, tmp_path):
        with pytest.raises(DirectoryUnavailableError):
            browser.open_directory(str(tmp_path / "missing"))

        assert [f.path for f in browser.files] == TRACK_PATHS


class TestMetadata:
    def test_attach_metadata_is_idempotent(self, browser):
        loaded = browser.find(A)._replace(
            metadata=TrackMetadata(title="First"), is_metadata_loaded=True
        )
        again = loaded._replace(metadata=TrackMetadata(title="Second"))

        assert browser.attach_metadata(loaded) is True
        assert browser.attach_metadata(again) is False
        assert browser.find(A).metadata.title == "First"

    def test_attach_keeps_shuffle_flag(self, browser):
        browser.set_played_in_shuffle(A, True)
        browser.attach_metadata(
            browser.find(A)._replace(is_metadata_loaded=True, is_played_in_shuffle=False)
        )
        assert browser.find(A).is_played_in_shuffle

    def test_attach_for_unlisted_path(self, browser):
        assert browser.attach_metadata(track_from_path("/x.mp3")) is False

    @pytest.mark.anyio
    async def test_load_metadata(self, browser, reader):
        reader.missing.add(B)

        loaded = await browser.load_metadata()

        assert loaded == 2
        assert browser.find(A).is_metadata_loaded
        assert not browser.find(B).is_metadata_loaded
        assert not browser.is_reading_metadata

        # Already loaded entries are not read again
        reader.calls.clear()
        await browser.load_metadata()
        assert reader.calls == [B]

    @pytest.mark.anyio
    async def test_load_metadata_discards_results_after_replace(self, reader):
        browser = FileBrowser([".mp3"], read_metadata=None)

        async def replacing_reader(path):
            browser.replace_files([track_from_path(path)])
            return await reader(path)

        browser._read_metadata = replacing_reader
        browser.replace_files([track_from_path(A), track_from_path(B)])

        assert await browser.load_metadata() == 0
        assert not browser.find(A).is_metadata_loaded

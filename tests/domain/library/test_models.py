"""Tests for library models: tracks, playlists and the collection."""

import pytest

from tapedeck.core.errors import OutOfRangeError
from tapedeck.domain.library.models import (
    PlaybackMode,
    Playlist,
    PlaylistCollection,
    Track,
    get_display_name,
    get_duration_str,
)


@pytest.fixture
def collection() -> PlaylistCollection:
    return PlaylistCollection.from_playlists(
        [
            Playlist(name="b", tracks=[Track("/b/1.mp3")]),
            Playlist(name="a", tracks=[Track("/a/1.mp3"), Track("/a/2.mp3")]),
            Playlist(name="empty"),
            Playlist(name="box", is_folder=True, children=["inner"]),
            Playlist(name="inner", tracks=[Track("/i/1.mp3")], parent="box"),
        ]
    )


class TestTrack:
    def test_display_name(self):
        assert get_display_name(Track("/x.mp3", "Title", "Artist")) == "Artist - Title"
        assert get_display_name(Track("/x.mp3")) == "Unknown - <Unknown Track>"

    @pytest.mark.parametrize(
        "duration,expected", [(None, "?:??"), (59.9, "0:59"), (61.0, "1:01"), (3600.0, "60:00")]
    )
    def test_duration(self, duration, expected):
        assert get_duration_str(Track("/x.mp3", duration=duration)) == expected


class TestPlaylist:
    def test_track_lookup_out_of_range(self):
        playlist = Playlist(name="p", tracks=[Track("/1.mp3")])
        assert playlist.track(0).uri == "/1.mp3"
        with pytest.raises(OutOfRangeError):
            playlist.track(1)
        with pytest.raises(IndexError):
            playlist.track(-1)

    def test_remove_track(self):
        playlist = Playlist(name="p", tracks=[Track("/1.mp3"), Track("/2.mp3")])
        assert playlist.remove_track(0).uri == "/1.mp3"
        assert [t.uri for t in playlist.tracks] == ["/2.mp3"]

    def test_toggle_open_only_for_folders(self):
        leaf = Playlist(name="leaf")
        leaf.toggle_open()
        assert not leaf.is_open

        folder = Playlist(name="folder", is_folder=True)
        folder.toggle_open()
        assert folder.is_open


class TestCollection:
    """Name ordering, mode switching and folder handling."""

    def test_names_sorted(self, collection):
        assert collection.names() == ("a", "b", "box", "empty", "inner")

    def test_playable_names_skip_empty_and_folders(self, collection):
        assert collection.playable_names() == ["a", "b", "inner"]

    def test_toggle_mode_is_exclusive(self, collection):
        assert collection.toggle_mode(PlaybackMode.SHUFFLE) == PlaybackMode.SHUFFLE
        assert collection.toggle_mode(PlaybackMode.SHUFFLE_ALL) == PlaybackMode.SHUFFLE_ALL
        assert collection.toggle_mode(PlaybackMode.SHUFFLE_ALL) == PlaybackMode.SEQUENTIAL

    def test_visible_names_follow_folder_state(self, collection):
        assert collection.visible_names() == ["a", "b", "box", "empty"]
        collection.get("box").toggle_open()
        assert collection.visible_names() == ["a", "b", "box", "inner", "empty"]
        assert collection.depth("inner") == 1

    def test_remove_folder_removes_children(self, collection):
        collection.remove("box")
        assert "inner" not in collection
        assert "box" not in collection

    def test_remove_child_detaches_from_folder(self, collection):
        collection.remove("inner")
        assert collection.get("box").children == []

    def test_remove_unknown(self, collection):
        assert collection.remove("nope") is None
        assert len(collection) == 5

    def test_merge_replaces_same_name(self, collection):
        other = PlaylistCollection.from_playlists(
            [Playlist(name="a"), Playlist(name="*search", tracks=[Track("/s.mp3")])]
        )
        collection.merge(other)

        assert len(collection.get("a")) == 0
        assert "*search" in collection
        assert collection.names()[0] == "*search"

    def test_get_none(self, collection):
        assert collection.get(None) is None

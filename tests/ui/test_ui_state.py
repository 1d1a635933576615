"""Tests for UI state updates and selectors."""

import pytest

from tapedeck.domain.library.models import (
    PlaybackMode,
    Playlist,
    PlaylistCollection,
    Track,
)
from tapedeck.ui.keys.bindings import VIEW_PLAYLISTS, VIEW_QUEUE, VIEW_TRACKS
from tapedeck.ui.state import (
    UIState,
    calculate_scroll_offset,
    clamp_selection,
    line_count,
    now_playing_line,
    parse_track_number,
    playlist_lines,
    select_line,
    selected_playlist,
    selected_track,
    set_now_playing,
    set_queue,
    status_line,
    track_lines,
)


@pytest.fixture
def collection() -> PlaylistCollection:
    return PlaylistCollection.from_playlists(
        [
            Playlist(name="Jazz", tracks=[Track("/j/1.mp3", "So What", "Miles Davis", 545.0)]),
            Playlist(name="Crates", is_folder=True, is_open=True, children=["Dub", "Funk"]),
            Playlist(name="Dub", tracks=[Track("/d/1.mp3", "Chase", "King Tubby")], parent="Crates"),
            Playlist(name="Funk", parent="Crates"),
        ]
    )


class TestParseTrackNumber:
    @pytest.mark.parametrize(
        "line,expected",
        [
            ("1. Miles Davis - So What", 0),
            ("12. A - B", 11),
            ("  3. padded", 2),
            ("Miles Davis - So What", -1),
            ("", -1),
            ("x1. nope", -1),
        ],
    )
    def test_parse(self, line, expected):
        assert parse_track_number(line) == expected


class TestSelection:
    def test_clamp(self):
        assert clamp_selection(-3, 5) == 0
        assert clamp_selection(9, 5) == 4
        assert clamp_selection(2, 0) == 0

    def test_scroll_follows_selection(self):
        assert calculate_scroll_offset(12, 0, 10) == 3
        assert calculate_scroll_offset(2, 5, 10) == 2
        assert calculate_scroll_offset(6, 5, 10) == 5

    def test_select_line_does_not_mutate(self):
        state = UIState()
        moved = select_line(state, VIEW_TRACKS, 4, 10)
        assert moved.selected[VIEW_TRACKS] == 4
        assert state.selected[VIEW_TRACKS] == 0

    def test_set_queue_clamps_queue_selection(self):
        tracks = tuple(Track(f"/q/{i}.mp3") for i in range(5))
        state = select_line(set_queue(UIState(), tracks), VIEW_QUEUE, 4, 5)

        state = set_queue(state, tracks[:2])

        assert state.selected[VIEW_QUEUE] == 1


class TestPlaylistsView:
    def test_open_folder_lists_children_indented(self, collection):
        assert playlist_lines(collection) == [
            ("Crates", "[-] Crates"),
            ("Dub", "  Dub"),
            ("Funk", "  Funk"),
            ("Jazz", "Jazz"),
        ]

    def test_closed_folder_hides_children(self, collection):
        collection.get("Crates").toggle_open()
        assert playlist_lines(collection) == [("Crates", "[+] Crates"), ("Jazz", "Jazz")]

    def test_no_collection(self):
        assert playlist_lines(None) == []
        assert selected_playlist(UIState(), None) is None

    def test_selected_playlist_follows_visible_order(self, collection):
        state = select_line(UIState(), VIEW_PLAYLISTS, 1, 4)
        assert selected_playlist(state, collection).name == "Dub"


class TestTracksView:
    def test_track_lines(self, collection):
        assert track_lines(collection.get("Jazz")) == ["1. Miles Davis - So What"]
        assert track_lines(collection.get("Crates")) == []

    def test_selected_track(self, collection):
        state = select_line(UIState(), VIEW_PLAYLISTS, 3, 4)
        playlist, index = selected_track(state, collection)
        assert playlist.name == "Jazz"
        assert index == 0

    def test_selected_track_in_empty_playlist(self, collection):
        state = select_line(UIState(), VIEW_PLAYLISTS, 2, 4)
        playlist, index = selected_track(state, collection)
        assert playlist.name == "Funk"
        assert index == -1

    def test_line_count(self, collection):
        state = select_line(UIState(), VIEW_PLAYLISTS, 3, 4)
        assert line_count(state, collection, VIEW_PLAYLISTS) == 4
        assert line_count(state, collection, VIEW_TRACKS) == 1
        assert line_count(state, collection, VIEW_QUEUE) == 0


class TestStatus:
    @pytest.mark.parametrize(
        "mode,expected",
        [
            (PlaybackMode.SEQUENTIAL, "Playing"),
            (PlaybackMode.SHUFFLE, "[Shuffle] Playing"),
            (PlaybackMode.SHUFFLE_ALL, "[Shuffle all] Playing"),
        ],
    )
    def test_mode_prefix(self, collection, mode, expected):
        collection.set_mode(mode)
        assert status_line(collection, "Playing") == expected

    def test_now_playing_line(self):
        state = UIState()
        assert now_playing_line(state) == ""

        track = Track("/j/1.mp3", "So What", "Miles Davis", 545.0)
        state = set_now_playing(state, track, "Jazz", 0)
        assert now_playing_line(state) == "Playing: Miles Davis - So What [9:05]"
        assert state.now_playing_playlist == "Jazz"

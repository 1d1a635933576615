"""Tests for the key binding table and key mapping file."""

import json

import pytest

from tapedeck.ui.keys import bindings as cmd
from tapedeck.ui.keys.bindings import (
    VIEW_PLAYLISTS,
    VIEW_QUEUE,
    VIEW_STATUS,
    VIEW_TRACKS,
    KeyEntry,
    build_binding_table,
    load_key_mapping,
)


class TestDefaults:
    """Compiled-in bindings."""

    @pytest.mark.parametrize(
        "view,keys,command",
        [
            (VIEW_TRACKS, ("p",), cmd.PAUSE_TRACK),
            (VIEW_QUEUE, ("s",), cmd.SHUFFLE_MODE),
            (VIEW_PLAYLISTS, ("S",), cmd.SHUFFLE_ALL_MODE),
            (VIEW_TRACKS, (">",), cmd.NEXT_TRACK),
            (VIEW_TRACKS, ("<",), cmd.REPLAY_TRACK),
            (VIEW_TRACKS, ("/",), cmd.SEARCH),
            (VIEW_TRACKS, ("d", "d"), cmd.REMOVE_TRACK),
            (VIEW_QUEUE, ("D",), cmd.REMOVE_ALL_TRACKS),
            (VIEW_TRACKS, ("<enter>",), cmd.PLAY_SELECTED_TRACK),
            (VIEW_PLAYLISTS, ("<down>",), cmd.DOWN),
            (VIEW_PLAYLISTS, ("k",), cmd.UP),
            (VIEW_TRACKS, ("i",), cmd.ARTIST_ALBUMS),
        ],
    )
    def test_default_binding(self, view, keys, command):
        assert build_binding_table().lookup(view, keys) == command

    def test_left_right_scoped(self):
        table = build_binding_table()
        assert table.lookup(VIEW_PLAYLISTS, ("h",)) is None
        assert table.lookup(VIEW_TRACKS, ("h",)) == cmd.LEFT
        assert table.lookup(VIEW_QUEUE, ("l",)) is None
        assert table.lookup(VIEW_PLAYLISTS, ("l",)) == cmd.RIGHT

    def test_status_view_has_no_bindings(self):
        assert build_binding_table().lookup(VIEW_STATUS, ("p",)) is None

    def test_single_d_is_unbound(self):
        assert build_binding_table().lookup(VIEW_TRACKS, ("d",)) is None

    def test_starts_sequence(self):
        table = build_binding_table()
        assert table.starts_sequence(VIEW_TRACKS, "d")
        assert table.starts_sequence(VIEW_QUEUE, "g")
        assert not table.starts_sequence(VIEW_TRACKS, "p")
        assert not table.starts_sequence(VIEW_STATUS, "d")


class TestUserOverrides:
    """User entries win per command, not per key."""

    def test_remap_frees_default_key(self):
        table = build_binding_table([KeyEntry("x", cmd.PAUSE_TRACK)])
        assert table.lookup(VIEW_TRACKS, ("x",)) == cmd.PAUSE_TRACK
        assert table.lookup(VIEW_TRACKS, ("p",)) is None

    def test_freed_key_can_be_reassigned(self):
        table = build_binding_table(
            [KeyEntry("x", cmd.PAUSE_TRACK), KeyEntry("p", cmd.NEXT_TRACK)]
        )
        assert table.lookup(VIEW_TRACKS, ("p",)) == cmd.NEXT_TRACK
        assert table.lookup(VIEW_TRACKS, (">",)) is None

    def test_several_keys_for_one_command(self):
        table = build_binding_table([KeyEntry("w", cmd.UP), KeyEntry("<up>", cmd.UP)])
        assert table.lookup(VIEW_TRACKS, ("w",)) == cmd.UP
        assert table.lookup(VIEW_TRACKS, ("<up>",)) == cmd.UP
        assert table.lookup(VIEW_TRACKS, ("k",)) is None

    def test_view_binding_beats_any_view(self):
        """p mapped to QueueTrack wins in the tracks view only."""
        table = build_binding_table([KeyEntry("p", cmd.QUEUE_TRACK)])
        assert table.lookup(VIEW_TRACKS, ("p",)) == cmd.QUEUE_TRACK
        assert table.lookup(VIEW_PLAYLISTS, ("p",)) == cmd.PAUSE_TRACK

    def test_later_registration_wins(self):
        table = build_binding_table(
            [KeyEntry("n", cmd.PAUSE_TRACK), KeyEntry("n", cmd.NEXT_TRACK)]
        )
        assert table.lookup(VIEW_TRACKS, ("n",)) == cmd.NEXT_TRACK

    def test_keys_for(self):
        table = build_binding_table()
        assert set(table.keys_for(cmd.PLAY_SELECTED_TRACK)) == {
            (VIEW_TRACKS, ("<space>",)),
            (VIEW_TRACKS, ("<enter>",)),
        }


class TestLoadKeyMapping:
    """Reading the JSON key mapping file."""

    def test_valid_file(self, tmp_path):
        path = tmp_path / "keys.json"
        path.write_text(
            json.dumps(
                [
                    {"Key": "x", "Command": "PauseTrack"},
                    {"Key": "<space>", "Command": "NextTrack"},
                ]
            )
        )

        assert load_key_mapping(path) == [
            KeyEntry("x", cmd.PAUSE_TRACK),
            KeyEntry("<space>", cmd.NEXT_TRACK),
        ]

    def test_missing_file(self, tmp_path):
        assert load_key_mapping(tmp_path / "nope.json") == []
        assert load_key_mapping(None) == []

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "keys.json"
        path.write_text("{not json")
        assert load_key_mapping(path) == []

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "keys.json"
        path.write_text(json.dumps({"Key": "x", "Command": "PauseTrack"}))
        assert load_key_mapping(path) == []

    def test_bad_entries_skipped(self, tmp_path):
        path = tmp_path / "keys.json"
        path.write_text(
            json.dumps(
                [
                    {"Key": "x", "Command": "Explode"},
                    {"Key": "abc", "Command": "PauseTrack"},
                    {"Key": 5, "Command": "PauseTrack"},
                    "junk",
                    {"Key": "zz", "Command": "Quit"},
                ]
            )
        )
        assert load_key_mapping(path) == [KeyEntry("zz", cmd.QUIT)]

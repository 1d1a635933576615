"""Command execution for the terminal UI.

Each command either mutates UI-owned state (views, selection, the playlist
collection) or publishes a signal for the player or catalog actor. Queue
changes always go through the player; the UI only keeps its snapshot.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from loguru import logger

from tapedeck.core.errors import OutOfRangeError
from tapedeck.domain.library.models import PlaybackMode, Playlist, PlaylistCollection
from tapedeck.events.bus import EventBus
from tapedeck.events.signals import (
    ClearQueue,
    Enqueue,
    GetArtistTopTracks,
    NextPlay,
    Pause,
    Play,
    RemoveQueued,
    RepeatCurrent,
    Replay,
    Search,
)

from .keys import bindings as cmd
from .keys.bindings import VIEW_PLAYLISTS, VIEW_QUEUE, VIEW_STATUS, VIEW_TRACKS
from .keys.dispatcher import KeyDispatcher
from .state import (
    UIState,
    line_count,
    request_quit,
    select_line,
    selected_playlist,
    selected_track,
    set_status,
    set_view,
)

DEFAULT_PAGE_SIZE = 10

VIEW_LEFT = {VIEW_TRACKS: VIEW_PLAYLISTS, VIEW_QUEUE: VIEW_TRACKS}
VIEW_RIGHT = {VIEW_PLAYLISTS: VIEW_TRACKS, VIEW_TRACKS: VIEW_QUEUE}


@dataclass
class CommandContext:
    """Collaborators a command may touch."""

    bus: EventBus
    dispatcher: Optional[KeyDispatcher] = None
    collection: Optional[PlaylistCollection] = None
    page_size: int = DEFAULT_PAGE_SIZE


Handler = Callable[[CommandContext, UIState, int], UIState]


# Playback


def pause_track(ctx: CommandContext, state: UIState, count: int) -> UIState:
    ctx.bus.publish(Pause())
    return state


def next_track(ctx: CommandContext, state: UIState, count: int) -> UIState:
    ctx.bus.publish(NextPlay())
    return state


def replay_track(ctx: CommandContext, state: UIState, count: int) -> UIState:
    ctx.bus.publish(Replay())
    return state


def play_selected_track(ctx: CommandContext, state: UIState, count: int) -> UIState:
    playlist, index = selected_track(state, ctx.collection)
    if playlist is None or index < 0:
        return state
    try:
        track = playlist.track(index)
    except OutOfRangeError:
        return state
    ctx.bus.publish(Play(track, playlist.name, index))
    return state


def _toggle_mode(ctx: CommandContext, mode: PlaybackMode) -> None:
    if ctx.collection is None:
        return
    active = ctx.collection.toggle_mode(mode)
    logger.info(f"Playback mode: {active.value}")


def shuffle_mode(ctx: CommandContext, state: UIState, count: int) -> UIState:
    _toggle_mode(ctx, PlaybackMode.SHUFFLE)
    return state


def shuffle_all_mode(ctx: CommandContext, state: UIState, count: int) -> UIState:
    _toggle_mode(ctx, PlaybackMode.SHUFFLE_ALL)
    return state


# Queue


def queue_track(ctx: CommandContext, state: UIState, count: int) -> UIState:
    """Queue the highlighted track ``count`` times."""
    playlist, index = selected_track(state, ctx.collection)
    if playlist is None or index < 0:
        return state
    try:
        track = playlist.track(index)
    except OutOfRangeError:
        return state
    ctx.bus.publish(Enqueue((track,) * count))
    return state


def queue_playlist(ctx: CommandContext, state: UIState, count: int) -> UIState:
    """Queue every track of the highlighted playlist, ``count`` times over."""
    playlist = selected_playlist(state, ctx.collection)
    if playlist is None or playlist.is_folder or not playlist.tracks:
        return state
    ctx.bus.publish(Enqueue(tuple(playlist.tracks) * count))
    return state


def repeat_playing_track(ctx: CommandContext, state: UIState, count: int) -> UIState:
    if state.now_playing is not None:
        ctx.bus.publish(RepeatCurrent(count))
    return state


def remove_track(ctx: CommandContext, state: UIState, count: int) -> UIState:
    """Remove what is highlighted: a playlist, ``count`` tracks or queue entries."""
    view = state.active_view

    if view == VIEW_PLAYLISTS:
        playlist = selected_playlist(state, ctx.collection)
        if playlist is not None:
            ctx.collection.remove(playlist.name)
            logger.info(f"Removed playlist {playlist.name!r}")
            state = select_line(
                state,
                VIEW_PLAYLISTS,
                state.selected[VIEW_PLAYLISTS],
                line_count(state, ctx.collection, VIEW_PLAYLISTS),
            )

    elif view == VIEW_TRACKS:
        playlist, index = selected_track(state, ctx.collection)
        if playlist is not None and index > -1:
            for _ in range(count):
                try:
                    playlist.remove_track(index)
                except OutOfRangeError:
                    break
            state = select_line(
                state, VIEW_TRACKS, index, line_count(state, ctx.collection, VIEW_TRACKS)
            )

    elif view == VIEW_QUEUE:
        if state.queue:
            ctx.bus.publish(RemoveQueued(state.selected[VIEW_QUEUE], count))

    return state


def remove_all_tracks(ctx: CommandContext, state: UIState, count: int) -> UIState:
    view = state.active_view

    if view == VIEW_TRACKS:
        playlist, index = selected_track(state, ctx.collection)
        if playlist is not None and index > -1:
            playlist.remove_all_tracks()
            return set_view(state, VIEW_PLAYLISTS)

    elif view == VIEW_QUEUE:
        ctx.bus.publish(ClearQueue())
        return set_view(state, VIEW_TRACKS)

    return state


# Navigation


def _select(ctx: CommandContext, state: UIState, index: int) -> UIState:
    view = state.active_view
    previous = state.selected.get(view, 0)
    state = select_line(state, view, index, line_count(state, ctx.collection, view))
    if view == VIEW_PLAYLISTS and state.selected[view] != previous:
        # A different playlist has different tracks
        state = select_line(state, VIEW_TRACKS, 0, 0)
    return state


def go_to_first_line(ctx: CommandContext, state: UIState, count: int) -> UIState:
    return _select(ctx, state, 0)


def go_to_last_line(ctx: CommandContext, state: UIState, count: int) -> UIState:
    return _select(ctx, state, line_count(state, ctx.collection, state.active_view) - 1)


def cursor_up(ctx: CommandContext, state: UIState, count: int) -> UIState:
    return _select(ctx, state, state.selected.get(state.active_view, 0) - count)


def cursor_down(ctx: CommandContext, state: UIState, count: int) -> UIState:
    return _select(ctx, state, state.selected.get(state.active_view, 0) + count)


def page_up(ctx: CommandContext, state: UIState, count: int) -> UIState:
    return cursor_up(ctx, state, ctx.page_size)


def page_down(ctx: CommandContext, state: UIState, count: int) -> UIState:
    return cursor_down(ctx, state, ctx.page_size)


def view_left(ctx: CommandContext, state: UIState, count: int) -> UIState:
    target = VIEW_LEFT.get(state.active_view)
    return set_view(state, target) if target else state


def view_right(ctx: CommandContext, state: UIState, count: int) -> UIState:
    target = VIEW_RIGHT.get(state.active_view)
    if target is None:
        return state
    state = set_view(state, target)
    return select_line(
        state, target, state.selected[target], line_count(state, ctx.collection, target)
    )


def open_close_folder(ctx: CommandContext, state: UIState, count: int) -> UIState:
    playlist = selected_playlist(state, ctx.collection)
    if playlist is not None and playlist.is_folder:
        playlist.toggle_open()
    return state


# Catalog


def artist_albums(ctx: CommandContext, state: UIState, count: int) -> UIState:
    """Ask the catalog for tracks by the highlighted track's artist."""
    playlist, index = selected_track(state, ctx.collection)
    if playlist is None or index < 0:
        return state
    try:
        track = playlist.track(index)
    except OutOfRangeError:
        return state
    if not track.artist:
        return set_status(state, "Unknown artist")
    ctx.bus.publish(GetArtistTopTracks(track.artist))
    return state


# Typing


def _start_typing(ctx: CommandContext, state: UIState, action: str) -> UIState:
    if ctx.dispatcher is not None:
        ctx.dispatcher.start_typing(action)
    return set_view(state, VIEW_STATUS)


def enable_search(ctx: CommandContext, state: UIState, count: int) -> UIState:
    return _start_typing(ctx, state, cmd.SEARCH)


def enable_create_playlist(ctx: CommandContext, state: UIState, count: int) -> UIState:
    return _start_typing(ctx, state, cmd.CREATE_PLAYLIST)


def submit_typed(ctx: CommandContext, state: UIState, action: str, text: str) -> UIState:
    """Finish a typed action (Enter submits ``text``, Escape passes "")."""
    if text and action == cmd.SEARCH:
        ctx.bus.publish(Search(text))
    elif text and action == cmd.CREATE_PLAYLIST:
        state = create_playlist_from_queue(ctx, state, text)
    return set_view(state, VIEW_PLAYLISTS)


def create_playlist_from_queue(ctx: CommandContext, state: UIState, name: str) -> UIState:
    if ctx.collection is None:
        return state
    if not state.queue:
        return set_status(state, "Queue is empty")
    ctx.collection.add(Playlist(name=name, tracks=list(state.queue)))
    logger.info(f"Created playlist {name!r} with {len(state.queue)} tracks")
    return set_status(state, f"Created playlist {name}")


def quit_app(ctx: CommandContext, state: UIState, count: int) -> UIState:
    ctx.bus.shutdown()
    return request_quit(state)


COMMAND_HANDLERS: dict[str, Handler] = {
    cmd.PAUSE_TRACK: pause_track,
    cmd.SHUFFLE_MODE: shuffle_mode,
    cmd.SHUFFLE_ALL_MODE: shuffle_all_mode,
    cmd.NEXT_TRACK: next_track,
    cmd.REPLAY_TRACK: replay_track,
    cmd.SEARCH: enable_search,
    cmd.QUIT: quit_app,
    cmd.QUEUE_TRACK: queue_track,
    cmd.QUEUE_PLAYLIST: queue_playlist,
    cmd.REPEAT_PLAYING_TRACK: repeat_playing_track,
    cmd.REMOVE_TRACK: remove_track,
    cmd.REMOVE_ALL_TRACKS: remove_all_tracks,
    cmd.GO_TO_FIRST_LINE: go_to_first_line,
    cmd.GO_TO_LAST_LINE: go_to_last_line,
    cmd.PLAY_SELECTED_TRACK: play_selected_track,
    cmd.UP: cursor_up,
    cmd.DOWN: cursor_down,
    cmd.LEFT: view_left,
    cmd.RIGHT: view_right,
    cmd.OPEN_CLOSE_FOLDER: open_close_folder,
    cmd.ARTIST_ALBUMS: artist_albums,
    cmd.CREATE_PLAYLIST: enable_create_playlist,
    cmd.CURSOR_HOME: go_to_first_line,
    cmd.CURSOR_END: go_to_last_line,
    cmd.PAGE_UP_COMMAND: page_up,
    cmd.PAGE_DOWN_COMMAND: page_down,
}


def execute_command(
    ctx: CommandContext, state: UIState, command: str, count: int = 1
) -> UIState:
    """
    Run one command.

    Args:
        ctx: Command collaborators
        state: Current UI state
        command: Command name from the binding table
        count: Repeat count typed before the command

    Returns:
        Updated UI state
    """
    handler = COMMAND_HANDLERS.get(command)
    if handler is None:
        logger.warning(f"No handler for command {command!r}")
        return state
    return handler(ctx, state, count)

"""
Local playlist library scanning.

Every directory under a library path becomes a playlist. A directory that
contains sub-directories becomes a folder whose children are those
sub-directories. Audio files become tracks, with metadata read by Mutagen.
"""

import os
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError

from .models import Playlist, PlaylistCollection, Track


def is_supported_format(local_path: Path, supported_formats: list[str]) -> bool:
    """Check if file format is supported."""
    return local_path.suffix.lower() in supported_formats


def get_tag_value(audio_file: Any, tag_names: list[str]) -> Optional[str]:
    """Get tag value, trying multiple possible tag names."""
    for tag_name in tag_names:
        try:
            value = audio_file.get(tag_name)
            if value:
                if isinstance(value, list) and value:
                    return str(value[0])
                return str(value)
        except (KeyError, ValueError):
            # Some formats (like Vorbis) raise ValueError for non-existent keys
            continue
    return None


def extract_metadata_from_filename(local_path: str) -> dict[str, Optional[str]]:
    """Extract basic info from filename as fallback."""
    title = Path(local_path).stem
    artist = None

    # Try to parse "Artist - Title" format
    if " - " in title:
        artist, title = (part.strip() for part in title.split(" - ", 1))

    return {"title": title, "artist": artist}


def extract_track(local_path: str) -> Track:
    """Build a Track from an audio file using mutagen."""
    try:
        audio_file = MutagenFile(local_path)
    except (MutagenError, OSError) as e:
        logger.warning(f"Could not read metadata from {local_path}: {e}")
        audio_file = None

    if audio_file is None:
        fallback = extract_metadata_from_filename(local_path)
        return Track(
            uri=local_path,
            title=fallback["title"],
            artist=fallback["artist"],
            available=os.access(local_path, os.R_OK),
        )

    # ID3 (MP3), MP4, and Vorbis/Opus tags (lowercase)
    title = get_tag_value(audio_file, ["TIT2", "\xa9nam", "TITLE", "title"])
    artist = get_tag_value(audio_file, ["TPE1", "\xa9ART", "ARTIST", "artist"])
    album = get_tag_value(audio_file, ["TALB", "\xa9alb", "ALBUM", "album"])

    duration = None
    if hasattr(audio_file, "info"):
        duration = getattr(audio_file.info, "length", None)

    if not title or not artist:
        fallback = extract_metadata_from_filename(local_path)
        title = title or fallback["title"]
        artist = artist or fallback["artist"]

    return Track(
        uri=local_path,
        title=title,
        artist=artist,
        album=album,
        duration=duration,
        available=os.access(local_path, os.R_OK),
    )


def _scan_playlist_dir(
    directory: Path,
    supported_formats: list[str],
    collection: dict[str, Playlist],
    parent: Optional[str] = None,
) -> Optional[str]:
    """Scan one directory into ``collection``; return the playlist name used."""
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.warning(f"Skipping unreadable directory {directory}: {e}")
        return None

    name = directory.name
    if name in collection:
        name = f"{parent}/{directory.name}" if parent else str(directory)

    subdirs = [entry for entry in entries if entry.is_dir()]
    if subdirs:
        folder = Playlist(name=name, is_folder=True, parent=parent)
        collection[name] = folder
        for subdir in subdirs:
            child = _scan_playlist_dir(subdir, supported_formats, collection, parent=name)
            if child:
                folder.children.append(child)
        return name

    files = [
        entry
        for entry in entries
        if entry.is_file() and is_supported_format(entry, supported_formats)
    ]
    if not files:
        return None

    collection[name] = Playlist(
        name=name, tracks=[extract_track(str(f)) for f in files], parent=parent
    )
    return name


def scan_library(
    library_paths: list[str],
    supported_formats: list[str],
    playlist_filter: Optional[list[str]] = None,
) -> PlaylistCollection:
    """Scan library paths into a playlist collection.

    Args:
        library_paths: Directories whose sub-directories are playlists
        supported_formats: File suffixes loaded as tracks
        playlist_filter: Only keep leaf playlists with these names (None/empty keeps all)

    Returns:
        PlaylistCollection in sequential mode
    """
    playlists: dict[str, Playlist] = {}

    for library_path in library_paths:
        root = Path(library_path).expanduser()
        if not root.is_dir():
            logger.warning(f"Library path does not exist: {root}")
            continue
        for entry in sorted(root.iterdir()):
            if entry.is_dir():
                _scan_playlist_dir(entry, supported_formats, playlists)

    if playlist_filter:
        wanted = set(playlist_filter)
        playlists = {
            name: Playlist(name=name, tracks=playlist.tracks)
            for name, playlist in playlists.items()
            if name in wanted and not playlist.is_folder
        }

    logger.info(
        f"Scanned {len(playlists)} playlists from {len(library_paths)} library path(s)"
    )
    return PlaylistCollection(playlists)

"""
Startup and shutdown for the interactive player.

Startup failures (cache directory, missing library, player process, login
timeout) are fatal: they are printed and the process exits with status 1.
Once the actors are running, errors are reported on the status line instead.
"""

import os
from pathlib import Path
from typing import Optional

from loguru import logger

from tapedeck.backend.catalog import CatalogActor
from tapedeck.backend.local import LocalSession, delete_cache
from tapedeck.backend.session import connect_session, wait_for_login
from tapedeck.core.config import (
    Config,
    ensure_directories,
    get_cache_dir,
    get_keymap_path,
    load_config,
)
from tapedeck.core.console import print_fatal, safe_print
from tapedeck.core.errors import StartupError
from tapedeck.core.output import log, setup_logging_from_config
from tapedeck.domain.library.models import PlaybackMode, PlaylistCollection
from tapedeck.domain.playback.player import PlayerOrchestrator
from tapedeck.domain.playback.queue import PlaybackQueue
from tapedeck.events.bus import EventBus
from tapedeck.events.signals import NewPlaylists, SetStatus
from tapedeck.ui.app import ConsoleUI
from tapedeck.ui.keys.bindings import build_binding_table, load_key_mapping

# Seconds each actor gets to finish after Shutdown
ACTOR_JOIN_TIMEOUT = 3.0


def start_session(config: Config) -> tuple[LocalSession, PlaylistCollection]:
    """
    Log in to the backend and load the playlists.

    Raises:
        StartupError: If the cache directory, the player or the login fails
    """
    cache_dir = get_cache_dir()
    delete_cache(cache_dir)

    session = LocalSession(config, cache_dir)
    session.login()
    safe_print("Waiting for the player...", style="dim")
    try:
        wait_for_login(session, config.player.login_timeout)
    except StartupError:
        session.close()
        raise

    collection = session.list_playlists()
    collection.set_mode(PlaybackMode(config.player.start_mode))
    return session, collection


def shutdown_actors(bus: EventBus, actors: list) -> None:
    """Publish Shutdown and wait for every actor thread to finish."""
    bus.shutdown()
    for actor in actors:
        thread = actor.thread
        if thread is None:
            continue
        thread.join(ACTOR_JOIN_TIMEOUT)
        if thread.is_alive():
            logger.warning(f"{thread.name} did not stop within {ACTOR_JOIN_TIMEOUT}s")


def run(config_path: Optional[Path] = None) -> int:
    """
    Run the player until the user quits.

    Args:
        config_path: Explicit config file (default lookup otherwise)

    Returns:
        Process exit code
    """
    config = load_config(config_path)
    if os.environ.get("TAPEDECK_DEBUG") == "1":
        config.logging.level = "DEBUG"
    ensure_directories()
    log_file = setup_logging_from_config(config.logging)

    try:
        session, collection = start_session(config)
    except StartupError as e:
        logger.error(f"Startup failed: {e}")
        print_fatal(e)
        return 1

    log(f"Loaded {len(collection)} playlists (log: {log_file})")

    bus = EventBus()
    connect_session(session, bus)

    player = PlayerOrchestrator(
        bus, session, collection, PlaybackQueue(config.player.queue_max_size)
    )
    catalog = CatalogActor(bus, session)
    table = build_binding_table(load_key_mapping(get_keymap_path(config)))
    ui = ConsoleUI(bus, table, config.ui)

    player.start()
    catalog.start()
    bus.publish(NewPlaylists(collection))
    if len(collection) == 0:
        bus.publish(SetStatus("No playlists found"))

    try:
        ui.run()
    finally:
        shutdown_actors(bus, [player, catalog])
        if not player.terminated:
            session.close()

    logger.info("tapedeck exited")
    return 0

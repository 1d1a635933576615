"""
mpv audio output over JSON IPC.

Functional approach: an immutable MpvState describes the running process
and every operation takes it explicitly.
"""

import json
import os
import socket
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Any, NamedTuple, Optional

from loguru import logger

# Durations below this indicate broken metadata
MIN_VALID_DURATION = 10.0

# Minimum playback time before a track may count as finished (seconds)
MIN_PLAYBACK_TIME = 3.0

SOCKET_TIMEOUT = 2.0


class MpvState(NamedTuple):
    """Immutable handle on a running mpv process."""

    socket_path: Optional[str] = None
    process: Optional[subprocess.Popen] = None


def default_socket_path() -> str:
    return str(Path(tempfile.gettempdir()) / f"tapedeck-mpv-{os.getpid()}")


def spawn_mpv(socket_path: str, volume: int = 50) -> subprocess.Popen:
    """Start an idle mpv process listening on ``socket_path``.

    Raises:
        OSError: If the process cannot be started
    """
    if os.path.exists(socket_path):
        logger.debug(f"Removing existing socket: {socket_path}")
        os.unlink(socket_path)

    cmd = [
        "mpv",
        "--idle=yes",
        "--no-video",
        "--no-terminal",
        f"--input-ipc-server={socket_path}",
        f"--volume={volume}",
        "--keep-open=yes",
        "--load-scripts=no",
    ]
    logger.info(f"Starting mpv with socket: {socket_path}")
    return subprocess.Popen(
        cmd,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        stdin=subprocess.DEVNULL,
    )


def wait_for_socket(state: MpvState, timeout: float) -> bool:
    """Wait until mpv's IPC socket exists and answers a property query."""
    deadline = time.monotonic() + timeout
    while not os.path.exists(state.socket_path):
        if time.monotonic() > deadline or state.process.poll() is not None:
            return False
        time.sleep(0.1)
    return send_mpv_command(state.socket_path, {"command": ["get_property", "idle-active"]})


def stop_mpv(state: MpvState) -> None:
    """Stop the mpv process and remove its socket."""
    if state.process:
        try:
            state.process.kill()
            state.process.wait(timeout=2.0)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"mpv did not exit cleanly: {e}")

    if state.socket_path and os.path.exists(state.socket_path):
        try:
            os.unlink(state.socket_path)
        except OSError:
            logger.debug(f"Could not remove socket {state.socket_path}")


def is_mpv_running(state: MpvState) -> bool:
    """Check if the mpv process is alive and its socket exists."""
    if not state.process or state.process.poll() is not None:
        return False
    return bool(state.socket_path) and os.path.exists(state.socket_path)


def _request(socket_path: Optional[str], command: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Send one JSON IPC request and return the decoded reply."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
            sock.settimeout(SOCKET_TIMEOUT)
            sock.connect(socket_path)
            sock.sendall((json.dumps(command) + "\n").encode("utf-8"))
            response = sock.recv(4096).decode("utf-8").strip()
    except OSError as e:
        logger.debug(f"mpv request {command['command'][0]} failed: {e}")
        return None

    # mpv may interleave event lines with the reply; the reply has "error"
    for line in response.splitlines():
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            continue
        if "error" in data:
            return data
    return {} if not response else None


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to mpv."""
    reply = _request(socket_path, command)
    if reply is None:
        return False
    return reply.get("error", "success") == "success"


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from mpv (None if unavailable)."""
    reply = _request(socket_path, {"command": ["get_property", property_name]})
    if reply and reply.get("error") == "success":
        return reply.get("data")
    return None


def load_file(state: MpvState, path: str) -> bool:
    """Replace the current file with ``path``, paused until ``set_paused(False)``."""
    if not is_mpv_running(state):
        return False
    send_mpv_command(state.socket_path, {"command": ["set_property", "pause", True]})
    return send_mpv_command(state.socket_path, {"command": ["loadfile", path, "replace"]})


def set_paused(state: MpvState, paused: bool) -> bool:
    if not is_mpv_running(state):
        return False
    return send_mpv_command(
        state.socket_path, {"command": ["set_property", "pause", paused]}
    )


def stop_playback(state: MpvState) -> bool:
    if not is_mpv_running(state):
        return False
    return send_mpv_command(state.socket_path, {"command": ["stop"]})


def is_track_finished(state: MpvState, started_at: Optional[float]) -> bool:
    """Check if the loaded track finished.

    Safeguards:
    1. Minimum playback time (metadata may still be loading)
    2. Duration sanity check (broken metadata only trusts eof near the end)
    3. Position or eof flag near the end of the track
    """
    if not is_mpv_running(state):
        return False

    if started_at is not None and time.time() - started_at < MIN_PLAYBACK_TIME:
        return False

    position = get_mpv_property(state.socket_path, "time-pos") or 0.0
    duration = get_mpv_property(state.socket_path, "duration") or 0.0
    eof = get_mpv_property(state.socket_path, "eof-reached")

    if 0 < duration < MIN_VALID_DURATION:
        return eof is True and position >= duration - 0.1

    finished_by_position = duration > 0 and position >= duration - 0.5
    finished_by_eof = eof is True and duration > 0 and position >= duration - 1.0

    logger.trace(
        "is_track_finished: pos={:.2f}, dur={:.2f}, eof={}", position, duration, eof
    )
    return finished_by_position or finished_by_eof

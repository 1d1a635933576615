"""
Configuration management for tapedeck
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .errors import CacheDirectoryError

VALID_START_MODES = ("sequential", "shuffle", "shuffle_all")


@dataclass
class LibraryConfig:
    """Configuration for the local playlist library."""

    library_paths: List[str] = field(
        default_factory=lambda: [str(Path.home() / "Music")]
    )
    supported_formats: List[str] = field(
        default_factory=lambda: [".mp3", ".m4a", ".ogg", ".opus", ".wav", ".flac"]
    )
    # Only load playlists with these names (empty = all)
    playlist_filter: List[str] = field(default_factory=list)


@dataclass
class PlayerConfig:
    """Configuration for playback settings."""

    mpv_socket_path: Optional[str] = None
    volume: int = 50
    queue_max_size: int = 100
    login_timeout: float = 9.0
    start_mode: str = "sequential"

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.start_mode not in VALID_START_MODES:
            raise ValueError(
                f"Invalid start_mode: {self.start_mode!r}. "
                f"Valid modes are: {', '.join(VALID_START_MODES)}"
            )
        if self.queue_max_size <= 0:
            raise ValueError("queue_max_size must be positive")
        if self.login_timeout <= 0:
            raise ValueError("login_timeout must be positive")


@dataclass
class UIConfig:
    """Configuration for the terminal interface."""

    keymap_file: Optional[str] = None  # default: <config dir>/keys.json
    use_colors: bool = True
    refresh_rate: int = 10  # Redraws per second while idle


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # default: ~/.local/share/tapedeck/tapedeck.log
    max_file_size_mb: int = 10
    backup_count: int = 5
    console_output: bool = False  # Also log to stderr (for debugging)


@dataclass
class Config:
    """Main configuration object."""

    library: LibraryConfig = field(default_factory=LibraryConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "tapedeck"
    return Path.home() / ".config" / "tapedeck"


def get_config_path() -> Path:
    """config.toml in the working directory if present, else in the config dir."""
    local_config = Path.cwd() / "config.toml"
    return local_config if local_config.exists() else get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "tapedeck"
    return Path.home() / ".local" / "share" / "tapedeck"


def get_cache_dir() -> Path:
    """Resolve and create the session cache directory.

    Raises:
        CacheDirectoryError: If no cache location can be determined or created
    """
    cache_home = os.environ.get("XDG_CACHE_HOME")
    if cache_home:
        cache_dir = Path(cache_home) / "tapedeck"
    else:
        try:
            cache_dir = Path.home() / ".cache" / "tapedeck"
        except RuntimeError as e:
            raise CacheDirectoryError(f"Cannot find cache dir: {e}") from e

    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheDirectoryError(f"Cannot create cache dir {cache_dir}: {e}") from e
    return cache_dir


def get_keymap_path(config: Config) -> Path:
    """Get the key-mapping file path (it may not exist)."""
    if config.ui.keymap_file:
        return Path(config.ui.keymap_file).expanduser()
    return get_config_dir() / "keys.json"


def parse_playlist_filter(raw: str) -> List[str]:
    """Split a comma-separated playlist filter, trimming each name.

    An empty string means no filter.
    """
    if not raw:
        return []
    return [name.strip() for name in raw.split(",")]


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# tapedeck Configuration

[library]
# Directories whose sub-directories are loaded as playlists
library_paths = ["~/Music"]

# Audio file formats loaded as tracks
supported_formats = [".mp3", ".m4a", ".ogg", ".opus", ".wav", ".flac"]

# Only load these playlists (empty list loads everything)
playlist_filter = []

[player]
# Path for mpv socket (auto-generated if not specified)
# mpv_socket_path = "/tmp/tapedeck-mpv"

# Default volume (0-100)
volume = 50

# Maximum number of tracks held in the play queue
queue_max_size = 100

# Seconds to wait for the player connection before giving up
login_timeout = 9.0

# Playback mode at startup: sequential, shuffle or shuffle_all
start_mode = "sequential"

[ui]
# Key mapping overrides, a JSON list of {"Key": "...", "Command": "..."}
# keymap_file = "~/.config/tapedeck/keys.json"

# Use colors in terminal output
use_colors = true

# Redraws per second while idle
refresh_rate = 10

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/tapedeck/tapedeck.log)
# log_file = "/path/to/custom/tapedeck.log"

# Maximum log file size in MB before rotation
max_file_size_mb = 10

# Number of backup log files to keep
backup_count = 5

# Also output logs to console (useful for debugging)
console_output = false
""".strip()


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - TAPEDECK_PLAYLISTS (comma-separated playlist filter)
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        config = Config()
    else:
        config = _parse_config_file(config_path)

    playlist_env = os.environ.get("TAPEDECK_PLAYLISTS")
    if playlist_env:
        config.library.playlist_filter = parse_playlist_filter(playlist_env)

    return config


def _parse_config_file(config_path: Path) -> Config:
    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"Error loading configuration from {config_path}: {e}")
        print("Using default configuration.")
        return Config()

    config = Config()

    if "library" in toml_data:
        library_data = toml_data["library"]
        config.library = LibraryConfig(
            library_paths=[
                str(Path(p).expanduser())
                for p in library_data.get("library_paths", config.library.library_paths)
            ],
            supported_formats=library_data.get(
                "supported_formats", config.library.supported_formats
            ),
            playlist_filter=[
                name.strip()
                for name in library_data.get(
                    "playlist_filter", config.library.playlist_filter
                )
            ],
        )

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            mpv_socket_path=player_data.get("mpv_socket_path"),
            volume=player_data.get("volume", config.player.volume),
            queue_max_size=player_data.get(
                "queue_max_size", config.player.queue_max_size
            ),
            login_timeout=float(
                player_data.get("login_timeout", config.player.login_timeout)
            ),
            start_mode=player_data.get("start_mode", config.player.start_mode),
        )
        try:
            config.player.validate()
        except ValueError as e:
            print(f"Warning: Invalid player configuration: {e}")
            print("Using default player configuration.")
            config.player = PlayerConfig()

    if "ui" in toml_data:
        ui_data = toml_data["ui"]
        keymap_file = ui_data.get("keymap_file")
        if keymap_file:
            keymap_file = str(Path(keymap_file).expanduser())
        config.ui = UIConfig(
            keymap_file=keymap_file,
            use_colors=ui_data.get("use_colors", config.ui.use_colors),
            refresh_rate=ui_data.get("refresh_rate", config.ui.refresh_rate),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            max_file_size_mb=logging_data.get(
                "max_file_size_mb", config.logging.max_file_size_mb
            ),
            backup_count=logging_data.get("backup_count", config.logging.backup_count),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)

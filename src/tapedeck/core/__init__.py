"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Logging and user-facing output (Loguru)
- Console management (Rich)
- The exception hierarchy
"""

# Configuration
from .config import (
    Config,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_cache_dir,
    get_keymap_path,
    parse_playlist_filter,
    create_default_config,
    ensure_directories,
)

# Console
from .console import get_console, print_fatal, safe_print

# Errors
from .errors import (
    TapedeckError,
    StartupError,
    MissingCredentialsError,
    LoginTimeoutError,
    CacheDirectoryError,
    PlayerUnavailableError,
    QueueFullError,
    OutOfRangeError,
    BackendError,
)

__all__ = [
    # Config
    "Config",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_cache_dir",
    "get_keymap_path",
    "parse_playlist_filter",
    "create_default_config",
    "ensure_directories",
    # Console
    "get_console",
    "safe_print",
    "print_fatal",
    # Errors
    "TapedeckError",
    "StartupError",
    "MissingCredentialsError",
    "LoginTimeoutError",
    "CacheDirectoryError",
    "PlayerUnavailableError",
    "QueueFullError",
    "OutOfRangeError",
    "BackendError",
]

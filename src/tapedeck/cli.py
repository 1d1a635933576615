"""
tapedeck CLI - entry point.

Parses the command line, exports the options the startup code reads from
the environment, then hands over to the interactive player.
"""

import argparse
import os
import sys
from pathlib import Path


def main() -> None:
    """Main entry point for the tapedeck command."""
    parser = argparse.ArgumentParser(
        description="tapedeck - terminal playlist player",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--playlists",
        help='Only load these playlists, comma separated (e.g. "Road trip, Focus")',
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.toml (default: ~/.config/tapedeck/config.toml)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level",
    )

    args = parser.parse_args()

    if args.playlists is not None:
        os.environ["TAPEDECK_PLAYLISTS"] = args.playlists
    if args.debug:
        os.environ["TAPEDECK_DEBUG"] = "1"

    from .main import run

    sys.exit(run(args.config))


if __name__ == "__main__":
    main()

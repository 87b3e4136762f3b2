"""CLI/runtime bootstrap helpers for sweepr commands."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Any

VERSION = "1.5.0"


def configure_windows_console_utf8() -> None:
    """Best-effort UTF-8 console setup for Windows terminals."""
    if sys.platform != "win32":
        return

    try:
        if hasattr(sys.stdout, "reconfigure"):
            stdout: Any = sys.stdout
            stderr: Any = sys.stderr
            stdout.reconfigure(encoding="utf-8")
            stderr.reconfigure(encoding="utf-8")
        os.system("chcp 65001 >nul 2>&1")
    except (OSError, ValueError):
        # Terminal-dependent setup; safe fallback is default encoding.
        pass


def build_sweepr_arg_parser() -> argparse.ArgumentParser:
    """Create the sweepr CLI parser."""
    parser = argparse.ArgumentParser(
        prog="sweepr",
        description="Bulk cache, temp and log cleanup for Windows and Unix systems.",
        epilog="Examples:\n"
        "  sweepr --safe\n"
        "  sweepr --full --yes\n"
        "  sweepr --user alice\n"
        "  sweepr  (interactive mode)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    modes = parser.add_mutually_exclusive_group()
    modes.add_argument("-s", "--safe", dest="mode", action="store_const", const="safe",
                       help="Run Safe-Cleanup (caches and package managers only)")
    modes.add_argument("-f", "--full", dest="mode", action="store_const", const="full",
                       help="Run Full-Cleanup (adds temp, crash dump and log folders)")
    modes.add_argument("-u", "--user", dest="profile", metavar="PROFILE",
                       help="Run User-Cleanup for one profile")
    parser.add_argument("-y", "--yes", action="store_true",
                        help="Non-interactive: skip confirmation and enable verbose output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show failure details for each task")
    parser.add_argument("-c", "--config", help="Path to config.json file")
    parser.add_argument("--platform", choices=["windows", "unix"], default=None,
                        help="Override platform detection")
    parser.add_argument("--show-plan", action="store_true", help="Show the task preview and exit (no changes)")
    parser.add_argument("--version", action="version", version=f"sweepr {VERSION}")
    return parser


def resolve_mode(args: argparse.Namespace) -> str | None:
    """Mode selected on the command line, or None when it should be prompted."""
    if args.profile is not None:
        return "user"
    return args.mode

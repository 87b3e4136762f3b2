"""
Sweepr: bulk cache, temp and log cleanup.

Builds an ordered catalog of cleanup tasks for the current platform and the
selected mode (safe, full, user), previews it, then runs it one task at a
time and reports the disk space freed.
"""

import os
import sys
import logging
from pathlib import Path
from typing import List, Optional

from colorama import init, Fore, Style

from core import Config, setup_logging
from core.catalog import build_catalog, preview_lines
from core.context import (Mode, build_context, detect_platform, discover_profiles,
                          profile_base)
from core.engine import CleanupEngine, RunResult
from utils.cli_runtime import build_sweepr_arg_parser, configure_windows_console_utf8, resolve_mode
from utils.defensive import ConfigurationError
from utils.error_messages import format_configuration_error
from utils.system_check import SystemCheck

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def print_info(message: str):
    print(f"{Fore.YELLOW}[INFO]{Style.RESET_ALL} {message}")


def print_error(message: str):
    print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} {message}")


def pause():
    """Wait for Enter."""
    input("\nPress [ENTER] to continue: ")


def prompt_yes_no(question: str) -> bool:
    """Ask a Y/N question until a valid answer is given. EOF counts as no."""
    while True:
        try:
            answer = input(f"{question} (Y = YES, N = NO): ").strip().lower()
        except EOFError:
            return False
        if answer in ('y', 'yes'):
            return True
        if answer in ('n', 'no', ''):
            return False


def prompt_mode() -> str:
    """Ask which cleanup mode to run."""
    print("Cleanup modes:")
    print(f"  {Fore.YELLOW}safe{Style.RESET_ALL} - Caches and package managers only")
    print(f"  {Fore.YELLOW}full{Style.RESET_ALL} - Safe plus temp, crash dump and log folders")
    print(f"  {Fore.YELLOW}user{Style.RESET_ALL} - Caches, temp and trash of one user profile")
    return input("Select mode: ").strip().lower()


def prompt_profile(profiles: List[str]) -> str:
    """List discovered profiles and ask for one."""
    print("Available profiles:")
    for profile in profiles:
        print(f"  {profile}")
    return input("Input profile name to clean: ").strip()


def print_preview(catalog, missing_tools: List[str], verbose: bool):
    """Show the catalog before asking for confirmation."""
    print()
    print_info("The following cleanup tasks will be executed:")
    for line in preview_lines(catalog, missing_tools):
        if line.startswith("Cleaning:"):
            print(f"{Fore.CYAN}{line}{Style.RESET_ALL}")
        else:
            print(line)
    print_info("The above cleanup tasks will be executed")
    if verbose:
        print_info("Verbose mode: showing all task details and errors")
    else:
        print_info("Verbose mode OFF: errors will be hidden")
    print_info("Press [CTRL+C] to cancel")
    print_info("!!! You use this tool at your own risk !!!")


def print_summary(result: RunResult, log_file: Optional[Path]):
    """Failure count and log location after a run."""
    if result.failed:
        print(f"{Style.DIM}{len(result.failed)} of {len(result.outcomes)} tasks reported errors"
              f"{Style.RESET_ALL}")
    if log_file:
        print(f"{Style.DIM}Log: {log_file}{Style.RESET_ALL}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with defensive error handling."""
    init()  # Initialize colorama
    configure_windows_console_utf8()

    parser = build_sweepr_arg_parser()
    args = parser.parse_args(argv)

    config_path = Path(args.config) if args.config else Path('config_files/config.json')
    config = Config(config_path if config_path.exists() else None)

    log_file = None
    try:
        log_file = setup_logging(config.log_folder, config.max_log_files)
        logging.info("=" * 70)
        logging.info("Sweepr started")
    except OSError as e:
        # Cleanup still works without a log file
        print_error(f"Could not set up logging: {e}")

    try:
        platform = detect_platform(args.platform)
        interactive = not args.yes
        mode = resolve_mode(args)
        if mode is None:
            if not interactive:
                raise ConfigurationError("No cleanup mode given (use --safe, --full or --user with --yes)")
            mode = prompt_mode()

        profile = args.profile
        profiles = None
        if Mode.parse(mode) == Mode.USER:
            profiles = discover_profiles(profile_base(platform, os.environ, config.profile_root))
            if profile is None:
                if not profiles:
                    raise ConfigurationError("No user profiles found!")
                profile = prompt_profile(profiles)

        verbose = args.verbose or args.yes
        if not verbose and interactive and not args.show_plan:
            verbose = prompt_yes_no("Enable verbose logging?")

        context = build_context(mode, verbose=verbose, profile=profile, platform=platform,
                                profile_root=config.profile_root, profiles=profiles)
        print_info(f"Starting cleanup in {context.mode.value} mode on {context.platform.value}")
        if context.profile:
            print(f"{Fore.YELLOW}Selected profile: {context.profile}{Style.RESET_ALL}")
        logging.info(f"Mode: {context.mode.value}, platform: {context.platform.value}, "
                     f"verbose: {context.verbose}, profile: {context.profile}")

        catalog = build_catalog(context, config)
        system_check = SystemCheck()
        missing = system_check.missing_tools(catalog)
        print_preview(catalog, missing, context.verbose)
        system_check.display_tool_status(missing)

        if args.show_plan:
            print(f"\n{Fore.GREEN}Preview complete. No changes made.{Style.RESET_ALL}")
            return EXIT_OK

        if interactive:
            pause()

        engine = CleanupEngine.for_context(context, config)
        result = engine.run(catalog, verbose=context.verbose)
        print_summary(result, log_file)
        logging.info("Sweepr completed")
        return EXIT_OK

    except ConfigurationError as e:
        print(Fore.RED + format_configuration_error(str(e)) + Style.RESET_ALL)
        logging.error(f"Configuration error: {e}")
        return EXIT_ERROR
    except (KeyboardInterrupt, EOFError):
        print(Fore.YELLOW + "\n\nCancelled by user" + Style.RESET_ALL)
        logging.info("User interrupted operation")
        return EXIT_INTERRUPTED
    except Exception as e:
        print(Fore.RED + f"\nUnexpected error: {e}" + Style.RESET_ALL)
        logging.error(f"Unexpected error: {e}", exc_info=True)
        return EXIT_ERROR


if __name__ == '__main__':
    sys.exit(main())

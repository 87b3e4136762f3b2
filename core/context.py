"""
Execution context for Sweepr.

Holds everything a run needs to know (platform, mode, verbosity, profile,
environment snapshot) as one read-only value built once at startup.
"""

from __future__ import annotations

import logging
import ntpath
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Union

from utils.defensive import ConfigurationError, InputValidator


class Platform(str, Enum):
    WINDOWS = "windows"
    UNIX = "unix"


class Mode(str, Enum):
    SAFE = "safe"
    FULL = "full"
    USER = "user"

    @classmethod
    def parse(cls, value: Union[str, Mode]) -> Mode:
        """Parse a mode name (case-insensitive)."""
        if isinstance(value, Mode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ConfigurationError(f"Unknown mode: {value!r} (expected one of: {valid})") from None


def detect_platform(name: Optional[str] = None) -> Platform:
    """
    Map a platform name to a Platform.

    Anything that is not recognisably Windows is treated as Unix-family.
    """
    name = (name if name is not None else sys.platform).strip().lower()
    if name in ('win32', 'cygwin', 'windows', 'nt') or name.startswith('win'):
        return Platform.WINDOWS
    if name not in ('unix', 'linux', 'darwin') and not name.startswith(('linux', 'freebsd', 'openbsd')):
        logging.info(f"Unknown platform {name!r}, using Unix-family catalog")
    return Platform.UNIX


def profile_base(platform: Platform, env: Mapping[str, str], override: Optional[str] = None) -> str:
    """Directory that holds one sub-directory per user profile."""
    if override:
        return override
    if platform == Platform.WINDOWS:
        return ntpath.join(env.get('SystemDrive', 'C:') + '\\', 'Users')
    return '/home'


def profile_home(platform: Platform, base: str, profile: str) -> str:
    """Home directory of profile under base, using the platform's separator."""
    if platform == Platform.WINDOWS:
        return ntpath.join(base, profile)
    return base.rstrip('/') + '/' + profile


def discover_profiles(base: Union[str, Path]) -> List[str]:
    """
    List user profiles (immediate sub-directories of base), sorted by name.

    Returns an empty list if base cannot be read.
    """
    try:
        entries = list(Path(base).iterdir())
    except OSError as e:
        logging.warning(f"Cannot read profile folder {base}: {e}")
        return []

    profiles = []
    for entry in entries:
        try:
            if entry.is_dir():
                profiles.append(entry.name)
        except OSError:
            continue
    return sorted(profiles)


def select_profile(name: Optional[str], profiles: Sequence[str]) -> str:
    """
    Validate a requested profile against the discovered ones.

    Raises:
        ConfigurationError: If no profiles exist, or name is missing, malformed, or unknown
    """
    if not profiles:
        raise ConfigurationError("No user profiles found!")

    cleaned = InputValidator.validate_profile_name(name)
    if cleaned not in profiles:
        raise ConfigurationError(f"Invalid profile name provided: {cleaned!r}")
    return cleaned


@dataclass(frozen=True)
class ExecutionContext:
    """Read-only settings for one run."""

    platform: Platform
    mode: Mode
    verbose: bool = False
    profile: Optional[str] = None
    env: Mapping[str, str] = field(default_factory=dict)
    profile_root: Optional[str] = None

    def __post_init__(self):
        # Freeze the environment snapshot so the catalog cannot change mid-run
        object.__setattr__(self, 'env', MappingProxyType(dict(self.env)))

    @property
    def profile_home(self) -> Optional[str]:
        if self.profile is None:
            return None
        base = profile_base(self.platform, self.env, self.profile_root)
        return profile_home(self.platform, base, self.profile)


def build_context(mode: Union[str, Mode], verbose: bool = False, profile: Optional[str] = None,
                  platform: Optional[Union[str, Platform]] = None,
                  env: Optional[Mapping[str, str]] = None,
                  profile_root: Optional[str] = None,
                  profiles: Optional[Sequence[str]] = None) -> ExecutionContext:
    """
    Build a validated ExecutionContext.

    Args:
        mode: 'safe', 'full' or 'user'
        verbose: Print failure details inline
        profile: Profile name (required for user mode, ignored otherwise)
        platform: Platform or platform name (None = detect from sys.platform)
        env: Environment snapshot (None = os.environ)
        profile_root: Override for the profile base directory
        profiles: Known profiles (None = discover from the profile base directory)

    Raises:
        ConfigurationError: For an unknown mode, or a missing/unknown profile in user mode
    """
    mode = Mode.parse(mode)
    if isinstance(platform, Platform):
        resolved_platform = platform
    else:
        resolved_platform = detect_platform(platform)
    env = dict(os.environ if env is None else env)

    selected = None
    if mode == Mode.USER:
        if profiles is None:
            profiles = discover_profiles(profile_base(resolved_platform, env, profile_root))
        selected = select_profile(profile, profiles)
    elif profile is not None:
        logging.info(f"Ignoring profile {profile!r} for {mode.value} mode")

    return ExecutionContext(
        platform=resolved_platform,
        mode=mode,
        verbose=bool(verbose),
        profile=selected,
        env=env,
        profile_root=profile_root,
    )

"""
Task catalog builder for Sweepr.

Each (platform, mode) pair maps to a pure builder function returning the
ordered task list for that combination. Builders only read the execution
context and config, so the same inputs always give the same catalog.
"""

import ntpath
from typing import Callable, Dict, List, Optional, Tuple

from utils.defensive import ConfigurationError

from .config import Config
from .context import ExecutionContext, Mode, Platform
from .tasks import Catalog, Task

CatalogBuilder = Callable[[ExecutionContext, Config], Catalog]


# ==================== UNIX-FAMILY ==================== #

def _unix_package_cache_tasks(config: Config) -> Catalog:
    """Log vacuum and package-manager cache commands shared by safe and full."""
    return [
        Task.command(f"Journal Logs (>{config.journal_retention_days} days)",
                     ["journalctl", f"--vacuum-time={config.journal_retention_days}d"]),
        Task.command("Font Cache", ["fc-cache", "-fr"]),
        Task.command("Apt Cache", ["apt-get", "clean"]),
        Task.command("Flatpak Cache", ["flatpak", "uninstall", "--unused", "-y"]),
        Task.command("Pacman Cache", ["pacman", "-Scc", "--noconfirm"]),
        Task.command("DNF Cache", ["dnf", "clean", "all"]),
        Task.command("Pip Cache", ["pip", "cache", "purge"]),
    ]


def build_unix_safe(context: ExecutionContext, config: Config) -> Catalog:
    tasks: Catalog = []
    home = context.env.get('HOME')
    if home:
        tasks.append(Task.purge("Thumbnail Cache", home.rstrip('/') + '/.cache/thumbnails'))
    tasks.extend(_unix_package_cache_tasks(config))
    return tasks


def build_unix_full(context: ExecutionContext, config: Config) -> Catalog:
    tasks = build_unix_safe(context, config)
    tasks.extend([
        Task.purge("Temp", "/tmp"),
        Task.purge("Var Temp", "/var/tmp"),
        Task.purge("Var Cache", "/var/cache"),
        Task.purge("Systemd Coredump", "/var/lib/systemd/coredump"),
        Task.purge("Var Crash", "/var/crash"),
        Task.command(f"System Logs (>{config.log_retention_days} days)",
                     ["find", "/var/log", "-type", "f", "-mtime", f"+{config.log_retention_days}",
                      "-exec", "rm", "-f", "{}", "+"]),
        Task.command("Systemd-Tmpfiles", ["systemd-tmpfiles", "--clean"]),
        # Optional language and container caches
        Task.command("Npm Cache", ["npm", "cache", "clean", "--force"]),
        Task.command("Yarn Cache", ["yarn", "cache", "clean"]),
        Task.command("Nix Garbage Collector", ["nix-collect-garbage", "-d"]),
        Task.command("Composer Cache", ["composer", "clear-cache"]),
        Task.command("Go Module Cache", ["go", "clean", "-modcache"]),
        Task.command("Docker System Prune", ["docker", "system", "prune", "-af"]),
        Task.command("Podman System Prune", ["podman", "system", "prune", "-af"]),
    ])
    return tasks


def build_unix_user(context: ExecutionContext, config: Config) -> Catalog:
    home = _require_profile_home(context)
    return [
        Task.purge("Cache Folder", home + '/.cache'),
        Task.purge("Thumbnails", home + '/.thumbnails'),
        Task.purge("Trash Files", home + '/.local/share/Trash/files'),
        Task.purge("Trash Info", home + '/.local/share/Trash/info'),
    ]


# ==================== WINDOWS-FAMILY ==================== #

def _windows_dirs(context: ExecutionContext) -> Tuple[str, str]:
    env = context.env
    return env.get('SystemRoot', r'C:\Windows'), env.get('ProgramData', r'C:\ProgramData')


def build_windows_safe(context: ExecutionContext, config: Config) -> Catalog:
    system_root, program_data = _windows_dirs(context)
    return [
        Task.purge("Windows Update Logs",
                   ntpath.join(program_data, 'Microsoft', 'Windows', 'WindowsUpdate', 'Logs')),
        Task.purge("Defender CacheManager",
                   ntpath.join(program_data, 'Microsoft', 'Windows Defender', 'Scans', 'History', 'CacheManager')),
        Task.purge("Delivery Optimization",
                   ntpath.join(system_root, 'SoftwareDistribution', 'DeliveryOptimization')),
        Task.command("DNS Cache", ["ipconfig", "/flushdns"]),
    ]


def build_windows_full(context: ExecutionContext, config: Config) -> Catalog:
    system_root, program_data = _windows_dirs(context)
    tasks = build_windows_safe(context, config)
    tasks.extend([
        Task.purge("Temp Folder", ntpath.join(system_root, 'Temp')),
        Task.purge("Prefetch Folder", ntpath.join(system_root, 'Prefetch')),
        Task.purge("Windows Event Logs", ntpath.join(system_root, 'System32', 'winevt', 'Logs')),
        Task.purge("CBS Logs", ntpath.join(system_root, 'Logs', 'CBS')),
        Task.purge("WDI Log Files", ntpath.join(system_root, 'System32', 'WDI', 'LogFiles')),
        Task.purge("Windows WER", ntpath.join(program_data, 'Microsoft', 'Windows', 'WER')),
        # Update service holds the download cache open
        Task.command("Stop Windows Update Service", ["net", "stop", "wuauserv"]),
        Task.purge("SoftwareDistribution Download", ntpath.join(system_root, 'SoftwareDistribution', 'Download')),
        Task.command("Start Windows Update Service", ["net", "start", "wuauserv"]),
        Task.command("Old Windows Updates",
                     ["dism", "/Online", "/Cleanup-Image", "/StartComponentCleanup", "/Quiet"]),
    ])
    return tasks


def build_windows_user(context: ExecutionContext, config: Config) -> Catalog:
    home = _require_profile_home(context)
    local = ntpath.join(home, 'AppData', 'Local')
    return [
        Task.purge("Windows Explorer Cache", ntpath.join(local, 'Microsoft', 'Windows', 'Explorer')),
        Task.purge("Local Crash Dumps", ntpath.join(local, 'CrashDumps')),
        Task.purge("Temp Folder", ntpath.join(local, 'Temp')),
    ]


def _require_profile_home(context: ExecutionContext) -> str:
    home = context.profile_home
    if not home:
        raise ConfigurationError("User cleanup requires a selected profile")
    return home


CATALOG_BUILDERS: Dict[Tuple[Platform, Mode], CatalogBuilder] = {
    (Platform.UNIX, Mode.SAFE): build_unix_safe,
    (Platform.UNIX, Mode.FULL): build_unix_full,
    (Platform.UNIX, Mode.USER): build_unix_user,
    (Platform.WINDOWS, Mode.SAFE): build_windows_safe,
    (Platform.WINDOWS, Mode.FULL): build_windows_full,
    (Platform.WINDOWS, Mode.USER): build_windows_user,
}


def build_catalog(context: ExecutionContext, config: Optional[Config] = None) -> Catalog:
    """
    Build the ordered task catalog for a run.

    Args:
        context: Validated execution context
        config: Config instance (None = defaults)

    Returns:
        Ordered list of tasks

    Raises:
        ConfigurationError: If user mode has no profile, or the catalog is empty
    """
    config = config or Config()
    builder = CATALOG_BUILDERS.get((context.platform, context.mode))
    if builder is None:
        # Unknown platforms use the Unix-family catalog
        builder = CATALOG_BUILDERS[(Platform.UNIX, context.mode)]

    tasks = builder(context, config)
    if not tasks:
        raise ConfigurationError(f"No cleanup tasks for {context.mode.value} mode on {context.platform.value}")
    return tasks


def describe_task(task: Task) -> str:
    """Description plus resolved detail, as shown in the preview."""
    return f"{task.description} -> {task.detail}"


def preview_lines(catalog: Catalog, missing_tools: Optional[List[str]] = None) -> List[str]:
    """Preview lines (two per task) for the confirmation step."""
    missing = set(missing_tools or [])
    lines = []
    for task in catalog:
        note = ""
        if task.is_command and task.argv[0] in missing:
            note = "  [not installed]"
        lines.append(f"Cleaning: {task.description}{note}")
        lines.append(f"  └─ {task.detail}")
    return lines

"""
Folder purge for Sweepr.
Removes every immediate child of a directory while keeping the directory itself.

Failure policy: continue and report the first failure. Every entry is attempted
even after one fails; once the listing is exhausted, the first removal error
is raised as EntryRemovalError.
"""

import logging
import os
import shutil
import stat
import sys
from pathlib import Path
from typing import Optional, Union


class PurgeError(OSError):
    """Base class for folder purge failures."""
    pass


class FolderUnreadableError(PurgeError):
    """The folder could not be listed (missing, not a directory, no permission)."""

    def __init__(self, folder: Path, cause: OSError):
        self.folder = folder
        self.cause = cause
        super().__init__(f"cannot read folder {folder}: {cause}")


class EntryRemovalError(PurgeError):
    """At least one entry could not be removed; carries the first failure."""

    def __init__(self, folder: Path, entry: Path, first_error: OSError, failed_count: int):
        self.folder = folder
        self.entry = entry
        self.first_error = first_error
        self.failed_count = failed_count
        others = f" (and {failed_count - 1} more)" if failed_count > 1 else ""
        super().__init__(f"cannot remove {entry}: {first_error}{others}")


def _retry_writable(func, path: str, error: OSError, include_parent: bool = False):
    """
    Add the owner write bit to path (and optionally its parent), then retry func(path).

    Only the write bit is added; if the retry still fails, the original modes
    are put back and error is raised.
    """
    targets = [path]
    if include_parent:
        targets.insert(0, os.path.dirname(path))

    changed = []
    try:
        for target in targets:
            mode = os.lstat(target).st_mode
            if stat.S_ISLNK(mode) or mode & stat.S_IWRITE:
                continue
            os.chmod(target, stat.S_IMODE(mode) | stat.S_IWRITE)
            changed.append((target, stat.S_IMODE(mode)))
        func(path)
    except OSError:
        for target, mode in reversed(changed):
            try:
                os.chmod(target, mode)
            except OSError as e:
                logging.debug(f"Could not restore mode of {target}: {e}")
        raise error


def _unlink(path: str):
    try:
        os.unlink(path)
    except FileNotFoundError:
        raise
    except OSError as e:
        # Read-only files (common on Windows) refuse unlink
        _retry_writable(os.unlink, path, e)


def _remove_entry(entry: Path):
    """Remove a file, symlink or directory subtree."""
    # Symlinks to directories are unlinked, never followed
    if entry.is_symlink() or not entry.is_dir():
        _unlink(str(entry))
        return

    def _on_error(func, path, exc):
        original = exc[1] if isinstance(exc, tuple) else exc
        if func not in (os.unlink, os.remove, os.rmdir) or isinstance(original, FileNotFoundError):
            raise original
        # Directories inside the entry may be read-only too; the purged folder itself is left alone
        inside = Path(os.path.dirname(path)) != entry.parent
        _retry_writable(func, path, original, include_parent=inside)

    if sys.version_info >= (3, 12):
        shutil.rmtree(entry, onexc=_on_error)
    else:
        shutil.rmtree(entry, onerror=_on_error)


def purge_children(folder: Union[str, Path]) -> int:
    """
    Remove every immediate entry of folder, leaving folder itself in place.

    Entries are processed in listing order. An empty folder is a successful no-op.

    Args:
        folder: Directory whose contents should be removed

    Returns:
        Number of entries removed

    Raises:
        FolderUnreadableError: If folder cannot be listed (nothing is removed)
        EntryRemovalError: If one or more entries could not be removed
    """
    folder = Path(folder)

    try:
        entries = list(folder.iterdir())
    except OSError as e:
        raise FolderUnreadableError(folder, e) from e

    removed = 0
    failed = 0
    first_failure: Optional[tuple] = None

    for entry in entries:
        try:
            _remove_entry(entry)
            removed += 1
        except FileNotFoundError:
            # Vanished between listing and removal; nothing left to do
            removed += 1
        except OSError as e:
            failed += 1
            logging.debug(f"Could not remove {entry}: {e}")
            if first_failure is None:
                first_failure = (entry, e)

    logging.info(f"Purged {removed} entries from {folder}" + (f", {failed} failed" if failed else ""))

    if first_failure is not None:
        entry, error = first_failure
        raise EntryRemovalError(folder, entry, error, failed)

    return removed

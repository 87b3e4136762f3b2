"""
Clear, actionable error message formatting.

All error messages follow the pattern:
  ERROR: [What failed]
    Reason: [Why it failed]
    Action: [What user should do]
    Location: [Where the problem is]
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

DEFAULT_MAX_OUTPUT_CHARS = 2000
PURGE_FAILED = "Could not clean folder contents"
PURGE_ACTION = "Folder may be missing, in use, or need admin/root rights"


def truncate_output(output: Optional[str], max_chars: int = DEFAULT_MAX_OUTPUT_CHARS) -> str:
    """Cut captured command output down to max_chars, marking the cut with '...'."""
    if not output:
        return ""
    if len(output) > max_chars:
        return output[:max_chars] + "..."
    return output


def format_error(
    what_failed: str,
    reason: str,
    action: str,
    location: Optional[Path] = None,
    details: Optional[str] = None
) -> str:
    """
    Format a clear, actionable error message.

    Args:
        what_failed: What operation failed (e.g., "Cleaning failed: Apt Cache")
        reason: Why it failed (e.g., "exit status 100")
        action: What user should do (e.g., "Run again as root")
        location: Where the problem occurred (file path, directory, etc.)
        details: Optional additional details

    Returns:
        Formatted error message
    """
    lines = [f"ERROR: {what_failed}"]
    lines.append(f"  Reason: {reason}")
    lines.append(f"  Action: {action}")

    if location:
        lines.append(f"  Location: {location}")

    if details:
        lines.append(f"  Details: {details}")

    return "\n".join(lines)


def log_error(
    what_failed: str,
    reason: str,
    action: str,
    location: Optional[Path] = None,
    details: Optional[str] = None
):
    """
    Log a clear, actionable error message.

    Same parameters as format_error, but logs it directly.
    """
    message = format_error(what_failed, reason, action, location, details)
    logging.error(message)


def format_command_error(argv: Sequence[str], reason: str, output: Optional[str] = None,
                         max_chars: int = DEFAULT_MAX_OUTPUT_CHARS) -> str:
    """Format a failed external command, including its (truncated) output."""
    program = argv[0] if argv else "<empty>"
    details = truncate_output(output, max_chars) or None

    return format_error(
        what_failed=f"Command failed: {' '.join(argv) if argv else program}",
        reason=reason,
        action=f"Check that '{program}' is installed and that sweepr runs with enough privileges",
        details=details
    )


def format_purge_error(folder: Path, reason: str) -> str:
    """Format a folder purge failure."""
    return format_error(
        what_failed=PURGE_FAILED,
        reason=reason,
        action=PURGE_ACTION,
        location=folder
    )


def format_configuration_error(reason: str, action: str = "Check the command line arguments and try again") -> str:
    """Format an error that stops the run before any task starts."""
    return format_error(
        what_failed="Cannot start cleanup",
        reason=reason,
        action=action
    )

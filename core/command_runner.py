"""
External command execution for Sweepr.
Runs one program, captures stdout and stderr as a single stream.
"""

import logging
import subprocess
from typing import List, Optional, Sequence

from utils.error_messages import truncate_output

DEFAULT_COMMAND_TIMEOUT = 1800


class CommandError(Exception):
    """Raised when an external command cannot be spawned or exits non-zero."""

    def __init__(self, argv: Sequence[str], cause: Optional[BaseException] = None,
                 output: str = "", returncode: Optional[int] = None):
        self.argv: List[str] = list(argv)
        self.command_line = " ".join(self.argv)
        self.cause = cause
        self.output = output
        self.returncode = returncode
        super().__init__(self._build_message())

    @property
    def reason(self) -> str:
        """Short human-readable cause (exit status, OS error, or timeout)."""
        if self.returncode is not None:
            return f"exit status {self.returncode}"
        if self.cause is not None:
            return str(self.cause)
        return "unknown error"

    def _build_message(self) -> str:
        message = f"command '{self.command_line}' failed: {self.reason}"
        if self.output:
            message += f"\nOutput: {self.output}"
        return message


class EmptyCommandError(CommandError):
    """Raised for an empty argv; no process is spawned."""

    def __init__(self):
        super().__init__([], cause=ValueError("command is empty"))


def run_command(argv: Sequence[str], timeout: Optional[float] = DEFAULT_COMMAND_TIMEOUT,
                max_output_chars: Optional[int] = None) -> str:
    """
    Run an external command and return its combined, trimmed output.

    Args:
        argv: Program name followed by its arguments
        timeout: Seconds to wait before killing the process (None = wait forever)
        max_output_chars: Truncate output attached to a CommandError (None = keep all)

    Returns:
        Combined stdout/stderr, stripped of surrounding whitespace

    Raises:
        EmptyCommandError: If argv is empty
        CommandError: If the process cannot be spawned, times out, or exits non-zero
    """
    if not argv:
        raise EmptyCommandError()

    argv = list(argv)
    logging.debug(f"Running command: {' '.join(argv)}")

    try:
        result = subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            timeout=timeout
        )
    except subprocess.TimeoutExpired as e:
        output = _decode(e.output)
        logging.warning(f"Command timed out after {timeout}s: {' '.join(argv)}")
        raise CommandError(argv, cause=e, output=_truncate(output, max_output_chars)) from e
    except OSError as e:
        # FileNotFoundError / PermissionError when spawning
        raise CommandError(argv, cause=e) from e

    output = _decode(result.stdout)

    if result.returncode != 0:
        raise CommandError(argv, output=_truncate(output, max_output_chars),
                           returncode=result.returncode)

    return output


def _decode(raw) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw.strip()
    return raw.decode('utf-8', errors='replace').strip()


def _truncate(output: str, max_chars: Optional[int]) -> str:
    if max_chars is None:
        return output
    return truncate_output(output, max_chars)

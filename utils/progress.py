"""
Progress indicator for Sweepr.

A single status line with a rotating glyph, redrawn by a background thread
while the main thread runs one task.
"""

import os
import sys
import threading
from typing import Optional, Sequence, TextIO

from colorama import Fore, Style

DEFAULT_FRAMES = ('|', '/', '-', '\\')
DEFAULT_INTERVAL = 0.1
CLEAR_LINE = '\r\033[2K'


def _is_truthy_env(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def animations_enabled(stream: TextIO) -> bool:
    """Animate only on an interactive terminal outside CI."""
    if _is_truthy_env(os.getenv("SWEEPR_NO_ANIM")) or _is_truthy_env(os.getenv("CI")):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def clear_line(stream: Optional[TextIO] = None):
    """Erase the current terminal line (the spinner's line)."""
    stream = stream or sys.stdout
    stream.write(CLEAR_LINE)
    stream.flush()


class SpinnerHandle:
    """Handle for one running spinner. stop() joins the worker thread."""

    def __init__(self, owner: 'Spinner', label: str):
        self._owner = owner
        self.label = label
        self.frames_drawn = 0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _start(self, animate: bool):
        if not animate:
            return
        self._thread = threading.Thread(target=self._loop, name="sweepr-spinner", daemon=True)
        self._thread.start()

    def _loop(self):
        frames = self._owner.frames
        index = 0
        # Event.wait doubles as the redraw timer and the cancellation check
        while not self._stop_event.is_set():
            with self._owner._lock:
                if self._stop_event.is_set():
                    break
                frame = frames[index % len(frames)]
                self._owner.stream.write(
                    f"\r{Fore.YELLOW}[RUNNING]{Style.RESET_ALL} {self.label} "
                    f"{Fore.YELLOW}{frame}{Style.RESET_ALL}  "
                )
                self._owner.stream.flush()
                self.frames_drawn += 1
            index += 1
            self._stop_event.wait(self._owner.interval)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def stop(self):
        """Stop redrawing and wait for the worker to exit. Safe to call twice."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self._owner._release(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()


class Spinner:
    """Starts spinner handles; only one may be active at a time."""

    def __init__(self, stream: Optional[TextIO] = None, interval: float = DEFAULT_INTERVAL,
                 frames: Sequence[str] = DEFAULT_FRAMES, enabled: Optional[bool] = None):
        """
        Initialize the spinner.

        Args:
            stream: Output stream (default sys.stdout)
            interval: Seconds between redraws
            frames: Glyph cycle
            enabled: Force animation on/off (None = auto-detect from the stream)
        """
        if not frames:
            raise ValueError("Spinner needs at least one frame")
        if interval <= 0:
            raise ValueError("Spinner interval must be positive")

        self.stream = stream or sys.stdout
        self.interval = interval
        self.frames = tuple(frames)
        self.enabled = animations_enabled(self.stream) if enabled is None else enabled
        self._lock = threading.Lock()
        self._active: Optional[SpinnerHandle] = None

    def start(self, label: str) -> SpinnerHandle:
        """
        Start rendering label with a rotating glyph.

        Raises:
            RuntimeError: If another spinner from this instance is still active
        """
        with self._lock:
            if self._active is not None:
                raise RuntimeError(f"Spinner already running: {self._active.label}")
            handle = SpinnerHandle(self, label)
            self._active = handle
        handle._start(self.enabled)
        return handle

    @property
    def active(self) -> Optional[SpinnerHandle]:
        return self._active

    def _release(self, handle: SpinnerHandle):
        with self._lock:
            if self._active is handle:
                self._active = None

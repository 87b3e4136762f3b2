"""
Cleanup execution engine for Sweepr.

Runs a catalog strictly in order, one task at a time, with a spinner drawn
while each task is dispatched. A failing task is recorded and the batch moves
on; only KeyboardInterrupt/SystemExit end a run early.
"""

import logging
import sys
import time
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Optional, TextIO

import psutil
from colorama import Fore, Style

from utils.error_messages import (PURGE_ACTION, PURGE_FAILED, format_command_error,
                                  format_purge_error, log_error)
from utils.progress import Spinner, clear_line

from .command_runner import CommandError, run_command
from .config import Config
from .context import ExecutionContext, Platform
from .folder_purge import PurgeError
from .logger import log_command_error
from .tasks import Catalog, Task

BYTES_PER_MB = 1024 * 1024


@dataclass
class TaskOutcome:
    """Result of one task."""

    description: str
    success: bool
    detail: Optional[str] = None


@dataclass
class RunResult:
    """Free-space snapshots and per-task outcomes of one run."""

    start_free_mb: int
    end_free_mb: int
    outcomes: List[TaskOutcome] = field(default_factory=list)

    @property
    def freed_mb(self) -> int:
        # Concurrent writes elsewhere can shrink free space; never report negative savings
        return max(0, self.end_free_mb - self.start_free_mb)

    @property
    def failed(self) -> List[TaskOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def succeeded(self) -> List[TaskOutcome]:
        return [o for o in self.outcomes if o.success]


def system_root(platform: Platform, env: Mapping[str, str]) -> str:
    """Root of the system drive, where free space is measured."""
    if platform == Platform.WINDOWS:
        return env.get('SystemDrive', 'C:') + '\\'
    return '/'


def free_space_mb(path: str) -> int:
    """Free space on the filesystem holding path, in whole MB (0 if unknown)."""
    try:
        return int(psutil.disk_usage(path).free // BYTES_PER_MB)
    except (OSError, RuntimeError) as e:
        logging.warning(f"Could not measure free space on {path}: {e}")
        return 0


class CleanupEngine:
    """Sequential task runner with spinner, outcome log and freed-space report."""

    def __init__(self, config: Optional[Config] = None, spinner: Optional[Spinner] = None,
                 free_space: Optional[Callable[[], int]] = None,
                 runner: Callable[..., str] = run_command,
                 sleep: Callable[[float], None] = time.sleep,
                 stream: Optional[TextIO] = None):
        """
        Initialize the engine.

        Args:
            config: Config instance (delays, timeouts)
            spinner: Spinner to draw while tasks run (default: one on stream)
            free_space: Callable returning free MB (default: system root of the platform)
            runner: Command runner used for external command tasks
            sleep: Sleep function (replaced in tests)
            stream: Output stream (default sys.stdout)
        """
        self.config = config or Config()
        self.stream = stream or sys.stdout
        self.spinner = spinner or Spinner(stream=self.stream, interval=self.config.spinner_interval)
        self.free_space = free_space or (lambda: free_space_mb('/'))
        self.runner = runner
        self.sleep = sleep

    @classmethod
    def for_context(cls, context: ExecutionContext, config: Optional[Config] = None, **kwargs) -> 'CleanupEngine':
        """Engine that measures free space on the context platform's system drive."""
        root = system_root(context.platform, context.env)
        kwargs.setdefault('free_space', lambda: free_space_mb(root))
        return cls(config, **kwargs)

    def _print(self, text: str = ""):
        self.stream.write(text + "\n")
        self.stream.flush()

    def run(self, catalog: Catalog, verbose: bool = False) -> RunResult:
        """
        Run every task in catalog order.

        Args:
            catalog: Ordered tasks
            verbose: Print failure details inline

        Returns:
            RunResult with one outcome per task, in catalog order
        """
        tasks = list(catalog)
        if not tasks:
            free = self.free_space()
            logging.info("Empty catalog, nothing to run")
            return RunResult(start_free_mb=free, end_free_mb=free)

        self._print(f"{Fore.RED}{'#' * 45}{Style.RESET_ALL}")
        self._print(f"{Fore.YELLOW}[INFO]{Style.RESET_ALL} *** Cleanup STARTED ***")
        self.sleep(self.config.batch_start_delay)

        start_free = self.free_space()
        logging.info(f"Cleanup started: {len(tasks)} tasks, {start_free} MB free")

        outcomes = []
        for index, task in enumerate(tasks, 1):
            outcome = self._run_task(task, index, len(tasks))
            outcomes.append(outcome)
            self._report(outcome, verbose)
            self.sleep(self.config.inter_task_delay)

        end_free = self.free_space()
        result = RunResult(start_free_mb=start_free, end_free_mb=end_free, outcomes=outcomes)
        logging.info(
            f"Cleanup finished: {len(result.succeeded)} ok, {len(result.failed)} failed, "
            f"{end_free} MB free, freed {result.freed_mb} MB"
        )

        self._print(f"{Fore.YELLOW}[INFO]{Style.RESET_ALL} Cleaned approx: "
                    f"{Fore.YELLOW}{result.freed_mb} MB{Style.RESET_ALL} disk space")
        self._print(f"\n{Fore.GREEN}[INFO]{Style.RESET_ALL} *** Cleanup FINISHED ***")
        return result

    def _run_task(self, task: Task, index: int, total: int) -> TaskOutcome:
        logging.info(f"[{index}/{total}] {task.description}: {task.detail}")

        handle = self.spinner.start(f"Cleaning: {task.description}")
        try:
            self.sleep(self.config.task_start_delay)
            task.execute(self.runner, timeout=self.config.command_timeout,
                         max_output_chars=self.config.max_output_chars)
        except CommandError as e:
            log_command_error(e, task.description)
            return TaskOutcome(task.description, False,
                               format_command_error(e.argv, e.reason, e.output, self.config.max_output_chars))
        except PurgeError as e:
            folder = getattr(e, "folder", task.detail)
            log_error(f"{PURGE_FAILED}: {task.description}", str(e), PURGE_ACTION, location=folder)
            return TaskOutcome(task.description, False, format_purge_error(folder, str(e)))
        except Exception as e:
            # Any other failure is still confined to this task
            logging.error(f"{task.description}: unexpected error: {e}", exc_info=True)
            return TaskOutcome(task.description, False, f"{type(e).__name__}: {e}")
        finally:
            # Runs on every exit path, KeyboardInterrupt included
            handle.stop()
            clear_line(self.stream)

        logging.info(f"{task.description}: done")
        return TaskOutcome(task.description, True)

    def _report(self, outcome: TaskOutcome, verbose: bool):
        self._print(f"{Fore.GREEN}[*]{Style.RESET_ALL} {Fore.CYAN}Cleaning: {outcome.description}"
                    f"{Style.RESET_ALL} FINISHED")
        if verbose and not outcome.success and outcome.detail:
            detail = outcome.detail.replace("\n", "\n     ")
            self._print(f"  └─ {Fore.RED}{detail}{Style.RESET_ALL}")

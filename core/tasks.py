"""
Task model for Sweepr.

A Task is one unit of cleanup work with exactly one active variant:
an external command (argv) or a native operation (a callable run in-process).
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from utils.defensive import ConfigurationError, InputValidator

from .command_runner import run_command
from .folder_purge import purge_children

EXTERNAL_COMMAND = "command"
NATIVE_OPERATION = "native"


class Task:
    """One cleanup action. Build with Task.command(), Task.native() or Task.purge()."""

    __slots__ = ('description', 'kind', 'argv', 'operation', 'path')

    def __init__(self, description: str, argv: Optional[Sequence[str]] = None,
                 operation: Optional[Callable[[], object]] = None,
                 path: Optional[Union[str, Path]] = None):
        description = InputValidator.validate_string(description, allow_empty=False)
        if not description.strip():
            raise ConfigurationError("Task description cannot be blank")

        if (argv is None) == (operation is None):
            raise ConfigurationError(
                f"Task '{description}' must define exactly one of a command or an operation"
            )

        self.description = description
        if argv is not None:
            self.kind = EXTERNAL_COMMAND
            self.argv: Tuple[str, ...] = tuple(InputValidator.validate_argv(argv))
            self.operation = None
            self.path = None
        else:
            if not callable(operation):
                raise ConfigurationError(f"Task '{description}' operation is not callable")
            self.kind = NATIVE_OPERATION
            self.argv = ()
            self.operation = operation
            self.path = str(path) if path is not None else None

    @classmethod
    def command(cls, description: str, argv: Sequence[str]) -> Task:
        """External command task; argv[0] is the program name."""
        return cls(description, argv=argv)

    @classmethod
    def native(cls, description: str, operation: Callable[[], object],
               path: Optional[Union[str, Path]] = None) -> Task:
        """Native task; path is only shown in previews."""
        return cls(description, operation=operation, path=path)

    @classmethod
    def purge(cls, description: str, folder: Union[str, Path]) -> Task:
        """Native task that removes everything inside folder."""
        folder = Path(folder)
        return cls.native(description, lambda: purge_children(folder), path=folder)

    @property
    def is_command(self) -> bool:
        return self.kind == EXTERNAL_COMMAND

    @property
    def detail(self) -> str:
        """Resolved detail for previews: the folder path or the joined command line."""
        if self.is_command:
            return " ".join(self.argv)
        return self.path or ""

    def execute(self, command_runner: Callable[..., str] = run_command, **runner_kwargs):
        """Dispatch to the command runner or the native operation. Errors propagate."""
        if self.is_command:
            return command_runner(list(self.argv), **runner_kwargs)
        return self.operation()

    def __repr__(self) -> str:
        return f"Task({self.description!r}, {self.kind}={self.detail!r})"

    def __eq__(self, other) -> bool:
        # Native callables are closures, so compare on what a preview shows
        if not isinstance(other, Task):
            return NotImplemented
        return (self.description, self.kind, self.detail) == (other.description, other.kind, other.detail)

    def __hash__(self) -> int:
        return hash((self.description, self.kind, self.detail))


Catalog = List[Task]
